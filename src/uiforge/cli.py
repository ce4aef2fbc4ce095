"""
uiforge command line.

Lists the catalog, checks generated component files and exports a project
from a generative-service payload.
"""

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from .builder import BuilderSession
from .catalog import Category, load_catalog
from .compiler import ComponentRegistrar, RenderError
from .core import GeneratedComponentDefinition, JSONParseError, configure_logging, create_container, get_settings
from .export import ExportError, SerializationError

app = typer.Typer(help="Compile generated UI components and export buildable projects")
console = Console()


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging")] = False,
) -> None:
    settings = get_settings()
    configure_logging("DEBUG" if verbose else settings.log_level, settings.json_logs)


@app.command("catalog")
def list_catalog(
    query: Annotated[str, typer.Argument(help="Search name, description and tags")] = "",
    category: Annotated[Category | None, typer.Option("--category", "-c", help="Only one category")] = None,
) -> None:
    """List catalog components."""
    catalog = load_catalog()
    entries = catalog.search(query)
    if category is not None:
        entries = [e for e in entries if e.category == category]

    if not entries:
        console.print("[dim]No components found.[/dim]")
        return

    table = Table(title=f"Catalog {catalog.version}")
    table.add_column("Type", style="bold")
    table.add_column("Id", style="dim")
    table.add_column("Category")
    table.add_column("Packages")
    table.add_column("Description")
    for entry in entries:
        table.add_row(
            entry.type_id,
            entry.id,
            entry.category.value,
            ", ".join(sorted(entry.required_packages)),
            entry.description,
        )
    console.print(table)
    console.print(f"\n[dim]{len(entries)} component(s) shown[/dim]")


@app.command("check")
def check(
    type_id: Annotated[str, typer.Argument(help="Component type id (e.g. login-form)")],
    file: Annotated[Path, typer.Argument(exists=True, dir_okay=False, help="Generated source file")],
    render: Annotated[bool, typer.Option("--render", help="Render with empty props and print HTML")] = False,
) -> None:
    """Compile a generated component file and report the result."""
    registrar = ComponentRegistrar()
    definition = GeneratedComponentDefinition(type_id=type_id, source_text=file.read_text(encoding="utf-8"))
    if not registrar.compile_and_register(definition):
        console.print(f"[red]Compilation failed:[/red] {registrar.last_error(type_id)}")
        raise typer.Exit(code=1)

    unit = registrar.get_unit(type_id)
    console.print(f"[green]Compiled[/green] {unit.component_name} ({unit.source_digest})")
    if unit.capabilities_used:
        console.print(f"  Uses: {', '.join(sorted(unit.capabilities_used))}")
    if render:
        try:
            console.print(unit.render({}).to_html(), markup=False)
        except RenderError as e:
            console.print(f"[red]Render failed:[/red] {e}")
            raise typer.Exit(code=1)


@app.command("export")
def export(
    payload: Annotated[Path, typer.Argument(exists=True, dir_okay=False, help="Generative-service response")],
    out: Annotated[Path, typer.Option("--out", "-o", help="Zip file (.zip) or output directory")],
) -> None:
    """Ingest a payload and write the synthesized project."""
    session = create_container().get(BuilderSession)
    request_id = session.begin_generation()
    try:
        report = session.ingest_response(request_id, payload.read_text(encoding="utf-8"))
    except JSONParseError as e:
        console.print(f"[red]Unreadable payload:[/red] {e}")
        raise typer.Exit(code=1)

    for type_id, reason in report.failed.items():
        console.print(f"[yellow]Not compiled[/yellow] {type_id}: {reason}")
    for warning in report.warnings:
        console.print(f"[yellow]{warning}[/yellow]")

    try:
        target = session.export_archive(out)
    except (ExportError, SerializationError) as e:
        console.print(f"[red]Export failed:[/red] {e}")
        raise typer.Exit(code=1)
    console.print(f"[green]Exported[/green] {len(session.document)} component(s) to {target}")


if __name__ == "__main__":
    app()
