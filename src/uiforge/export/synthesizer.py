"""
Project Synthesizer.

Walks a document model and produces the file set of a standalone,
buildable project: one source file per distinct component type, an entry
page placing every instance in order, a manifest and the fixed scaffold.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..catalog import CatalogEntry, CatalogIndex
from ..catalog.models import import_path_to_file
from ..compiler import CompiledUnit, ComponentRegistrar
from ..core import Settings, get_logger, get_settings, hash_files, to_kebab_case
from . import scaffold
from .packages import compute_required_packages, render_manifest
from .serializer import SerializationError, emit_markup

if TYPE_CHECKING:
    from ..builder.document import ComponentInstance, DocumentModel

logger = get_logger(__name__)


class ExportError(Exception):
    """Export cannot produce a project."""

    def __init__(self, message: str, type_id: str | None = None):
        self.type_id = type_id
        super().__init__(message)


@dataclass
class SynthesisResult:
    """Files of an exported project plus what export had to leave out."""

    files: dict[str, str]
    packages: frozenset[str]
    skipped: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def entry_point(self) -> str:
        return self.files[scaffold.ENTRY_POINT]

    @property
    def manifest(self) -> str:
        return self.files[scaffold.MANIFEST]

    @property
    def digest(self) -> str:
        """Content digest of the whole file set (order independent)."""
        return hash_files(self.files)


class ProjectSynthesizer:
    """Serializes a document model into project files."""

    def __init__(
        self,
        catalog: CatalogIndex,
        registrar: ComponentRegistrar,
        settings: Settings | None = None,
    ) -> None:
        self.catalog = catalog
        self.registrar = registrar
        self.settings = settings or get_settings()

    def resolve(self, type_id: str) -> CompiledUnit | CatalogEntry | None:
        """Generated units take precedence over catalog entries."""
        unit = self.registrar.get_unit(type_id)
        if unit is not None:
            return unit
        return self.catalog.resolve(type_id)

    def compute_required_packages(self, instances: Iterable["ComponentInstance"]) -> frozenset[str]:
        """External packages the instances' component types need, baseline excluded."""
        return compute_required_packages((i.type_id for i in instances), self.resolve)

    def emit_instance_markup(self, instance: "ComponentInstance") -> str:
        """
        One self-closing element for an instance.

        Raises:
            ExportError: If the instance's type cannot be resolved
            SerializationError: If a property value cannot be written back,
                naming the instance and the key path
        """
        resolved = self.resolve(instance.type_id)
        if resolved is None:
            raise ExportError(f"Unknown component type: {instance.type_id}", instance.type_id)
        try:
            return emit_markup(_component_name(resolved), instance.properties)
        except SerializationError as e:
            raise e.for_instance(instance.id, instance.type_id) from e

    # ------------------------------------------------------------------
    # Project files
    # ------------------------------------------------------------------

    def generated_path(self, unit: CompiledUnit) -> str:
        return f"{self.settings.generated_dir.strip('/')}/{to_kebab_case(unit.component_name)}.tsx"

    def _generated_file(self, unit: CompiledUnit) -> str:
        header = ['"use client"', ""]
        imports = self.registrar.capabilities.import_lines(unit.capabilities_used)
        if imports:
            header.extend([*imports, ""])
        footer = ["", f"export {{ {unit.component_name} }}", f"export default {unit.component_name}", ""]
        return "\n".join(header) + unit.source_text.strip("\n") + "\n" + "\n".join(footer)

    def _catalog_files(self, entry: CatalogEntry, result: SynthesisResult) -> None:
        template = self.catalog.template_for(entry)
        if template is None:
            result.warnings.append(f"No source shipped for {entry.type_id}; wrote a placeholder")
            logger.warning("catalog_template_missing", type_id=entry.type_id)
            template = _placeholder(entry.type_id)
        result.files[entry.source_path] = template
        for support in entry.support_files:
            text = self.catalog.support_template(support)
            if text is None:
                result.warnings.append(f"Missing support file {support} for {entry.type_id}")
                logger.warning("support_template_missing", type_id=entry.type_id, import_path=support)
                continue
            result.files[import_path_to_file(support)] = text

    def _import_line(self, resolved: CompiledUnit | CatalogEntry) -> str:
        name = _component_name(resolved)
        if isinstance(resolved, CompiledUnit):
            module = "@/" + self.generated_path(resolved).removesuffix(".tsx")
        else:
            module = resolved.source_import_path
        return f'import {{ {name} }} from "{module}"'

    def build(self, document: "DocumentModel") -> SynthesisResult:
        """
        Synthesize the project for a document.

        Unknown types are skipped with a warning or abort the export,
        following ``settings.unknown_type_policy``.

        Raises:
            ExportError: Unknown type under the ``abort`` policy
            SerializationError: A property value is outside the value domain
        """
        result = SynthesisResult(files={}, packages=frozenset())
        placed: list["ComponentInstance"] = []
        markup: list[str] = []
        components: dict[str, CompiledUnit | CatalogEntry] = {}

        for instance in document.list_instances():
            resolved = self.resolve(instance.type_id)
            if resolved is None:
                if self.settings.unknown_type_policy == "abort":
                    raise ExportError(
                        f"Cannot export: unknown component type {instance.type_id!r}", instance.type_id
                    )
                result.skipped.append(instance.id)
                result.warnings.append(f"Skipped instance {instance.id}: unknown type {instance.type_id}")
                logger.warning("export_instance_skipped", instance_id=instance.id, type_id=instance.type_id)
                continue
            markup.append(self.emit_instance_markup(instance))
            placed.append(instance)
            components.setdefault(_component_name(resolved), resolved)

        for resolved in components.values():
            if isinstance(resolved, CompiledUnit):
                result.files[self.generated_path(resolved)] = self._generated_file(resolved)
            else:
                self._catalog_files(resolved, result)

        result.packages = self.compute_required_packages(placed)
        result.files.update(scaffold.static_files(self.registrar.capabilities))
        result.files[scaffold.MANIFEST] = render_manifest(result.packages, self.settings)
        result.files[scaffold.LAYOUT] = scaffold.render_layout(self.settings)
        result.files[scaffold.ENTRY_POINT] = scaffold.render_page(
            [self._import_line(r) for r in components.values()], markup
        )
        result.files[scaffold.README] = scaffold.render_readme(self.settings, components)

        logger.info(
            "project_synthesized",
            files=len(result.files),
            instances=len(placed),
            skipped=len(result.skipped),
            packages=len(result.packages),
        )
        return result

    def synthesize_project(self, document: "DocumentModel") -> dict[str, str]:
        """Map of relative file path to file contents."""
        return self.build(document).files


def _component_name(resolved: CompiledUnit | CatalogEntry) -> str:
    if isinstance(resolved, CompiledUnit):
        return resolved.component_name
    return resolved.type_id


def _placeholder(name: str) -> str:
    return f"""export function {name}(props: Record<string, unknown>) {{
  return <div data-component="{name}" />
}}
"""


__all__ = ["ExportError", "SynthesisResult", "ProjectSynthesizer"]
