"""Tests for package aggregation and project synthesis."""

import json
import zipfile

import pytest

from uiforge.builder import BuilderSession
from uiforge.core.config import Settings
from uiforge.export import (
    BASELINE_PACKAGES,
    ExportError,
    SerializationError,
    compute_required_packages,
    dependency_table,
)

PANEL_SOURCE = """
function AlphaPanel({ label = "Panel" }) {
  const [open, setOpen] = useState(false);
  return (
    <Card>
      <CardTitle>{label}</CardTitle>
      <Button onClick={() => setOpen(!open)}>Toggle</Button>
    </Card>
  );
}
"""


def manifest_of(files):
    return json.loads(files["package.json"])


# ============================================================================
# Packages
# ============================================================================

@pytest.mark.unit
def test_dependency_union(small_catalog):
    """Union of catalog packages, no duplicates, denylist filtered."""
    packages = compute_required_packages(["Card", "alpha-panel", "AlphaPanel"], small_catalog.resolve)
    assert packages == frozenset({"pkg-a", "pkg-b"})

    with_hero = compute_required_packages(["Card", "BetaHero", "Unknown"], small_catalog.resolve)
    assert with_hero == frozenset({"pkg-a", "pkg-c"})
    assert "next/font/google" not in with_hero


@pytest.mark.unit
def test_packaged_catalog_denylist(catalog):
    """Catalog metadata naming next/font/google never reaches the manifest."""
    packages = compute_required_packages([e.type_id for e in catalog], catalog.resolve)

    assert "next/font/google" not in packages
    assert {"framer-motion", "@permaweb/aoconnect"} <= packages


@pytest.mark.unit
def test_dependency_table_versions():
    """Baseline always present; unknown packages get the default range."""
    table = dependency_table({"framer-motion", "pkg-z", "next/font/google"})

    assert set(table) == BASELINE_PACKAGES | {"framer-motion", "pkg-z"}
    assert table["framer-motion"] == "^10.16.0"
    assert table["pkg-z"] == "^1.0.0"
    assert list(table) == sorted(table)


# ============================================================================
# End to end
# ============================================================================

@pytest.mark.unit
def test_card_scenario(session):
    """Escaped-quote title survives to the entry point; pkg-a in the manifest."""
    report = session.ingest_batch([{"type": "Card", "props": {"title": 'Hello "World"'}}], [])

    (instance,) = session.document.list_instances()
    assert report.added == [instance.id]
    assert instance.type_id == "Card"
    assert instance.properties["title"] == 'Hello "World"'

    files = session.synthesize_project()
    page = files["app/page.tsx"]
    assert '      <Card title={"Hello \\"World\\""} />' in page
    assert 'import { Card } from "@/components/custom/card"' in page
    assert "pkg-a" in manifest_of(files)["dependencies"]


@pytest.mark.unit
def test_fixed_files_always_present(session):
    """Scaffold ships even for an empty canvas."""
    files = session.synthesize_project()

    for path in (
        "package.json",
        "next.config.mjs",
        "tailwind.config.ts",
        "tsconfig.json",
        "postcss.config.cjs",
        "app/layout.tsx",
        "app/page.tsx",
        "app/globals.css",
        "lib/utils.ts",
        "types/ao.d.ts",
        ".env.example",
        "README.md",
        "components/ui/button.tsx",
        "components/ui/card.tsx",
        "components/ui/scroll-area.tsx",
    ):
        assert path in files, path

    manifest = manifest_of(files)
    assert manifest["name"] == "test-project"
    assert set(manifest["dependencies"]) == BASELINE_PACKAGES
    assert "test-project" in files["app/layout.tsx"]


@pytest.mark.unit
def test_generated_component_file(session):
    """Generated source lands in its own namespace with imports and exports."""
    session.ingest_batch(generated_picks=[{"type": "alpha-panel", "code": PANEL_SOURCE, "props": {"label": "Hi"}}])

    result = session.build()
    source = result.files["components/generated/alpha-panel.tsx"]
    assert source.startswith('"use client"\n')
    assert 'import { useState } from "react";' in source
    assert 'import { Button } from "@/components/ui/button";' in source
    assert 'import { Card, CardTitle } from "@/components/ui/card";' in source
    assert "function AlphaPanel(" in source
    assert source.rstrip().endswith("export default AlphaPanel")

    page = result.entry_point
    assert 'import { AlphaPanel } from "@/components/generated/alpha-panel"' in page
    assert '<AlphaPanel label="Hi" />' in page
    # generated units need nothing beyond the baseline, catalog file not shipped
    assert result.packages == frozenset()
    assert "components/custom/alpha-panel.tsx" not in result.files


@pytest.mark.unit
def test_instance_order_and_shared_files(session):
    """Markup follows document order; one file per distinct type."""
    session.ingest_batch([{"type": "AlphaPanel", "props": {"v": 1}}, {"type": "Card"}])
    session.document.add_instance("AlphaPanel", properties={"v": 2})

    result = session.build()
    lines = [line.strip() for line in result.entry_point.splitlines() if line.strip().startswith("<") and "/>" in line]
    assert lines == [
        "<AlphaPanel v={1} />",
        '<Card title="Default" />',
        "<AlphaPanel v={2} />",
    ]
    assert result.files["components/custom/alpha-panel.tsx"].startswith("export function AlphaPanel")
    # Card has no shipped template
    assert "components/custom/card.tsx" in result.files
    assert any("placeholder" in w for w in result.warnings)
    assert "- AlphaPanel\n- Card" in result.files["README.md"]
    # same document, same project
    assert session.build().digest == result.digest


@pytest.mark.unit
def test_unknown_type_skipped_by_default(session):
    """Instances with unresolvable types are skipped with a warning."""
    session.document.add_instance("Card")
    ghost = session.document.add_instance("Ghost", properties={"a": 1})

    result = session.build()
    assert result.skipped == [ghost]
    assert "Ghost" not in result.entry_point
    assert "<Card" in result.entry_point


@pytest.mark.unit
def test_unknown_type_aborts_under_policy(small_catalog):
    """The abort policy names the offending type."""
    session = BuilderSession(
        catalog=small_catalog, settings=Settings(_env_file=None, unknown_type_policy="abort")
    )
    session.document.add_instance("Ghost")

    with pytest.raises(ExportError, match="Ghost") as excinfo:
        session.synthesize_project()
    assert excinfo.value.type_id == "Ghost"


@pytest.mark.unit
def test_serialization_error_names_instance(session):
    """Export surfaces which instance and property blocked it."""
    instance_id = session.document.add_instance("Card", properties={"title": "ok", "items": [1, None]})

    with pytest.raises(SerializationError) as excinfo:
        session.synthesize_project()
    error = excinfo.value
    assert error.instance_id == instance_id
    assert error.type_id == "Card"
    assert error.key_path == "props.items[1]"


@pytest.mark.unit
def test_emit_instance_markup_unknown_type(session):
    """Markup for an unresolvable instance is an error."""
    instance_id = session.document.add_instance("Ghost")
    with pytest.raises(ExportError):
        session.synthesizer.emit_instance_markup(session.document.get_instance(instance_id))


@pytest.mark.unit
def test_export_archive_and_tree(session, tmp_path):
    """Zip and directory exports hold the same files."""
    with pytest.raises(ExportError):
        session.export_archive(tmp_path / "empty.zip")

    session.ingest_batch([{"type": "BetaHero"}])
    archive = session.export_archive(tmp_path / "out" / "project.zip")
    with zipfile.ZipFile(archive) as zf:
        names = set(zf.namelist())
    assert "app/page.tsx" in names
    assert "components/headers/beta-hero.tsx" in names

    tree = session.export_archive(tmp_path / "project")
    assert (tree / "app" / "page.tsx").read_text(encoding="utf-8") == session.synthesize_project()["app/page.tsx"]
    assert (tree / ".env.example").is_file()
