"""Tests for the catalog index."""

import pytest
from pydantic import ValidationError

from uiforge.catalog import CatalogIndex, Category, load_catalog_from_bytes


@pytest.mark.unit
def test_packaged_catalog_loads(catalog):
    """Every packaged entry has a template body."""
    assert len(catalog) == 11
    assert catalog.version == "2024.1"
    for entry in catalog:
        assert catalog.template_for(entry) is not None, entry.id


@pytest.mark.unit
def test_resolve_both_textual_forms(catalog):
    """Hyphenated id and canonical type id resolve to the same entry."""
    by_type = catalog.resolve("ArDacityClassicNavbar")
    by_id = catalog.resolve("ardacity-classic-navbar")

    assert by_type is not None
    assert by_type is by_id
    assert catalog.get("  FloatingNavbar ") is catalog.resolve("floating-navbar")


@pytest.mark.unit
def test_resolve_transliterates_last(small_catalog):
    """Hyphen-to-capitalized transliteration is a fallback."""
    assert small_catalog.resolve("beta-hero").type_id == "BetaHero"
    assert small_catalog.resolve("alpha-panel").type_id == "AlphaPanel"
    assert small_catalog.resolve("gamma") is None
    assert "card" in small_catalog
    assert "Missing" not in small_catalog


@pytest.mark.unit
def test_support_files_ship_with_entry(catalog):
    """The NFT panel ships the Lua IDE next to it."""
    entry = catalog.resolve("arweave-nft")
    assert entry.support_files == ("@/components/arweave/lua-ide",)
    assert "LuaIDE" in catalog.support_template("@/components/arweave/lua-ide")
    assert entry.source_path == "components/arweave/arweave-nft.tsx"


@pytest.mark.unit
def test_search_and_categories(catalog):
    """Search covers name, description and tags."""
    assert {e.type_id for e in catalog.search("wallet")} >= {"AOMessageSigner", "ArDacityClassicNavbar"}
    assert len(catalog.search("")) == len(catalog)
    assert catalog.search("no-such-thing") == []

    headers = catalog.by_category(Category.HEADER)
    assert {e.type_id for e in headers} == {"SmoothScrollHero", "ArDacityClassicHero", "NftThemeHero"}
    assert catalog.by_category("navigation") == catalog.by_category(Category.NAVIGATION)


@pytest.mark.unit
def test_duplicate_entries_rejected(entry_factory):
    """Two entries may not share an id or a type id."""
    with pytest.raises(ValueError):
        CatalogIndex([entry_factory(), entry_factory(id="other-card")])


@pytest.mark.unit
def test_entry_validation(entry_factory):
    """Import paths are project-rooted and categories are closed."""
    with pytest.raises(ValidationError):
        entry_factory(importPath="components/custom/card")
    with pytest.raises(ValidationError):
        entry_factory(category="widgets")


@pytest.mark.unit
def test_load_from_bytes_with_custom_reader():
    """Templates come from the supplied reader."""
    raw = b"""{"version": "t1", "entries": [
        {"id": "card", "name": "Card", "category": "ui", "type": "Card",
         "importPath": "@/components/custom/card", "dependencies": ["pkg-a"]}
    ]}"""
    index = load_catalog_from_bytes(raw, template_reader=lambda name: f"// {name}")

    entry = index.resolve("Card")
    assert index.version == "t1"
    assert entry.required_packages == frozenset({"pkg-a"})
    assert index.template_for(entry) == "// card.tsx"
