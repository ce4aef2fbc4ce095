"""Catalog Index - immutable lookup of pre-authored components."""

from collections.abc import Iterable, Iterator, Mapping
from functools import lru_cache
from importlib import resources
from types import MappingProxyType

import msgspec

from ..core import get_logger
from ..core.naming import to_pascal_case
from .models import CatalogEntry, Category


logger = get_logger(__name__)

DATA_PACKAGE = "uiforge.catalog"


class CatalogIndex:
    """
    Read-only table from component type id to catalog metadata.

    Lookups accept the hyphenated catalog id or the canonical type id; a
    hyphen-to-capitalized transliteration is tried only after both exact
    forms miss.
    """

    def __init__(
        self,
        entries: Iterable[CatalogEntry],
        templates: Mapping[str, str] | None = None,
        version: str = "dev",
    ) -> None:
        self.version = version
        self._entries: tuple[CatalogEntry, ...] = tuple(entries)
        by_type: dict[str, CatalogEntry] = {}
        by_id: dict[str, CatalogEntry] = {}
        for entry in self._entries:
            if entry.type_id in by_type or entry.id in by_id:
                raise ValueError(f"Duplicate catalog entry: {entry.id} ({entry.type_id})")
            by_type[entry.type_id] = entry
            by_id[entry.id] = entry
        self._by_type = MappingProxyType(by_type)
        self._by_id = MappingProxyType(by_id)
        self._templates = MappingProxyType(dict(templates or {}))

    def resolve(self, type_id: str) -> CatalogEntry | None:
        """Resolve either textual form of a type id to its entry."""
        key = type_id.strip()
        entry = self._by_type.get(key) or self._by_id.get(key)
        if entry is not None:
            return entry
        return self._by_type.get(to_pascal_case(key))

    # Alias used by callers that mirror the registry API
    get = resolve

    def __contains__(self, type_id: str) -> bool:
        return self.resolve(type_id) is not None

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[CatalogEntry]:
        return iter(self._entries)

    def entries(self) -> tuple[CatalogEntry, ...]:
        """All entries in table order."""
        return self._entries

    def by_category(self, category: Category | str) -> list[CatalogEntry]:
        """Entries of one category."""
        wanted = Category(category)
        return [e for e in self._entries if e.category == wanted]

    def search(self, query: str) -> list[CatalogEntry]:
        """Search name, description and tags; an empty query returns everything."""
        if not query.strip():
            return list(self._entries)
        return [e for e in self._entries if e.matches(query.strip())]

    def template_for(self, entry: CatalogEntry) -> str | None:
        """Verbatim component source for an entry, if one ships with the catalog."""
        return self._templates.get(entry.id)

    def support_template(self, import_path: str) -> str | None:
        """Verbatim source of a support file, keyed by its import path."""
        return self._templates.get(import_path)


class _CatalogTable(msgspec.Struct):
    """On-disk catalog layout."""

    version: str
    entries: list[dict]


def _read_template(name: str) -> str | None:
    resource = resources.files(DATA_PACKAGE) / "templates" / name
    if not resource.is_file():
        return None
    return resource.read_text(encoding="utf-8")


def load_catalog_from_bytes(raw: bytes, template_reader=_read_template) -> CatalogIndex:
    """
    Build a catalog from the JSON data table.

    Args:
        raw: Encoded data table ``{"version": ..., "entries": [...]}``
        template_reader: Callable mapping a template file name to its text

    Returns:
        Populated catalog index
    """
    table = msgspec.json.decode(raw, type=_CatalogTable)
    entries = [CatalogEntry.model_validate(item) for item in table.entries]

    templates: dict[str, str] = {}
    for entry in entries:
        text = template_reader(f"{entry.id}.tsx")
        if text is not None:
            templates[entry.id] = text
        for support in entry.support_files:
            support_text = template_reader(f"{support.rsplit('/', 1)[-1]}.tsx")
            if support_text is not None:
                templates[support] = support_text

    logger.debug("catalog_loaded", version=table.version, entries=len(entries), templates=len(templates))
    return CatalogIndex(entries, templates=templates, version=table.version)


@lru_cache
def load_catalog() -> CatalogIndex:
    """Load the packaged catalog once per process (it is immutable)."""
    raw = (resources.files(DATA_PACKAGE) / "data" / "catalog.json").read_bytes()
    return load_catalog_from_bytes(raw)


__all__ = ["CatalogIndex", "load_catalog", "load_catalog_from_bytes"]
