"""Catalog of pre-authored components."""

from .models import CatalogEntry, Category, import_path_to_file
from .index import CatalogIndex, load_catalog, load_catalog_from_bytes

__all__ = [
    "CatalogEntry",
    "Category",
    "CatalogIndex",
    "import_path_to_file",
    "load_catalog",
    "load_catalog_from_bytes",
]
