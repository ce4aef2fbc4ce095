"""Catalog data models."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Category(str, Enum):
    """Closed set of catalog categories."""

    NAVIGATION = "navigation"
    HEADER = "header"
    ARWEAVE = "arweave"
    UI = "ui"


class CatalogEntry(BaseModel):
    """Metadata for one pre-authored component."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    id: str = Field(..., min_length=1, description="Hyphenated catalog id")
    display_name: str = Field(..., alias="name")
    category: Category
    type_id: str = Field(..., alias="type", min_length=1, description="Canonical component name")
    description: str = ""
    default_properties: dict[str, Any] = Field(default_factory=dict, alias="defaultProps")
    required_packages: frozenset[str] = Field(default_factory=frozenset, alias="dependencies")
    source_import_path: str = Field(..., alias="importPath")
    support_files: tuple[str, ...] = Field(default=(), alias="supportFiles")
    tags: frozenset[str] = Field(default_factory=frozenset)

    @field_validator("source_import_path")
    @classmethod
    def validate_import_path(cls, v: str) -> str:
        """Import paths are project-rooted (``@/...``)."""
        if not v.startswith("@/"):
            raise ValueError(f"Import path must start with '@/': {v}")
        return v

    @property
    def source_path(self) -> str:
        """Relative file path of the component source in an exported project."""
        return import_path_to_file(self.source_import_path)

    def matches(self, query: str) -> bool:
        """Case-insensitive match over name, description and tags."""
        q = query.lower()
        return (
            q in self.display_name.lower()
            or q in self.description.lower()
            or any(q in tag.lower() for tag in self.tags)
        )


def import_path_to_file(import_path: str, extension: str = ".tsx") -> str:
    """``@/components/x/y`` -> ``components/x/y.tsx``."""
    return import_path.removeprefix("@/") + extension
