"""uiforge: compile generated UI components and synthesize buildable projects."""

from .builder import BuilderSession, ComponentInstance, DocumentModel
from .catalog import CatalogIndex, load_catalog
from .compiler import CompiledUnit, ComponentRegistrar
from .export import ProjectSynthesizer

__version__ = "0.1.0"

__all__ = [
    "BuilderSession",
    "ComponentInstance",
    "DocumentModel",
    "CatalogIndex",
    "load_catalog",
    "CompiledUnit",
    "ComponentRegistrar",
    "ProjectSynthesizer",
]
