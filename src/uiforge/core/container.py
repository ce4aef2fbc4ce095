"""Dependency Injection Container."""

from injector import Injector, Module, provider, singleton

from ..builder import BuilderSession
from ..catalog import CatalogIndex, load_catalog
from ..compiler import Capabilities, default_capabilities
from .config import Settings, get_settings


class CoreModule(Module):
    """Core dependencies."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings

    @singleton
    @provider
    def provide_settings(self) -> Settings:
        """Provide settings (explicit instance or environment)."""
        return self.settings or get_settings()

    @singleton
    @provider
    def provide_catalog(self) -> CatalogIndex:
        """Provide the packaged catalog, shared by every session."""
        return load_catalog()

    @singleton
    @provider
    def provide_capabilities(self) -> Capabilities:
        """Provide the capability set injected into generated components."""
        return default_capabilities()

    @provider
    def provide_session(
        self, catalog: CatalogIndex, settings: Settings, capabilities: Capabilities
    ) -> BuilderSession:
        """Provide a fresh builder session; sessions never share registrars."""
        return BuilderSession(catalog=catalog, settings=settings, capabilities=capabilities)


def create_container(settings: Settings | None = None) -> Injector:
    """Create configured injector."""
    return Injector([CoreModule(settings)])
