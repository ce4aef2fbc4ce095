"""
Builder session.

One editing session: its own registrar and document model over the shared
immutable catalog. Generation responses are matched to the request that
produced them so a late answer to a superseded request cannot land on the
canvas.
"""

from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from ..catalog import CatalogEntry, CatalogIndex, load_catalog
from ..compiler import Capabilities, CompiledUnit, ComponentRegistrar
from ..core import (
    CatalogPick,
    GeneratedComponentDefinition,
    LogContext,
    Settings,
    get_logger,
    get_settings,
)
from ..core.id import Prefix, RequestID, SessionID, extract_prefix, is_valid, new_request_id, new_session_id
from ..export import ExportError, ProjectSynthesizer, SynthesisResult, write_archive, write_tree
from .document import DocumentModel, IngestReport
from .payload import parse_generation_payload

logger = get_logger(__name__)


class BuilderSession:
    """Registrar, document model and synthesizer for one canvas."""

    def __init__(
        self,
        catalog: CatalogIndex | None = None,
        settings: Settings | None = None,
        capabilities: Capabilities | None = None,
    ) -> None:
        self.id: SessionID = new_session_id()
        self.settings = settings or get_settings()
        self.catalog = catalog if catalog is not None else load_catalog()
        self.registrar = ComponentRegistrar(capabilities, self.settings)
        self.document = DocumentModel(self.catalog, self.registrar, self.settings)
        self.synthesizer = ProjectSynthesizer(self.catalog, self.registrar, self.settings)
        self._pending: RequestID | None = None

    def ingest_batch(
        self,
        catalog_picks: Iterable[CatalogPick | Mapping[str, Any]] = (),
        generated_picks: Iterable[GeneratedComponentDefinition | Mapping[str, Any]] = (),
    ) -> IngestReport:
        with LogContext(session_id=self.id):
            return self.document.ingest_batch(catalog_picks, generated_picks)

    # ------------------------------------------------------------------
    # Generation requests
    # ------------------------------------------------------------------

    def begin_generation(self) -> RequestID:
        """Start a generation request; any earlier pending request becomes stale."""
        self._pending = new_request_id()
        logger.debug("generation_started", session_id=self.id, request_id=self._pending)
        return self._pending

    @property
    def pending_request(self) -> RequestID | None:
        return self._pending

    def ingest_response(self, request_id: RequestID, payload_text: str) -> IngestReport | None:
        """
        Ingest the generative service's answer to a request.

        Returns:
            The ingest report, or None if the response belongs to a request
            that has been superseded (or was never started)

        Raises:
            JSONParseError: If the payload cannot be parsed at all
        """
        if not is_valid(request_id) or extract_prefix(request_id) != Prefix.REQUEST:
            logger.warning("response_request_id_invalid", session_id=self.id, request_id=request_id)
            return None
        if request_id != self._pending:
            logger.info(
                "stale_response_dropped",
                session_id=self.id,
                request_id=request_id,
                pending=self._pending,
            )
            return None
        self._pending = None
        with LogContext(session_id=self.id, request_id=request_id):
            payload = parse_generation_payload(payload_text)
            return self.document.ingest_batch(payload.components, payload.generated_components)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def is_component_available(self, type_id: str) -> bool:
        """True if the type resolves to a generated unit or a catalog entry."""
        return self.resolve(type_id) is not None

    def resolve(self, type_id: str) -> CompiledUnit | CatalogEntry | None:
        return self.document.resolve(type_id)

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def build(self) -> SynthesisResult:
        with LogContext(session_id=self.id):
            return self.synthesizer.build(self.document)

    def synthesize_project(self) -> dict[str, str]:
        return self.build().files

    def export_archive(self, path: str | Path) -> Path:
        """
        Write the project as a zip archive (``.zip``) or a directory tree.

        Raises:
            ExportError: If the canvas is empty or a type cannot be resolved
                under the ``abort`` policy
            SerializationError: If a property value cannot be written back
        """
        if not len(self.document):
            raise ExportError("Nothing to export: the canvas is empty")
        files = self.synthesize_project()
        target = Path(path)
        if target.suffix == ".zip":
            return write_archive(files, target)
        return write_tree(files, target)


__all__ = ["BuilderSession"]
