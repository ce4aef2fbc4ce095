"""Canvas document model, payload parsing and builder sessions."""

from .document import (
    ComponentInstance,
    DocumentModel,
    IngestReport,
    Origin,
    Position,
    UnknownInstanceError,
)
from .payload import parse_generation_payload
from .session import BuilderSession

__all__ = [
    "ComponentInstance",
    "DocumentModel",
    "IngestReport",
    "Origin",
    "Position",
    "UnknownInstanceError",
    "parse_generation_payload",
    "BuilderSession",
]
