"""Project synthesis: property serialization, packages, scaffold and export."""

from .archive import write_archive, write_tree
from .packages import (
    BASELINE_PACKAGES,
    DENYLIST,
    compute_required_packages,
    dependency_table,
    render_manifest,
)
from .serializer import (
    SerializationError,
    emit_markup,
    parse_property_value,
    quote_string,
    serialize_attribute,
    serialize_property_value,
)
from .synthesizer import ExportError, ProjectSynthesizer, SynthesisResult

__all__ = [
    "write_archive",
    "write_tree",
    "BASELINE_PACKAGES",
    "DENYLIST",
    "compute_required_packages",
    "dependency_table",
    "render_manifest",
    "SerializationError",
    "emit_markup",
    "parse_property_value",
    "quote_string",
    "serialize_attribute",
    "serialize_property_value",
    "ExportError",
    "ProjectSynthesizer",
    "SynthesisResult",
]
