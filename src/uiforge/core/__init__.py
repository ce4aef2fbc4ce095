"""Core utilities and infrastructure."""

from .config import Settings, get_settings
from .logging_config import configure_logging, get_logger, LogContext
from .json import (
    extract_json,
    extract_json_array,
    safe_json_dumps,
    strip_markdown_fence,
    strip_outer_fence,
    JSONParseError,
    validate_json_depth,
)
from .validate import (
    ValidationError,
    ValidationResult,
    CatalogPick,
    GeneratedComponentDefinition,
    GenerationPayload,
    validate_payload,
    validate_property_bag,
)
from .hash import Algorithm, hash_string, hash_files
from .naming import to_pascal_case, to_kebab_case, type_id_forms, is_component_name


def create_container(settings: Settings | None = None):
    """Create dependency injection container (lazy import to avoid circular deps)."""
    from .container import create_container as _create_container

    return _create_container(settings)


__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Logging
    "configure_logging",
    "get_logger",
    "LogContext",
    # JSON
    "extract_json",
    "extract_json_array",
    "safe_json_dumps",
    "strip_markdown_fence",
    "strip_outer_fence",
    "JSONParseError",
    "validate_json_depth",
    # Validation
    "ValidationError",
    "ValidationResult",
    "CatalogPick",
    "GeneratedComponentDefinition",
    "GenerationPayload",
    "validate_payload",
    "validate_property_bag",
    # Hashing
    "Algorithm",
    "hash_string",
    "hash_files",
    # Naming
    "to_pascal_case",
    "to_kebab_case",
    "type_id_forms",
    "is_component_name",
    # DI
    "create_container",
]
