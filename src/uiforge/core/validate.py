"""Input validation for generative-service payloads and property bags."""

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from returns.result import Failure, Result, Success

from .json import JSONParseError, validate_json_depth


# Validation limits
MAX_PROPS_DEPTH = 20


class ValidationError(Exception):
    """Validation failed."""

    pass


@dataclass(frozen=True)
class ValidationResult:
    """Validation error with details (for Result pattern)."""

    message: str
    field: str | None = None
    value: Any | None = None


class PayloadModel(BaseModel):
    """Base model for payload items produced by the generative service."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class CatalogPick(PayloadModel):
    """A catalog component requested by the generative service."""

    type_id: str = Field(alias="type", min_length=1)
    category: str = Field(default="")
    properties: dict[str, Any] = Field(default_factory=dict, alias="props")

    @field_validator("type_id")
    @classmethod
    def validate_type_id(cls, v: str) -> str:
        """Ensure type id is non-empty after stripping."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("Component type cannot be empty")
        return stripped


class GeneratedComponentDefinition(PayloadModel):
    """A component whose source text was produced by the generative service."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    type_id: str = Field(alias="type", min_length=1)
    category: str = Field(default="ui")
    default_properties: dict[str, Any] = Field(default_factory=dict, alias="props")
    source_text: str = Field(alias="code")

    @field_validator("type_id")
    @classmethod
    def validate_type_id(cls, v: str) -> str:
        """Ensure type id is non-empty after stripping."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("Component type cannot be empty")
        return stripped


class GenerationPayload(PayloadModel):
    """Parsed response of the generative service."""

    components: list[CatalogPick] = Field(default_factory=list)
    generated_components: list[GeneratedComponentDefinition] = Field(
        default_factory=list, alias="generatedComponents"
    )


def validate_property_bag(props: dict[str, Any], max_depth: int = MAX_PROPS_DEPTH) -> None:
    """
    Validate a property bag before it is stored on an instance.

    Args:
        props: Property bag
        max_depth: Maximum allowed nesting depth

    Raises:
        ValidationError: If the bag is not a string-keyed map or is too deep
    """
    if not isinstance(props, dict):
        raise ValidationError(f"Properties must be a map, got {type(props).__name__}")

    for key in props:
        if not isinstance(key, str):
            raise ValidationError(f"Property names must be strings, got {key!r}")

    try:
        validate_json_depth(props, max_depth)
    except JSONParseError as e:
        raise ValidationError(f"Properties too deeply nested: {e}") from e


def validate_payload(data: dict[str, Any]) -> Result[GenerationPayload, ValidationResult]:
    """
    Validate a decoded generative-service payload (Result pattern version).

    Args:
        data: Decoded JSON object

    Returns:
        Result holding the payload or the first validation error
    """
    try:
        return Success(GenerationPayload.model_validate(data))
    except PydanticValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first.get("loc", ()))
        return Failure(ValidationResult(first.get("msg", str(e)), field=location or None))
