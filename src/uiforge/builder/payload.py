"""Parsing of generative-service responses."""

from typing import Any

from pydantic import ValidationError as PydanticValidationError
from returns.result import Success

from ..core import (
    CatalogPick,
    GeneratedComponentDefinition,
    GenerationPayload,
    JSONParseError,
    extract_json,
    extract_json_array,
    get_logger,
    strip_outer_fence,
    validate_payload,
)

logger = get_logger(__name__)


def _unwrap(data: dict[str, Any]) -> dict[str, Any] | str:
    """Peel response wrappers down to the payload object (or the model's raw text)."""
    if isinstance(data.get("result"), dict):
        return data["result"]
    candidates = data.get("candidates")
    if isinstance(candidates, list) and candidates:
        try:
            return candidates[0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            return data
    return data


def _salvage(items: list[Any], model: type) -> list:
    """Validate items one by one, dropping the ones that do not fit ``model``."""
    kept = []
    for index, item in enumerate(items):
        if isinstance(item, str) and model is CatalogPick:
            item = {"type": item}
        try:
            kept.append(model.model_validate(item))
        except PydanticValidationError as e:
            logger.warning("payload_item_dropped", model=model.__name__, index=index, error=str(e.errors()[0]["msg"]))
    return kept


def parse_generation_payload(text: str) -> GenerationPayload:
    """
    Parse a generative-service response.

    Accepts the payload object itself, a ``{"result": {...}}`` wrapper, a
    raw model response whose first candidate text holds the payload, and
    fenced or slightly malformed JSON. Only a fence around the whole
    response is removed, so fenced code inside ``code`` values survives.
    When no object can be parsed at all the text is read as a bare list
    of catalog picks.

    Args:
        text: Raw response text

    Returns:
        Validated payload (items that fail validation are dropped)

    Raises:
        JSONParseError: If neither an object nor a list can be recovered
    """
    body = strip_outer_fence(text).strip()
    object_at, list_at = body.find("{"), body.find("[")

    if object_at != -1 and (list_at == -1 or object_at < list_at):
        try:
            data = _unwrap(extract_json(body))
        except JSONParseError as e:
            logger.debug("payload_object_unparsed", error=str(e))
        else:
            if isinstance(data, str):
                return parse_generation_payload(data)

            result = validate_payload(data)
            if isinstance(result, Success):
                return result.unwrap()

            error = result.failure()
            logger.warning("payload_invalid", field=error.field, error=error.message)
            components = data.get("components")
            generated = data.get("generatedComponents", data.get("generated_components"))
            return GenerationPayload(
                components=_salvage(components if isinstance(components, list) else [], CatalogPick),
                generated_components=_salvage(
                    generated if isinstance(generated, list) else [], GeneratedComponentDefinition
                ),
            )

    try:
        items = extract_json_array(body)
    except JSONParseError as e:
        raise JSONParseError("Response holds neither a payload object nor a component list", e) from e

    logger.info("payload_list_fallback", items=len(items))
    return GenerationPayload(components=_salvage(items, CatalogPick))


__all__ = ["parse_generation_payload"]
