"""Fast, type-safe JSON parsing with multiple backends."""

from typing import Any
import json

import msgspec
import orjson
from json_repair import repair_json


class JSONParseError(Exception):
    """JSON parsing failed."""

    def __init__(self, message: str, original: Exception | None = None) -> None:
        super().__init__(message)
        self.original = original


def strip_markdown_fence(text: str) -> str:
    """
    Return the contents of the first markdown code block, or the text unchanged.

    Args:
        text: Text potentially wrapped in ``` fences

    Returns:
        Inner text of the first fenced block
    """
    if "```" not in text:
        return text

    start_marker = text.find("```") + 3
    # Skip the language tag on the opening fence line
    newline = text.find("\n", start_marker)
    if newline != -1 and text[start_marker:newline].strip().isidentifier():
        start_marker = newline + 1
    elif text.startswith("json", start_marker):
        start_marker += 4

    end_marker = text.find("```", start_marker)
    if end_marker == -1:
        return text[start_marker:].strip()
    return text[start_marker:end_marker].strip()


def strip_outer_fence(text: str) -> str:
    """
    Peel a fence that wraps the whole text, keeping any fences inside it.

    JSON string values may themselves hold fenced code, so only the
    outermost pair is removed.
    """
    stripped = text.strip()
    if not stripped.startswith("```"):
        return text

    body = stripped[3:]
    newline = body.find("\n")
    if newline != -1 and (not body[:newline].strip() or body[:newline].strip().isidentifier()):
        body = body[newline + 1:]
    body = body.rstrip()
    if body.endswith("```"):
        body = body[:-3]
    return body.strip()


def extract_json_boundaries(text: str, opener: str = "{", closer: str = "}") -> tuple[str, int, int] | None:
    """
    Extract JSON string and boundaries from text.

    Args:
        text: Text potentially containing JSON
        opener: Opening bracket of the wanted value
        closer: Closing bracket of the wanted value

    Returns:
        (extracted_text, start, end) or None if not found
    """
    working_text = strip_outer_fence(text)

    start = working_text.find(opener)
    end = working_text.rfind(closer)

    if start == -1 or end == -1 or end < start:
        return None

    return (working_text, start, end + 1)


def _decode(json_str: str, repair: bool) -> Any:
    """Decode with msgspec, then stdlib, then json_repair."""
    # Try msgspec first (fastest)
    try:
        return msgspec.json.decode(json_str.encode("utf-8"))
    except msgspec.DecodeError as e:
        if not repair:
            raise JSONParseError(f"Invalid JSON: {e}", e)

    # Try standard library
    try:
        return json.loads(json_str)
    except json.JSONDecodeError as e:
        # Last resort: try json_repair
        try:
            repaired = repair_json(json_str)
            return json.loads(repaired)
        except Exception as repair_error:
            raise JSONParseError(f"JSON repair failed: {repair_error}", repair_error) from e


def extract_json(text: str, repair: bool = True) -> dict[str, Any]:
    """
    Extract and parse a JSON object from text with automatic extraction and fallbacks.

    Args:
        text: Text containing JSON
        repair: Attempt to repair invalid JSON with json_repair

    Returns:
        Parsed JSON dictionary

    Raises:
        JSONParseError: If parsing fails
    """
    boundaries = extract_json_boundaries(text.strip())
    if boundaries is None:
        raise JSONParseError("No JSON object found in text")

    extracted_text, start, end = boundaries
    result = _decode(extracted_text[start:end], repair)
    if not isinstance(result, dict):
        raise JSONParseError(f"Expected dict, got {type(result).__name__}")
    return result


def extract_json_array(text: str, repair: bool = True) -> list[Any]:
    """
    Extract and parse a JSON array from text.

    Args:
        text: Text containing a JSON array
        repair: Attempt to repair invalid JSON with json_repair

    Returns:
        Parsed list

    Raises:
        JSONParseError: If parsing fails
    """
    boundaries = extract_json_boundaries(text.strip(), "[", "]")
    if boundaries is None:
        raise JSONParseError("No JSON array found in text")

    extracted_text, start, end = boundaries
    result = _decode(extracted_text[start:end], repair)
    if not isinstance(result, list):
        raise JSONParseError(f"Expected list, got {type(result).__name__}")
    return result


def safe_json_dumps(obj: Any, **kwargs: Any) -> str:
    """
    Encode object to JSON string using fastest available library.

    Args:
        obj: Object to encode
        **kwargs: Additional arguments (indent, etc.)

    Returns:
        JSON string
    """
    indent = kwargs.get("indent", 0)

    # Use orjson for compact output (fastest)
    if indent == 0:
        try:
            return orjson.dumps(obj).decode("utf-8")
        except (TypeError, ValueError):
            # Fallback for edge cases (e.g., integers outside 64-bit range)
            pass

    # Use stdlib for pretty-printed output or as fallback (most compatible)
    return json.dumps(obj, indent=indent if indent > 0 else None, ensure_ascii=False)


def validate_json_depth(obj: Any, max_depth: int = 20, current_depth: int = 0) -> None:
    """
    Validate JSON nesting depth to prevent stack overflow.

    Args:
        obj: Object to validate
        max_depth: Maximum allowed nesting depth
        current_depth: Current depth (internal)

    Raises:
        JSONParseError: If depth exceeds limit
    """
    if current_depth > max_depth:
        raise JSONParseError(f"JSON nesting depth {current_depth} exceeds maximum {max_depth}")

    if isinstance(obj, dict):
        for value in obj.values():
            validate_json_depth(value, max_depth, current_depth + 1)
    elif isinstance(obj, list):
        for item in obj:
            validate_json_depth(item, max_depth, current_depth + 1)
