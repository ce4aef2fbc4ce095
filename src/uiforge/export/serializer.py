"""
Property value serialization.

Turns a property bag value back into source-expression text that can be
embedded in markup. The mapping is total over the property value domain
(strings, finite numbers, booleans, lists and string-keyed maps) and
round-trips through the compiler's expression evaluator.
"""

import math
import re
from collections.abc import Mapping
from typing import Any

from ..compiler import evaluate_expression

# Largest integer a JS number represents exactly
MAX_SAFE_INTEGER = 2**53 - 1

IDENTIFIER_KEY = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")
ATTRIBUTE_NAME = re.compile(r"^[A-Za-z_$][\w$-]*(?::[A-Za-z_$][\w$-]*)?$")

_SHORT_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\b": "\\b",
    "\f": "\\f",
    "\v": "\\v",
}


class SerializationError(ValueError):
    """A property value cannot be written back as source text."""

    def __init__(
        self,
        message: str,
        key_path: str = "",
        instance_id: str | None = None,
        type_id: str | None = None,
    ):
        self.reason = message
        self.key_path = key_path
        self.instance_id = instance_id
        self.type_id = type_id
        super().__init__(self._render())

    def _render(self) -> str:
        where = f" at {self.key_path}" if self.key_path else ""
        owner = ""
        if self.instance_id:
            owner = f" (instance {self.instance_id}"
            owner += f", type {self.type_id})" if self.type_id else ")"
        return f"{self.reason}{where}{owner}"

    def for_instance(self, instance_id: str, type_id: str) -> "SerializationError":
        """Copy of this error attributed to one instance."""
        return SerializationError(self.reason, self.key_path, instance_id, type_id)


def _escape_char(char: str) -> str:
    if char in _SHORT_ESCAPES:
        return _SHORT_ESCAPES[char]
    code = ord(char)
    if code < 0x20 or code == 0x7F or code in (0x2028, 0x2029) or 0xD800 <= code <= 0xDFFF:
        return f"\\u{code:04x}"
    return char


def quote_string(text: str) -> str:
    """Double-quoted, escaped string literal."""
    return '"' + "".join(_escape_char(c) for c in text) + '"'


def child_path(parent: str, key: str | int) -> str:
    """Key path of a nested value (``items[2].label``, ``meta["x-y"]``)."""
    if isinstance(key, int):
        return f"{parent}[{key}]"
    if IDENTIFIER_KEY.match(key):
        return f"{parent}.{key}" if parent else key
    return f"{parent}[{quote_string(key)}]"


def serialize_property_value(value: Any, key_path: str = "") -> str:
    """
    Serialize one property value to source-expression text.

    Args:
        value: Value from a property bag
        key_path: Path of the value inside the bag, used in error messages

    Returns:
        Expression text that evaluates back to an equal value

    Raises:
        SerializationError: If the value (or anything inside it) is outside
            the property value domain
    """
    return _serialize(value, key_path, set())


def _serialize(value: Any, path: str, active: set[int]) -> str:
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        if abs(value) > MAX_SAFE_INTEGER:
            raise SerializationError(f"Integer {value} is outside the exact number range", path)
        return str(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise SerializationError(f"Non-finite number {value!r} has no literal form", path)
        return repr(value)
    if isinstance(value, str):
        return quote_string(value)
    if value is None:
        raise SerializationError("Null values cannot be serialized", path)

    if isinstance(value, (list, tuple, Mapping)):
        marker = id(value)
        if marker in active:
            raise SerializationError("Cyclic reference", path)
        active.add(marker)
        try:
            if isinstance(value, Mapping):
                return _serialize_mapping(value, path, active)
            items = [_serialize(item, child_path(path, i), active) for i, item in enumerate(value)]
            return "[" + ", ".join(items) + "]"
        finally:
            active.discard(marker)

    raise SerializationError(f"Unsupported value of type {type(value).__name__}", path)


def _serialize_mapping(value: Mapping, path: str, active: set[int]) -> str:
    parts = []
    for key, item in value.items():
        if not isinstance(key, str):
            raise SerializationError(f"Map key {key!r} is not a string", path)
        if key == "__proto__":
            raise SerializationError("Key '__proto__' cannot be written as a plain property", path)
        parts.append(f"{quote_string(key)}: {_serialize(item, child_path(path, key), active)}")
    return "{" + ", ".join(parts) + "}"


def serialize_attribute(name: str, value: Any, key_path: str | None = None) -> str:
    """
    One markup attribute for a property.

    Strings that need no escaping are written as plain attribute text
    (``title="Hello"``); everything else is an expression container
    (``count={3}``, ``title={"Say \\"hi\\""}``).
    """
    path = name if key_path is None else key_path
    if not ATTRIBUTE_NAME.match(name):
        raise SerializationError(f"Invalid attribute name {name!r}", path)
    expression = serialize_property_value(value, path)
    if isinstance(value, str) and expression == f'"{value}"' and "&" not in value and "{" not in value:
        return f"{name}={expression}"
    return f"{name}={{{expression}}}"


def emit_markup(component_name: str, properties: Mapping[str, Any]) -> str:
    """Self-closing element with one attribute per property, in bag order."""
    attributes = [
        serialize_attribute(key, value, child_path("props", key)) for key, value in properties.items()
    ]
    if not attributes:
        return f"<{component_name} />"
    return f"<{component_name} {' '.join(attributes)} />"


def parse_property_value(text: str) -> Any:
    """Evaluate serialized expression text back into a value."""
    return evaluate_expression(text)


__all__ = [
    "MAX_SAFE_INTEGER",
    "SerializationError",
    "quote_string",
    "child_path",
    "serialize_property_value",
    "serialize_attribute",
    "emit_markup",
    "parse_property_value",
]
