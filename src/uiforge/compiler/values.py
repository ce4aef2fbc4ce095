"""Runtime values produced by rendering a compiled component."""

import html
import math
import re
from dataclasses import dataclass, field
from typing import Any

FRAGMENT = "#fragment"

VOID_TAGS = frozenset({"area", "br", "col", "hr", "img", "input", "link", "meta", "source", "wbr"})

ATTRIBUTE_ALIASES = {"className": "class", "htmlFor": "for"}

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


class RenderError(Exception):
    """A compiled component failed while producing markup."""


@dataclass
class Element:
    """A rendered markup node."""

    tag: str
    props: dict[str, Any] = field(default_factory=dict)
    children: list["Element | str"] = field(default_factory=list)

    @property
    def is_fragment(self) -> bool:
        return self.tag == FRAGMENT

    def text(self) -> str:
        """Concatenated text content of the subtree."""
        return "".join(c if isinstance(c, str) else c.text() for c in self.children)

    def find_all(self, tag: str) -> list["Element"]:
        found = []
        for child in self.children:
            if isinstance(child, Element):
                if child.tag == tag:
                    found.append(child)
                found.extend(child.find_all(tag))
        return found

    def to_html(self) -> str:
        inner = "".join(
            html.escape(c, quote=False) if isinstance(c, str) else c.to_html()
            for c in self.children
        )
        if self.is_fragment:
            return inner
        attrs = "".join(_render_attribute(k, v) for k, v in self.props.items())
        if self.tag in VOID_TAGS:
            return f"<{self.tag}{attrs}>"
        return f"<{self.tag}{attrs}>{inner}</{self.tag}>"


def _render_attribute(name: str, value: Any) -> str:
    if name in ("children", "key", "ref") or value is None or value is False or callable(value):
        return ""
    name = ATTRIBUTE_ALIASES.get(name, name)
    if value is True:
        return f" {name}"
    if name == "style" and isinstance(value, dict):
        value = "; ".join(
            f"{_CAMEL_BOUNDARY.sub('-', k).lower()}: {to_js_string(v)}" for k, v in value.items()
        )
    return f' {name}="{html.escape(to_js_string(value))}"'


# ============================================================================
# JavaScript value semantics
# ============================================================================


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def truthy(value: Any) -> bool:
    if value is None or value is False:
        return False
    if is_number(value):
        return value != 0 and not math.isnan(value)
    if isinstance(value, str):
        return value != ""
    return True


def format_number(value: int | float) -> str:
    if isinstance(value, int):
        return str(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(value)


def to_js_string(value: Any) -> str:
    if isinstance(value, str):
        return value
    if value is None:
        return "undefined"
    if isinstance(value, bool):
        return "true" if value else "false"
    if is_number(value):
        return format_number(value)
    if isinstance(value, list):
        return ",".join("" if v is None else to_js_string(v) for v in value)
    if callable(value):
        return "function () { [native code] }"
    return "[object Object]"


def to_number(value: Any) -> int | float:
    if is_number(value):
        return value
    if isinstance(value, bool):
        return int(value)
    if value is None:
        return math.nan
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0
        try:
            return int(text) if re.fullmatch(r"[+-]?\d+", text) else float(text)
        except ValueError:
            return math.nan
    if isinstance(value, list):
        return to_number(to_js_string(value))
    return math.nan


def typeof(value: Any) -> str:
    if value is None:
        return "undefined"
    if isinstance(value, bool):
        return "boolean"
    if is_number(value):
        return "number"
    if isinstance(value, str):
        return "string"
    if callable(value):
        return "function"
    return "object"


def strict_equals(left: Any, right: Any) -> bool:
    if is_number(left) and is_number(right):
        return left == right
    if type(left) is not type(right):
        return False
    if isinstance(left, (str, bool)) or left is None:
        return left == right
    return left is right


def loose_equals(left: Any, right: Any) -> bool:
    if left is None or right is None:
        return left is None and right is None
    if isinstance(left, (str, bool)) and is_number(right) or is_number(left) and isinstance(right, (str, bool)):
        return to_number(left) == to_number(right)
    return strict_equals(left, right)


def flatten_children(value: Any) -> list["Element | str"]:
    """Normalize rendered output into a list of child nodes.

    Booleans and nulls render nothing, numbers render as text and nested
    lists are flattened. Plain objects are not valid children.
    """
    out: list[Element | str] = []
    stack = [value]
    while stack:
        current = stack.pop()
        if isinstance(current, list):
            stack.extend(reversed(current))
        elif current is None or isinstance(current, bool):
            continue
        elif isinstance(current, Element):
            if current.is_fragment:
                stack.extend(reversed(current.children))
            else:
                out.append(current)
        elif isinstance(current, str):
            if current:
                out.append(current)
        elif is_number(current):
            out.append(format_number(current))
        elif callable(current):
            continue
        else:
            raise RenderError(f"Objects are not valid as a child (found {typeof(current)})")
    return out
