"""
The fixed set of names a compiled component may use.

Generated source never resolves anything from the host environment: every
atom, hook and global it touches is passed in through ``Capabilities``.
"""

import math
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

import msgspec

from ..core import get_logger, safe_json_dumps
from .values import FRAGMENT, Element, flatten_children, is_number, to_js_string, to_number, truthy

logger = get_logger(__name__)

HOOK_MODULE = "react"


@dataclass(frozen=True)
class Atom:
    """A primitive UI building block available to every component."""

    name: str
    tag: str
    module: str
    class_name: str = ""

    def __call__(self, props: Mapping[str, Any] | None = None) -> Element:
        props = dict(props or {})
        children = flatten_children(props.pop("children", None))
        classes = " ".join(c for c in (self.class_name, props.get("className")) if c)
        if classes:
            props["className"] = classes
        props["data-atom"] = self.name
        return Element(self.tag, props, children)


DEFAULT_ATOMS = (
    Atom("Button", "button", "@/components/ui/button",
         "inline-flex items-center justify-center rounded-md px-4 py-2 text-sm font-medium"),
    Atom("Input", "input", "@/components/ui/input",
         "flex h-10 w-full rounded-md border px-3 py-2 text-sm"),
    Atom("Label", "label", "@/components/ui/label", "text-sm font-medium leading-none"),
    Atom("Badge", "span", "@/components/ui/badge",
         "inline-flex items-center rounded-full border px-2.5 py-0.5 text-xs font-semibold"),
    Atom("Card", "div", "@/components/ui/card", "rounded-lg border bg-card shadow-sm"),
    Atom("CardHeader", "div", "@/components/ui/card", "flex flex-col space-y-1.5 p-6"),
    Atom("CardTitle", "h3", "@/components/ui/card", "text-2xl font-semibold leading-none"),
    Atom("CardDescription", "p", "@/components/ui/card", "text-sm text-muted-foreground"),
    Atom("CardContent", "div", "@/components/ui/card", "p-6 pt-0"),
    Atom("CardFooter", "div", "@/components/ui/card", "flex items-center p-6 pt-0"),
    Atom("ScrollArea", "div", "@/components/ui/scroll-area", "relative overflow-auto"),
)


# ============================================================================
# Hooks
# ============================================================================


def _ignore(*_args: Any) -> None:
    return None


def use_state(initial: Any = None) -> list:
    value = initial() if callable(initial) else initial
    return [value, _ignore]


def use_ref(initial: Any = None) -> dict:
    return {"current": initial}


def use_memo(factory: Callable[[], Any], deps: Any = None) -> Any:
    return factory()


def use_callback(fn: Any, deps: Any = None) -> Any:
    return fn


DEFAULT_HOOKS = MappingProxyType({
    "useState": use_state,
    "useEffect": _ignore,
    "useRef": use_ref,
    "useMemo": use_memo,
    "useCallback": use_callback,
})


# ============================================================================
# Globals
# ============================================================================


def _numeric(fn: Callable[[float], Any]) -> Callable[..., Any]:
    def wrapper(value: Any = None, *_rest: Any) -> Any:
        number = to_number(value)
        if not math.isfinite(number):
            return number
        return fn(number)

    return wrapper


def _js_round(value: float) -> int:
    return math.floor(value + 0.5)


def _extreme(pick: Callable[..., Any], empty: float) -> Callable[..., Any]:
    def wrapper(*values: Any) -> Any:
        numbers = [to_number(v) for v in values]
        if any(math.isnan(v) for v in numbers):
            return math.nan
        return pick(numbers) if numbers else empty

    return wrapper


def _stringify(value: Any, _replacer: Any = None, indent: Any = None) -> str:
    width = int(indent) if is_number(indent) and indent > 0 else 0
    return safe_json_dumps(value, indent=width)


def _parse(text: Any) -> Any:
    try:
        return msgspec.json.decode(to_js_string(text))
    except msgspec.DecodeError as e:
        raise ValueError(f"JSON.parse: {e}") from e


def _object_assign(target: dict, *sources: Any) -> dict:
    for source in sources:
        if isinstance(source, dict):
            target.update(source)
    return target


def _array_from(iterable: Any, map_fn: Any = None) -> list:
    if isinstance(iterable, dict) and "length" in iterable:
        items: list = [None] * int(to_number(iterable["length"]))
    elif isinstance(iterable, (list, str)):
        items = list(iterable)
    else:
        items = []
    if map_fn is None:
        return items
    return [map_fn(item, index) for index, item in enumerate(items)]


def _console(level: str) -> Callable[..., None]:
    def log(*args: Any) -> None:
        logger.debug("component_console", level=level, message=" ".join(to_js_string(a) for a in args))

    return log


def default_globals() -> dict[str, Any]:
    return {
        "Math": {
            "PI": math.pi,
            "E": math.e,
            "abs": _numeric(abs),
            "floor": _numeric(math.floor),
            "ceil": _numeric(math.ceil),
            "round": _numeric(_js_round),
            "trunc": _numeric(math.trunc),
            "sqrt": _numeric(lambda v: math.sqrt(v) if v >= 0 else math.nan),
            "sign": _numeric(lambda v: (v > 0) - (v < 0)),
            "pow": lambda base, exp: to_number(base) ** to_number(exp),
            "max": _extreme(max, -math.inf),
            "min": _extreme(min, math.inf),
        },
        "JSON": {"stringify": _stringify, "parse": _parse},
        "Object": {
            "keys": lambda obj: list(obj) if isinstance(obj, dict) else [],
            "values": lambda obj: list(obj.values()) if isinstance(obj, dict) else [],
            "entries": lambda obj: [[k, v] for k, v in obj.items()] if isinstance(obj, dict) else [],
            "fromEntries": lambda pairs: {to_js_string(k): v for k, v in pairs},
            "assign": _object_assign,
        },
        "Array": {"isArray": lambda value: isinstance(value, list), "from": _array_from},
        "String": lambda value="", *_: to_js_string(value),
        "Number": lambda value=0, *_: to_number(value),
        "Boolean": lambda value=None, *_: truthy(value),
        "console": {level: _console(level) for level in ("log", "info", "warn", "error", "debug")},
    }


@dataclass(frozen=True)
class Capabilities:
    """Everything a component's scope can resolve."""

    atoms: Mapping[str, Atom] = field(default_factory=lambda: {a.name: a for a in DEFAULT_ATOMS})
    hooks: Mapping[str, Callable[..., Any]] = field(default_factory=lambda: dict(DEFAULT_HOOKS))
    globals: Mapping[str, Any] = field(default_factory=default_globals)

    @property
    def names(self) -> frozenset[str]:
        return frozenset(self.atoms) | frozenset(self.hooks) | frozenset(self.globals) | {"React"}

    def namespace(self) -> dict[str, Any]:
        """Bindings for the outermost scope of a component."""
        scope: dict[str, Any] = {}
        scope.update(self.globals)
        scope.update(self.hooks)
        scope.update(self.atoms)
        scope["React"] = {**self.hooks, "Fragment": FRAGMENT}
        return scope

    def with_atoms(self, *atoms: Atom) -> "Capabilities":
        merged = {**self.atoms, **{a.name: a for a in atoms}}
        return Capabilities(atoms=merged, hooks=self.hooks, globals=self.globals)

    def import_lines(self, used: Iterable[str]) -> list[str]:
        """Import statements an exported component needs for ``used`` names."""
        used = set(used)
        lines = []
        if "React" in used:
            lines.append(f'import * as React from "{HOOK_MODULE}";')
        hooks = sorted(used & set(self.hooks))
        if hooks:
            lines.append(f'import {{ {", ".join(hooks)} }} from "{HOOK_MODULE}";')
        by_module: dict[str, list[str]] = {}
        for name in sorted(used & set(self.atoms)):
            by_module.setdefault(self.atoms[name].module, []).append(name)
        for module, names in sorted(by_module.items()):
            lines.append(f'import {{ {", ".join(names)} }} from "{module}";')
        return lines


def default_capabilities() -> Capabilities:
    return Capabilities()
