"""Syntax tree for the component source subset.

Nodes are immutable; the interpreter walks them directly.
"""

from collections.abc import Iterator
from dataclasses import dataclass, fields
from typing import Any, Union


class Node:
    """Base class for all syntax nodes."""

    __slots__ = ()


# ============================================================================
# Expressions
# ============================================================================


@dataclass(frozen=True, slots=True)
class Literal(Node):
    value: Any


@dataclass(frozen=True, slots=True)
class TemplateLiteral(Node):
    quasis: tuple[str, ...]
    expressions: tuple["Expr", ...]


@dataclass(frozen=True, slots=True)
class Identifier(Node):
    name: str


@dataclass(frozen=True, slots=True)
class Spread(Node):
    argument: "Expr"


@dataclass(frozen=True, slots=True)
class ArrayExpr(Node):
    elements: tuple["Expr | Spread", ...]


@dataclass(frozen=True, slots=True)
class Property(Node):
    key: "Expr"
    value: "Expr"


@dataclass(frozen=True, slots=True)
class ObjectExpr(Node):
    properties: tuple["Property | Spread", ...]


@dataclass(frozen=True, slots=True)
class Member(Node):
    object: "Expr"
    property: "Expr"
    optional: bool = False


@dataclass(frozen=True, slots=True)
class Call(Node):
    callee: "Expr"
    arguments: tuple["Expr | Spread", ...]
    optional: bool = False
    is_new: bool = False


@dataclass(frozen=True, slots=True)
class Unary(Node):
    operator: str
    operand: "Expr"


@dataclass(frozen=True, slots=True)
class Binary(Node):
    operator: str
    left: "Expr"
    right: "Expr"


@dataclass(frozen=True, slots=True)
class Logical(Node):
    operator: str
    left: "Expr"
    right: "Expr"


@dataclass(frozen=True, slots=True)
class Conditional(Node):
    test: "Expr"
    consequent: "Expr"
    alternate: "Expr"


@dataclass(frozen=True, slots=True)
class Assign(Node):
    operator: str
    target: "Expr"
    value: "Expr"


@dataclass(frozen=True, slots=True)
class Function(Node):
    """Function declaration, function expression or arrow function."""

    name: str | None
    params: tuple["Binding", ...]
    body: "Expr | Block"
    rest: str | None = None
    is_arrow: bool = False


@dataclass(frozen=True, slots=True)
class JSXAttribute(Node):
    name: str
    value: "Expr"


@dataclass(frozen=True, slots=True)
class JSXElement(Node):
    """Markup element; ``name`` is None for fragments."""

    name: str | None
    attributes: tuple["JSXAttribute | Spread", ...]
    children: tuple["Expr", ...]


Expr = Union[
    Literal, TemplateLiteral, Identifier, ArrayExpr, ObjectExpr, Member, Call,
    Unary, Binary, Logical, Conditional, Assign, Function, JSXElement,
]


# ============================================================================
# Binding patterns
# ============================================================================


@dataclass(frozen=True, slots=True)
class ArrayPattern(Node):
    elements: tuple["Binding | None", ...]
    rest: str | None = None


@dataclass(frozen=True, slots=True)
class ObjectPattern(Node):
    properties: tuple[tuple[str, "Binding"], ...]
    rest: str | None = None


@dataclass(frozen=True, slots=True)
class Binding(Node):
    """A binding target with an optional default value."""

    target: "str | ArrayPattern | ObjectPattern"
    default: "Expr | None" = None


# ============================================================================
# Statements
# ============================================================================


@dataclass(frozen=True, slots=True)
class VarDecl(Node):
    kind: str
    declarations: tuple[tuple[Binding, "Expr | None"], ...]


@dataclass(frozen=True, slots=True)
class FunctionDecl(Node):
    function: Function


@dataclass(frozen=True, slots=True)
class Return(Node):
    argument: "Expr | None"


@dataclass(frozen=True, slots=True)
class If(Node):
    test: "Expr"
    consequent: "Stmt"
    alternate: "Stmt | None"


@dataclass(frozen=True, slots=True)
class Block(Node):
    body: tuple["Stmt", ...]


@dataclass(frozen=True, slots=True)
class ExprStmt(Node):
    expression: "Expr"


@dataclass(frozen=True, slots=True)
class For(Node):
    init: "Stmt | None"
    test: "Expr | None"
    update: "Expr | None"
    body: "Stmt"


@dataclass(frozen=True, slots=True)
class ForEach(Node):
    """``for (... of ...)`` or ``for (... in ...)``; ``declaration`` is None for a bare target."""

    kind: str
    declaration: str | None
    target: "Binding | Identifier"
    iterable: "Expr"
    body: "Stmt"


@dataclass(frozen=True, slots=True)
class While(Node):
    test: "Expr"
    body: "Stmt"


@dataclass(frozen=True, slots=True)
class DoWhile(Node):
    body: "Stmt"
    test: "Expr"


@dataclass(frozen=True, slots=True)
class Break(Node):
    pass


@dataclass(frozen=True, slots=True)
class Continue(Node):
    pass


@dataclass(frozen=True, slots=True)
class Throw(Node):
    argument: "Expr"


@dataclass(frozen=True, slots=True)
class Skipped(Node):
    """A statement outside the supported subset, parsed over but never run."""

    keyword: str
    offset: int


@dataclass(frozen=True, slots=True)
class ModuleDecl(Node):
    """An import or export declaration."""

    kind: str
    offset: int


@dataclass(frozen=True, slots=True)
class Program(Node):
    body: tuple["Stmt", ...]


Stmt = Union[
    VarDecl, FunctionDecl, Return, If, Block, ExprStmt,
    For, ForEach, While, DoWhile, Break, Continue, Throw,
    Skipped, ModuleDecl,
]


def iter_children(node: Node) -> Iterator[Node]:
    """Yield the direct child nodes of ``node``."""
    for f in fields(node):
        yield from _nodes_in(getattr(node, f.name))


def _nodes_in(value: Any) -> Iterator[Node]:
    if isinstance(value, Node):
        yield value
    elif isinstance(value, tuple):
        for item in value:
            yield from _nodes_in(item)


def walk(node: Node) -> Iterator[Node]:
    """Depth-first pre-order traversal."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(list(iter_children(current))))


def binding_names(binding: Binding) -> Iterator[str]:
    """Every name a binding pattern introduces."""
    target = binding.target
    if isinstance(target, str):
        yield target
    elif isinstance(target, ArrayPattern):
        for element in target.elements:
            if element is not None:
                yield from binding_names(element)
        if target.rest:
            yield target.rest
    else:
        for _, sub in target.properties:
            yield from binding_names(sub)
        if target.rest:
            yield target.rest
