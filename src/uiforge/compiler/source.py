"""
Structural validation of generated component source.

Generated text arrives from an external service and may be wrapped in
markdown fences, carry module syntax, define the wrong component or no
component at all. Everything here runs before a unit is built; nothing is
evaluated.
"""

import re
from dataclasses import dataclass

from ..core import is_component_name, strip_markdown_fence, type_id_forms
from . import nodes as n
from .capabilities import Capabilities
from .errors import CompileError
from .interpreter import is_intrinsic
from .parser import parse_program

_DIRECTIVE = re.compile(r"""^\s*(["'])use client\1\s*;?""")


def strip_code_fences(text: str) -> str:
    """Remove markdown fences and a leading client directive."""
    cleaned = strip_markdown_fence(text.strip()) if "```" in text else text
    return _DIRECTIVE.sub("", cleaned.strip(), count=1).strip()


@dataclass(frozen=True)
class Analysis:
    """What structural validation learned about a source unit."""

    program: n.Program
    component_name: str
    factory: n.Function
    capabilities_used: frozenset[str]


def _factories(program: n.Program) -> list[tuple[str, n.Function]]:
    """Top-level capitalized function definitions."""
    found = []
    for stmt in program.body:
        if isinstance(stmt, n.FunctionDecl) and is_component_name(stmt.function.name or ""):
            found.append((stmt.function.name, stmt.function))
        elif isinstance(stmt, n.VarDecl):
            for binding, init in stmt.declarations:
                target = binding.target
                if isinstance(target, str) and is_component_name(target) and isinstance(init, n.Function):
                    found.append((target, init))
    return found


def _returns_markup(fn: n.Function) -> bool:
    """True if some return path of ``fn`` itself yields JSX."""
    if not isinstance(fn.body, n.Block):
        return _contains_jsx(fn.body)
    stack: list[n.Node] = list(fn.body.body)
    while stack:
        node = stack.pop()
        if isinstance(node, n.Return):
            if node.argument is not None and _contains_jsx(node.argument):
                return True
        elif isinstance(node, (n.Block, n.If, n.For, n.ForEach, n.While, n.DoWhile)):
            stack.extend(n.iter_children(node))
    return False


def _contains_jsx(expr: n.Node) -> bool:
    """JSX reachable from ``expr`` without entering a nested function."""
    stack = [expr]
    while stack:
        node = stack.pop()
        if isinstance(node, n.JSXElement):
            return True
        if not isinstance(node, n.Function):
            stack.extend(n.iter_children(node))
    return False


def _declared_names(program: n.Program) -> set[str]:
    names: set[str] = set()
    for node in n.walk(program):
        if isinstance(node, n.Function):
            if node.name:
                names.add(node.name)
            for param in node.params:
                names.update(n.binding_names(param))
            if node.rest:
                names.add(node.rest)
        elif isinstance(node, n.VarDecl):
            for binding, _ in node.declarations:
                names.update(n.binding_names(binding))
        elif isinstance(node, n.ForEach) and isinstance(node.target, n.Binding):
            names.update(n.binding_names(node.target))
    return names


def _referenced_names(program: n.Program) -> set[str]:
    names: set[str] = set()
    for node in n.walk(program):
        if isinstance(node, n.Identifier):
            names.add(node.name)
        elif isinstance(node, n.JSXElement) and node.name and not is_intrinsic(node.name):
            names.add(node.name.split(".")[0])
    return names


def analyze(type_id: str, source: str, capabilities: Capabilities) -> Analysis:
    """Parse and validate ``source`` as the factory for ``type_id``.

    Raises:
        CompileError: if the source is not a single markup-returning factory
            that matches the type id.
    """
    if not source.strip():
        raise CompileError("Source is empty", type_id)

    program = parse_program(source)

    module_decls = [s for s in program.body if isinstance(s, n.ModuleDecl)]
    if module_decls:
        kinds = sorted({s.kind for s in module_decls})
        raise CompileError(f"Source must not contain {'/'.join(kinds)} declarations", type_id)

    factories = _factories(program)
    if not factories:
        raise CompileError("No component factory defined", type_id)
    if len(factories) > 1:
        names = ", ".join(name for name, _ in factories)
        raise CompileError(f"Expected exactly one component factory, found {names}", type_id)

    name, factory = factories[0]
    forms = type_id_forms(type_id)
    if name not in forms:
        raise CompileError(f"Factory {name} does not match type id (expected {' or '.join(forms)})", type_id)
    if not _returns_markup(factory):
        raise CompileError(f"Factory {name} never returns markup", type_id)

    declared = _declared_names(program)
    for node in n.walk(program):
        if isinstance(node, n.JSXElement) and node.name and not is_intrinsic(node.name):
            head = node.name.split(".")[0]
            if head not in declared and head not in capabilities.names and node.name != "Fragment":
                raise CompileError(f"Unknown component <{node.name}>", type_id)

    used = (_referenced_names(program) - declared) & capabilities.names
    return Analysis(program, name, factory, frozenset(used))
