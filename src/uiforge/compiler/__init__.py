"""Generated component compilation."""

from .capabilities import Atom, Capabilities, DEFAULT_ATOMS, default_capabilities
from .errors import CompileError, ParseError
from .interpreter import Closure, Interpreter, Scope
from .parser import parse_expression, parse_program
from .registrar import CompilationReport, ComponentRegistrar
from .source import analyze, strip_code_fences
from .unit import CompiledUnit, compile_source
from .values import FRAGMENT, Element, RenderError


def evaluate_expression(text: str) -> object:
    """Parse and evaluate a standalone literal expression (no capabilities in scope)."""
    return Interpreter().evaluate(parse_expression(text), Scope())


__all__ = [
    "Atom",
    "Capabilities",
    "DEFAULT_ATOMS",
    "default_capabilities",
    "CompileError",
    "ParseError",
    "RenderError",
    "Closure",
    "Interpreter",
    "Scope",
    "parse_expression",
    "parse_program",
    "evaluate_expression",
    "CompilationReport",
    "ComponentRegistrar",
    "analyze",
    "strip_code_fences",
    "CompiledUnit",
    "compile_source",
    "FRAGMENT",
    "Element",
]
