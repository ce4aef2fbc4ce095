"""Compiled units: validated source bound to an explicit capability set."""

from dataclasses import dataclass, field
from typing import Any

from returns.result import Failure, Result, Success

from ..core import hash_string
from . import nodes as n
from .capabilities import Capabilities, default_capabilities
from .errors import CompileError
from .interpreter import NATIVE_ERRORS, Interpreter, Scope
from .source import analyze, strip_code_fences
from .values import FRAGMENT, Element, RenderError, flatten_children


@dataclass(frozen=True, eq=False)
class CompiledUnit:
    """An invocable component produced from generated source.

    Rendering evaluates the program in a fresh scope each time, so units
    hold no state between renders and may be shared freely.
    """

    type_id: str
    component_name: str
    source_text: str
    source_digest: str
    capabilities_used: frozenset[str]
    program: n.Program = field(repr=False)
    capabilities: Capabilities = field(repr=False)
    max_render_depth: int = 64

    def render(self, props: dict[str, Any] | None = None) -> Element:
        """Instantiate the component with a property bag.

        Raises:
            RenderError: if evaluation fails
        """
        interpreter = Interpreter(self.max_render_depth)
        module = Scope(Scope(values=self.capabilities.namespace()))
        try:
            interpreter.run_program(self.program, module)
            factory = module.lookup(self.component_name)
            result = interpreter.call_value(factory, [dict(props or {})], self.component_name)
        except RecursionError as e:
            raise RenderError(f"{self.component_name}: nesting too deep to render") from e
        except NATIVE_ERRORS as e:
            raise RenderError(f"{self.component_name}: {e}") from e
        if isinstance(result, Element) and not result.is_fragment:
            return result
        return Element(FRAGMENT, {}, flatten_children(result))

    def __call__(self, props: dict[str, Any] | None = None) -> Element:
        return self.render(props)


def compile_source(
    type_id: str,
    source: str,
    capabilities: Capabilities | None = None,
    max_render_depth: int = 64,
) -> Result[CompiledUnit, CompileError]:
    """
    Validate and compile generated source for ``type_id``.

    Args:
        type_id: Type id the source must define a factory for
        source: Raw source text, possibly fenced
        capabilities: Names injected into the unit's scope
        max_render_depth: Nested call limit while rendering

    Returns:
        Success with the unit, or Failure with the reason
    """
    capabilities = capabilities or default_capabilities()
    cleaned = strip_code_fences(source)
    try:
        analysis = analyze(type_id, cleaned, capabilities)
    except CompileError as e:
        if e.type_id is None:
            e.type_id = type_id
        return Failure(e)
    except RecursionError:
        return Failure(CompileError("Source is nested too deeply to compile", type_id))

    return Success(CompiledUnit(
        type_id=type_id,
        component_name=analysis.component_name,
        source_text=cleaned,
        source_digest=hash_string(cleaned),
        capabilities_used=analysis.capabilities_used,
        program=analysis.program,
        capabilities=capabilities,
        max_render_depth=max_render_depth,
    ))
