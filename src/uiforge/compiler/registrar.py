"""
Component Registrar
Session-owned store of compiled generated components
"""

from collections.abc import Iterable
from dataclasses import dataclass, field

from returns.result import Success

from ..core import GeneratedComponentDefinition, Settings, get_logger, get_settings, to_pascal_case
from .capabilities import Capabilities, default_capabilities
from .unit import CompiledUnit, compile_source
from .source import strip_code_fences

logger = get_logger(__name__)


@dataclass(frozen=True)
class CompilationReport:
    """Outcome of compiling a batch of definitions."""

    succeeded: tuple[str, ...] = ()
    failed: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed


class ComponentRegistrar:
    """
    Compiles generated component source and keeps the resulting units.

    Units are keyed by component name; every textual form of a type id
    that has been registered is kept as an alias, so ``login-form`` and
    ``LoginForm`` find the same unit. Nothing is ever evicted: a unit
    lives until the owning session is discarded or a recompilation with
    different source replaces it.
    """

    def __init__(self, capabilities: Capabilities | None = None, settings: Settings | None = None) -> None:
        self.capabilities = capabilities or default_capabilities()
        self.settings = settings or get_settings()
        self._units: dict[str, CompiledUnit] = {}
        self._aliases: dict[str, str] = {}
        self._errors: dict[str, str] = {}

    def __len__(self) -> int:
        return len(self._units)

    def __contains__(self, type_id: object) -> bool:
        return isinstance(type_id, str) and self.is_known_generated(type_id)

    def _find(self, type_id: str) -> str | None:
        """Component name registered for ``type_id``, exact forms first."""
        key = type_id.strip()
        if key in self._aliases:
            return self._aliases[key]
        if key in self._units:
            return key
        pascal = to_pascal_case(key)
        return self._aliases.get(pascal) or (pascal if pascal in self._units else None)

    def is_known_generated(self, type_id: str) -> bool:
        """True iff a compiled unit exists for ``type_id``."""
        return self._find(type_id) is not None

    def get_unit(self, type_id: str) -> CompiledUnit | None:
        name = self._find(type_id)
        return self._units[name] if name else None

    def get_source_text(self, type_id: str) -> str | None:
        """Cleaned source text the unit for ``type_id`` was compiled from."""
        unit = self.get_unit(type_id)
        return unit.source_text if unit else None

    def component_name_for(self, type_id: str) -> str | None:
        return self._find(type_id)

    def last_error(self, type_id: str) -> str | None:
        """Reason the most recent compilation of ``type_id`` failed, if it did."""
        return self._errors.get(type_id.strip())

    def type_ids(self) -> list[str]:
        """Registered type ids in registration order."""
        return list(self._aliases)

    def compile_and_register(self, definition: GeneratedComponentDefinition) -> bool:
        """
        Compile a generated definition and register the unit.

        Never raises: failures are logged, remembered for ``last_error`` and
        reported as False. Recompiling identical source is a no-op that
        returns True; a failed recompilation keeps the previous unit.
        """
        type_id = definition.type_id.strip()
        try:
            if len(definition.source_text) > self.settings.max_source_length:
                return self._fail(
                    type_id,
                    f"Source is {len(definition.source_text)} characters "
                    f"(limit {self.settings.max_source_length})",
                )

            current = self.get_unit(type_id)
            if current is not None and current.source_text == strip_code_fences(definition.source_text):
                self._aliases[type_id] = current.component_name
                self._errors.pop(type_id, None)
                logger.debug("compile_skipped_identical", type_id=type_id)
                return True

            result = compile_source(
                type_id,
                definition.source_text,
                self.capabilities,
                self.settings.max_render_depth,
            )
        except Exception as e:
            logger.error("compile_crashed", type_id=type_id, error=str(e), exc_info=True)
            return self._fail(type_id, f"Internal compiler error: {e}")

        if not isinstance(result, Success):
            return self._fail(type_id, str(result.failure()))

        unit = result.unwrap()
        if current is not None and current.component_name != unit.component_name:
            self._units.pop(current.component_name, None)
        self._units[unit.component_name] = unit
        self._aliases[type_id] = unit.component_name
        self._errors.pop(type_id, None)
        logger.info(
            "component_compiled",
            type_id=type_id,
            component=unit.component_name,
            digest=unit.source_digest,
            capabilities=sorted(unit.capabilities_used),
            replaced=current is not None,
        )
        return True

    def _fail(self, type_id: str, reason: str) -> bool:
        self._errors[type_id] = reason
        logger.warning("compile_failed", type_id=type_id, error=reason)
        return False

    def compile_many(self, definitions: Iterable[GeneratedComponentDefinition]) -> CompilationReport:
        succeeded: list[str] = []
        failed: dict[str, str] = {}
        for definition in definitions:
            if self.compile_and_register(definition):
                succeeded.append(definition.type_id)
            else:
                failed[definition.type_id] = self.last_error(definition.type_id) or "unknown error"
        return CompilationReport(tuple(succeeded), failed)

    def clear(self) -> None:
        self._units.clear()
        self._aliases.clear()
        self._errors.clear()


__all__ = ["ComponentRegistrar", "CompilationReport"]
