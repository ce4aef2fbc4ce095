"""
Canvas document model.

Holds the ordered component instances placed on the canvas and merges
batches of catalog picks and generated definitions into it.
"""

from collections.abc import Callable, Iterable, Iterator, Mapping
from copy import deepcopy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field

from ..catalog import CatalogEntry, CatalogIndex
from ..compiler import CompiledUnit, ComponentRegistrar
from ..core import (
    CatalogPick,
    GeneratedComponentDefinition,
    Settings,
    ValidationError,
    get_logger,
    get_settings,
    to_pascal_case,
    validate_property_bag,
)
from ..core.id import InstanceID, new_instance_id

logger = get_logger(__name__)


class Origin(str, Enum):
    """Where a component definition came from."""

    CATALOG = "catalog"
    GENERATED = "generated"


class Position(BaseModel):
    """Canvas coordinates."""

    model_config = ConfigDict(frozen=True)

    x: float = 0
    y: float = 0


class ComponentInstance(BaseModel):
    """A component placed on the canvas."""

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    id: str = Field(default_factory=new_instance_id)
    type_id: str = Field(..., alias="type", min_length=1)
    category: str = ""
    properties: dict[str, Any] = Field(default_factory=dict, alias="props")
    position: Position = Field(default_factory=Position)
    origin: Origin = Origin.CATALOG


class UnknownInstanceError(KeyError):
    """No instance with the given id is on the canvas."""


@dataclass
class IngestReport:
    """What one ``ingest_batch`` call did."""

    added: list[InstanceID] = field(default_factory=list)
    compiled: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)
    skipped: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def warn(self, message: str) -> None:
        self.warnings.append(message)


# ============================================================================
# Provenance-tagged merge candidates
# ============================================================================


@dataclass(frozen=True)
class CatalogCandidate:
    pick: CatalogPick
    origin: Literal[Origin.CATALOG] = Origin.CATALOG
    priority: int = 0


@dataclass(frozen=True)
class GeneratedCandidate:
    definition: GeneratedComponentDefinition
    origin: Literal[Origin.GENERATED] = Origin.GENERATED
    priority: int = 1


Candidate = Union[CatalogCandidate, GeneratedCandidate]

T = TypeVar("T")


def keep_last(items: Iterable[T], key: Callable[[T], str]) -> dict[str, T]:
    """Collapse items sharing a key to the last occurrence.

    A key keeps the position of its first occurrence.
    """
    kept: dict[str, T] = {}
    for item in items:
        kept[key(item)] = item
    return kept


def insert_with_priority(table: dict[str, Candidate], key: str, candidate: Candidate) -> Candidate | None:
    """Insert unless a higher-priority candidate holds the key; return what was displaced."""
    current = table.get(key)
    if current is not None and current.priority > candidate.priority:
        return None
    table[key] = candidate
    return current


class DocumentModel:
    """
    Ordered list of placed component instances.

    Insertion order is render and export order. The model also remembers
    every generated definition it has seen so exports can find them.
    """

    def __init__(
        self,
        catalog: CatalogIndex,
        registrar: ComponentRegistrar,
        settings: Settings | None = None,
    ) -> None:
        self.catalog = catalog
        self.registrar = registrar
        self.settings = settings or get_settings()
        self._instances: list[ComponentInstance] = []
        self._definitions: dict[str, GeneratedComponentDefinition] = {}

    def __len__(self) -> int:
        return len(self._instances)

    def __iter__(self) -> Iterator[ComponentInstance]:
        return iter(list(self._instances))

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def merge_key(self, type_id: str) -> str:
        """Key under which both textual forms of a type id collide."""
        entry = self.catalog.resolve(type_id)
        return entry.type_id if entry is not None else to_pascal_case(type_id)

    def resolve(self, type_id: str) -> CompiledUnit | CatalogEntry | None:
        """Resolve a type id, generated units taking precedence over the catalog."""
        unit = self.registrar.get_unit(type_id)
        if unit is not None:
            return unit
        return self.catalog.resolve(type_id)

    def definitions(self) -> Mapping[str, GeneratedComponentDefinition]:
        """Generated definitions ingested so far, by type id."""
        return dict(self._definitions)

    # ------------------------------------------------------------------
    # Ingestion
    # ------------------------------------------------------------------

    def ingest_batch(
        self,
        catalog_picks: Iterable[CatalogPick | Mapping[str, Any]] = (),
        generated_picks: Iterable[GeneratedComponentDefinition | Mapping[str, Any]] = (),
    ) -> IngestReport:
        """
        Merge a batch of catalog picks and generated definitions.

        Each list is first collapsed to the last occurrence per type id.
        Generated definitions then overwrite catalog picks with the same
        type id. Surviving generated definitions are compiled; those that
        fail are reported and get no instance. Surviving catalog picks get
        an instance with the entry defaults under the pick's overrides.
        """
        report = IngestReport()
        catalog_list = [CatalogPick.model_validate(p) for p in catalog_picks]
        generated_list = [GeneratedComponentDefinition.model_validate(d) for d in generated_picks]

        table: dict[str, Candidate] = {}
        for key, pick in keep_last(catalog_list, lambda p: self.merge_key(p.type_id)).items():
            insert_with_priority(table, key, CatalogCandidate(pick))
        for key, definition in keep_last(generated_list, lambda d: self.merge_key(d.type_id)).items():
            displaced = insert_with_priority(table, key, GeneratedCandidate(definition))
            if isinstance(displaced, CatalogCandidate):
                logger.info("generated_overrides_catalog", type_id=definition.type_id)

        for candidate in table.values():
            if isinstance(candidate, GeneratedCandidate):
                self._ingest_generated(candidate.definition, report)
            else:
                self._ingest_catalog(candidate.pick, report)

        logger.info(
            "batch_ingested",
            catalog_picks=len(catalog_list),
            generated_picks=len(generated_list),
            added=len(report.added),
            failed=len(report.failed),
            skipped=len(report.skipped),
        )
        return report

    def _ingest_generated(self, definition: GeneratedComponentDefinition, report: IngestReport) -> None:
        type_id = definition.type_id
        self._definitions[type_id] = definition
        if not self.registrar.compile_and_register(definition):
            reason = self.registrar.last_error(type_id) or "compilation failed"
            report.failed[type_id] = reason
            report.warn(f"Generated component {type_id} was not added: {reason}")
            return
        report.compiled.append(type_id)
        self._append_checked(type_id, definition.category, deepcopy(definition.default_properties),
                             Origin.GENERATED, report)

    def _ingest_catalog(self, pick: CatalogPick, report: IngestReport) -> None:
        entry = self.catalog.resolve(pick.type_id)
        if entry is None:
            report.skipped.append(pick.type_id)
            report.warn(f"Unknown catalog component {pick.type_id} was skipped")
            logger.warning("catalog_pick_unknown", type_id=pick.type_id)
            return
        properties = {**deepcopy(entry.default_properties), **deepcopy(pick.properties)}
        self._append_checked(entry.type_id, pick.category or entry.category.value, properties,
                             Origin.CATALOG, report)

    def _append_checked(
        self,
        type_id: str,
        category: str,
        properties: dict[str, Any],
        origin: Origin,
        report: IngestReport,
    ) -> None:
        try:
            validate_property_bag(properties, self.settings.max_props_depth)
        except ValidationError as e:
            report.skipped.append(type_id)
            report.warn(f"Component {type_id} was skipped: {e}")
            logger.warning("instance_rejected", type_id=type_id, error=str(e))
            return
        instance = ComponentInstance(type_id=type_id, category=category, properties=properties, origin=origin)
        self._instances.append(instance)
        report.added.append(InstanceID(instance.id))

    # ------------------------------------------------------------------
    # Instance operations
    # ------------------------------------------------------------------

    def add_instance(
        self,
        type_id: str,
        category: str = "",
        properties: Mapping[str, Any] | None = None,
        position: Position | tuple[float, float] | None = None,
    ) -> InstanceID:
        """
        Place a component on the canvas.

        Raises:
            ValidationError: if the property bag is malformed
        """
        bag = deepcopy(dict(properties or {}))
        validate_property_bag(bag, self.settings.max_props_depth)
        if isinstance(position, tuple):
            position = Position(x=position[0], y=position[1])
        origin = Origin.GENERATED if self.registrar.is_known_generated(type_id) else Origin.CATALOG
        instance = ComponentInstance(
            type_id=type_id,
            category=category,
            properties=bag,
            position=position or Position(),
            origin=origin,
        )
        self._instances.append(instance)
        logger.debug("instance_added", instance_id=instance.id, type_id=type_id)
        return InstanceID(instance.id)

    def get_instance(self, instance_id: str) -> ComponentInstance:
        for instance in self._instances:
            if instance.id == instance_id:
                return instance
        raise UnknownInstanceError(instance_id)

    def _index_of(self, instance_id: str) -> int:
        for index, instance in enumerate(self._instances):
            if instance.id == instance_id:
                return index
        raise UnknownInstanceError(instance_id)

    def update_properties(self, instance_id: str, patch: Mapping[str, Any]) -> None:
        """Shallow-merge ``patch`` over the instance's properties."""
        instance = self.get_instance(instance_id)
        merged = {**instance.properties, **deepcopy(dict(patch))}
        validate_property_bag(merged, self.settings.max_props_depth)
        instance.properties = merged

    def move_instance(self, instance_id: str, direction: Literal["up", "down"]) -> None:
        """Swap an instance with its neighbour; no-op at either end."""
        index = self._index_of(instance_id)
        target = index - 1 if direction == "up" else index + 1
        if 0 <= target < len(self._instances):
            self._instances[index], self._instances[target] = self._instances[target], self._instances[index]

    def remove_instance(self, instance_id: str) -> None:
        del self._instances[self._index_of(instance_id)]
        logger.debug("instance_removed", instance_id=instance_id)

    def list_instances(self) -> list[ComponentInstance]:
        """Instances in insertion (render and export) order."""
        return list(self._instances)

    def clear(self) -> None:
        self._instances.clear()


__all__ = [
    "Origin",
    "Position",
    "ComponentInstance",
    "UnknownInstanceError",
    "IngestReport",
    "DocumentModel",
    "keep_last",
    "insert_with_priority",
]
