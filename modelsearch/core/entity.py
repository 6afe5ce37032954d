"""Live records handed to the projector.

The projector never talks to storage. It reads attribute values and
already-loaded relations through ``EntityNode``; a relation is either
``NOT_LOADED``, a ``Single`` related entity, or ``Many`` related entities.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple, Union


class _Missing:
    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


class NotLoaded:
    def __repr__(self) -> str:
        return "NOT_LOADED"


NOT_LOADED = NotLoaded()


@dataclass(frozen=True)
class Single:
    entity: "EntityNode"


@dataclass(frozen=True)
class Many:
    entities: Tuple["EntityNode", ...] = ()


RelationValue = Union[NotLoaded, Single, Many]


class EntityNode(ABC):
    @abstractmethod
    def get_attribute(self, name: str) -> Any:
        """Attribute value, or ``MISSING`` when the record does not carry it."""

    def get_raw_attribute(self, name: str) -> Any:
        """Stored value before any casting; defaults to ``get_attribute``."""
        return self.get_attribute(name)

    @abstractmethod
    def get_relation(self, name: str) -> RelationValue:
        """Already-loaded related entities for a relation name."""

    def get_key(self) -> Any:
        key = self.get_attribute("id")
        return None if key is MISSING else key


class MappingEntity(EntityNode):
    """``EntityNode`` over plain dictionaries.

    Relation values may be entities, dictionaries, sequences of either, or
    ``None`` for a loaded but empty relation. Relations absent from
    ``relations`` are reported as not loaded.
    """

    def __init__(
        self,
        attributes: Mapping[str, Any],
        relations: Optional[Mapping[str, Any]] = None,
        raw: Optional[Mapping[str, Any]] = None,
    ):
        self.attributes = dict(attributes)
        self.relations = dict(relations or {})
        self.raw = dict(raw or {})

    def get_attribute(self, name: str) -> Any:
        return self.attributes.get(name, MISSING)

    def get_raw_attribute(self, name: str) -> Any:
        if name in self.raw:
            return self.raw[name]
        return self.get_attribute(name)

    def get_relation(self, name: str) -> RelationValue:
        if name not in self.relations:
            return NOT_LOADED
        value = self.relations[name]
        if value is None:
            return Many()
        if isinstance(value, (EntityNode, Mapping)):
            return Single(_as_entity(value))
        return Many(tuple(_as_entity(item) for item in value))

    def __repr__(self) -> str:
        return f"MappingEntity({self.attributes!r}, relations={sorted(self.relations)!r})"


def _as_entity(value: Union[EntityNode, Mapping[str, Any]]) -> EntityNode:
    if isinstance(value, EntityNode):
        return value
    return MappingEntity(value)
