from typing import Any

from sqlalchemy import inspect
from sqlalchemy.orm.base import NO_VALUE

from modelsearch.core.entity import MISSING, NOT_LOADED, EntityNode, Many, RelationValue, Single


class SQLAlchemyEntity(EntityNode):
    """
    ``EntityNode`` over a SQLAlchemy ORM instance.

    Only state already present on the instance is read: unloaded columns are
    reported as missing and unloaded relationships as not loaded, so
    projection never issues a lazy load.
    """

    def __init__(self, instance: Any):
        self.instance = instance
        self._state = inspect(instance)
        self._mapper = self._state.mapper

    def get_attribute(self, name: str) -> Any:
        if name not in self._mapper.column_attrs:
            return MISSING
        value = self._state.attrs[name].loaded_value
        return MISSING if value is NO_VALUE else value

    def get_relation(self, name: str) -> RelationValue:
        relationship = self._mapper.relationships.get(name)
        if relationship is None or name in self._state.unloaded:
            return NOT_LOADED

        value = self._state.dict.get(name)
        if value is None:
            return Many()
        if relationship.uselist:
            return Many(tuple(SQLAlchemyEntity(item) for item in value))
        return Single(SQLAlchemyEntity(value))

    def get_key(self) -> Any:
        identity = self._state.identity
        if identity is None:
            return super().get_key()
        if len(identity) == 1:
            return identity[0]
        return "-".join(str(part) for part in identity)

    def __repr__(self) -> str:
        return f"SQLAlchemyEntity({self.instance!r})"
