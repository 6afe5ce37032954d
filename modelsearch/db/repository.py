import importlib
import logging
from typing import Any, Iterator, List, Optional, Sequence

from sqlalchemy import func, inspect, select
from sqlalchemy.exc import NoInspectionAvailable
from sqlalchemy.orm import Session, selectinload
from sqlalchemy.sql import Select

from modelsearch.config import QueryConditions
from modelsearch.db.interfaces.base import BaseRepository
from modelsearch.exceptions import ConfigurationError, ModelResolutionError

logger = logging.getLogger(__name__)


def resolve_model_class(path: str) -> type:
    """Import a mapped class from ``package.module:Class`` or ``package.module.Class``."""
    module_name, sep, class_name = path.partition(":")
    if not sep:
        module_name, _, class_name = path.rpartition(".")
    if not module_name or not class_name:
        raise ModelResolutionError(f"Invalid model path '{path}'", "model")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ModelResolutionError(f"Cannot import module '{module_name}': {e}", "model") from e

    model_cls = getattr(module, class_name, None)
    if model_cls is None:
        raise ModelResolutionError(f"Module '{module_name}' has no attribute '{class_name}'", "model")
    try:
        inspect(model_cls)
    except NoInspectionAvailable:
        raise ModelResolutionError(f"'{path}' is not a mapped SQLAlchemy class", "model") from None
    return model_cls


def eager_load_options(model_cls: type, relation_paths: Sequence[str]) -> List[Any]:
    """``selectinload`` chains for dotted relation paths such as ``images.tags``."""
    options = []
    for path in relation_paths:
        mapper = inspect(model_cls)
        loader = None
        for name in path.split("."):
            relationship = mapper.relationships.get(name)
            if relationship is None:
                raise ConfigurationError(f"{mapper.class_.__name__} has no relationship '{name}'", path)
            attribute = relationship.class_attribute
            loader = selectinload(attribute) if loader is None else loader.selectinload(attribute)
            mapper = relationship.mapper
        options.append(loader)
    return options


class EntityRepository(BaseRepository):
    """Reads records of one mapped class for indexing and result hydration."""

    def __init__(self, session: Session, model_cls: type):
        super().__init__(session)
        self.model_cls = model_cls
        self.primary_key = inspect(model_cls).primary_key

    def count(self, conditions: Optional[QueryConditions] = None) -> int:
        stmt = self._select(conditions)
        return self.session.scalar(select(func.count()).select_from(stmt.subquery()))

    def iter_chunks(
        self,
        chunk_size: int,
        relation_paths: Sequence[str] = (),
        conditions: Optional[QueryConditions] = None,
    ) -> Iterator[List[Any]]:
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")

        stmt = (
            self._select(conditions)
            .options(*eager_load_options(self.model_cls, relation_paths))
            .order_by(*self.primary_key)
        )
        offset = 0
        while True:
            records = list(self.session.scalars(stmt.limit(chunk_size).offset(offset)))
            if not records:
                return
            logger.debug(f"Loaded {len(records)} {self.model_cls.__name__} records at offset {offset}")
            yield records
            if len(records) < chunk_size:
                return
            offset += chunk_size

    def load_ordered(self, ids: Sequence[Any], relation_paths: Sequence[str] = ()) -> List[Any]:
        if not ids:
            return []
        if len(self.primary_key) != 1:
            raise ConfigurationError(f"{self.model_cls.__name__} has a composite primary key")

        column = self.primary_key[0]
        keys = []
        for key in ids:
            try:
                keys.append(_coerce_key(column, key))
            except (TypeError, ValueError):
                logger.warning(f"Skipping id {key!r}, not a valid {self.model_cls.__name__} key")
        if not keys:
            return []

        stmt = (
            select(self.model_cls)
            .options(*eager_load_options(self.model_cls, relation_paths))
            .where(column.in_(keys))
        )
        by_key = {inspect(record).identity[0]: record for record in self.session.scalars(stmt)}
        return [by_key[key] for key in keys if key in by_key]

    def _select(self, conditions: Optional[QueryConditions]) -> Select:
        stmt = select(self.model_cls)
        if conditions is None:
            return stmt

        for field, value in conditions.where.items():
            column = self._column(field, "where")
            if value == "null":
                stmt = stmt.where(column.is_(None))
            elif value == "not_null":
                stmt = stmt.where(column.is_not(None))
            else:
                stmt = stmt.where(column == value)

        for field, values in conditions.where_in.items():
            stmt = stmt.where(self._column(field, "where_in").in_(values))

        for field, (low, high) in conditions.where_between.items():
            stmt = stmt.where(self._column(field, "where_between").between(low, high))

        return stmt

    def _column(self, field: str, clause: str):
        column = inspect(self.model_cls).columns.get(field)
        if column is None:
            raise ConfigurationError(
                f"{self.model_cls.__name__} has no column '{field}'", f"query_conditions.{clause}.{field}"
            )
        return column


def _coerce_key(column, key: Any) -> Any:
    # search hits carry string ids
    if not isinstance(key, str):
        return key
    try:
        python_type = column.type.python_type
    except NotImplementedError:
        return key
    return key if python_type is str else python_type(key)
