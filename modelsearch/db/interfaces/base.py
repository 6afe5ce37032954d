from abc import ABC, abstractmethod
from typing import Any, ContextManager, Iterator, List, Optional, Sequence

from sqlalchemy.orm import Session

from modelsearch.config import QueryConditions


class BaseDatabase(ABC):
    @abstractmethod
    def startup(self) -> None:
        pass

    @abstractmethod
    def teardown(self) -> None:
        pass

    @abstractmethod
    def get_session(self) -> ContextManager[Session]:
        pass

class BaseRepository(ABC):
    def __init__(self, session: Session):
        self.session = session

    @abstractmethod
    def count(self, conditions: Optional[QueryConditions] = None) -> int:
        """Count records matching the conditions."""

    @abstractmethod
    def iter_chunks(
        self,
        chunk_size: int,
        relation_paths: Sequence[str] = (),
        conditions: Optional[QueryConditions] = None,
    ) -> Iterator[List[Any]]:
        """Yield records in primary-key order, with relations eager-loaded."""

    @abstractmethod
    def load_ordered(self, ids: Sequence[Any], relation_paths: Sequence[str] = ()) -> List[Any]:
        """Load records by ID, preserving the order of ``ids``."""
