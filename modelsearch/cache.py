import logging
import threading
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Hashable, NamedTuple, Optional, Tuple

from cachetools import TLRUCache

logger = logging.getLogger(__name__)


class BaseCache(ABC):
    @abstractmethod
    def get(self, key: Hashable) -> Tuple[Any, bool]:
        """Return ``(value, found)``."""

    @abstractmethod
    def put(self, key: Hashable, value: Any, ttl: Optional[float] = None) -> None:
        pass

    @abstractmethod
    def clear(self) -> None:
        pass

    def get_or_compute(self, key: Hashable, compute: Callable[[], Any], ttl: Optional[float] = None) -> Any:
        """Read-through lookup; ``compute`` runs outside any cache lock."""
        value, found = self.get(key)
        if found:
            return value
        value = compute()
        self.put(key, value, ttl)
        return value


class _Entry(NamedTuple):
    value: Any
    ttl: float


class TTLCacheStore(BaseCache):
    """Thread-safe in-process cache with a time-to-live per entry."""

    def __init__(self, maxsize: int = 1024, ttl: float = 60.0, timer: Callable[[], float] = time.monotonic):
        self.ttl = ttl
        self._lock = threading.Lock()
        self._cache = TLRUCache(maxsize=maxsize, ttu=self._expires_at, timer=timer)

    @staticmethod
    def _expires_at(key: Hashable, entry: _Entry, now: float) -> float:
        return now + entry.ttl

    def get(self, key: Hashable) -> Tuple[Any, bool]:
        with self._lock:
            entry = self._cache.get(key)
        if entry is None:
            return None, False
        return entry.value, True

    def put(self, key: Hashable, value: Any, ttl: Optional[float] = None) -> None:
        with self._lock:
            self._cache[key] = _Entry(value, self.ttl if ttl is None else ttl)

    def clear(self) -> None:
        with self._lock:
            size = len(self._cache)
            self._cache.clear()
        logger.info(f"Cleared {size} cached entries")

    def __len__(self) -> int:
        with self._lock:
            self._cache.expire()
            return len(self._cache)


class NullCache(BaseCache):
    """Cache that never stores anything, used when caching is disabled."""

    def get(self, key: Hashable) -> Tuple[Any, bool]:
        return None, False

    def put(self, key: Hashable, value: Any, ttl: Optional[float] = None) -> None:
        pass

    def clear(self) -> None:
        pass
