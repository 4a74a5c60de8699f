"""
TTL cache: keyed store with per-entry creation time and one expiration window.

Entries are never evicted by age; a stale entry is only ignored by `get`
and eventually overwritten by the next `put`. The window can be changed at
any time and applies to every later lookup.
"""

import logging
import time
from collections.abc import Callable, Hashable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

logger = logging.getLogger("hecomlink.cache")

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


@dataclass(frozen=True)
class CacheEntry(Generic[V]):
    value: V
    created_at: float


@dataclass(frozen=True)
class CacheStats:
    label: str
    size: int
    hits: int
    misses: int
    expiration_seconds: float

    def to_dict(self) -> dict[str, Any]:
        return {k: getattr(self, k) for k in self.__dataclass_fields__}


class TTLCache(Generic[K, V]):
    """In-memory TTL cache. Not thread-safe; callers share one event loop."""

    def __init__(self, expiration_seconds: float = 300, *, label: str = "cache",
                 clock: Callable[[], float] = time.monotonic):
        if expiration_seconds < 0:
            raise ValueError("expiration_seconds must be >= 0")
        self.label = label
        self._expiration = float(expiration_seconds)
        self._clock = clock
        self._store: dict[K, CacheEntry[V]] = {}
        self._hits = 0
        self._misses = 0

    @property
    def expiration_seconds(self) -> float:
        return self._expiration

    def set_expiration(self, seconds: float) -> None:
        if seconds < 0:
            raise ValueError("expiration must be >= 0")
        self._expiration = float(seconds)
        logger.info(f"Cache {self.label}: expiration set to {seconds}s")

    def _is_fresh(self, entry: CacheEntry[V]) -> bool:
        # A zero window disables hits outright, even for an entry put this instant.
        if self._expiration == 0:
            return False
        return self._clock() - entry.created_at <= self._expiration

    def get(self, key: K) -> V | None:
        entry = self._store.get(key)
        if entry is None or not self._is_fresh(entry):
            self._misses += 1
            logger.debug(f"Cache {self.label}: miss {key!r}")
            return None
        self._hits += 1
        logger.debug(f"Cache {self.label}: hit {key!r}")
        return entry.value

    def peek(self, key: K) -> V | None:
        """Return whatever is stored under ``key``, fresh or not."""
        entry = self._store.get(key)
        return entry.value if entry else None

    def put(self, key: K, value: V) -> None:
        self._store[key] = CacheEntry(value=value, created_at=self._clock())

    def invalidate(self, key: K) -> bool:
        return self._store.pop(key, None) is not None

    def invalidate_all(self) -> None:
        self._store.clear()

    def stats(self) -> CacheStats:
        return CacheStats(label=self.label, size=len(self._store), hits=self._hits,
                          misses=self._misses, expiration_seconds=self._expiration)

    def __contains__(self, key: object) -> bool:
        entry = self._store.get(key)  # type: ignore[arg-type]
        return entry is not None and self._is_fresh(entry)

    def __len__(self) -> int:
        return len(self._store)
