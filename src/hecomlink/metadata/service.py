"""
Metadata service: cached access to the platform's object metadata.

Two caches sit in front of the platform client: the object list under a
single key, and object descriptions keyed by object name. A lookup checks
its cache first and only goes upstream on a miss. Only complete, non-empty
upstream results are stored; an empty answer or a failure leaves the cache
exactly as it was, so the next call asks the platform again.

Two concurrent misses for the same key both go upstream and the later
`put` wins. There is no request coalescing.
"""

import logging
import time
from collections.abc import Awaitable, Callable, Iterable
from typing import Any, TypeVar

from hecomlink.core.cache import CacheStats, TTLCache
from hecomlink.core.types import ObjectDetail, ObjectRef, ObjectSummary
from hecomlink.metrics import ServiceMetrics
from hecomlink.platform.base import PlatformClient

logger = logging.getLogger("hecomlink.metadata")

T = TypeVar("T")

OBJECTS_KEY = "objects"
DEFAULT_EXPIRATION_MINUTES = 5


class MetadataService:
    def __init__(self, client: PlatformClient, expiration_minutes: float = DEFAULT_EXPIRATION_MINUTES,
                 metrics: ServiceMetrics | None = None, clock: Callable[[], float] = time.monotonic):
        self.client = client
        self.metrics = metrics or ServiceMetrics()
        seconds = expiration_minutes * 60
        self._objects_cache: TTLCache[str, list[ObjectSummary]] = TTLCache(seconds, label="objects", clock=clock)
        self._desc_cache: TTLCache[str, ObjectDetail] = TTLCache(seconds, label="object_desc", clock=clock)

    # ------------------------------------------------------------------
    # Upstream plumbing
    # ------------------------------------------------------------------

    async def _call(self, operation: str, fn: Callable[[], Awaitable[T]]) -> T:
        start = time.monotonic()
        try:
            result = await fn()
        except Exception as e:
            self.metrics.record_upstream_error(operation, type(e).__name__)
            logger.warning(f"Platform {operation} failed: {e}")
            raise
        self.metrics.record_upstream(operation, time.monotonic() - start)
        return result

    # ------------------------------------------------------------------
    # Metadata lookups
    # ------------------------------------------------------------------

    async def list_objects(self) -> list[ObjectSummary]:
        cached = self._objects_cache.get(OBJECTS_KEY)
        self.metrics.record_cache("objects", cached is not None)
        if cached is not None:
            return cached

        raw = await self._call("get_objects", self.client.get_objects)
        objects = [ObjectSummary.from_dict(o) for o in raw or []]
        if objects:
            self._objects_cache.put(OBJECTS_KEY, objects)
            logger.info(f"Cached {len(objects)} objects")
        return objects

    async def describe_object(self, name: str, label: str | None = None) -> ObjectDetail | None:
        cached = self._desc_cache.get(name)
        self.metrics.record_cache("object_desc", cached is not None)
        if cached is not None:
            return cached

        raw = await self._call("get_object_description", lambda: self.client.get_object_description(name))
        if not raw:
            logger.info(f"Object {name!r} not found")
            return None

        detail = ObjectDetail.from_upstream(raw, name=name, label=label)
        self._desc_cache.put(name, detail)
        return detail

    def mark(self, refs: Iterable[ObjectRef]) -> list[ObjectSummary]:
        """
        Match references against the cached object list.

        Uses whatever list is cached, fresh or stale, and never fetches.
        Every match of every reference is appended, so an object matched
        by two references appears twice.
        """
        cached = self._objects_cache.peek(OBJECTS_KEY)
        if not cached:
            return []

        result: list[ObjectSummary] = []
        for ref in refs:
            result.extend(obj for obj in cached if ref.matches(obj))
        return result

    # ------------------------------------------------------------------
    # Data pass-through (uncached)
    # ------------------------------------------------------------------

    async def query_data(self, sql: str) -> list[dict[str, Any]]:
        data = await self._call("query_data", lambda: self.client.query_data_by_sql(sql))
        return list((data or {}).get("records") or [])

    async def query_departments(self, sql: str) -> list[dict[str, Any]]:
        data = await self._call("query_depts", lambda: self.client.query_depts_by_sql(sql))
        return list((data or {}).get("records") or [])

    async def create_user(self, user: dict[str, Any]) -> str:
        return await self._call("create_user", lambda: self.client.create_user(user))

    # ------------------------------------------------------------------
    # Cache control
    # ------------------------------------------------------------------

    def clear_cache(self) -> None:
        self._objects_cache.invalidate_all()
        self._desc_cache.invalidate_all()
        logger.info("Metadata caches cleared")

    def invalidate_description(self, name: str) -> bool:
        return self._desc_cache.invalidate(name)

    def set_expiration(self, seconds: float) -> None:
        self._objects_cache.set_expiration(seconds)
        self._desc_cache.set_expiration(seconds)

    @property
    def expiration_seconds(self) -> float:
        return self._objects_cache.expiration_seconds

    def cache_stats(self) -> dict[str, CacheStats]:
        return {"objects": self._objects_cache.stats(), "object_desc": self._desc_cache.stats()}
