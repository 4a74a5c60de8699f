"""hecomlink core: metadata types and the TTL cache."""

from .cache import CacheEntry, CacheStats, TTLCache
from .types import (
    SELECT_FIELD_TYPES,
    FieldDescriptor,
    NamedItem,
    ObjectDetail,
    ObjectRef,
    ObjectSummary,
)

__all__ = [
    "CacheEntry",
    "CacheStats",
    "TTLCache",
    "SELECT_FIELD_TYPES",
    "FieldDescriptor",
    "NamedItem",
    "ObjectDetail",
    "ObjectRef",
    "ObjectSummary",
]
