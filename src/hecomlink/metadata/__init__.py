"""Cached metadata access."""

from .service import DEFAULT_EXPIRATION_MINUTES, MetadataService

__all__ = ["MetadataService", "DEFAULT_EXPIRATION_MINUTES"]
