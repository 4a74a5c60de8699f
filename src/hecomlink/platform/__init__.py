"""Business-platform clients."""

from .base import AuthenticationError, ObjectNotFoundError, PlatformClient, PlatformError, RateLimitError
from .hecom import HecomClient

__all__ = [
    "PlatformClient",
    "PlatformError",
    "AuthenticationError",
    "RateLimitError",
    "ObjectNotFoundError",
    "HecomClient",
]
