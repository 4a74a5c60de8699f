"""
Base platform client: the contract the metadata service consumes.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class PlatformError(Exception):
    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(f"[hecom] {message}")


class AuthenticationError(PlatformError):
    pass


class RateLimitError(PlatformError):
    pass


class ObjectNotFoundError(PlatformError):
    pass


# ---------------------------------------------------------------------------
# Base class
# ---------------------------------------------------------------------------

class PlatformClient(ABC):
    """
    Abstract business-platform client.

    Returns raw platform payloads; normalization into hecomlink types
    happens in the metadata service. Failures raise PlatformError (or an
    httpx transport error) and are never turned into values here, except
    that a description lookup for an unknown object returns None.
    """

    @abstractmethod
    async def get_objects(self) -> list[dict[str, Any]]: ...

    @abstractmethod
    async def get_object_description(self, name: str) -> dict[str, Any] | None: ...

    @abstractmethod
    async def query_data_by_sql(self, sql: str) -> dict[str, Any]: ...

    @abstractmethod
    async def query_depts_by_sql(self, sql: str) -> dict[str, Any]: ...

    @abstractmethod
    async def create_user(self, user: dict[str, Any]) -> str: ...

    async def close(self) -> None:
        return None

    @staticmethod
    def _handle_error(response: httpx.Response) -> None:
        if response.status_code in (401, 403):
            raise AuthenticationError("Authentication failed.", response.status_code)
        if response.status_code == 429:
            raise RateLimitError("Rate limit exceeded.", 429)
        if response.status_code == 404:
            raise ObjectNotFoundError("Resource not found.", 404)
        if response.status_code >= 400:
            try:
                body = response.json()
                msg = body.get("desc") or body.get("message") or response.text
            except Exception:
                msg = response.text
            raise PlatformError(msg, response.status_code)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}>"
