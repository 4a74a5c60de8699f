"""Shared fixtures for the hecomlink test suite."""

from typing import Any

import pytest

from hecomlink.config import HecomConfig, PlatformConfig
from hecomlink.platform.base import PlatformClient

OBJECTS = [
    {"name": "a", "label": "Alpha", "description": "first"},
    {"name": "b", "label": "Beta", "description": None},
]

DESCRIPTION = {
    "name": "a",
    "label": "Alpha",
    "bizTypes": [{"name": "default", "label": "Default", "id": 1}],
    "fieldList": [
        {"name": "title", "label": "Title", "type": "Text", "subType": ""},
        {"name": "stage", "label": "Stage", "type": "Select",
         "attributes": {"selectItems": [{"name": "s1", "label": "Open", "color": "red"}]}},
    ],
}


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakePlatformClient(PlatformClient):
    """In-memory platform; counts calls and can be told to fail."""

    def __init__(self, objects: list[dict[str, Any]] | None = None,
                 descriptions: dict[str, dict[str, Any]] | None = None):
        self.objects = list(OBJECTS) if objects is None else objects
        self.descriptions = {"a": DESCRIPTION} if descriptions is None else descriptions
        self.records: list[dict[str, Any]] = [{"id": 1}]
        self.calls: dict[str, int] = {}
        self.error: Exception | None = None
        self.closed = False

    def _hit(self, op: str) -> None:
        self.calls[op] = self.calls.get(op, 0) + 1
        if self.error:
            raise self.error

    async def get_objects(self):
        self._hit("get_objects")
        return list(self.objects)

    async def get_object_description(self, name):
        self._hit("get_object_description")
        return self.descriptions.get(name)

    async def query_data_by_sql(self, sql):
        self._hit("query_data_by_sql")
        return {"records": self.records}

    async def query_depts_by_sql(self, sql):
        self._hit("query_depts_by_sql")
        return {"records": [{"code": "D1"}]}

    async def create_user(self, user):
        self._hit("create_user")
        return "u-1"

    async def close(self):
        self.closed = True


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def platform():
    return FakePlatformClient()


@pytest.fixture
def hecom_config():
    """A config with dummy credentials and default behaviour."""
    return HecomConfig(
        platform=PlatformConfig(api_host="http://hecom.test", client_id="id", client_secret="secret", username="bot"),
    )
