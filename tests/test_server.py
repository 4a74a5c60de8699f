"""Integration tests for the FastAPI server endpoints."""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from hecomlink.server import create_app


@pytest.fixture
def client(hecom_config, platform):
    app = create_app(hecom_config, client=platform)
    with TestClient(app) as c:
        yield c


class TestLiveness:
    def test_health_endpoint(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"

    def test_loads_config_when_not_given(self, hecom_config, platform):
        with patch("hecomlink.server.load_config", return_value=hecom_config) as loader:
            with TestClient(create_app(client=platform)) as c:
                assert c.get("/health").status_code == 200
        loader.assert_called_once()


class TestToolsEndpoint:
    def test_lists_enabled_tools(self, client):
        resp = client.get("/api/v1/tools")
        names = [t["name"] for t in resp.json()["tools"]]
        assert "get-object-desc" in names
        assert "inputSchema" in resp.json()["tools"][0]

    def test_openai_dialect(self, client):
        resp = client.get("/api/v1/tools", params={"format": "openai"})
        assert resp.json()["tools"][0]["type"] == "function"

    def test_bad_dialect(self, client):
        assert client.get("/api/v1/tools", params={"format": "cobol"}).status_code == 422

    def test_invoke(self, client):
        resp = client.post("/api/v1/tools/get-objects")
        assert resp.status_code == 200
        assert resp.json()["success"] is True

    def test_invoke_unknown(self, client):
        assert client.post("/api/v1/tools/nope", json={}).status_code == 404

    def test_invoke_non_object_body(self, client):
        assert client.post("/api/v1/tools/get-object-desc", json=["a"]).status_code == 400

    def test_focus_flow(self, client):
        client.post("/api/v1/tools/get-objects")
        resp = client.post("/api/v1/tools/mark-objects", json={"objects": [{"name": "a"}]})
        assert resp.json()["success"] is True

        names = [t["name"] for t in client.get("/api/v1/tools").json()["tools"]]
        assert "describe-object-a" in names
        assert "get-object-desc" not in names
        assert client.post("/api/v1/tools/get-object-desc", json={"name": "a"}).status_code == 404

        focus = client.get("/api/v1/focus").json()
        assert focus["state"] == "focused"
        assert focus["capabilities"] == ["describe-object-a"]

        cleared = client.delete("/api/v1/focus").json()
        assert cleared["state"] == "unfocused"
        assert cleared["generic_enabled"] is True


class TestCacheEndpoints:
    def test_stats_and_clear(self, client, platform):
        client.post("/api/v1/tools/get-objects")
        client.post("/api/v1/tools/get-objects")
        stats = client.get("/api/v1/cache").json()
        assert stats["objects"]["hits"] == 1
        assert stats["objects"]["size"] == 1

        assert client.delete("/api/v1/cache").json()["status"] == "cleared"
        client.post("/api/v1/tools/get-objects")
        assert platform.calls["get_objects"] == 2

    def test_set_expiration(self, client):
        resp = client.put("/api/v1/cache/expiration", json={"minutes": 1})
        assert resp.json()["expiration_seconds"] == 60

    def test_negative_expiration_rejected(self, client):
        assert client.put("/api/v1/cache/expiration", json={"minutes": -1}).status_code == 422


class TestMetricsEndpoint:
    def test_metrics(self, client):
        client.post("/api/v1/tools/get-objects")
        data = client.get("/api/v1/metrics").json()
        assert data["upstream_calls"] == 1
        assert data["tool_invocations"] == {"get-objects": 1}
