"""Tests for platform error mapping."""

from unittest.mock import MagicMock

import httpx
import pytest

from hecomlink.platform.base import (
    AuthenticationError,
    ObjectNotFoundError,
    PlatformClient,
    PlatformError,
    RateLimitError,
)


def _make_response(status_code: int, json_body: dict | None = None, text: str = "") -> MagicMock:
    resp = MagicMock(spec=httpx.Response)
    resp.status_code = status_code
    resp.text = text or str(json_body)
    if json_body is not None:
        resp.json.return_value = json_body
    else:
        resp.json.side_effect = ValueError("No JSON")
    return resp


class TestHandleError:
    @pytest.mark.parametrize("status", [401, 403])
    def test_auth_errors(self, status):
        with pytest.raises(AuthenticationError) as exc:
            PlatformClient._handle_error(_make_response(status))
        assert exc.value.status_code == status

    def test_429_raises_rate_limit_error(self):
        with pytest.raises(RateLimitError):
            PlatformClient._handle_error(_make_response(429))

    def test_404_raises_not_found(self):
        with pytest.raises(ObjectNotFoundError):
            PlatformClient._handle_error(_make_response(404))

    def test_500_with_json_body(self):
        resp = _make_response(500, json_body={"desc": "Internal server error"})
        with pytest.raises(PlatformError) as exc:
            PlatformClient._handle_error(resp)
        assert "Internal server error" in str(exc.value)
        assert exc.value.status_code == 500

    def test_500_without_json_body(self):
        resp = _make_response(500, json_body=None, text="Something went wrong")
        with pytest.raises(PlatformError) as exc:
            PlatformClient._handle_error(resp)
        assert "Something went wrong" in str(exc.value)

    def test_200_does_not_raise(self):
        PlatformClient._handle_error(_make_response(200))


class TestPlatformErrorAttributes:
    def test_subclasses(self):
        for cls in (AuthenticationError, RateLimitError, ObjectNotFoundError):
            assert issubclass(cls, PlatformError)

    def test_message(self):
        err = PlatformError("test error", 502)
        assert err.message == "test error"
        assert "hecom" in str(err)
