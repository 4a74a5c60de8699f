"""Tests for capability execution and failure reporting."""

import asyncio

import pytest
from pydantic import BaseModel

from hecomlink.platform.base import AuthenticationError
from hecomlink.tools.executor import ToolExecutor
from hecomlink.tools.registry import ToolDef, ToolRegistry


class NeedsName(BaseModel):
    name: str


async def _echo(args):
    return {"echo": args}


async def _status(args):
    return {"success": False, "error": "nothing matched"}


async def _auth_fail(args):
    raise AuthenticationError("Authentication failed.", 401)


async def _slow(args):
    await asyncio.sleep(1)


async def _validate(args):
    return NeedsName.model_validate(args).name


async def _crash(args):
    raise RuntimeError("kaboom")


@pytest.fixture
def executor():
    registry = ToolRegistry()
    for name, handler in [("echo", _echo), ("status", _status), ("auth", _auth_fail), ("slow", _slow),
                          ("validate", _validate), ("crash", _crash)]:
        registry.register(ToolDef(name=name, description=name, handler=handler))
    registry.register(ToolDef(name="off", description="off", enabled=False, handler=_echo))
    registry.register(ToolDef(name="bare", description="no handler"))
    return ToolExecutor(registry)


class TestExecute:
    @pytest.mark.asyncio
    async def test_success(self, executor):
        result = await executor.execute("echo", {"x": 1})
        assert result.success is True
        assert result.output == {"echo": {"x": 1}}
        assert result.error is None

    @pytest.mark.asyncio
    async def test_no_arguments(self, executor):
        result = await executor.execute("echo")
        assert result.output == {"echo": {}}

    @pytest.mark.asyncio
    async def test_status_dict_respected(self, executor):
        result = await executor.execute("status")
        assert result.success is False
        assert result.error == "nothing matched"

    @pytest.mark.asyncio
    async def test_unknown_tool(self, executor):
        result = await executor.execute("missing")
        assert result.success is False
        assert "Unknown tool" in result.error

    @pytest.mark.asyncio
    async def test_disabled_tool(self, executor):
        result = await executor.execute("off")
        assert result.success is False
        assert "not enabled" in result.error

    @pytest.mark.asyncio
    async def test_missing_handler(self, executor):
        result = await executor.execute("bare")
        assert "No handler" in result.error


class TestFailures:
    @pytest.mark.asyncio
    async def test_platform_error_reported(self, executor):
        result = await executor.execute("auth")
        assert result.success is False
        assert "Authentication failed" in result.error

    @pytest.mark.asyncio
    async def test_timeout(self, executor):
        result = await executor.execute("slow", timeout=0.01)
        assert result.success is False
        assert "Timed out" in result.error

    @pytest.mark.asyncio
    async def test_zero_timeout_honored(self, executor):
        zero = ToolExecutor(executor.registry, timeout=0)
        assert zero.timeout == 0
        result = await zero.execute("slow")
        assert result.success is False
        assert "Timed out after 0s" in result.error

    @pytest.mark.asyncio
    async def test_zero_call_timeout_overrides_default(self, executor):
        result = await executor.execute("slow", timeout=0)
        assert "Timed out after 0s" in result.error

    def test_default_timeout(self, executor):
        assert executor.timeout == ToolExecutor.DEFAULT_TIMEOUT

    @pytest.mark.asyncio
    async def test_invalid_arguments(self, executor):
        result = await executor.execute("validate", {})
        assert result.success is False
        assert result.error.startswith("Invalid arguments")

    @pytest.mark.asyncio
    async def test_unexpected_error(self, executor):
        result = await executor.execute("crash")
        assert result.success is False
        assert result.error == "kaboom"

    @pytest.mark.asyncio
    async def test_metrics_recorded(self, executor):
        await executor.execute("echo")
        await executor.execute("crash")
        summary = executor.metrics.get_summary()
        assert summary["tool_invocations"] == {"echo": 1, "crash": 1}
