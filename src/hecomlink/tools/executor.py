"""Tool executor: runs enabled capabilities and reports the outcome."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from hecomlink.metrics import ServiceMetrics
from hecomlink.platform.base import PlatformError

from .registry import ToolRegistry

logger = logging.getLogger("hecomlink.executor")


@dataclass
class ToolResult:
    tool_name: str
    success: bool
    output: Any
    error: str | None = None
    execution_time_ms: float = 0

    def to_dict(self) -> dict[str, Any]:
        return {"tool_name": self.tool_name, "success": self.success, "output": self.output,
                "error": self.error, "execution_time_ms": self.execution_time_ms}


class ToolExecutor:
    DEFAULT_TIMEOUT = 30

    def __init__(self, registry: ToolRegistry, metrics: ServiceMetrics | None = None, timeout: float | None = None):
        self.registry = registry
        self.metrics = metrics or ServiceMetrics()
        self.timeout = self.DEFAULT_TIMEOUT if timeout is None else timeout

    async def execute(self, tool_name: str, arguments: dict[str, Any] | None = None, timeout: float | None = None) -> ToolResult:
        result = await self._execute(tool_name, arguments or {}, self.timeout if timeout is None else timeout)
        self.metrics.record_tool(tool_name, result.success)
        return result

    async def _execute(self, tool_name: str, arguments: dict[str, Any], timeout: float) -> ToolResult:
        start = time.time()
        tool = self.registry.get(tool_name)
        if tool is None:
            return ToolResult(tool_name, False, None, f"Unknown tool: {tool_name}")
        if not tool.enabled:
            return ToolResult(tool_name, False, None, f"Tool not enabled: {tool_name}")
        if tool.handler is None:
            return ToolResult(tool_name, False, None, f"No handler for tool: {tool_name}")

        try:
            output = await asyncio.wait_for(tool.handler(arguments), timeout=timeout)
            ms = (time.time() - start) * 1000
            if isinstance(output, ToolResult):
                return output
            if isinstance(output, dict) and "success" in output:
                return ToolResult(tool_name, bool(output["success"]), output, output.get("error"), ms)
            return ToolResult(tool_name, True, output, execution_time_ms=ms)
        except TimeoutError:
            return ToolResult(tool_name, False, None, f"Timed out after {timeout}s", (time.time() - start) * 1000)
        except ValidationError as e:
            return ToolResult(tool_name, False, None, f"Invalid arguments: {e.errors(include_url=False)}",
                              (time.time() - start) * 1000)
        except PlatformError as e:
            return ToolResult(tool_name, False, None, str(e), (time.time() - start) * 1000)
        except Exception as e:
            logger.error(f"Tool {tool_name} failed: {e}", exc_info=True)
            return ToolResult(tool_name, False, None, str(e), (time.time() - start) * 1000)
