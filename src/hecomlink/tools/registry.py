"""
Tool registry: the capabilities currently exposed to the agent.

Each capability is registered once with its handler and an enabled flag,
and exported on demand in whichever tool-schema dialect the agent speaks.
Disabled capabilities stay registered but are neither exported nor
invokable.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Any, Literal

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

Dialect = Literal["mcp", "anthropic", "openai", "google"]
ToolKind = Literal["generic", "object"]

Handler = Callable[[dict[str, Any]], Awaitable[Any]]

MAX_TOOL_NAME = 128
MAX_TOOL_DESCRIPTION = 500


class ToolDef(BaseModel):
    """One capability: schema for the agent plus the handler behind it."""
    name: str = Field(..., max_length=MAX_TOOL_NAME)
    description: str = Field(..., max_length=MAX_TOOL_DESCRIPTION)
    parameters: dict[str, Any] = Field(default_factory=lambda: {"type": "object", "properties": {}})
    kind: ToolKind = "generic"
    object_name: str | None = None
    enabled: bool = True
    handler: Handler | None = Field(default=None, exclude=True)


class ToolRegistry:
    """In-memory capability registry with dialect export."""

    def __init__(self):
        self._tools: dict[str, ToolDef] = {}

    def register(self, tool: ToolDef) -> None:
        if tool.name in self._tools:
            logger.debug(f"Replacing tool {tool.name}")
        self._tools[tool.name] = tool

    def unregister(self, name: str) -> bool:
        return self._tools.pop(name, None) is not None

    def get(self, name: str) -> ToolDef | None:
        return self._tools.get(name)

    def get_enabled(self, name: str) -> ToolDef | None:
        tool = self._tools.get(name)
        return tool if tool and tool.enabled else None

    def set_enabled(self, name: str, enabled: bool) -> bool:
        tool = self._tools.get(name)
        if tool is None:
            return False
        tool.enabled = enabled
        return True

    def enable(self, name: str) -> bool:
        return self.set_enabled(name, True)

    def disable(self, name: str) -> bool:
        return self.set_enabled(name, False)

    def is_enabled(self, name: str) -> bool:
        return self.get_enabled(name) is not None

    def list_all(self) -> list[ToolDef]:
        return list(self._tools.values())

    def list_enabled(self) -> list[ToolDef]:
        return [t for t in self._tools.values() if t.enabled]

    def list_names(self) -> list[str]:
        return list(self._tools.keys())

    def list_by_kind(self, kind: ToolKind) -> list[ToolDef]:
        return [t for t in self._tools.values() if t.kind == kind]

    def count(self) -> int:
        return len(self._tools)

    def export(self, dialect: Dialect = "mcp") -> list[dict[str, Any]]:
        tools = self.list_enabled()
        if dialect == "mcp":
            return [{"name": t.name, "description": t.description, "inputSchema": t.parameters} for t in tools]
        if dialect == "anthropic":
            return [{"name": t.name, "description": t.description, "input_schema": t.parameters} for t in tools]
        if dialect == "openai":
            return [{"type": "function", "function": {"name": t.name, "description": t.description, "parameters": t.parameters}} for t in tools]
        if dialect == "google":
            return [{"name": t.name, "description": t.description, "parameters": t.parameters} for t in tools]
        raise ValueError(f"Unknown tool dialect: {dialect}")
