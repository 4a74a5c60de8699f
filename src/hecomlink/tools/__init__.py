"""hecomlink tools: capability registry, focus state and execution."""

from .capabilities import CapabilityRegistry, FocusState, object_tool_name
from .executor import ToolExecutor, ToolResult
from .focus import FocusSet
from .registry import ToolDef, ToolRegistry

__all__ = [
    "ToolDef",
    "ToolRegistry",
    "CapabilityRegistry",
    "FocusState",
    "FocusSet",
    "object_tool_name",
    "ToolExecutor",
    "ToolResult",
]
