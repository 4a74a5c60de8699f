"""
Capability registry: swaps the exposed toolset when objects are focused.

States:
    UNFOCUSED → The generic description tool is enabled; no per-object tools
    FOCUSED   → The generic description tool is disabled; one describe tool
                per focused object is registered

A focus that matches nothing changes nothing. Focusing again while
already focused either keeps the earlier per-object tools and adds the new
ones ("append") or drops the ones no longer in focus first ("replace").
Per-object tools are never registered twice for the same object.
"""

import hashlib
import logging
import re
from collections.abc import Callable
from enum import Enum
from typing import Any

from hecomlink.config import RefocusMode
from hecomlink.core.types import ObjectSummary
from hecomlink.tools.focus import FocusSet
from hecomlink.tools.registry import MAX_TOOL_NAME, ToolDef, ToolRegistry

logger = logging.getLogger("hecomlink.capabilities")

OBJECT_TOOL_PREFIX = "describe-object-"

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_-]")

ObjectToolFactory = Callable[[ObjectSummary, str], ToolDef]


class FocusState(Enum):
    UNFOCUSED = "unfocused"
    FOCUSED = "focused"


def object_tool_name(object_name: str, hashed: bool = False) -> str:
    """
    Name of the describe tool for one object.

    A name that had to be rewritten (unsafe characters, or too long for a
    tool name) ends in a short hash of the original, so two objects whose
    names sanitize alike still get different tools.
    """
    safe = _UNSAFE_CHARS.sub("_", object_name)
    if not hashed and safe == object_name and len(OBJECT_TOOL_PREFIX) + len(safe) <= MAX_TOOL_NAME:
        return OBJECT_TOOL_PREFIX + safe
    suffix = "-" + hashlib.sha1(object_name.encode()).hexdigest()[:8]
    return OBJECT_TOOL_PREFIX + safe[:MAX_TOOL_NAME - len(OBJECT_TOOL_PREFIX) - len(suffix)] + suffix


class CapabilityRegistry:
    def __init__(self, tools: ToolRegistry, generic_tool: str, object_tool_factory: ObjectToolFactory,
                 refocus_mode: RefocusMode = "append"):
        self.tools = tools
        self.focus_set = FocusSet()
        self.generic_tool = generic_tool
        self.refocus_mode = refocus_mode
        self._factory = object_tool_factory
        self._created: dict[str, str] = {}  # object name -> tool name
        self._state = FocusState.UNFOCUSED

    @property
    def state(self) -> FocusState:
        return self._state

    @property
    def focused_objects(self) -> list[ObjectSummary]:
        return self.focus_set.objects

    @property
    def created_capabilities(self) -> list[str]:
        return list(self._created.values())

    def focus(self, objects: list[ObjectSummary]) -> bool:
        """
        Enter (or stay in) FOCUSED for ``objects``. Returns False on an empty match.

        Every new tool is built before any state changes; if building one
        fails, the registry is left exactly as it was.
        """
        if not objects:
            return False

        dropped: list[str] = []
        if self._state == FocusState.FOCUSED and self.refocus_mode == "replace":
            keep = {o.name for o in objects}
            dropped = [n for n in self._created if n not in keep]

        taken = set(self.tools.list_names())
        planned: dict[str, ToolDef] = {}
        for obj in objects:
            if obj.name in self._created or obj.name in planned:
                continue
            tool_name = self._tool_name(obj.name, taken)
            planned[obj.name] = self._factory(obj, tool_name)
            taken.add(tool_name)

        for obj_name in dropped:
            self.tools.unregister(self._created.pop(obj_name))
        self.focus_set.replace(objects)
        self.tools.disable(self.generic_tool)
        for obj_name, tool in planned.items():
            self.tools.register(tool)
            self._created[obj_name] = tool.name

        self._transition(FocusState.FOCUSED)
        logger.info(f"Focused on {len(self.focus_set.names())} objects, added tools: {[t.name for t in planned.values()]}")
        return True

    @staticmethod
    def _tool_name(object_name: str, taken: set[str]) -> str:
        tool_name = object_tool_name(object_name)
        if tool_name in taken:
            tool_name = object_tool_name(object_name, hashed=True)
        if tool_name in taken:
            raise ValueError(f"Tool name {tool_name} for object {object_name!r} is already taken")
        return tool_name

    def clear(self) -> None:
        self.tools.enable(self.generic_tool)
        for tool_name in self._created.values():
            self.tools.unregister(tool_name)
        self._created.clear()
        self.focus_set.clear()
        self._transition(FocusState.UNFOCUSED)

    def _transition(self, new: FocusState) -> None:
        if self._state != new:
            logger.info(f"Capabilities: {self._state.value} -> {new.value}")
        self._state = new

    def to_dict(self) -> dict[str, Any]:
        return {
            "state": self._state.value,
            "objects": [o.to_dict() for o in self.focus_set.objects],
            "capabilities": self.created_capabilities,
            "generic_enabled": self.tools.is_enabled(self.generic_tool),
        }
