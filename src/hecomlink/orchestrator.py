"""
Orchestrator: wires capability handlers to the metadata service.

All process state (caches, focus, registries, metrics) lives on one
HecomContext; the server holds exactly one per application.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, Field

from hecomlink.config import HecomConfig
from hecomlink.core.types import ObjectRef, ObjectSummary
from hecomlink.metadata.service import MetadataService
from hecomlink.metrics import ServiceMetrics
from hecomlink.platform.base import PlatformClient
from hecomlink.tools.capabilities import CapabilityRegistry
from hecomlink.tools.executor import ToolExecutor
from hecomlink.tools.registry import MAX_TOOL_DESCRIPTION, ToolDef, ToolRegistry

logger = logging.getLogger("hecomlink.orchestrator")

GET_OBJECTS = "get-objects"
GET_OBJECT_DESC = "get-object-desc"
MARK_OBJECTS = "mark-objects"
CLEAR_MARK = "clear-mark"
QUERY_DATA = "query-object-data"
QUERY_DEPTS = "query-departments"
CREATE_USER = "create-user"


# ---------------------------------------------------------------------------
# Argument models
# ---------------------------------------------------------------------------

class DescribeArgs(BaseModel):
    name: str = Field(..., description="Object name")
    label: str | None = Field(default=None, description="Object label")


class RefArgs(BaseModel):
    name: str = ""
    label: str | None = None


class MarkArgs(BaseModel):
    objects: list[RefArgs] = Field(..., description="Objects to focus on, by name and/or label")


class SqlArgs(BaseModel):
    sql: str = Field(..., min_length=1, description="SQL query")


class CreateUserArgs(BaseModel):
    user: dict[str, Any] = Field(..., description="User record fields")


def _schema(model: type[BaseModel]) -> dict[str, Any]:
    return model.model_json_schema()


# ---------------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------------

class Orchestrator:
    def __init__(self, metadata: MetadataService, tools: ToolRegistry, config: HecomConfig,
                 metrics: ServiceMetrics | None = None):
        self.metadata = metadata
        self.tools = tools
        self.config = config
        self.metrics = metrics or metadata.metrics
        self.capabilities = CapabilityRegistry(tools, GET_OBJECT_DESC, self._object_tool, config.refocus_mode)

    def register_builtins(self) -> None:
        for tool in (
            ToolDef(name=GET_OBJECTS, description="List the business objects available on the platform",
                    handler=self.get_objects),
            ToolDef(name=GET_OBJECT_DESC,
                    description="Describe an object: its bizType list and field list",
                    parameters=_schema(DescribeArgs), handler=self.get_object_desc),
            ToolDef(name=MARK_OBJECTS,
                    description="Focus on a set of objects; exposes one describe tool per matched object",
                    parameters=_schema(MarkArgs), handler=self.mark_objects),
            ToolDef(name=CLEAR_MARK, description="Clear the object focus and restore the generic describe tool",
                    handler=self.clear_mark),
            ToolDef(name=QUERY_DATA, description="Query object records with SQL",
                    parameters=_schema(SqlArgs), handler=self.query_data),
            ToolDef(name=QUERY_DEPTS, description="Query departments with SQL",
                    parameters=_schema(SqlArgs), handler=self.query_departments),
            ToolDef(name=CREATE_USER, description="Create a platform user",
                    parameters=_schema(CreateUserArgs), handler=self.create_user),
        ):
            self.tools.register(tool)

    # --- Metadata ---

    async def get_objects(self, args: dict[str, Any]) -> Any:
        objects = await self.metadata.list_objects()
        if not objects:
            return "No objects available"
        return [o.to_dict() for o in objects if len(o.label) >= self.config.min_label_length]

    async def get_object_desc(self, args: dict[str, Any]) -> Any:
        req = DescribeArgs.model_validate(args)
        return await self._describe(req.name, req.label)

    async def _describe(self, name: str, label: str | None = None) -> Any:
        detail = await self.metadata.describe_object(name, label)
        if detail is None:
            return f"Object {name} does not exist"
        return detail.to_dict()

    def _object_tool(self, obj: ObjectSummary, tool_name: str) -> ToolDef:
        async def handler(args: dict[str, Any]) -> Any:
            return await self._describe(obj.name, obj.label)

        return ToolDef(
            name=tool_name,
            description=f"Describe {obj.label or obj.name} ({obj.name}): its bizType list and field list"[:MAX_TOOL_DESCRIPTION],
            kind="object",
            object_name=obj.name,
            handler=handler,
        )

    # --- Focus ---

    async def mark_objects(self, args: dict[str, Any]) -> dict[str, Any]:
        req = MarkArgs.model_validate(args)
        matched = self.metadata.mark(ObjectRef(name=r.name, label=r.label) for r in req.objects)
        if not self.capabilities.focus(matched):
            return {"success": False, "objects": [], "error": "No matching objects; call get-objects first"}
        self.metrics.set_focused(len(self.capabilities.focus_set))
        return {"success": True, "objects": [o.to_dict() for o in matched]}

    async def clear_mark(self, args: dict[str, Any]) -> dict[str, Any]:
        self.clear_focus()
        return {"success": True}

    def clear_focus(self) -> None:
        self.capabilities.clear()
        self.metrics.set_focused(0)

    # --- Data ---

    async def query_data(self, args: dict[str, Any]) -> list[dict[str, Any]]:
        return await self.metadata.query_data(SqlArgs.model_validate(args).sql)

    async def query_departments(self, args: dict[str, Any]) -> list[dict[str, Any]]:
        return await self.metadata.query_departments(SqlArgs.model_validate(args).sql)

    async def create_user(self, args: dict[str, Any]) -> dict[str, Any]:
        user_id = await self.metadata.create_user(CreateUserArgs.model_validate(args).user)
        return {"id": user_id}


# ---------------------------------------------------------------------------
# Context
# ---------------------------------------------------------------------------

@dataclass
class HecomContext:
    """Everything one running instance owns."""

    config: HecomConfig
    client: PlatformClient
    metadata: MetadataService
    tools: ToolRegistry
    orchestrator: Orchestrator
    executor: ToolExecutor
    metrics: ServiceMetrics

    @classmethod
    def create(cls, config: HecomConfig, client: PlatformClient | None = None,
               clock: Callable[[], float] = time.monotonic) -> HecomContext:
        if client is None:
            from hecomlink.platform.hecom import HecomClient
            client = HecomClient(config.platform)

        metrics = ServiceMetrics()
        metadata = MetadataService(client, config.cache_expiration_minutes, metrics=metrics, clock=clock)
        tools = ToolRegistry()
        orchestrator = Orchestrator(metadata, tools, config, metrics)
        orchestrator.register_builtins()
        executor = ToolExecutor(tools, metrics, timeout=config.tool_timeout_seconds)
        return cls(config=config, client=client, metadata=metadata, tools=tools,
                   orchestrator=orchestrator, executor=executor, metrics=metrics)

    @property
    def capabilities(self) -> CapabilityRegistry:
        return self.orchestrator.capabilities

    async def invoke(self, name: str, arguments: dict[str, Any] | None = None) -> dict[str, Any]:
        result = await self.executor.execute(name, arguments)
        return result.to_dict()

    async def close(self) -> None:
        await self.client.close()
