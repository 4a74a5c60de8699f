"""
hecomlink API server: FastAPI application exposing the capability surface.

Tools:
    GET    /api/v1/tools              Enabled capabilities (?format=mcp|anthropic|openai|google)
    POST   /api/v1/tools/{name}       Invoke a capability; body is its arguments

Focus:
    GET    /api/v1/focus              Focus state, focused objects, per-object tools
    DELETE /api/v1/focus              Clear the focus

Cache:
    GET    /api/v1/cache              Cache statistics
    DELETE /api/v1/cache              Drop every cached entry
    PUT    /api/v1/cache/expiration   Change the expiration window

Observability:
    GET    /health                    Liveness probe
    GET    /api/v1/metrics            Service metrics
"""

from __future__ import annotations

import json
import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from pydantic import BaseModel, Field

from hecomlink.config import HecomConfig, load_config
from hecomlink.orchestrator import HecomContext
from hecomlink.platform.base import PlatformClient
from hecomlink.tools.registry import Dialect

logger = logging.getLogger("hecomlink.server")


class ExpirationUpdate(BaseModel):
    minutes: float = Field(..., ge=0)


def _context(request: Request) -> HecomContext:
    return request.app.state.context


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------

def create_app(config: HecomConfig | None = None, client: PlatformClient | None = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        cfg = config or load_config()
        if client is None and not cfg.platform.is_configured:
            logger.warning("Platform credentials incomplete; set HECOM_HOST, HECOM_CLIENT_ID, "
                           "HECOM_CLIENT_SECRET and HECOM_USERNAME")
        ctx = HecomContext.create(cfg, client=client)
        app.state.context = ctx
        logger.info(f"hecomlink ready on {cfg.host}:{cfg.port}, cache expiration {cfg.cache_expiration_minutes}m, "
                    f"refocus mode {cfg.refocus_mode}")
        yield
        await ctx.close()

    app = FastAPI(
        title="hecomlink",
        version="0.1.0",
        description="Hecom business-object metadata as agent tools",
        lifespan=lifespan,
    )

    # ==================================================================
    # Health
    # ==================================================================

    @app.get("/health")
    async def liveness():
        return {"status": "ok"}

    # ==================================================================
    # Tools
    # ==================================================================

    @app.get("/api/v1/tools")
    async def list_tools(request: Request, format: Dialect = "mcp"):
        ctx = _context(request)
        return {"tools": ctx.tools.export(format)}

    @app.post("/api/v1/tools/{name}")
    async def invoke_tool(name: str, request: Request):
        ctx = _context(request)
        if not ctx.tools.is_enabled(name):
            raise HTTPException(404, f"Tool '{name}' not available")

        raw = await request.body()
        try:
            arguments: Any = json.loads(raw) if raw else {}
        except json.JSONDecodeError:
            raise HTTPException(400, "Request body must be JSON") from None
        if not isinstance(arguments, dict):
            raise HTTPException(400, "Tool arguments must be a JSON object")

        return await ctx.invoke(name, arguments)

    # ==================================================================
    # Focus
    # ==================================================================

    @app.get("/api/v1/focus")
    async def focus_state(request: Request):
        return _context(request).capabilities.to_dict()

    @app.delete("/api/v1/focus")
    async def clear_focus(request: Request):
        ctx = _context(request)
        ctx.orchestrator.clear_focus()
        return ctx.capabilities.to_dict()

    # ==================================================================
    # Cache
    # ==================================================================

    @app.get("/api/v1/cache")
    async def cache_stats(request: Request):
        stats = _context(request).metadata.cache_stats()
        return {name: s.to_dict() for name, s in stats.items()}

    @app.delete("/api/v1/cache")
    async def clear_cache(request: Request):
        _context(request).metadata.clear_cache()
        return {"status": "cleared"}

    @app.put("/api/v1/cache/expiration")
    async def set_expiration(update: ExpirationUpdate, request: Request):
        ctx = _context(request)
        ctx.metadata.set_expiration(update.minutes * 60)
        return {"expiration_seconds": ctx.metadata.expiration_seconds}

    # ==================================================================
    # Observability
    # ==================================================================

    @app.get("/api/v1/metrics")
    async def metrics(request: Request):
        return _context(request).metrics.get_summary()

    return app
