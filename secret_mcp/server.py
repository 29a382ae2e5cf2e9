"""FastAPI application wiring the Secret Network MCP tools to HTTP routes."""

from __future__ import annotations

import logging
import time
import uuid
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response

from secret_mcp import __version__, mcp
from secret_mcp.chain import ChainRegistry
from secret_mcp.config import ServerConfig, default_config
from secret_mcp.metrics import default_metrics
from secret_mcp.service import build_registry, check_health, configure_logging, start_chain

logger = logging.getLogger(__name__)


def create_app(
    config: Optional[ServerConfig] = None,
    registry: Optional[ChainRegistry] = None,
) -> FastAPI:
    """Build the app; the registry is connected in the lifespan and closed on shutdown."""
    config = config or default_config
    registry = registry or build_registry(config)

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        # Startup: ChainInitializationError aborts the server.
        await start_chain(registry, config)
        yield
        # Shutdown
        await registry.shutdown()

    app = FastAPI(
        title="Secret Network MCP Server",
        description="Read-only Secret Network tool surface for LLM agents.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.registry = registry
    app.state.config = config

    @app.middleware("http")
    async def add_request_context(request: Request, call_next):
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id
        start = time.time()
        default_metrics.incr_request()
        response = await call_next(request)
        duration_ms = (time.time() - start) * 1000
        logger.debug(
            "%s %s status=%s duration_ms=%.2f",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            extra={"request_id": request_id},
        )
        response.headers["X-Request-ID"] = request_id
        return response

    @app.get("/health")
    async def health() -> JSONResponse:
        """Chain health for monitoring; 503 when the active chain is unhealthy."""
        healthy = await check_health(registry)
        payload = {
            "status": "ok" if healthy is not False else "unhealthy",
            "chain": registry.active_chain_name,
            "state": registry.state().value,
            "healthy": healthy,
        }
        return JSONResponse(status_code=200 if healthy is not False else 503, content=payload)

    @app.get("/metrics")
    async def metrics() -> JSONResponse:
        """Return in-process metrics snapshot."""
        return JSONResponse(content=default_metrics.snapshot())

    @app.get("/tools")
    async def tools() -> JSONResponse:
        return JSONResponse(content={"tools": mcp.list_tools()})

    @app.post("/mcp")
    async def mcp_gateway(request: Request) -> Response:
        """JSON-RPC gateway for MCP clients."""
        request_id = getattr(request.state, "request_id", None)
        try:
            body = await request.json()
        except ValueError:
            return JSONResponse(status_code=400, content=mcp.jsonrpc_error(None, -32700, "Parse error"))

        result = await mcp.handle_jsonrpc(body, registry, request_id=request_id)
        if result is None:
            # Notifications carry no response body.
            return Response(status_code=204)
        status_code = 400 if result.get("error", {}).get("code") == -32600 else 200
        return JSONResponse(status_code=status_code, content=result)

    return app


_default_app: Optional[FastAPI] = None


def __getattr__(name: str) -> FastAPI:
    # Built on first access so importing create_app has no side effects.
    global _default_app
    if name != "app":
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    if _default_app is None:
        configure_logging(default_config)
        _default_app = create_app()
    return _default_app


# Run with: uvicorn secret_mcp.server:app  (or python -m secret_mcp --transport http)
