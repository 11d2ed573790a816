from __future__ import annotations

import datetime as dt
import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded

from .config import Settings, get_settings
from .error_handlers import register_error_handlers
from .fastmcp_runtime import build_fastmcp_server, build_fastmcp_sse_app
from .observability import observe_requests, router as metrics_router, setup_logging
from .rate_limit import limiter, rate_limit_exceeded_handler
from .registry import FunctionRegistry, registry as default_registry
from .routes_functions import router as functions_router
from .tools_cache import ToolsListCache


logger = logging.getLogger(__name__)

APP_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    setup_logging(settings.log_level, settings.log_format)
    logger.info("bgg_gateway started environment=%s port=%s", settings.environment, settings.port)
    yield
    await app.state.tools_cache.close()
    logger.info("bgg_gateway shutting down")


def create_app(
    settings: Optional[Settings] = None,
    registry: Optional[FunctionRegistry] = None,
    upstream_transport: Optional[httpx.AsyncBaseTransport] = None,
    tools_cache: Optional[ToolsListCache] = None,
) -> FastAPI:
    """설정/레지스트리를 한 번 만들어 app.state에 싣고 라우터와 미들웨어를 조립한다.

    upstream_transport는 테스트에서 httpx.MockTransport를 끼워 넣을 때 쓴다.
    """
    if settings is None:
        settings = get_settings()
    if registry is None:
        registry = default_registry

    app = FastAPI(title="BGG Gateway", version=APP_VERSION, lifespan=lifespan)
    app.state.settings = settings
    app.state.registry = registry
    app.state.upstream_transport = upstream_transport
    app.state.tools_cache = tools_cache or ToolsListCache.from_url(
        registry, settings.redis_url, ttl=settings.tools_cache_ttl
    )
    app.state.limiter = limiter

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(observe_requests)

    register_error_handlers(app)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    @app.get("/health")
    async def health() -> Dict[str, Any]:
        return {
            "status": "ok",
            "timestamp": dt.datetime.now(dt.timezone.utc).isoformat(),
            "version": APP_VERSION,
        }

    app.include_router(functions_router)
    if settings.metrics_enabled:
        app.include_router(metrics_router)

    if settings.mcp_enabled:
        # Mount FastMCP SSE app under /mcp-sdk
        mcp_server = build_fastmcp_server(registry, settings.upstream, transport=upstream_transport)
        app.state.mcp_server = mcp_server
        app.mount("/mcp-sdk", build_fastmcp_sse_app(mcp_server))

    return app


app = create_app()


def run() -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run("bgg_gateway.main:app", host="0.0.0.0", port=settings.port)
