"""Shared FastAPI assembly for the issuance and verification services.

Each service module (app.issuance, app.verification) owns its lifespan and
routers; this module adds what both have in common: CORS for the web
client, request-context and metrics middleware, the health and /metrics
routes.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from contextlib import AbstractAsyncContextManager
from typing import Any

import uvicorn
from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.health import build_health_router
from app.api.metrics_endpoint import router as metrics_router
from app.core.config import Settings
from app.middleware.metrics import MetricsMiddleware
from app.middleware.request_context import (
    RequestContextMiddleware,
    install_request_context_filter,
)

logger = logging.getLogger(__name__)

Lifespan = Callable[[FastAPI], AbstractAsyncContextManager[Any]]


def build_app(
    service: str,
    settings: Settings,
    *,
    lifespan: Lifespan,
    routers: Sequence[APIRouter],
) -> FastAPI:
    install_request_context_filter()

    app = FastAPI(
        title=f"{service}-service",
        lifespan=lifespan,
        docs_url="/docs" if settings.is_dev else None,
        redoc_url="/redoc" if settings.is_dev else None,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    # Middleware execution order: last-added runs first (outermost layer).
    # RequestContext (outermost) → Metrics → CORS → route handler
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestContextMiddleware, service=service)

    app.include_router(metrics_router)
    app.include_router(build_health_router(service))
    for router in routers:
        app.include_router(router)

    return app


def run(target: str, settings: Settings, *, default_port: int) -> None:
    """Serve *target* ("module:app") with uvicorn."""
    port = settings.port or default_port
    logger.info("Starting %s on port %d", target, port)
    uvicorn.run(
        target,
        host="0.0.0.0",
        port=port,
        log_level=settings.log_level,
    )
