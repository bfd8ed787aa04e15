"""FastAPI application factory (create_app)."""

from __future__ import annotations

import time
from collections.abc import Awaitable, Callable

import structlog
from fastapi import FastAPI, Request
from starlette.responses import Response

from trawlarr.infrastructure.config import AppConfig
from trawlarr.interfaces.app_state import AppState
from trawlarr.interfaces.composition import lifespan

log = structlog.get_logger(__name__)


def create_app(config: AppConfig) -> FastAPI:
    """Create FastAPI app: configuration only, no resource initialization.

    Resources (cache, repository, indexer manager) are created in lifespan().
    """
    app = FastAPI(
        title="Trawlarr",
        description="Torznab indexer aggregation engine",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state = AppState()
    app.state.config = config

    from trawlarr.interfaces.api.indexers import router as indexers_router
    from trawlarr.interfaces.api.search import router as search_router
    from trawlarr.interfaces.api.torznab import router as torznab_router

    app.include_router(torznab_router.router)
    app.include_router(search_router.router, prefix="/api/v1")
    app.include_router(indexers_router.router, prefix="/api/v1")

    @app.get("/healthz")
    async def healthz() -> dict[str, str | int]:
        """Liveness probe: 200 as long as the process is running."""
        manager = getattr(app.state, "manager", None)
        return {
            "status": "ok",
            "indexers": len(manager.loaded_ids) if manager else 0,
        }

    @app.middleware("http")
    async def log_requests(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        start = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            duration_ms = (time.perf_counter() - start) * 1000.0
            log.info(
                "http_request",
                method=request.method,
                path=request.url.path,
                query=str(request.url.query),
                status_code=status_code,
                duration_ms=round(duration_ms, 2),
                client_host=(request.client.host if request.client else None),
            )

    return app
