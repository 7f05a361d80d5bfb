# livecam/main.py
from __future__ import annotations

"""
# livecam — Application Entrypoint (FastAPI)

ASGI application factory and lifecycle for the live camera redirect service.

## Design Goals
- Deterministic, testable **app factory** (`create_app`) with explicit lifespan.
- Middleware order: request id → strip `Server` header.
- Centralized, plain-text exception rendering (`livecam.core.exception_handlers`).
- Dependencies (`get_clip_resolver`, `get_object_store`) overridable in tests.

## Probes
- `/healthz` — liveness (process up, no storage calls).
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable
import logging
import os

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response

# -- Logging bootstrap (Loguru + stdlib intercept) ----------------------------
# Importing sets up handlers/format.
from livecam.core import logger as _logsetup  # noqa: F401

from livecam.api.routers import router as public_router
from livecam.core.config import settings
from livecam.core.exception_handlers import (
    app_exception_handler,
    global_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from livecam.core.exceptions import AppException
from livecam.middleware.request_id import RequestIDMiddleware

logger = logging.getLogger("livecam")


# ─────────────────────────────────────────────────────────────────────────────
# 🔄 Lifespan: startup & shutdown
# ─────────────────────────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    cfg = settings.resolver_config()
    logger.info(
        "✅ livecam starting up (bucket=%s, prefix=%r, zone=%s, lookback=%dm, scan_window=%d)",
        cfg.bucket or "<unset>",
        cfg.base_prefix,
        cfg.timezone,
        cfg.lookback_minutes,
        cfg.scan_window,
    )
    try:
        yield
    finally:
        logger.info("🛑 livecam shutting down")


# ─────────────────────────────────────────────────────────────────────────────
# 🏗️ App factory
# ─────────────────────────────────────────────────────────────────────────────
def create_app() -> FastAPI:
    """
    Build and configure the FastAPI app instance.

    Returns:
        FastAPI: application with middleware, exception handlers, the viewer
        page, `/live`, and `/healthz`.
    """
    enable_docs = settings.ENABLE_DOCS
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        docs_url="/docs" if enable_docs else None,
        redoc_url=None,
        openapi_url="/openapi.json" if enable_docs else None,
        lifespan=lifespan,
    )

    # ── Middlewares ─────────────────────────────────────────────────────────
    app.add_middleware(RequestIDMiddleware)

    @app.middleware("http")
    async def _strip_server_header(request: Request, call_next: Callable) -> Response:
        """Remove the `Server` header to avoid leaking implementation details."""
        response: Response = await call_next(request)
        if "server" in response.headers:
            del response.headers["server"]
        return response

    # ── Exception handlers (AppException first: it is also an HTTPException) ─
    app.add_exception_handler(AppException, app_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(HTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, global_exception_handler)  # type: ignore[arg-type]

    # ── Routers ─────────────────────────────────────────────────────────────
    app.include_router(public_router)

    @app.get("/healthz", tags=["meta"])
    async def healthz() -> dict[str, bool]:
        """Liveness probe. No external checks."""
        return {"ok": True}

    return app


# ─────────────────────────────────────────────────────────────────────────────
# 🚀 Module-level ASGI app for Uvicorn
# ─────────────────────────────────────────────────────────────────────────────
app = create_app()
__all__ = ["create_app", "app"]


def run() -> None:
    """Console entry point (`livecam`)."""
    import uvicorn

    uvicorn.run(
        "livecam.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=settings.PORT,
        reload=os.getenv("RELOAD", "0") == "1",
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )


if __name__ == "__main__":
    run()
