"""
🧭 livecam • Router Aggregator
=============================

Exports the combined `router` and each sub-router.

Quick usage
-----------
    from livecam.api.routers import router
    app.include_router(router)
"""

from fastapi import APIRouter

from .live import router as live_router
from .pages import router as pages_router


def build_router() -> APIRouter:
    """Compose the public surface: viewer page + `/live` redirect (no prefix)."""
    router = APIRouter()
    router.include_router(pages_router)
    router.include_router(live_router)
    return router


router = build_router()

__all__ = ["router", "build_router", "live_router", "pages_router"]
