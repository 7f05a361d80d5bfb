from __future__ import annotations

"""
livecam • Live Clip Redirect
============================

Route Index
-----------
- GET /live?camera={front|back|left|right} → 302 to a presigned GET of the
  camera's newest clip (or the placeholder when none is recent)

Errors (text/plain)
-------------------
- 400 when `camera` is missing or empty (checked before touching storage)
- 500 when listing, signing or key parsing fails, or nothing was recorded
  in the lookback window

Hardening
---------
- Redirects are **no-store**; presigned URLs expire in seconds and must not be
  cached by browsers or proxies.
- Presigned URLs are never logged.
"""

from typing import Optional
import logging

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import RedirectResponse

from livecam.core.dependencies import get_clip_resolver
from livecam.core.exceptions import MissingCameraParameter
from livecam.services.clip_service import ClipResolver

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Live"])
__all__ = ["router"]


def require_camera(
    camera: Optional[str] = Query(None, description="Camera angle: front, back, left or right"),
) -> str:
    """Reject an absent or empty `camera` before any other dependency runs."""
    if not camera:
        raise MissingCameraParameter()
    return camera


@router.get(
    "/live",
    status_code=status.HTTP_302_FOUND,
    response_class=RedirectResponse,
    summary="Redirect to the newest clip for a camera",
)
def live(
    camera: str = Depends(require_camera),
    resolver: ClipResolver = Depends(get_clip_resolver),
) -> RedirectResponse:
    result = resolver.resolve(camera)
    response = RedirectResponse(result.url, status_code=status.HTTP_302_FOUND)
    response.headers["Cache-Control"] = "no-store"
    response.headers["Pragma"] = "no-cache"
    return response
