from __future__ import annotations

"""
livecam • Viewer Page
=====================

- GET / → the static viewer (`INDEX_HTML_PATH`, packaged `static/index.html`
  by default). The page embeds one `<video>` per camera pointing at `/live`.
"""

import logging

from fastapi import APIRouter
from fastapi.responses import HTMLResponse, PlainTextResponse, Response

from livecam.core.config import settings

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Pages"])
__all__ = ["router"]


@router.get("/", include_in_schema=False)
def index() -> Response:
    # Read per request so the page can be edited without a restart.
    try:
        html = settings.INDEX_HTML_PATH.read_text(encoding="utf-8")
    except OSError as e:
        logger.error("Cannot read %s: %s", settings.INDEX_HTML_PATH, e)
        return PlainTextResponse("Error reading HTML file", status_code=500)
    return HTMLResponse(html)
