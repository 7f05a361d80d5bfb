from __future__ import annotations

"""
Plain-text exception handlers.

FastAPI integrates these via livecam/main.py. The viewer page follows
redirects from `<video src="/live?...">`, so error bodies stay short
human-readable `text/plain` rather than JSON documents.
"""

import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from livecam.core.exceptions import AppException
from livecam.middleware.request_id import get_request_id

logger = logging.getLogger(__name__)


def _plain(detail: str, status_code: int, headers: dict | None = None) -> PlainTextResponse:
    return PlainTextResponse(detail, status_code=status_code, headers=headers)


async def app_exception_handler(request: Request, exc: AppException) -> PlainTextResponse:  # type: ignore
    args = (exc.__class__.__name__, request.url.path, get_request_id(request) or "N/A", exc.message)
    if exc.status_code >= 500:
        logger.error("%s on %s (request_id=%s): %s", *args)
    else:
        logger.info("%s on %s (request_id=%s): %s", *args)
    return _plain(exc.message, exc.status_code, getattr(exc, "headers", None))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> PlainTextResponse:  # type: ignore
    detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return _plain(detail, exc.status_code, getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> PlainTextResponse:  # type: ignore
    return _plain("Invalid request parameters", status.HTTP_400_BAD_REQUEST)


async def global_exception_handler(request: Request, exc: Exception) -> PlainTextResponse:  # type: ignore
    # Hide internals; the stack trace goes to the log only.
    logger.exception("Unhandled error on %s (request_id=%s)", request.url.path, get_request_id(request) or "N/A")
    return _plain("Internal Server Error", status.HTTP_500_INTERNAL_SERVER_ERROR)


__all__ = [
    "app_exception_handler",
    "http_exception_handler",
    "validation_exception_handler",
    "global_exception_handler",
]
