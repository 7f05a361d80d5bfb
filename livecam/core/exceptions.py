# livecam/core/exceptions.py
from __future__ import annotations

"""
livecam — Application Exceptions
================================
A small, consistent layer on top of FastAPI/Starlette's `HTTPException` that
carries a human-readable `message`, a typed `code`, and optional `details`.

Taxonomy
--------
- `MissingCameraParameter` → 400 (client error, raised before any store call)
- `StoreUnavailable`       → 500 (listing failed)
- `NoClipsFound`           → 500 (listing returned nothing)
- `SigningFailed`          → 500 (presign failed)
- `MalformedKey`           → 500 (listing broke the key naming contract)

No retries happen anywhere in the resolution path; each of these ends the
request. `livecam.core.exception_handlers` renders them as plain text.
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status

__all__ = [
    "AppException",
    "MissingCameraParameter",
    "StoreUnavailable",
    "NoClipsFound",
    "SigningFailed",
    "MalformedKey",
]


# ──────────────────────────────────────────────────────────────
# 📦 Core: AppException
# ──────────────────────────────────────────────────────────────
class AppException(HTTPException):
    """Base application-level exception with optional metadata.

    Attributes
    -----------
    status_code : int
        HTTP status code.
    message : str
        Human-readable error message (serialized as `detail` as well).
    code : int
        Optional internal/typed error code. Defaults to `status_code`.
    details : dict | list | str | None
        Machine-readable details for logs (never signed URLs).
    """

    default_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal Server Error"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        status_code: Optional[int] = None,
        code: Optional[int] = None,
        details: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        status_code = status_code or self.default_status
        message = message or self.default_message
        super().__init__(status_code=status_code, detail=message, headers=headers)
        self.code: int = int(code or status_code)
        self.message: str = message
        self.details: Optional[Any] = details

    def __str__(self) -> str:
        return self.message


# ──────────────────────────────────────────────────────────────
# 🎥 Clip resolution errors
# ──────────────────────────────────────────────────────────────
class MissingCameraParameter(AppException):
    """Raised when `camera` is absent or empty."""
    default_status = status.HTTP_400_BAD_REQUEST
    default_message = "No camera specified (front, back, left, right)"


class StoreUnavailable(AppException):
    """Raised when listing the recordings bucket fails."""
    default_message = "Object store unavailable"


class NoClipsFound(AppException):
    """Raised when the recent-window listing is empty."""
    default_message = "No files found"


class SigningFailed(AppException):
    """Raised when a signed GET URL cannot be produced."""
    default_message = "Failed to sign clip URL"


class MalformedKey(AppException):
    """Raised when a listed key carries no `YYYY-MM-DD_HH-MM-SS` timestamp."""
    default_message = "Malformed object key"

    def __init__(self, key: str, **kwargs: Any) -> None:
        super().__init__(f"Malformed object key: {key!r}", details={"key": key}, **kwargs)
        self.key = key
