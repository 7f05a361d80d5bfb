from __future__ import annotations

"""
livecam • Clip Schemas
======================

Purpose
-------
- `ClipObject`: one listed object from the recordings bucket.
- `ResolutionResult`: the signed (or placeholder) URL handed back for a camera.

Both models are frozen; they live for a single resolution request only.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ClipObject(BaseModel):
    """A single listed object. `last_modified` is informational only."""
    model_config = ConfigDict(frozen=True)

    key: str
    last_modified: Optional[datetime] = None
    size: Optional[int] = None


class ResolutionResult(BaseModel):
    """Outcome of resolving one camera to a URL."""
    model_config = ConfigDict(frozen=True)

    camera: str
    url: str
    expires_in: Optional[int] = None  # None for static (unsigned) placeholders
    key: Optional[str] = None
    is_placeholder: bool = False


__all__ = ["ClipObject", "ResolutionResult"]
