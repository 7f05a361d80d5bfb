from __future__ import annotations

"""
Central enum definitions used across livecam.

Design notes
------------
• Enums subclass `str, PyEnum` so values compare equal to raw query strings.
• VALUE STRINGS double as the substring searched for in object keys, so they
  are **stable** once recordings exist in the bucket.
"""

from enum import Enum as PyEnum
from typing import Optional, Tuple


# ──────────────────────────────────────────────────────────────
# Cameras
# ──────────────────────────────────────────────────────────────
class CameraAngle(str, PyEnum):
    """Mounting position of a camera; also the key marker for its clips."""
    FRONT = "front"
    BACK = "back"
    LEFT = "left"
    RIGHT = "right"

    @classmethod
    def from_value(cls, value: Optional[str], *, exact: bool = False) -> Optional["CameraAngle"]:
        """
        Return the matching angle or None for unknown/empty values.

        Config input is trimmed and case-folded; `exact=True` compares the raw
        string, as the `/live` query parameter is matched.
        """
        v = (value or "") if exact else (value or "").strip().lower()
        for angle in cls:
            if angle.value == v:
                return angle
        return None


# Order in which key substrings are tested; first match wins.
DEFAULT_ANGLE_ORDER: Tuple[CameraAngle, ...] = (
    CameraAngle.FRONT,
    CameraAngle.BACK,
    CameraAngle.LEFT,
    CameraAngle.RIGHT,
)


__all__ = ["CameraAngle", "DEFAULT_ANGLE_ORDER"]
