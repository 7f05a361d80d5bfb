# livecam/core/config.py
from __future__ import annotations

"""
# livecam — Centralized Configuration (Pydantic v2)

Single `settings` object with strongly-typed, environment-driven config, plus
an immutable `ResolverConfig` snapshot handed to the clip resolver.

## Goals
- Safe defaults for local/dev; the bucket is the only value prod must set.
- Policy constants (scan window, angle order, TTLs) are named and overridable,
  but default to the values the recorders and viewer page rely on.
- Settings are read **once** at process start; request handling only sees the
  frozen `ResolverConfig`.

## Usage
    from livecam.core.config import settings
    cfg = settings.resolver_config()
"""

import logging
from pathlib import Path
from typing import Optional, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from livecam.schemas.enums import CameraAngle, DEFAULT_ANGLE_ORDER

log = logging.getLogger(__name__)
load_dotenv()  # harmless in prod; convenient in dev

_PACKAGE_DIR = Path(__file__).resolve().parent.parent


# ─────────────────────────────────────────────────────────────
# Small helpers
# ─────────────────────────────────────────────────────────────
def _split_csv(v: str | None) -> list[str]:
    """Split a comma-separated string into a trimmed list (empty-safe)."""
    if not v:
        return []
    return [s.strip() for s in str(v).split(",") if s and s.strip()]


def _parse_angle_order(v: str | None) -> Tuple[CameraAngle, ...]:
    """Turn `front,back,...` into a tuple of angles; rejects unknown/duplicate names."""
    names = _split_csv(v)
    if not names:
        return DEFAULT_ANGLE_ORDER
    out: list[CameraAngle] = []
    for name in names:
        angle = CameraAngle.from_value(name)
        if angle is None:
            raise ValueError(f"Unknown camera angle in CAMERA_ANGLE_ORDER: {name!r}")
        if angle in out:
            raise ValueError(f"Duplicate camera angle in CAMERA_ANGLE_ORDER: {name!r}")
        out.append(angle)
    return tuple(out)


# ─────────────────────────────────────────────────────────────
# Resolver snapshot
# ─────────────────────────────────────────────────────────────
class ResolverConfig(BaseModel):
    """
    Immutable configuration consumed by `ClipResolver`.

    Built once from `Settings` (or directly in tests) and passed explicitly,
    so a resolution never reads ambient process state.
    """
    model_config = ConfigDict(frozen=True)

    bucket: str = ""
    base_prefix: str = ""
    timezone: str = "Asia/Bangkok"
    lookback_minutes: int = Field(10, ge=0)
    max_keys: int = Field(100, ge=1, le=1000)
    scan_window: int = Field(8, ge=0)
    angle_order: Tuple[CameraAngle, ...] = DEFAULT_ANGLE_ORDER
    signed_url_ttl_seconds: int = Field(5, ge=1)
    placeholder_key: str = "placeholder.mp4"
    placeholder_url: Optional[str] = None

    @property
    def zone(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


# ─────────────────────────────────────────────────────────────
# Settings
# ─────────────────────────────────────────────────────────────
class Settings(BaseSettings):
    """
    Global application settings sourced from environment.

    Storage:
        - `S3_CUSTOM_ENDPOINT` points the client at MinIO / other
          S3-compatible stores. Addressing is always path-style.
        - Credentials fall back to the standard AWS chain when unset.

    Notes:
        - `OPERATIONAL_TIMEZONE` is validated at load time; a typo fails
          startup instead of the first request.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # don't crash on unknown keys
    )

    # ── App meta ──────────────────────────────────────────────
    PROJECT_NAME: str = "livecam"
    VERSION: str = "1.0.0"
    ENABLE_DOCS: bool = False
    PORT: int = 8080
    INDEX_HTML_PATH: Path = _PACKAGE_DIR / "static" / "index.html"

    # ── Object storage ────────────────────────────────────────
    S3_BUCKET_NAME: Optional[str] = None
    S3_BUCKET_PREFIX: str = ""
    AWS_REGION: str = "us-east-1"
    S3_CUSTOM_ENDPOINT: Optional[str] = None
    AWS_ACCESS_KEY_ID: Optional[str] = None
    AWS_SECRET_ACCESS_KEY: Optional[SecretStr] = None
    AWS_SESSION_TOKEN: Optional[SecretStr] = None
    S3_CONNECT_TIMEOUT: float = Field(3, gt=0)
    S3_READ_TIMEOUT: float = Field(10, gt=0)
    S3_MAX_ATTEMPTS: int = Field(3, ge=1, le=10)

    # ── Clip selection policy ─────────────────────────────────
    OPERATIONAL_TIMEZONE: str = "Asia/Bangkok"
    LOOKBACK_MINUTES: int = Field(10, ge=0, le=24 * 60)
    LIST_MAX_KEYS: int = Field(100, ge=1, le=1000)
    CLIP_SCAN_WINDOW: int = Field(8, ge=0)
    CAMERA_ANGLE_ORDER: str = "front,back,left,right"
    SIGNED_URL_TTL_SECONDS: int = Field(5, ge=1, le=7 * 24 * 3600)
    PLACEHOLDER_KEY: str = "placeholder.mp4"
    PLACEHOLDER_URL: Optional[str] = None

    # ── Validators / normalizers ──────────────────────────────
    @field_validator("OPERATIONAL_TIMEZONE")
    @classmethod
    def _validate_timezone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown time zone: {v!r}") from e
        return v

    @field_validator("CAMERA_ANGLE_ORDER")
    @classmethod
    def _validate_angle_order(cls, v: str) -> str:
        _parse_angle_order(v)
        return v

    @field_validator("S3_BUCKET_PREFIX", mode="before")
    @classmethod
    def _normalize_prefix(cls, v: str | None) -> str:
        """No trailing slash; keys are joined as `{prefix}/streams/...`."""
        return str(v or "").strip().rstrip("/")

    @field_validator("S3_CUSTOM_ENDPOINT", "PLACEHOLDER_URL", mode="before")
    @classmethod
    def _blank_to_none(cls, v: str | None) -> str | None:
        s = (v or "").strip()
        return s or None

    # ── Derived / convenience ────────────────────────────────
    @property
    def camera_angle_order(self) -> Tuple[CameraAngle, ...]:
        return _parse_angle_order(self.CAMERA_ANGLE_ORDER)

    def resolver_config(self) -> ResolverConfig:
        """Freeze the clip-selection subset of settings."""
        return ResolverConfig(
            bucket=self.S3_BUCKET_NAME or "",
            base_prefix=self.S3_BUCKET_PREFIX,
            timezone=self.OPERATIONAL_TIMEZONE,
            lookback_minutes=self.LOOKBACK_MINUTES,
            max_keys=self.LIST_MAX_KEYS,
            scan_window=self.CLIP_SCAN_WINDOW,
            angle_order=self.camera_angle_order,
            signed_url_ttl_seconds=self.SIGNED_URL_TTL_SECONDS,
            placeholder_key=self.PLACEHOLDER_KEY,
            placeholder_url=self.PLACEHOLDER_URL,
        )


# Instantiate settings
settings = Settings()

if not settings.S3_BUCKET_NAME:
    log.warning("S3_BUCKET_NAME is not set; /live will fail until it is configured")

__all__ = ["Settings", "ResolverConfig", "settings"]
