from __future__ import annotations

"""
Latest-clip resolution for the live viewer.

Pipeline (one pass per request, no retries):
- list a bounded page of today's recordings started within the lookback window
- rank by the timestamp embedded in each key, newest first
- pick the newest clip per camera angle within the first `scan_window` entries
- presign the requested angle's clip, or fall back to the placeholder

Timestamps are compared as strings. `YYYY-MM-DD_HH-MM-SS` is zero-padded and
fixed-width, so string order is chronological order; changing the recorder's
filename format requires changing the comparison too.
"""

import logging
import re
from datetime import datetime, timedelta
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from livecam.core.config import ResolverConfig
from livecam.core.exceptions import (
    MalformedKey,
    MissingCameraParameter,
    NoClipsFound,
    SigningFailed,
    StoreUnavailable,
)
from livecam.core.storage import (
    DATE_FORMAT,
    START_AFTER_KEY,
    TIMESTAMP_FORMAT,
    ObjectStore,
    streams_prefix,
)
from livecam.schemas.clips import ClipObject, ResolutionResult
from livecam.schemas.enums import DEFAULT_ANGLE_ORDER, CameraAngle

logger = logging.getLogger(__name__)

_TIMESTAMP_RE = re.compile(r"\d{4}-\d{2}-\d{2}_\d{2}-\d{2}-\d{2}")

DEFAULT_SCAN_WINDOW = 8


# ─────────────────────────────────────────────────────────────────────────────
# ⏱️ Timestamp extraction
# ─────────────────────────────────────────────────────────────────────────────

def extract_timestamp(key: str) -> str:
    """Return the first `YYYY-MM-DD_HH-MM-SS` token in `key`.

    Raises:
        MalformedKey: if the key carries no timestamp.
    """
    m = _TIMESTAMP_RE.search(key or "")
    if m is None:
        raise MalformedKey(key)
    return m.group(0)


def parse_timestamp(key: str) -> datetime:
    """Naive datetime for the key's timestamp (wall time in the operational zone)."""
    token = extract_timestamp(key)
    try:
        return datetime.strptime(token, TIMESTAMP_FORMAT)
    except ValueError as e:
        # Shape matched but the calendar value is impossible (e.g. month 13).
        raise MalformedKey(key) from e


# ─────────────────────────────────────────────────────────────────────────────
# 📊 Ranking & selection
# ─────────────────────────────────────────────────────────────────────────────

def rank_clips(clips: Iterable[ClipObject]) -> List[ClipObject]:
    """Newest first by embedded timestamp; equal timestamps keep listing order.

    One malformed key fails the whole ranking.
    """
    keyed = [(extract_timestamp(c.key), c) for c in clips]
    # sorted(reverse=True) is stable: ties keep their original relative order.
    keyed = sorted(keyed, key=lambda pair: pair[0], reverse=True)
    return [c for _, c in keyed]


def match_angle(
    key: str,
    *,
    taken: Optional[Dict[CameraAngle, ClipObject]] = None,
    angle_order: Sequence[CameraAngle] = DEFAULT_ANGLE_ORDER,
) -> Optional[CameraAngle]:
    """First angle in `angle_order` whose marker is in `key` and is not yet in `taken`."""
    taken = taken or {}
    for angle in angle_order:
        if angle.value in key and angle not in taken:
            return angle
    return None


def select_latest_per_camera(
    ranked: Sequence[ClipObject],
    *,
    scan_window: int = DEFAULT_SCAN_WINDOW,
    angle_order: Sequence[CameraAngle] = DEFAULT_ANGLE_ORDER,
) -> Dict[CameraAngle, ClipObject]:
    """
    Pick the newest clip per angle from the head of a ranked listing.

    Only the first `scan_window` entries are inspected, even when some angles
    are still unfilled; an angle whose newest clip ranks below the window is
    left out of the result.
    """
    winners: Dict[CameraAngle, ClipObject] = {}
    for clip in ranked[: max(scan_window, 0)]:
        angle = match_angle(clip.key, taken=winners, angle_order=angle_order)
        if angle is not None:
            winners[angle] = clip
    return winners


# ─────────────────────────────────────────────────────────────────────────────
# 🎬 Resolver
# ─────────────────────────────────────────────────────────────────────────────

class ClipResolver:
    """
    Resolve a camera name to a short-lived URL for its newest clip.

    Stateless between calls; `store`, `config` and `clock` are fixed at
    construction so a resolution is reproducible from the listing and the
    clock reading alone.
    """

    def __init__(
        self,
        store: ObjectStore,
        config: ResolverConfig,
        *,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.store = store
        self.config = config
        self._zone = config.zone
        self._clock = clock or (lambda: datetime.now(self._zone))

    # ── window ────────────────────────────────────────────────────────────
    def now(self) -> datetime:
        """Current time in the operational zone (naive clock values are taken as local)."""
        current = self._clock()
        if current.tzinfo is None:
            return current.replace(tzinfo=self._zone)
        return current.astimezone(self._zone)

    def query_window(self, now: Optional[datetime] = None) -> tuple[str, str]:
        """Return `(prefix, start_after)` for a listing at `now`."""
        now = now or self.now()
        prefix = streams_prefix(self.config.base_prefix, now.strftime(DATE_FORMAT))
        since = (now - timedelta(minutes=self.config.lookback_minutes)).strftime(TIMESTAMP_FORMAT)
        return prefix, START_AFTER_KEY.format(prefix=prefix, timestamp=since)

    # ── pipeline ──────────────────────────────────────────────────────────
    def list_candidates(self) -> List[ClipObject]:
        prefix, start_after = self.query_window()
        try:
            clips = self.store.list_objects(prefix, start_after=start_after, max_keys=self.config.max_keys)
        except Exception as e:
            logger.error("Listing %s failed: %s", prefix, e)
            raise StoreUnavailable(str(e) or None) from e
        # A store that ignores MaxKeys must not widen the window.
        return list(clips)[: self.config.max_keys]

    def latest_clips(self) -> Dict[CameraAngle, ClipObject]:
        """List, rank and select; raises `NoClipsFound` on an empty listing."""
        clips = self.list_candidates()
        if not clips:
            raise NoClipsFound()
        logger.info("Found %d files", len(clips))
        ranked = rank_clips(clips)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Newest listed clip recorded at %s", parse_timestamp(ranked[0].key))
        return select_latest_per_camera(
            ranked,
            scan_window=self.config.scan_window,
            angle_order=self.config.angle_order,
        )

    def resolve(self, camera: Optional[str]) -> ResolutionResult:
        """
        Resolve `camera` to a signed URL for its newest clip.

        A camera with no clip in the scanned window (including names that are
        not a known angle) resolves to the placeholder instead of failing. The name is
        matched exactly: `FRONT` or `" front"` are unknown names, not the front camera.

        Raises:
            MissingCameraParameter: `camera` is None or empty; no store call is made.
            StoreUnavailable, NoClipsFound, MalformedKey, SigningFailed.
        """
        if not camera:
            raise MissingCameraParameter()
        name = camera

        winners = self.latest_clips()
        angle = CameraAngle.from_value(name, exact=True)
        clip = winners.get(angle) if angle is not None else None

        if clip is None:
            logger.info("No recent clip for camera=%s; using placeholder", name)
            return self._placeholder(name)

        logger.info("camera=%s -> %s", name, clip.key)
        return ResolutionResult(
            camera=name,
            url=self._sign(clip.key),
            expires_in=self.config.signed_url_ttl_seconds,
            key=clip.key,
        )

    # ── helpers ───────────────────────────────────────────────────────────
    def _placeholder(self, camera: str) -> ResolutionResult:
        if self.config.placeholder_url:
            return ResolutionResult(camera=camera, url=self.config.placeholder_url, is_placeholder=True)
        key = self.config.placeholder_key
        return ResolutionResult(
            camera=camera,
            url=self._sign(key),
            expires_in=self.config.signed_url_ttl_seconds,
            key=key,
            is_placeholder=True,
        )

    def _sign(self, key: str) -> str:
        try:
            return self.store.presigned_get(key, expires_in=self.config.signed_url_ttl_seconds)
        except Exception as e:
            logger.error("Signing %s failed: %s", key, e)
            raise SigningFailed(str(e) or None) from e


__all__ = [
    "extract_timestamp",
    "parse_timestamp",
    "rank_clips",
    "match_angle",
    "select_latest_per_camera",
    "ClipResolver",
    "DEFAULT_SCAN_WINDOW",
]
