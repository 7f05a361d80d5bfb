from __future__ import annotations

"""
livecam • Recording Layout & Store Capability
=============================================

Documented key layout (single private bucket, written by the recorders):

    s3://{bucket}/
      {base_prefix}/streams/{YYYY-MM-DD}/{YYYY-MM-DD_HH-MM-SS}-{angle}.mp4
      placeholder.mp4

- `{angle}` is one of `front`, `back`, `left`, `right`.
- The embedded timestamp is zero-padded and fixed-width, so S3's lexical key
  order (and `StartAfter`) is chronological order.
- Dates and timestamps are in the operational zone, not UTC.

Access
------
- All objects private; the service hands out short-lived presigned GETs.

`ObjectStore` is the capability the clip resolver depends on. `S3Client`
(livecam.utils.aws) satisfies it; tests use an in-memory fake.
"""

from typing import List, Protocol, runtime_checkable

from livecam.schemas.clips import ClipObject


# Prefix / key templates
STREAMS_PREFIX = "{base_prefix}/streams/{date}"
START_AFTER_KEY = "{prefix}/{timestamp}"

DATE_FORMAT = "%Y-%m-%d"
TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"


def streams_prefix(base_prefix: str, date: str) -> str:
    """Listing prefix for one calendar day."""
    return STREAMS_PREFIX.format(base_prefix=base_prefix, date=date)


@runtime_checkable
class ObjectStore(Protocol):
    """List + presign capability over a single bucket. Both calls may raise."""

    def list_objects(self, prefix: str, *, start_after: str, max_keys: int) -> List[ClipObject]:
        ...

    def presigned_get(self, key: str, *, expires_in: int) -> str:
        ...


__all__ = [
    "ObjectStore",
    "STREAMS_PREFIX",
    "START_AFTER_KEY",
    "DATE_FORMAT",
    "TIMESTAMP_FORMAT",
    "streams_prefix",
]
