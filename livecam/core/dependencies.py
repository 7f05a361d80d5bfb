# livecam/core/dependencies.py
from __future__ import annotations

"""
Request dependencies — livecam
==============================

FastAPI dependencies that hand routes a ready `ClipResolver`.

- The resolver configuration is frozen from settings on first use and shared
  by every request afterwards.
- The boto3-backed store is built once per process (boto3 clients are
  thread-safe); a missing bucket surfaces as `StoreUnavailable`.
- Tests swap either piece via `app.dependency_overrides`.
"""

from functools import lru_cache
import logging

from fastapi import Depends

from livecam.core.config import ResolverConfig, settings
from livecam.core.exceptions import StoreUnavailable
from livecam.core.storage import ObjectStore
from livecam.services.clip_service import ClipResolver
from livecam.utils.aws import S3Client, S3StorageError

logger = logging.getLogger(__name__)

__all__ = ["get_resolver_config", "get_object_store", "get_clip_resolver"]


@lru_cache(maxsize=1)
def get_resolver_config() -> ResolverConfig:
    return settings.resolver_config()


@lru_cache(maxsize=1)
def _s3_client() -> S3Client:
    return S3Client(settings=settings)


def get_object_store() -> ObjectStore:
    """Return the process-wide S3 store or fail the request with a 500."""
    try:
        return _s3_client()
    except S3StorageError as e:
        logger.error("Object store not available: %s", e)
        raise StoreUnavailable(str(e)) from e


def get_clip_resolver(
    store: ObjectStore = Depends(get_object_store),
    config: ResolverConfig = Depends(get_resolver_config),
) -> ClipResolver:
    return ClipResolver(store, config)
