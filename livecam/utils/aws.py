# livecam/utils/aws.py
from __future__ import annotations

"""
🧊 livecam • S3 Utilities
=========================

Thin boto3 wrapper implementing the `ObjectStore` capability:

- `list_objects(prefix, start_after=..., max_keys=...)` → one bounded
  ListObjectsV2 page as `ClipObject`s
- `presigned_get(key, expires_in=...)` → short-lived SigV4 GET URL

🎯 Goals
--------
- Explicit timeouts + bounded transport retries (from settings)
- Works against AWS and S3-compatible endpoints (`S3_CUSTOM_ENDPOINT`);
  always path-style addressing, so bucket names with dots sign cleanly
- Pluggable creds (env / role / IRSA) with explicit override if provided
- Zero secret leakage in logs; signed URLs are never logged

Implementation notes
--------------------
Listed keys are authoritative and are signed exactly as returned; validation
only rejects empty keys and path traversal. Every botocore failure surfaces
as `S3StorageError` so callers map one exception type.
"""

from typing import Any, Dict, List, Optional
import logging

import boto3
from botocore.config import Config as BotoConfig
from pydantic import SecretStr

from livecam.core.config import Settings, settings as default_settings
from livecam.schemas.clips import ClipObject

logger = logging.getLogger(__name__)

# ─────────────────────────────────────────────────────────────────────────────
# 🧱 Exceptions
# ─────────────────────────────────────────────────────────────────────────────

class S3StorageError(RuntimeError):
    """Raised when a storage operation fails (network, auth, policy, etc.)."""


# ─────────────────────────────────────────────────────────────────────────────
# 🧰 Key and value validation
# ─────────────────────────────────────────────────────────────────────────────

def _validate_key(key: str) -> str:
    """
    Reject keys we must never sign.

    Raises
    ------
    S3StorageError
        If key is empty or contains a `..` path segment.
    """
    k = str(key or "").strip()
    if not k:
        raise S3StorageError("Invalid storage key: empty")
    if ".." in k.split("/"):
        raise S3StorageError("Invalid storage key: path traversal detected")
    return k


def _secret_value(v: Optional[SecretStr | str]) -> Optional[str]:
    """Return the underlying secret string without raising if not SecretStr."""
    if v is None:
        return None
    return v.get_secret_value() if isinstance(v, SecretStr) else str(v)


# ─────────────────────────────────────────────────────────────────────────────
# 📦 S3 Client
# ─────────────────────────────────────────────────────────────────────────────

class S3Client:
    """
    S3 wrapper bound to one bucket.

    Parameters
    ----------
    bucket : str | None
        Recordings bucket. Defaults to `settings.S3_BUCKET_NAME`.
    region_name : str | None
        Defaults to `settings.AWS_REGION`.
    endpoint_url : str | None
        Custom S3-compatible endpoint. Defaults to `settings.S3_CUSTOM_ENDPOINT`.
    settings : Settings | None
        Source of credentials and timeouts; defaults to the process settings.
    client : Any | None
        Pre-built boto3 client (tests, or sharing a client across wrappers).

    Notes
    -----
    * Credentials: explicit `AWS_ACCESS_KEY_ID` + `AWS_SECRET_ACCESS_KEY`
      win; otherwise the standard AWS credential chain is used.
    """

    def __init__(
        self,
        bucket: Optional[str] = None,
        *,
        region_name: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        settings: Optional[Settings] = None,
        client: Any = None,
    ) -> None:
        cfg_src = settings or default_settings

        self.bucket = bucket or cfg_src.S3_BUCKET_NAME
        if not self.bucket:
            raise S3StorageError("S3_BUCKET_NAME not configured")

        self.region = region_name or cfg_src.AWS_REGION
        endpoint_cfg = endpoint_url or cfg_src.S3_CUSTOM_ENDPOINT

        if client is not None:
            self.client = client
        else:
            boto_cfg = BotoConfig(
                signature_version="s3v4",
                retries={"max_attempts": cfg_src.S3_MAX_ATTEMPTS, "mode": "standard"},
                connect_timeout=cfg_src.S3_CONNECT_TIMEOUT,
                read_timeout=cfg_src.S3_READ_TIMEOUT,
                s3={"addressing_style": "path"},
            )

            client_kwargs: Dict[str, Any] = {"config": boto_cfg, "region_name": self.region}
            if endpoint_cfg:
                client_kwargs["endpoint_url"] = endpoint_cfg

            ak = cfg_src.AWS_ACCESS_KEY_ID
            sk = _secret_value(cfg_src.AWS_SECRET_ACCESS_KEY)
            st = _secret_value(cfg_src.AWS_SESSION_TOKEN)
            if ak and sk:
                client_kwargs["aws_access_key_id"] = ak
                client_kwargs["aws_secret_access_key"] = sk
                if st:
                    client_kwargs["aws_session_token"] = st

            try:
                self.client = boto3.client("s3", **client_kwargs)
            except Exception as e:  # pragma: no cover
                raise S3StorageError(f"Failed to create S3 client: {e}") from e

        self._repr = f"S3Client(bucket={self.bucket}, region={self.region}, endpoint={'yes' if endpoint_cfg else 'no'})"

    # ────────────────────────────────────────────────────────────────────────
    # 📜 Listing
    # ────────────────────────────────────────────────────────────────────────

    def list_objects(self, prefix: str, *, start_after: str, max_keys: int) -> List[ClipObject]:
        """
        Fetch a single ListObjectsV2 page.

        Parameters
        ----------
        prefix : str
            Key prefix to list under.
        start_after : str
            Return only keys lexically greater than this.
        max_keys : int
            Page size; no continuation tokens are followed.

        Returns
        -------
        list[ClipObject]
            Objects in S3 (ascending key) order.

        Raises
        ------
        S3StorageError
            On any listing failure.
        """
        params: Dict[str, Any] = {
            "Bucket": self.bucket,
            "Prefix": prefix,
            "MaxKeys": int(max_keys),
        }
        if start_after:
            params["StartAfter"] = start_after

        try:
            resp = self.client.list_objects_v2(**params)
        except Exception as e:
            raise S3StorageError(f"Failed to list objects: {e}") from e

        return [
            ClipObject(key=obj["Key"], last_modified=obj.get("LastModified"), size=obj.get("Size"))
            for obj in resp.get("Contents", [])
        ]

    # ────────────────────────────────────────────────────────────────────────
    # 🔐 Signed URL helpers
    # ────────────────────────────────────────────────────────────────────────

    def presigned_get(self, key: str, *, expires_in: int = 5) -> str:
        """
        Generate a short-lived **presigned GET** URL.

        Parameters
        ----------
        key : str
            Object key, signed as-is.
        expires_in : int
            TTL seconds.

        Raises
        ------
        S3StorageError
            On signing failure or invalid key.
        """
        k = _validate_key(key)
        try:
            return self.client.generate_presigned_url(
                ClientMethod="get_object",
                Params={"Bucket": self.bucket, "Key": k},
                ExpiresIn=int(expires_in),
            )
        except Exception as e:
            raise S3StorageError(f"Failed to create presigned GET: {e}") from e

    def __repr__(self) -> str:  # pragma: no cover
        return self._repr


__all__ = ["S3Client", "S3StorageError"]
