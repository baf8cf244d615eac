"""Async client for Tencent Cloud Object Storage (COS).

WHY: The recognition service fetches audio by URL, so the exported audio
is uploaded to a bucket first and handed over as a time-limited signed
URL. The object is deleted again once the run ends.

HOW: Wraps cos-python-sdk-v5's CosS3Client, which signs every request.
Blocking SDK calls run in a worker thread via asyncio.to_thread(). The
upload hands the SDK an open file so the audio is streamed, not loaded
into memory. get_presigned_url() signs locally without a network call.

RULES:
- Always use the async context manager (async with CosClient(...) as cos:)
- Keys are bucket-relative, without a leading slash
- CosServiceError and CosClientError raise ServiceError
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Callable

from qcloud_cos import CosConfig, CosS3Client
from qcloud_cos.cos_exception import CosClientError, CosServiceError

from pr_autosub.config import SIGNED_URL_EXPIRES_S, Credentials
from pr_autosub.errors import ServiceError

logger = logging.getLogger(__name__)


def _service_error(action: str, key: str, exc: Exception) -> ServiceError:
    if isinstance(exc, CosServiceError):
        return ServiceError(
            exc.get_status_code(),
            exc.get_error_msg() or "{} of {} failed".format(action, key),
            code=exc.get_error_code(),
        )
    return ServiceError(None, "{} of {} failed: {}".format(action, key, exc))


class CosClient:
    """Async client for a single COS bucket.

    RULES:
    - Use as: async with CosClient(credentials, bucket, region) as cos: ...
    - sdk_client is only passed by tests (a stand-in for CosS3Client)
    """

    def __init__(
        self,
        credentials: Credentials,
        bucket: str,
        region: str,
        sdk_client: Any = None,
    ) -> None:
        self._credentials = credentials
        self._bucket = bucket
        self._region = region
        self._injected = sdk_client
        self._client: Any = None

    async def __aenter__(self) -> CosClient:
        self._client = self._injected if self._injected is not None else self._build_sdk_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        self._client = None

    def _build_sdk_client(self) -> CosS3Client:
        config = CosConfig(
            Region=self._region,
            SecretId=self._credentials.secret_id,
            SecretKey=self._credentials.secret_key,
            Scheme="https",
        )
        return CosS3Client(config)

    def _ensure_client(self) -> Any:
        if self._client is None:
            raise RuntimeError(
                "CosClient must be used as an async context manager: "
                "async with CosClient(...) as cos: ..."
            )
        return self._client

    async def _call(self, action: str, key: str, fn: Callable[..., Any], **kwargs: Any) -> Any:
        try:
            return await asyncio.to_thread(fn, **kwargs)
        except (CosServiceError, CosClientError) as exc:
            raise _service_error(action, key, exc) from exc

    # ------------------------------------------------------------------
    # Object operations
    # ------------------------------------------------------------------

    async def put_object(self, key: str, file_path: Path) -> None:
        """Stream a local file to ``key``.

        Raises:
            ServiceError: when the SDK reports a client or service error.
            OSError: when the local file cannot be opened.
        """
        client = self._ensure_client()
        with open(file_path, "rb") as body:
            await self._call(
                "upload", key, client.put_object, Bucket=self._bucket, Body=body, Key=key
            )
        logger.info("Uploaded %s", key)

    def get_object_url(self, key: str, expires_s: int = SIGNED_URL_EXPIRES_S) -> str:
        """Return a pre-signed GET URL for ``key`` valid for expires_s seconds."""
        client = self._ensure_client()
        try:
            return client.get_presigned_url(
                Bucket=self._bucket, Key=key, Method="GET", Expired=expires_s
            )
        except CosClientError as exc:
            raise _service_error("signing", key, exc) from exc

    async def delete_object(self, key: str) -> None:
        """Delete ``key``. Missing objects are not an error (COS answers 204)."""
        client = self._ensure_client()
        await self._call("delete", key, client.delete_object, Bucket=self._bucket, Key=key)
