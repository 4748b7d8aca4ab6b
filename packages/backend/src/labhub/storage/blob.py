"""Blob stores for uploaded images and icons.

Learn: Two backends behind one async ``put`` method:
- LocalBlobStore writes under ``upload_dir`` and the app serves it at /uploads
- S3BlobStore uploads to an S3-compatible bucket (AWS, MinIO, R2) via boto3

Keys are ``<prefix>/<epoch-millis>-<filename>``, so repeated uploads of
the same file name never overwrite each other. There are no retries: a
failed upload surfaces immediately as StorageError.
"""

import asyncio
import re
import time
from functools import lru_cache
from pathlib import Path
from typing import Optional

import boto3
import structlog
from botocore.exceptions import BotoCoreError, ClientError

from labhub.config import settings
from labhub.errors import StorageError

logger = structlog.get_logger()

_UNSAFE = re.compile(r"[^A-Za-z0-9._-]+")


def make_blob_key(prefix: str, filename: str) -> str:
    """Build a timestamp-keyed object name for an uploaded file."""
    name = Path(filename or "upload").name
    name = _UNSAFE.sub("_", name).strip("._") or "upload"
    return f"{prefix}/{int(time.time() * 1000)}-{name}"


class BlobStore:
    """Interface: store bytes under a key, return a public URL."""

    async def put(self, key: str, data: bytes, content_type: str) -> str:
        raise NotImplementedError


class LocalBlobStore(BlobStore):
    """Writes blobs to the local filesystem.

    Learn: File writes are blocking, so they run in a worker thread to
    keep the event loop free.
    """

    def __init__(self, root: str | Path, base_url: str):
        self.root = Path(root)
        self.base_url = base_url.rstrip("/")

    def _write(self, key: str, data: bytes) -> None:
        path = self.root / key
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)

    async def put(self, key: str, data: bytes, content_type: str) -> str:
        try:
            await asyncio.to_thread(self._write, key, data)
        except OSError as e:
            raise StorageError(f"Failed to store {key}: {e}")
        logger.info("storage.stored", key=key, size_bytes=len(data))
        return f"{self.base_url}/uploads/{key}"


class S3BlobStore(BlobStore):
    """Uploads blobs to an S3-compatible bucket with public-read access."""

    def __init__(
        self,
        bucket: str,
        region: str,
        endpoint_url: Optional[str] = None,
        public_url: Optional[str] = None,
        access_key_id: Optional[str] = None,
        secret_access_key: Optional[str] = None,
    ):
        self.bucket = bucket
        self.region = region
        self.endpoint_url = endpoint_url
        self.public_url = public_url.rstrip("/") if public_url else None
        self._access_key_id = access_key_id
        self._secret_access_key = secret_access_key
        self._client = None

    def _get_client(self):
        """Lazy initialization of the S3 client."""
        if self._client is None:
            kwargs = {"region_name": self.region}
            if self.endpoint_url:
                kwargs["endpoint_url"] = self.endpoint_url
            # Without explicit keys boto3 falls back to the instance role.
            if self._access_key_id and self._secret_access_key:
                kwargs["aws_access_key_id"] = self._access_key_id
                kwargs["aws_secret_access_key"] = self._secret_access_key
            self._client = boto3.client("s3", **kwargs)
        return self._client

    def url_for(self, key: str) -> str:
        if self.public_url:
            return f"{self.public_url}/{key}"
        if self.endpoint_url:
            return f"{self.endpoint_url.rstrip('/')}/{self.bucket}/{key}"
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"

    async def put(self, key: str, data: bytes, content_type: str) -> str:
        client = self._get_client()
        try:
            await asyncio.to_thread(
                client.put_object,
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
                ACL="public-read",
            )
        except (ClientError, BotoCoreError) as e:
            logger.error("storage.upload_failed", key=key, error=str(e))
            raise StorageError(f"Failed to upload {key}: {e}")
        logger.info("storage.uploaded", bucket=self.bucket, key=key, size_bytes=len(data))
        return self.url_for(key)


@lru_cache
def get_blob_store() -> BlobStore:
    """FastAPI dependency — the configured blob store."""
    if settings.storage_backend == "s3":
        return S3BlobStore(
            bucket=settings.s3_bucket,
            region=settings.s3_region,
            endpoint_url=settings.s3_endpoint_url,
            public_url=settings.s3_public_url,
            access_key_id=settings.aws_access_key_id,
            secret_access_key=settings.aws_secret_access_key,
        )
    return LocalBlobStore(settings.upload_dir, settings.public_base_url)
