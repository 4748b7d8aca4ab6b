"""The upload step: buffer an incoming file, hand it to the blob store.

Learn: The whole file is held in memory between the request body and
the blob store, so the buffer is capped (LABHUB_UPLOAD_MAX_BYTES) and
the upload is always closed when the scope exits, whether the store
call succeeded or not.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from starlette.datastructures import UploadFile

from labhub.config import settings
from labhub.errors import UploadTooLarge
from labhub.storage.blob import BlobStore, make_blob_key


@asynccontextmanager
async def buffered(upload: UploadFile, max_bytes: int) -> AsyncIterator[bytes]:
    """Read an upload into memory, refusing anything over ``max_bytes``."""
    try:
        data = await upload.read(max_bytes + 1)
        if len(data) > max_bytes:
            raise UploadTooLarge(max_bytes)
        yield data
    finally:
        await upload.close()


async def store_upload(
    upload: Optional[UploadFile],
    store: BlobStore,
    prefix: str,
    max_bytes: Optional[int] = None,
) -> Optional[str]:
    """Forward an optional upload to the blob store.

    Returns the public URL, or None when no file was sent.
    """
    if upload is None or not upload.filename:
        return None
    limit = max_bytes if max_bytes is not None else settings.upload_max_bytes
    async with buffered(upload, limit) as data:
        key = make_blob_key(prefix, upload.filename)
        return await store.put(
            key, data, upload.content_type or "application/octet-stream"
        )
