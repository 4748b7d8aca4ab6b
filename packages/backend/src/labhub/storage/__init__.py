"""Object storage for uploaded images and icons."""

from labhub.storage.blob import (
    BlobStore,
    LocalBlobStore,
    S3BlobStore,
    get_blob_store,
    make_blob_key,
)
from labhub.storage.uploads import buffered, store_upload

__all__ = [
    "BlobStore",
    "LocalBlobStore",
    "S3BlobStore",
    "buffered",
    "get_blob_store",
    "make_blob_key",
    "store_upload",
]
