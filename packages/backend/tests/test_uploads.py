"""Upload pipeline tests — bounded buffer, blob keys, error mapping."""

import io
import re

import pytest
from starlette.datastructures import Headers, UploadFile

from labhub.config import settings
from labhub.errors import StorageError, UploadTooLarge
from labhub.main import app
from labhub.storage import BlobStore, buffered, get_blob_store, make_blob_key, store_upload


def _upload(data: bytes, filename: str = "pic.png") -> UploadFile:
    return UploadFile(
        io.BytesIO(data),
        filename=filename,
        headers=Headers({"content-type": "image/png"}),
    )


class FailingStore(BlobStore):
    async def put(self, key, data, content_type):
        raise StorageError("bucket unavailable")


# ═══════════════════════════════════════════════════════════
# Keys and buffering
# ═══════════════════════════════════════════════════════════


def test_blob_key_is_prefixed_and_timestamped():
    key = make_blob_key("user-images", "me.png")
    assert re.fullmatch(r"user-images/\d{13}-me\.png", key)


def test_blob_key_strips_paths_and_unsafe_chars():
    key = make_blob_key("x", "../../etc/pass wd")
    assert key.startswith("x/")
    assert "/" not in key[2:]
    assert ".." not in key
    assert " " not in key


@pytest.mark.asyncio
async def test_buffered_reads_and_closes():
    upload = _upload(b"12345")
    async with buffered(upload, max_bytes=5) as data:
        assert data == b"12345"
    assert upload.file.closed


@pytest.mark.asyncio
async def test_buffered_rejects_oversize_and_still_closes():
    upload = _upload(b"123456")
    with pytest.raises(UploadTooLarge):
        async with buffered(upload, max_bytes=5):
            pass
    assert upload.file.closed


@pytest.mark.asyncio
async def test_buffered_closes_when_store_fails():
    upload = _upload(b"abc")
    with pytest.raises(StorageError):
        await store_upload(upload, FailingStore(), "p")
    assert upload.file.closed


@pytest.mark.asyncio
async def test_store_upload_none_when_no_file(blob_store):
    assert await store_upload(None, blob_store, "p") is None
    assert await store_upload(_upload(b"x", filename=""), blob_store, "p") is None


@pytest.mark.asyncio
async def test_store_upload_writes_local_file(blob_store):
    url = await store_upload(_upload(b"img"), blob_store, "user-images")
    assert url.startswith("http://test/uploads/user-images/")
    key = url.split("/uploads/", 1)[1]
    assert (blob_store.root / key).read_bytes() == b"img"


# ═══════════════════════════════════════════════════════════
# Through the API
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_oversize_upload_is_413(client, make_user, monkeypatch):
    monkeypatch.setattr(settings, "upload_max_bytes", 8)
    _, admin_h = await make_user(admin=True)
    r = await client.post(
        "/api/technology",
        data={"name": "Big"},
        files={"icon": ("big.png", b"x" * 64, "image/png")},
        headers=admin_h,
    )
    assert r.status_code == 413

    # Nothing was created.
    assert (await client.get("/api/technology")).json() == []


@pytest.mark.asyncio
async def test_storage_failure_is_500_with_message(client, make_user):
    app.dependency_overrides[get_blob_store] = lambda: FailingStore()
    author, headers = await make_user(team=True)
    r = await client.post(
        "/api/publications",
        data={"title": "Cover fails", "authors": str(author.id)},
        files={"coverImage": ("c.png", b"png", "image/png")},
        headers=headers,
    )
    assert r.status_code == 500
    assert r.json()["detail"] == "bucket unavailable"
