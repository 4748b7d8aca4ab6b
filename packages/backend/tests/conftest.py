"""Test fixtures — an in-memory database per test, real auth.

Learn: Testing pattern for async SQLAlchemy + FastAPI:

1. Each test gets its own in-memory SQLite engine (aiosqlite). StaticPool
   keeps the single connection alive so every session sees the same DB.
2. The app's get_db is overridden to open one session per request from
   that engine, exactly like production, just against a throwaway schema.
3. The blob store is a LocalBlobStore under tmp_path.

Auth is NOT mocked: ``make_user`` writes a real user row (and optionally
a roster row) and returns headers carrying a real signed token, so the
access-control gate runs for every request.

The environment is set before the app is imported: settings are read
once at import time.
"""

import os

os.environ["LABHUB_DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["LABHUB_ENVIRONMENT"] = "test"
os.environ["LABHUB_STORAGE_BACKEND"] = "local"

import uuid  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from labhub.auth.jwt import get_token_issuer  # noqa: E402
from labhub.auth.password import hash_password  # noqa: E402
from labhub.db.engine import get_db  # noqa: E402
from labhub.db.models import Base, TeamMember, User  # noqa: E402
from labhub.main import app  # noqa: E402
from labhub.storage import LocalBlobStore, get_blob_store  # noqa: E402

TEST_DB_URL = "sqlite+aiosqlite://"
TEST_PASSWORD = "correct-horse-battery"


@pytest_asyncio.fixture()
async def engine():
    eng = create_async_engine(
        TEST_DB_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield eng
    finally:
        await eng.dispose()


@pytest.fixture()
def sessions(engine):
    """Session factory bound to the per-test database."""
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture()
def blob_store(tmp_path):
    return LocalBlobStore(tmp_path / "uploads", "http://test")


@pytest_asyncio.fixture()
async def client(sessions, blob_store):
    """HTTP client against the app with DB and blob store overridden."""

    async def override_get_db():
        async with sessions() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_blob_store] = lambda: blob_store

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


def auth_headers(user_id) -> dict:
    token = get_token_issuer().issue(str(user_id), "PhD Student")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def make_user(sessions):
    """Factory: create a stored user, return (user, auth headers).

    ``team=True`` also puts the user on the roster; ``admin=True`` sets
    the admin flag the way ``labhub promote`` does.
    """

    async def _make(
        name: str = "Test User",
        email: str | None = None,
        password: str = TEST_PASSWORD,
        role: str = "PhD Student",
        admin: bool = False,
        team: bool = False,
        alumni: bool = False,
    ):
        async with sessions() as db:
            user = User(
                name=name,
                email=email or f"user-{uuid.uuid4().hex[:8]}@lab.example.edu",
                password_hash=hash_password(password),
                role=role,
                is_admin=admin,
            )
            db.add(user)
            await db.flush()
            if team:
                db.add(TeamMember(user_id=user.id, added_by=user.id, is_alumni=alumni))
            await db.commit()
        return user, auth_headers(user.id)

    return _make
