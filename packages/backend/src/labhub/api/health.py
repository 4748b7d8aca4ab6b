"""Health check endpoint.

Learn: Simple GET endpoint that verifies the server is running and the
database is reachable. Uses the request-scoped session, so tests that
override ``get_db`` check their own database.
"""

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from labhub import __version__
from labhub.auth.capabilities import public
from labhub.db.engine import get_db

router = APIRouter()


@router.get("/health", **public())
async def health_check(db: AsyncSession = Depends(get_db)):
    """Check server health and database connectivity."""
    checks = {"server": "ok", "version": __version__}

    try:
        await db.execute(text("SELECT 1"))
        checks["database"] = "ok"
    except (SQLAlchemyError, OSError) as e:
        checks["database"] = f"error: {e}"

    status = "healthy" if checks["database"] == "ok" else "degraded"
    return {"status": status, **checks}
