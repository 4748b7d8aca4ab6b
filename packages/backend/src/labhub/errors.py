"""Error types and the app-wide exception handlers.

Learn: Routes raise HTTPException for the expected 4xx cases (missing
credentials, not found, forbidden). Failures that come from outside the
request (the database or the blob store) are raised as their own
exception types and turned into responses here.

Store and storage error messages are echoed to the caller. The lab site
has no secrecy requirement on internal error text.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

logger = structlog.get_logger()


class StorageError(Exception):
    """Raised when the blob store fails to accept an upload."""


class UploadTooLarge(Exception):
    """Raised when an uploaded file exceeds the configured buffer size."""

    def __init__(self, limit: int):
        self.limit = limit
        super().__init__(f"Upload exceeds the {limit} byte limit")


# SQLSTATE class 23 codes that mean "conflicts with existing data".
_CONFLICT_SQLSTATES = ("23505", "23503")  # unique_violation, foreign_key_violation
_CONFLICT_MESSAGES = ("UNIQUE constraint failed", "FOREIGN KEY constraint failed")


def is_conflict(exc: IntegrityError) -> bool:
    """Unique or foreign-key violation, as opposed to NOT NULL or CHECK."""
    sqlstate = getattr(exc.orig, "sqlstate", None) or getattr(exc.orig, "pgcode", None)
    if sqlstate:
        return sqlstate in _CONFLICT_SQLSTATES
    return any(m in str(exc.orig) for m in _CONFLICT_MESSAGES)


async def _integrity_error(request: Request, exc: IntegrityError) -> JSONResponse:
    if not is_conflict(exc):
        return await _store_failure(request, exc)
    logger.warning("errors.conflict", path=request.url.path, error=str(exc.orig))
    return JSONResponse(status_code=409, content={"detail": str(exc.orig)})


async def _store_failure(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("errors.store_failure", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=500, content={"detail": str(exc)})


async def _storage_failure(request: Request, exc: StorageError) -> JSONResponse:
    logger.error("errors.storage_failure", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=500, content={"detail": str(exc)})


async def _upload_too_large(request: Request, exc: UploadTooLarge) -> JSONResponse:
    return JSONResponse(status_code=413, content={"detail": str(exc)})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(IntegrityError, _integrity_error)
    app.add_exception_handler(SQLAlchemyError, _store_failure)
    app.add_exception_handler(StorageError, _storage_failure)
    app.add_exception_handler(UploadTooLarge, _upload_too_large)
