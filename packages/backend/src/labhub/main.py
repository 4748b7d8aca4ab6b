"""FastAPI application factory.

Learn: App factory pattern — create_app() returns a configured FastAPI
instance. Lifespan manages startup/shutdown. Middleware, CORS, error
handlers, routers and the local upload mount are all registered here;
each concern lives in its own module.
"""

from contextlib import asynccontextmanager
from pathlib import Path

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from labhub import __version__
from labhub.api import api_router
from labhub.config import settings
from labhub.errors import register_exception_handlers
from labhub.middleware.request_id import RequestIdMiddleware
from labhub.middleware.security import SecurityHeadersMiddleware

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Learn: Anything before `yield` runs at startup, after `yield` runs
    at shutdown.
    """
    logger.info(
        "labhub.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
        storage_backend=settings.storage_backend,
        token_expiry_minutes=settings.token_expire_minutes,
    )

    yield

    logger.info("labhub.shutdown")

    from labhub.db.engine import engine
    await engine.dispose()


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    app = FastAPI(
        title="LabHub",
        description="Membership and content backend for an academic lab website",
        version=__version__,
        lifespan=lifespan,
    )

    # ── Middleware stack ──────────────────────────────────────
    # Starlette middleware executes in reverse order of registration.
    # Request flow: CORS → Security → RequestId → handler
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Authorization", "X-Request-ID"],
    )

    register_exception_handlers(app)

    app.include_router(api_router)

    # Uploaded files are served by the app itself only with the local store.
    if settings.storage_backend == "local":
        app.mount(
            "/uploads",
            StaticFiles(directory=Path(settings.upload_dir), check_dir=False),
            name="uploads",
        )

    return app


# Default app instance (used by uvicorn: labhub.main:app)
app = create_app()
