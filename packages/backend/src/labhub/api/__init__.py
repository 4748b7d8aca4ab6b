"""API route aggregation.

All routers registered here get mounted in main.py under ``/api``.

Learn: Access control is not applied at the include_router level. Each
route declares its own capabilities with ``guarded()`` / ``public()``,
because most collections mix open reads with protected writes.
"""

from fastapi import APIRouter

from labhub.api.content import router as content_router
from labhub.api.health import router as health_router
from labhub.api.publications import router as publications_router
from labhub.api.team import router as team_router
from labhub.api.users import router as users_router

api_router = APIRouter(prefix="/api")

api_router.include_router(health_router, tags=["health"])
api_router.include_router(users_router, tags=["users"])
api_router.include_router(team_router, tags=["team"])
api_router.include_router(publications_router, tags=["publications"])
api_router.include_router(content_router, tags=["content"])
