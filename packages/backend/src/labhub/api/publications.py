"""Publication API routes.

Learn: Creating and editing publications needs a roster row; editing
(and reading one by id) additionally needs the caller to be one of the
registered authors. The listing routes are public:
- GET /publications → five most recent
- GET /publications/year/:year → exact year match
- GET /publications/my → the caller's own (team members only)

``/publications/my`` is declared before ``/publications/{id}`` so the
literal path wins.
"""

import uuid

import structlog
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from labhub.api.payload import read_payload
from labhub.auth.capabilities import Capability, guarded, public
from labhub.auth.dependencies import ensure_author, get_current_user
from labhub.db.engine import get_db
from labhub.db.models import User
from labhub.errors import StorageError
from labhub.schemas.publication import (
    PublicationCreate,
    PublicationRead,
    PublicationUpdate,
)
from labhub.services.publication_service import PublicationService
from labhub.storage import BlobStore, get_blob_store, store_upload

logger = structlog.get_logger()

router = APIRouter()

COVER_FIELD = "coverImage"
COVER_PREFIX = "cover-images"


def _svc(db: AsyncSession = Depends(get_db)) -> PublicationService:
    return PublicationService(db)


@router.post(
    "/publications",
    response_model=PublicationRead,
    status_code=201,
    **guarded(Capability.TEAM_MEMBER),
)
async def create_publication(
    request: Request,
    svc: PublicationService = Depends(_svc),
    store: BlobStore = Depends(get_blob_store),
):
    """Add a publication. At least one registered author is required."""
    body, files = await read_payload(request, PublicationCreate, file_fields=(COVER_FIELD,))
    cover_url = await store_upload(files[COVER_FIELD], store, COVER_PREFIX)
    return await svc.create(body, cover_image=cover_url)


@router.get("/publications", response_model=list[PublicationRead], **public())
async def recent_publications(svc: PublicationService = Depends(_svc)):
    return await svc.recent()


@router.get("/publications/year/{year}", response_model=list[PublicationRead], **public())
async def publications_by_year(year: int, svc: PublicationService = Depends(_svc)):
    return await svc.by_year(year)


@router.get(
    "/publications/my",
    response_model=list[PublicationRead],
    **guarded(Capability.TEAM_MEMBER),
)
async def my_publications(
    user: User = Depends(get_current_user),
    svc: PublicationService = Depends(_svc),
):
    return await svc.by_author(user.id)


@router.patch(
    "/publications/{publication_id}",
    response_model=PublicationRead,
    **guarded(Capability.TEAM_MEMBER, Capability.RESOURCE_OWNER),
)
async def update_publication(
    publication_id: uuid.UUID,
    request: Request,
    user: User = Depends(get_current_user),
    svc: PublicationService = Depends(_svc),
    store: BlobStore = Depends(get_blob_store),
):
    """Edit a publication. Only listed authors may edit."""
    publication = await svc.get(publication_id)
    if publication is None:
        raise HTTPException(status_code=404, detail="Publication not found")
    ensure_author(publication, user)

    patch, files = await read_payload(request, PublicationUpdate, file_fields=(COVER_FIELD,))
    # A failed flush expires every loaded row; read ids for logging up front.
    user_id = str(user.id)
    try:
        cover_url = await store_upload(files[COVER_FIELD], store, COVER_PREFIX)
        return await svc.update(publication, patch, cover_image=cover_url)
    except (SQLAlchemyError, StorageError) as e:
        logger.error(
            "publications.update_failed",
            publication_id=str(publication_id),
            user_id=user_id,
            error=str(e),
        )
        raise


@router.get(
    "/publications/{publication_id}",
    response_model=PublicationRead,
    **guarded(Capability.AUTHENTICATED, Capability.RESOURCE_OWNER),
)
async def get_publication(
    publication_id: uuid.UUID,
    user: User = Depends(get_current_user),
    svc: PublicationService = Depends(_svc),
):
    """Fetch one publication for editing. Authors only."""
    publication = await svc.get(publication_id)
    if publication is None:
        raise HTTPException(status_code=404, detail="Publication not found")
    ensure_author(publication, user)
    return publication
