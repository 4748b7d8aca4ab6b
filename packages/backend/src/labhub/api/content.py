"""Flat site-content API routes.

Learn: Address, role, about text, technology, tutorial and notes all
expose the same three routes:
- POST /<name> → create (admin)
- GET /<name> → list everything (public)
- PATCH /<name>/:id → typed partial update (admin)

Rather than six near-identical modules, each collection is described
once as a ``ContentResource`` and ``build_router`` stamps out its routes.
Collections with an icon accept it as a multipart upload on create.
"""

import uuid
from dataclasses import dataclass
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from labhub.api.payload import read_payload
from labhub.auth.capabilities import Capability, guarded, public
from labhub.db.engine import get_db
from labhub.db.models import AboutText, Address, Note, Role, Technology, Tutorial
from labhub.schemas import content as schemas
from labhub.services.content_service import ContentService
from labhub.storage import BlobStore, get_blob_store, store_upload


@dataclass(frozen=True)
class ContentResource:
    name: str
    path: str
    model: type
    create_schema: type
    update_schema: type
    read_schema: type
    label: str
    upload_field: Optional[str] = None  # multipart field name
    upload_attr: Optional[str] = None  # model column the URL lands in
    blob_prefix: Optional[str] = None


RESOURCES = (
    ContentResource(
        name="address",
        path="/address",
        model=Address,
        create_schema=schemas.AddressCreate,
        update_schema=schemas.AddressUpdate,
        read_schema=schemas.AddressRead,
        label="Address",
    ),
    ContentResource(
        name="role",
        path="/role",
        model=Role,
        create_schema=schemas.RoleCreate,
        update_schema=schemas.RoleUpdate,
        read_schema=schemas.RoleRead,
        label="Role",
    ),
    ContentResource(
        name="about",
        path="/about",
        model=AboutText,
        create_schema=schemas.AboutTextCreate,
        update_schema=schemas.AboutTextUpdate,
        read_schema=schemas.AboutTextRead,
        label="About text",
    ),
    ContentResource(
        name="technology",
        path="/technology",
        model=Technology,
        create_schema=schemas.TechnologyCreate,
        update_schema=schemas.TechnologyUpdate,
        read_schema=schemas.TechnologyRead,
        label="Technology",
        upload_field="icon",
        upload_attr="icon",
        blob_prefix="tech-icons",
    ),
    ContentResource(
        name="tutorial",
        path="/tutorial",
        model=Tutorial,
        create_schema=schemas.TutorialCreate,
        update_schema=schemas.TutorialUpdate,
        read_schema=schemas.TutorialRead,
        label="Tutorial",
        upload_field="newIcon",
        upload_attr="new_icon",
        blob_prefix="tutorial-icons",
    ),
    ContentResource(
        name="notes",
        path="/notes",
        model=Note,
        create_schema=schemas.NoteCreate,
        update_schema=schemas.NoteUpdate,
        read_schema=schemas.NoteRead,
        label="Note",
        upload_field="newIcon",
        upload_attr="new_icon",
        blob_prefix="note-icons",
    ),
)


def _add_routes(router: APIRouter, res: ContentResource) -> None:
    def _svc(db: AsyncSession = Depends(get_db)) -> ContentService:
        return ContentService(db, res.model)

    file_fields = (res.upload_field,) if res.upload_field else ()

    @router.post(
        res.path,
        response_model=res.read_schema,
        status_code=201,
        name=f"create_{res.name}",
        **guarded(Capability.ADMIN),
    )
    async def create_item(
        request: Request,
        svc: ContentService = Depends(_svc),
        store: BlobStore = Depends(get_blob_store),
    ):
        body, files = await read_payload(request, res.create_schema, file_fields=file_fields)
        data = body.model_dump()
        if res.upload_field:
            data[res.upload_attr] = await store_upload(
                files[res.upload_field], store, res.blob_prefix
            )
        return await svc.create(data)

    @router.get(
        res.path,
        response_model=list[res.read_schema],
        name=f"list_{res.name}",
        **public(),
    )
    async def list_items(svc: ContentService = Depends(_svc)):
        return await svc.list_all()

    @router.patch(
        f"{res.path}/{{item_id}}",
        response_model=res.read_schema,
        name=f"update_{res.name}",
        **guarded(Capability.ADMIN),
    )
    async def update_item(
        item_id: uuid.UUID,
        body: res.update_schema,
        svc: ContentService = Depends(_svc),
    ):
        item = await svc.update(item_id, body.changes())
        if item is None:
            raise HTTPException(status_code=404, detail=f"{res.label} not found")
        return item


def build_router(resources=RESOURCES) -> APIRouter:
    router = APIRouter()
    for res in resources:
        _add_routes(router, res)
    return router


router = build_router()
