"""User API — registration, login, profile.

Learn: Routes for accounts:
- POST /users/register → create an account (optional profile image)
- POST /users/login → email/password → {user, token}
- PATCH /users → self-service profile update (password re-hashed)
- GET /user, /user/:id, /admins → public listings
- GET /isAdmin, /userid → small helpers the frontend uses after login

No route changes ``isAdmin``; see ``labhub promote``.
"""

import uuid

import structlog
from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from labhub.api.payload import read_payload
from labhub.auth.capabilities import Capability, guarded, public
from labhub.auth.dependencies import get_current_user
from labhub.auth.jwt import TokenIssuer, get_token_issuer
from labhub.db.engine import get_db
from labhub.db.models import User
from labhub.errors import StorageError
from labhub.schemas.user import (
    AdminStatus,
    LoginRequest,
    LoginResponse,
    UserIdRead,
    UserRead,
    UserRegister,
    UserUpdate,
)
from labhub.services.user_service import EmailTakenError, UserService
from labhub.storage import BlobStore, get_blob_store, store_upload

logger = structlog.get_logger()

router = APIRouter()

IMAGE_PREFIX = "user-images"


def _svc(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(db)


# ─── Register ────────────────────────────────────────────


@router.post("/users/register", response_model=UserRead, status_code=201, **public())
async def register(
    request: Request,
    svc: UserService = Depends(_svc),
    store: BlobStore = Depends(get_blob_store),
):
    """Create a new account. Accepts multipart (with ``image``) or JSON."""
    body, files = await read_payload(request, UserRegister, file_fields=("image",))
    # Checked before the upload so a rejected registration stores nothing.
    if await svc.get_by_email(body.email):
        raise HTTPException(status_code=409, detail="Email already registered")

    try:
        image_url = await store_upload(files["image"], store, IMAGE_PREFIX)
        user = await svc.register(body, image_url=image_url)
    except EmailTakenError:
        raise HTTPException(status_code=409, detail="Email already registered")
    except (SQLAlchemyError, StorageError) as e:
        logger.error("users.register_failed", email=body.email, error=str(e))
        raise

    logger.info("users.registered", user_id=str(user.id))
    return user


# ─── Login ───────────────────────────────────────────────


@router.post("/users/login", response_model=LoginResponse, **public())
async def login(
    body: LoginRequest,
    response: Response,
    svc: UserService = Depends(_svc),
    issuer: TokenIssuer = Depends(get_token_issuer),
):
    """Login with email and password → user record and bearer token."""
    user = await svc.authenticate(body.email, body.password)
    if user is None:
        raise HTTPException(status_code=400, detail="Invalid email or password")

    token = issuer.issue(str(user.id), user.role)
    response.headers["Authorization"] = token
    return LoginResponse(user=UserRead.model_validate(user), token=token)


# ─── Profile ─────────────────────────────────────────────


@router.patch("/users", response_model=UserRead, **guarded(Capability.AUTHENTICATED))
async def update_profile(
    request: Request,
    user: User = Depends(get_current_user),
    svc: UserService = Depends(_svc),
    store: BlobStore = Depends(get_blob_store),
):
    """Update the caller's own profile, optionally with a new image."""
    patch, files = await read_payload(request, UserUpdate, file_fields=("image",))
    image_url = await store_upload(files["image"], store, IMAGE_PREFIX)
    return await svc.update_profile(user, patch, image_url=image_url)


# ─── Listings ────────────────────────────────────────────


@router.get("/user", response_model=list[UserRead], **public())
async def list_users(svc: UserService = Depends(_svc)):
    return await svc.list_users()


@router.get("/user/{user_id}", response_model=UserRead, **public())
async def get_user(user_id: uuid.UUID, svc: UserService = Depends(_svc)):
    user = await svc.get(user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.get("/admins", response_model=list[UserRead], **public())
async def list_admins(svc: UserService = Depends(_svc)):
    admins = await svc.list_admins()
    if not admins:
        raise HTTPException(status_code=404, detail="No admins found")
    return admins


@router.get("/isAdmin", response_model=AdminStatus, **guarded(Capability.AUTHENTICATED))
async def is_admin(user: User = Depends(get_current_user)):
    return AdminStatus(
        message="User is an admin" if user.is_admin else "User is not an admin",
        is_admin=user.is_admin,
    )


@router.get("/userid", response_model=UserIdRead, **guarded(Capability.AUTHENTICATED))
async def user_id(user: User = Depends(get_current_user)):
    return UserIdRead(id=user.id)
