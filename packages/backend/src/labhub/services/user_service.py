"""User service — accounts, credentials, and profiles.

Learn: Service layer separates business logic from HTTP routing.
API routes call services, services call the database. The CLI uses the
same service to flip the admin flag, which no HTTP route can do.
"""

import uuid
from typing import Optional

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from labhub.auth.password import hash_password, verify_password
from labhub.db.models import User
from labhub.schemas.user import UserRegister, UserUpdate

logger = structlog.get_logger()


class EmailTakenError(Exception):
    """Raised when registering an email that already has an account."""


class UserService:
    """Business logic for user accounts."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, user_id: uuid.UUID) -> Optional[User]:
        return await self.db.get(User, user_id)

    async def get_by_email(self, email: str) -> Optional[User]:
        # Exact, case-sensitive match.
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalars().first()

    async def list_users(self) -> list[User]:
        result = await self.db.execute(select(User).order_by(User.created_at))
        return list(result.scalars().all())

    async def list_admins(self) -> list[User]:
        result = await self.db.execute(
            select(User).where(User.is_admin.is_(True)).order_by(User.created_at)
        )
        return list(result.scalars().all())

    # ─── Credentials ────────────────────────────────────

    async def register(
        self, data: UserRegister, image_url: Optional[str] = None
    ) -> User:
        """Create an account. New accounts are never admins."""
        if await self.get_by_email(data.email):
            raise EmailTakenError(data.email)

        profile = data.model_dump(
            mode="json", include={"education", "experience", "links"}
        )
        user = User(
            name=data.name,
            email=data.email,
            role=data.role,
            address=data.address,
            bio=data.bio,
            image=image_url,
            education=profile["education"],
            experience=profile["experience"],
            links=profile["links"],
            password_hash=hash_password(data.password),
        )
        self.db.add(user)
        await self.db.commit()
        return user

    async def authenticate(self, email: str, password: str) -> Optional[User]:
        """Return the user for valid credentials, else None."""
        user = await self.get_by_email(email)
        if user is None:
            return None
        if not verify_password(password, user.password_hash):
            return None
        return user

    # ─── Profile ────────────────────────────────────────

    async def update_profile(
        self, user: User, patch: UserUpdate, image_url: Optional[str] = None
    ) -> User:
        """Apply a self-service patch. A blank password leaves it unchanged."""
        changes = patch.changes()

        password = changes.pop("password", None)
        if password is not None and password.strip():
            user.password_hash = hash_password(password)

        if image_url is not None:
            changes["image"] = image_url

        for field, value in changes.items():
            setattr(user, field, value)

        await self.db.commit()
        return user

    async def set_admin(self, email: str, is_admin: bool) -> Optional[User]:
        """Set or clear the admin flag directly in the store."""
        user = await self.get_by_email(email)
        if user is None:
            return None
        user.is_admin = is_admin
        await self.db.commit()
        logger.info("users.admin_flag_set", user_id=str(user.id), is_admin=is_admin)
        return user
