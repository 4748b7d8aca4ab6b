"""Team service — the lab roster.

Learn: Membership rows are keyed by user id for every operation the
admin performs (remove, toggle alumni), not by the row's own id.
The unique constraint on ``user_id`` keeps one row per user; a second
add surfaces as an IntegrityError (409).
"""

import uuid
from typing import Optional

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from labhub.db.models import TeamMember

logger = structlog.get_logger()


class TeamService:
    """Business logic for roster management."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_membership(self, user_id: uuid.UUID) -> Optional[TeamMember]:
        result = await self.db.execute(
            select(TeamMember).where(TeamMember.user_id == user_id)
        )
        return result.scalars().first()

    async def list_members(self) -> list[TeamMember]:
        result = await self.db.execute(
            select(TeamMember).order_by(TeamMember.created_at)
        )
        return list(result.scalars().all())

    async def add_member(
        self, user_id: uuid.UUID, added_by: uuid.UUID
    ) -> TeamMember:
        member = TeamMember(user_id=user_id, added_by=added_by)
        self.db.add(member)
        await self.db.commit()
        logger.info(
            "team.member_added", user_id=str(user_id), added_by=str(added_by)
        )
        return member

    async def remove_member(self, user_id: uuid.UUID) -> bool:
        """Delete the roster row for a user. Returns False if there was none."""
        member = await self.get_membership(user_id)
        if member is None:
            return False
        await self.db.delete(member)
        await self.db.commit()
        logger.info("team.member_removed", user_id=str(user_id))
        return True

    async def toggle_alumni(self, user_id: uuid.UUID) -> Optional[TeamMember]:
        member = await self.get_membership(user_id)
        if member is None:
            return None
        member.is_alumni = not member.is_alumni
        await self.db.commit()
        return member
