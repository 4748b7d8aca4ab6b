"""Team roster API routes.

Learn: Roster changes are admin-only and keyed by *user id*. Reading
the roster, and a member's profile with their publications, is public; it backs
the "People" page.
"""

import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from labhub.auth.capabilities import Capability, guarded, public
from labhub.auth.dependencies import get_current_user
from labhub.db.engine import get_db
from labhub.db.models import User
from labhub.schemas.team import (
    AlumniToggled,
    MemberProfile,
    Message,
    TeamMemberCreate,
    TeamMemberRead,
)
from labhub.services.publication_service import PublicationService
from labhub.services.team_service import TeamService
from labhub.services.user_service import UserService

router = APIRouter()


def _svc(db: AsyncSession = Depends(get_db)) -> TeamService:
    return TeamService(db)


@router.post("/team", response_model=TeamMemberRead, status_code=201, **guarded(Capability.ADMIN))
async def add_member(
    body: TeamMemberCreate,
    admin: User = Depends(get_current_user),
    svc: TeamService = Depends(_svc),
):
    """Put a user on the roster. A user can only be added once (409)."""
    return await svc.add_member(user_id=body.user_id, added_by=admin.id)


@router.delete("/team/{user_id}", response_model=Message, **guarded(Capability.ADMIN))
async def remove_member(user_id: uuid.UUID, svc: TeamService = Depends(_svc)):
    if not await svc.remove_member(user_id):
        raise HTTPException(status_code=404, detail="Team member not found")
    return Message(message="Team member removed successfully")


@router.patch(
    "/team/{user_id}/alumni",
    response_model=AlumniToggled,
    **guarded(Capability.ADMIN),
)
async def toggle_alumni(user_id: uuid.UUID, svc: TeamService = Depends(_svc)):
    member = await svc.toggle_alumni(user_id)
    if member is None:
        raise HTTPException(status_code=404, detail="Team member not found")
    return AlumniToggled(
        message="Team member alumni status toggled successfully",
        updated_member=TeamMemberRead.model_validate(member),
    )


@router.get("/team", response_model=list[TeamMemberRead], **public())
async def list_members(svc: TeamService = Depends(_svc)):
    return await svc.list_members()


@router.get("/team/{user_id}", response_model=MemberProfile, **public())
async def get_member_profile(user_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    """A user's public profile plus every publication they co-authored."""
    user = await UserService(db).get(user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    publications = await PublicationService(db).by_author(user_id)
    return {"team_member": user, "publications": publications}
