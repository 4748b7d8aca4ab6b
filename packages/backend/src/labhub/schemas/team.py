"""Pydantic schemas for the team roster."""

import uuid
from datetime import datetime

from labhub.schemas.common import ApiModel
from labhub.schemas.publication import PublicationRead
from labhub.schemas.user import UserRead


class TeamMemberCreate(ApiModel):
    user_id: uuid.UUID


class TeamMemberRead(ApiModel):
    id: uuid.UUID
    user_id: uuid.UUID
    added_by: uuid.UUID
    is_alumni: bool
    created_at: datetime


class AlumniToggled(ApiModel):
    message: str
    updated_member: TeamMemberRead


class MemberProfile(ApiModel):
    """A roster member's public profile plus everything they authored."""
    team_member: UserRead
    publications: list[PublicationRead] = []


class Message(ApiModel):
    message: str
