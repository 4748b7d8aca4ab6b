"""Pydantic schemas for user accounts and login.

Learn: Separate schemas for create/update/read keeps the API clean.
- UserRegister: what registration accepts (no admin flag)
- UserUpdate: self-service patch (no admin flag, unknown keys rejected)
- UserRead: public view — the password hash never leaves the service
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from labhub.schemas.common import ApiModel, PatchModel, coerce_list, reject_null


class TimelineEntry(ApiModel):
    """One education or experience entry."""
    institution: Optional[str] = None
    degree: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None


class LinkEntry(ApiModel):
    link_type: Optional[str] = None
    link: Optional[str] = None


class UserRegister(ApiModel):
    name: str = Field(..., min_length=1, max_length=200)
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1)
    role: str = Field(..., min_length=1, max_length=100)
    address: Optional[str] = None
    bio: Optional[str] = None
    education: list[TimelineEntry] = Field(default_factory=list)
    experience: list[TimelineEntry] = Field(default_factory=list)
    links: list[LinkEntry] = Field(default_factory=list)

    @field_validator("education", "experience", "links", mode="before")
    @classmethod
    def decode_lists(cls, v):
        return coerce_list(v)


class UserUpdate(PatchModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    email: Optional[str] = Field(None, min_length=3, max_length=255)
    password: Optional[str] = None
    role: Optional[str] = Field(None, min_length=1, max_length=100)
    address: Optional[str] = None
    bio: Optional[str] = None
    image: Optional[str] = None
    education: Optional[list[TimelineEntry]] = None
    experience: Optional[list[TimelineEntry]] = None
    links: Optional[list[LinkEntry]] = None

    @field_validator("education", "experience", "links", mode="before")
    @classmethod
    def decode_lists(cls, v):
        return coerce_list(v)

    @field_validator("name", "email", "role", "education", "experience", "links")
    @classmethod
    def not_null(cls, v):
        return reject_null(v)


class UserRead(ApiModel):
    id: uuid.UUID
    name: str
    email: str
    role: str
    address: Optional[str] = None
    bio: Optional[str] = None
    image: Optional[str] = None
    education: list[TimelineEntry] = []
    experience: list[TimelineEntry] = []
    links: list[LinkEntry] = []
    is_admin: bool
    created_at: datetime


class LoginRequest(ApiModel):
    email: str
    password: str


class LoginResponse(ApiModel):
    user: UserRead
    token: str


class AdminStatus(ApiModel):
    message: str
    is_admin: bool


class UserIdRead(ApiModel):
    id: uuid.UUID
