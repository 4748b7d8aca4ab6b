"""Pydantic schemas for publications."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from labhub.schemas.common import ApiModel, PatchModel, coerce_list, reject_null


class PublicationCreate(ApiModel):
    title: str = Field(..., min_length=1, max_length=500)
    authors: list[uuid.UUID] = Field(..., min_length=1)
    additional_authors: list[str] = Field(default_factory=list)
    summary: Optional[str] = None
    doi: Optional[str] = None
    year: Optional[int] = None  # None → current calendar year

    @field_validator("authors", "additional_authors", mode="before")
    @classmethod
    def decode_lists(cls, v):
        return coerce_list(v)


class PublicationUpdate(PatchModel):
    """Partial update — only fields present in the request are applied."""
    title: Optional[str] = Field(None, min_length=1, max_length=500)
    authors: Optional[list[uuid.UUID]] = Field(None, min_length=1)
    additional_authors: Optional[list[str]] = None
    summary: Optional[str] = None
    cover_image: Optional[str] = None
    doi: Optional[str] = None
    year: Optional[int] = None

    @field_validator("authors", "additional_authors", mode="before")
    @classmethod
    def decode_lists(cls, v):
        return coerce_list(v)

    @field_validator("title", "authors", "additional_authors", "year")
    @classmethod
    def not_null(cls, v):
        return reject_null(v)


class PublicationRead(ApiModel):
    id: uuid.UUID
    title: str
    authors: list[uuid.UUID]
    additional_authors: list[str]
    summary: Optional[str] = None
    cover_image: Optional[str] = None
    doi: Optional[str] = None
    year: int
    created_at: datetime
    updated_at: datetime
