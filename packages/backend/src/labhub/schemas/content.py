"""Pydantic schemas for the flat site-content collections.

Learn: each collection has the same three shapes — Create (POST body),
Update (typed PATCH, unknown keys rejected) and Read (adds the id).
Upload fields (``icon``, ``newIcon``) are filled in by the upload step,
so they are not part of Create but can be patched with a plain URL.
"""

import uuid
from typing import Optional

from labhub.schemas.common import ApiModel, PatchModel


# ─── Address ─────────────────────────────────────────────

class AddressCreate(ApiModel):
    room: Optional[str] = None
    department: Optional[str] = None
    institution: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None


class AddressUpdate(PatchModel):
    room: Optional[str] = None
    department: Optional[str] = None
    institution: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None


class AddressRead(AddressCreate):
    id: uuid.UUID


# ─── Role ────────────────────────────────────────────────

class RoleCreate(ApiModel):
    role_name: Optional[str] = None


class RoleUpdate(PatchModel):
    role_name: Optional[str] = None


class RoleRead(RoleCreate):
    id: uuid.UUID


# ─── About text ──────────────────────────────────────────

class AboutTextCreate(ApiModel):
    text: Optional[str] = None


class AboutTextUpdate(PatchModel):
    text: Optional[str] = None


class AboutTextRead(AboutTextCreate):
    id: uuid.UUID


# ─── Technology ──────────────────────────────────────────

class TechnologyCreate(ApiModel):
    name: Optional[str] = None
    description: Optional[str] = None
    download_link: Optional[str] = None


class TechnologyUpdate(PatchModel):
    name: Optional[str] = None
    icon: Optional[str] = None
    description: Optional[str] = None
    download_link: Optional[str] = None


class TechnologyRead(TechnologyCreate):
    id: uuid.UUID
    icon: Optional[str] = None


# ─── Tutorial ────────────────────────────────────────────

class TutorialCreate(ApiModel):
    name: Optional[str] = None
    description: Optional[str] = None
    tutorial_link: Optional[str] = None


class TutorialUpdate(PatchModel):
    name: Optional[str] = None
    new_icon: Optional[str] = None
    description: Optional[str] = None
    tutorial_link: Optional[str] = None


class TutorialRead(TutorialCreate):
    id: uuid.UUID
    new_icon: Optional[str] = None


# ─── Notes ───────────────────────────────────────────────

class NoteCreate(ApiModel):
    name: Optional[str] = None
    description: Optional[str] = None
    note_link: Optional[str] = None


class NoteUpdate(PatchModel):
    name: Optional[str] = None
    new_icon: Optional[str] = None
    description: Optional[str] = None
    note_link: Optional[str] = None


class NoteRead(NoteCreate):
    id: uuid.UUID
    new_icon: Optional[str] = None
