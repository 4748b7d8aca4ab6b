"""SQLAlchemy ORM models — single source of truth for the database schema.

Learn: Declarative ORM mapping with SQLAlchemy 2.0 style (Mapped[] + mapped_column).
Each class = one table. Alembic migrations mirror these models.

Key concepts:
- UUID primary keys, stored natively on PostgreSQL and as CHAR(32) on SQLite
- JSON columns for the ordered profile sub-lists (education, experience, links)
- Publication authors are an ordered association table so "publications
  authored by X" is a plain indexed lookup
- Python-side timestamp defaults so creation order is exact (sub-second)
"""

import uuid
from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_uuid() -> uuid.UUID:
    return uuid.uuid4()


def current_year() -> int:
    return date.today().year


# ══════════════════════════════════════════════════════════════
# Accounts and roster
# ══════════════════════════════════════════════════════════════


class User(Base):
    """A lab member account (student, researcher, admin).

    Learn: ``is_admin`` has no API path that sets it. It is flipped
    only by editing the store directly (see ``labhub promote``).
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=new_uuid)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(100), nullable=False)
    address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    bio: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    image: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    education: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    experience: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    links: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    is_admin: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow
    )


class TeamMember(Base):
    """Roster entry — one per user at most.

    Learn: The existence of this row is what makes a user a "team member"
    for authorization. Alumni keep their row (and their access).
    """

    __tablename__ = "team_members"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=new_uuid)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id"), unique=True, nullable=False
    )
    added_by: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id"), nullable=False
    )
    is_alumni: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow
    )


# ══════════════════════════════════════════════════════════════
# Publications
# ══════════════════════════════════════════════════════════════


class Publication(Base):
    """An authored work with registered and free-text co-authors."""

    __tablename__ = "publications"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=new_uuid)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    additional_authors: Mapped[list] = mapped_column(
        JSON, nullable=False, default=list
    )
    summary: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    cover_image: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    doi: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    year: Mapped[int] = mapped_column(
        Integer, nullable=False, default=current_year, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    # Relationships
    author_links: Mapped[list["PublicationAuthor"]] = relationship(
        back_populates="publication",
        order_by="PublicationAuthor.position",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def authors(self) -> list[uuid.UUID]:
        """Registered author ids, in byline order."""
        return [link.user_id for link in self.author_links]

    def set_authors(self, user_ids: list[uuid.UUID]) -> None:
        self.author_links = [
            PublicationAuthor(user_id=uid, position=i)
            for i, uid in enumerate(user_ids)
        ]

    def has_author(self, user_id: uuid.UUID) -> bool:
        return str(user_id) in {str(uid) for uid in self.authors}


class PublicationAuthor(Base):
    """Ordered link between a publication and a registered author."""

    __tablename__ = "publication_authors"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    publication_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("publications.id", ondelete="CASCADE"), nullable=False
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id"), nullable=False, index=True
    )

    publication: Mapped["Publication"] = relationship(back_populates="author_links")


# ══════════════════════════════════════════════════════════════
# Flat site content
# ══════════════════════════════════════════════════════════════


class Address(Base):
    __tablename__ = "addresses"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=new_uuid)
    room: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    department: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    institution: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    city: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    state: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    postal_code: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    country: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)


class Role(Base):
    """A role label offered on the site (e.g. "PhD Student")."""

    __tablename__ = "roles"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=new_uuid)
    role_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)


class AboutText(Base):
    __tablename__ = "about_texts"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=new_uuid)
    text: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class Technology(Base):
    __tablename__ = "technologies"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=new_uuid)
    name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    icon: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    download_link: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class Tutorial(Base):
    __tablename__ = "tutorials"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=new_uuid)
    name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    new_icon: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    tutorial_link: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class Note(Base):
    __tablename__ = "notes"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=new_uuid)
    name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    new_icon: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    note_link: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
