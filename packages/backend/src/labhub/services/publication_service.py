"""Publication service — authored works and their bylines.

Learn: Registered authors live in ``publication_authors`` with a
position column, so the byline order is preserved and "everything
user X wrote" is a single indexed lookup.
"""

import uuid
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from labhub.db.models import Publication, PublicationAuthor, current_year
from labhub.schemas.publication import PublicationCreate, PublicationUpdate

RECENT_LIMIT = 5


class PublicationService:
    """Business logic for publications."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(
        self, data: PublicationCreate, cover_image: Optional[str] = None
    ) -> Publication:
        publication = Publication(
            title=data.title,
            additional_authors=list(data.additional_authors),
            summary=data.summary,
            cover_image=cover_image,
            doi=data.doi,
            year=data.year if data.year is not None else current_year(),
        )
        publication.set_authors(list(data.authors))
        self.db.add(publication)
        await self.db.commit()
        return publication

    async def get(self, publication_id: uuid.UUID) -> Optional[Publication]:
        result = await self.db.execute(
            select(Publication).where(Publication.id == publication_id)
        )
        return result.scalars().first()

    async def recent(self, limit: int = RECENT_LIMIT) -> list[Publication]:
        """Newest first, by creation time."""
        result = await self.db.execute(
            select(Publication)
            .order_by(Publication.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def by_year(self, year: int) -> list[Publication]:
        result = await self.db.execute(
            select(Publication)
            .where(Publication.year == year)
            .order_by(Publication.created_at.desc())
        )
        return list(result.scalars().all())

    async def by_author(self, user_id: uuid.UUID) -> list[Publication]:
        authored = select(PublicationAuthor.publication_id).where(
            PublicationAuthor.user_id == user_id
        )
        result = await self.db.execute(
            select(Publication)
            .where(Publication.id.in_(authored))
            .order_by(Publication.created_at.desc())
        )
        return list(result.scalars().all())

    async def update(
        self,
        publication: Publication,
        patch: PublicationUpdate,
        cover_image: Optional[str] = None,
    ) -> Publication:
        changes = patch.changes()

        authors = changes.pop("authors", None)
        if authors is not None:
            publication.set_authors([uuid.UUID(str(a)) for a in authors])

        if cover_image is not None:
            changes["cover_image"] = cover_image

        for field, value in changes.items():
            setattr(publication, field, value)

        await self.db.commit()
        return publication
