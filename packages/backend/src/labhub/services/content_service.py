"""Content service — create/list/update for the flat site collections.

Learn: Address, role, about text, technology, tutorial and notes share
one contract, so one service class parameterised by the ORM model
handles them all. Field validation happens before this layer, in the
per-entity Create/Update schemas.
"""

import uuid
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession


class ContentService:
    """Generic store operations for one content model."""

    def __init__(self, db: AsyncSession, model: type):
        self.db = db
        self.model = model

    async def create(self, data: dict[str, Any]) -> Any:
        item = self.model(**data)
        self.db.add(item)
        await self.db.commit()
        return item

    async def list_all(self) -> list[Any]:
        result = await self.db.execute(select(self.model))
        return list(result.scalars().all())

    async def update(self, item_id: uuid.UUID, changes: dict[str, Any]) -> Optional[Any]:
        """Merge ``changes`` onto the record. Returns None if it doesn't exist."""
        item = await self.db.get(self.model, item_id)
        if item is None:
            return None
        for field, value in changes.items():
            setattr(item, field, value)
        await self.db.commit()
        return item
