# closetai/database/repositories/wardrobe.py
"""Repository for wardrobe item reads."""

from typing import List
from sqlalchemy.ext.asyncio import AsyncSession
from closetai.models.database.wardrobe import WardrobeItem
from closetai.models.domain.wardrobe import WardrobeItemSnapshot
from .base import BaseRepository

class WardrobeItemRepository(BaseRepository[WardrobeItem]):
    """Read access to the wardrobe owned by the wardrobe service."""

    def __init__(self, session: AsyncSession):
        super().__init__(WardrobeItem, session)

    async def find_active_items(self, user_id: int) -> List[WardrobeItemSnapshot]:
        """Snapshot of a user's active items in creation order."""
        items = await self.get_multi(
            filters={"user_id": user_id, "is_active": True},
            order_by=["id"],
            limit=None
        )
        return [WardrobeItemSnapshot.model_validate(item) for item in items]
