from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from sqlalchemy import or_, select

from src.db.models.inventory import InventoryItem
from .base import BaseRepository


class InventoryItemRepository(BaseRepository[InventoryItem]):
    """
    Repository for inventory items.

    All queries are automatically tenant-scoped by Postgres RLS.
    """

    model = InventoryItem

    async def list_items(
        self,
        *,
        search: Optional[str] = None,
        category: Optional[str] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[InventoryItem]:
        """List items ordered by name. limit=None returns the whole collection."""
        stmt = select(InventoryItem)
        if search:
            like = f"%{search}%"
            stmt = stmt.where(or_(InventoryItem.name.ilike(like), InventoryItem.sku.ilike(like)))
        if category:
            stmt = stmt.where(InventoryItem.category == category)
        stmt = stmt.order_by(InventoryItem.name, InventoryItem.sku)
        return await self.fetch_all(self.paginate(stmt, limit, offset))

    async def get_item(self, item_id: UUID) -> Optional[InventoryItem]:
        return await self.get_by_id(item_id)
