from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.deps import Pagination, found_or_404, get_pagination, get_tenant_session
from src.repositories.inventory import InventoryItemRepository
from src.schemas.inventory import InventoryItemRead

router = APIRouter(prefix="/inventory", tags=["Inventory"])


# PUBLIC_INTERFACE
@router.get(
    "/items",
    response_model=List[InventoryItemRead],
    summary="List inventory items",
    description="Inventory items of the current tenant, ordered by name.",
)
async def list_inventory_items(
    session: AsyncSession = Depends(get_tenant_session),
    page: Pagination = Depends(get_pagination),
    search: Optional[str] = Query(None, description="Substring of name or SKU"),
    category: Optional[str] = Query(None, description="Exact category"),
) -> List[InventoryItemRead]:
    rows = await InventoryItemRepository(session).list_items(
        search=search, category=category, limit=page.limit, offset=page.offset
    )
    return [InventoryItemRead.model_validate(row) for row in rows]


# PUBLIC_INTERFACE
@router.get("/items/{item_id}", response_model=InventoryItemRead, summary="Get inventory item")
async def get_inventory_item(
    item_id: UUID,
    session: AsyncSession = Depends(get_tenant_session),
) -> InventoryItemRead:
    item = await InventoryItemRepository(session).get_item(item_id)
    return InventoryItemRead.model_validate(found_or_404(item, "Inventory item"))
