from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.deps import Pagination, found_or_404, get_pagination, get_tenant_session
from src.repositories.procurement import PurchaseOrderRepository, SupplierRepository
from src.schemas.procurement import PurchaseOrderRead, PurchaseOrderStatus, SupplierRead

router = APIRouter(prefix="/procurement", tags=["Procurement"])


# PUBLIC_INTERFACE
@router.get(
    "/suppliers",
    response_model=List[SupplierRead],
    summary="List suppliers",
    description="Suppliers of the current tenant, ordered by name.",
)
async def list_suppliers(
    session: AsyncSession = Depends(get_tenant_session),
    page: Pagination = Depends(get_pagination),
    search: Optional[str] = Query(None, description="Substring of name or contact person"),
) -> List[SupplierRead]:
    rows = await SupplierRepository(session).list_suppliers(
        search=search, limit=page.limit, offset=page.offset
    )
    return [SupplierRead.model_validate(row) for row in rows]


# PUBLIC_INTERFACE
@router.get(
    "/purchase-orders",
    response_model=List[PurchaseOrderRead],
    summary="List purchase orders",
    description="Purchase orders with their lines, most recent order date first.",
)
async def list_purchase_orders(
    session: AsyncSession = Depends(get_tenant_session),
    page: Pagination = Depends(get_pagination),
    supplier_id: Optional[UUID] = Query(None),
    status: Optional[PurchaseOrderStatus] = Query(None, description="pending | received | cancelled"),
) -> List[PurchaseOrderRead]:
    rows = await PurchaseOrderRepository(session).list_purchase_orders(
        supplier_id=supplier_id, status=status, limit=page.limit, offset=page.offset
    )
    return [PurchaseOrderRead.model_validate(row) for row in rows]


# PUBLIC_INTERFACE
@router.get("/purchase-orders/{po_id}", response_model=PurchaseOrderRead, summary="Get purchase order")
async def get_purchase_order(
    po_id: UUID,
    session: AsyncSession = Depends(get_tenant_session),
) -> PurchaseOrderRead:
    po = await PurchaseOrderRepository(session).get_purchase_order(po_id)
    return PurchaseOrderRead.model_validate(found_or_404(po, "Purchase order"))
