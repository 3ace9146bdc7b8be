from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from sqlalchemy import or_, select

from src.db.models.procurement import PurchaseOrder, Supplier
from .base import BaseRepository


class SupplierRepository(BaseRepository[Supplier]):
    """Repository for suppliers."""

    model = Supplier

    async def list_suppliers(
        self, *, search: Optional[str] = None, limit: Optional[int] = None, offset: int = 0
    ) -> List[Supplier]:
        stmt = select(Supplier)
        if search:
            like = f"%{search}%"
            stmt = stmt.where(or_(Supplier.name.ilike(like), Supplier.contact_person.ilike(like)))
        stmt = stmt.order_by(Supplier.name)
        return await self.fetch_all(self.paginate(stmt, limit, offset))


class PurchaseOrderRepository(BaseRepository[PurchaseOrder]):
    """Repository for purchase orders. Lines load eagerly with their order."""

    model = PurchaseOrder

    async def list_purchase_orders(
        self,
        *,
        supplier_id: Optional[UUID] = None,
        status: Optional[str] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[PurchaseOrder]:
        stmt = select(PurchaseOrder)
        if supplier_id:
            stmt = stmt.where(PurchaseOrder.supplier_id == supplier_id)
        if status:
            stmt = stmt.where(PurchaseOrder.status == status)
        stmt = stmt.order_by(PurchaseOrder.order_date.desc(), PurchaseOrder.po_number)
        return await self.fetch_all(self.paginate(stmt, limit, offset))

    async def get_purchase_order(self, po_id: UUID) -> Optional[PurchaseOrder]:
        return await self.get_by_id(po_id)
