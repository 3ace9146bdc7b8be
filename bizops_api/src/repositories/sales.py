from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from sqlalchemy import select

from src.db.models.sales import Invoice
from .base import BaseRepository


class InvoiceRepository(BaseRepository[Invoice]):
    """Repository for invoices. Line items load eagerly with their invoice."""

    model = Invoice

    async def list_invoices(
        self,
        *,
        status: Optional[str] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[Invoice]:
        stmt = select(Invoice)
        if status:
            stmt = stmt.where(Invoice.status == status)
        stmt = stmt.order_by(Invoice.created_at.desc(), Invoice.invoice_number)
        return await self.fetch_all(self.paginate(stmt, limit, offset))

    async def get_invoice(self, invoice_id: UUID) -> Optional[Invoice]:
        return await self.get_by_id(invoice_id)
