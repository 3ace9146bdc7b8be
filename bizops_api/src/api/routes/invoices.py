from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.deps import Pagination, found_or_404, get_pagination, get_tenant_session
from src.repositories.sales import InvoiceRepository
from src.schemas.sales import InvoiceRead, InvoiceStatus

router = APIRouter(prefix="/invoices", tags=["Invoices"])


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=List[InvoiceRead],
    summary="List invoices",
    description="Invoices with their line items, newest first.",
)
async def list_invoices(
    session: AsyncSession = Depends(get_tenant_session),
    page: Pagination = Depends(get_pagination),
    status: Optional[InvoiceStatus] = Query(None, description="draft | paid | cancelled"),
) -> List[InvoiceRead]:
    rows = await InvoiceRepository(session).list_invoices(
        status=status, limit=page.limit, offset=page.offset
    )
    return [InvoiceRead.model_validate(row) for row in rows]


# PUBLIC_INTERFACE
@router.get("/{invoice_id}", response_model=InvoiceRead, summary="Get invoice")
async def get_invoice(
    invoice_id: UUID,
    session: AsyncSession = Depends(get_tenant_session),
) -> InvoiceRead:
    invoice = await InvoiceRepository(session).get_invoice(invoice_id)
    return InvoiceRead.model_validate(found_or_404(invoice, "Invoice"))
