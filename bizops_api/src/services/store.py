"""
Read collaborator supplying the four source collections to the analytics layer.

The aggregation functions only ever see the Pydantic read models produced here;
they never touch sessions or ORM rows.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, List, Protocol
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.db.session import tenant_context
from src.repositories.inventory import InventoryItemRepository
from src.repositories.procurement import PurchaseOrderRepository, SupplierRepository
from src.repositories.sales import InvoiceRepository
from src.schemas.inventory import InventoryItemRead
from src.schemas.procurement import PurchaseOrderRead, SupplierRead
from src.schemas.sales import InvoiceRead

logger = logging.getLogger(__name__)


class StoreReader(Protocol):
    """Full, tenant-scoped collections. No ordering is guaranteed."""

    async def list_invoices(self) -> List[InvoiceRead]: ...

    async def list_inventory_items(self) -> List[InventoryItemRead]: ...

    async def list_purchase_orders(self) -> List[PurchaseOrderRead]: ...

    async def list_suppliers(self) -> List[SupplierRead]: ...


class TenantStoreReader:
    """
    StoreReader backed by the Postgres repositories.

    Every read opens its own session from the factory and scopes it to the
    tenant, so independent reads may run concurrently. Errors propagate as raised
    by the driver.
    """

    def __init__(self, session_maker: async_sessionmaker[AsyncSession], tenant_id: UUID) -> None:
        self.session_maker = session_maker
        self.tenant_id = tenant_id

    @asynccontextmanager
    async def _session(self) -> AsyncGenerator[AsyncSession, None]:
        async with self.session_maker() as session:
            async with tenant_context(session, self.tenant_id):
                yield session

    async def list_invoices(self) -> List[InvoiceRead]:
        async with self._session() as session:
            rows = await InvoiceRepository(session).list_invoices()
            return [InvoiceRead.model_validate(r) for r in rows]

    async def list_inventory_items(self) -> List[InventoryItemRead]:
        async with self._session() as session:
            rows = await InventoryItemRepository(session).list_items()
            return [InventoryItemRead.model_validate(r) for r in rows]

    async def list_purchase_orders(self) -> List[PurchaseOrderRead]:
        async with self._session() as session:
            rows = await PurchaseOrderRepository(session).list_purchase_orders()
            return [PurchaseOrderRead.model_validate(r) for r in rows]

    async def list_suppliers(self) -> List[SupplierRead]:
        async with self._session() as session:
            rows = await SupplierRepository(session).list_suppliers()
            return [SupplierRead.model_validate(r) for r in rows]
