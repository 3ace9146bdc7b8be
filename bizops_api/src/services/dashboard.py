from __future__ import annotations

import asyncio
import itertools
import logging
from datetime import timezone, tzinfo
from typing import List, Optional, Sequence
from zoneinfo import ZoneInfo

from src.core.settings import UTC_NAMES, AppSettings
from src.schemas.analytics import (
    DashboardSnapshot,
    RestockPrediction,
    RevenuePoint,
    SalesData,
    SupplierAnalytic,
    TotalStats,
)
from src.schemas.inventory import InventoryItemRead
from src.schemas.procurement import PurchaseOrderRead, SupplierRead
from src.schemas.sales import InvoiceRead
from src.services import analytics
from src.services.base import BaseService
from src.services.store import StoreReader

logger = logging.getLogger(__name__)

# Process-wide; next() on itertools.count never yields the same value twice.
_load_sequence = itertools.count(1)


def resolve_timezone(name: str) -> tzinfo:
    """Map a configured IANA name to a tzinfo, using the builtin UTC singleton for 'UTC'."""
    if name.upper() in UTC_NAMES:
        return timezone.utc
    return ZoneInfo(name)


class DashboardService(BaseService):
    """
    Domain service for the business-intelligence dashboard.

    Fetches source collections through the StoreReader and derives every view with
    the pure functions in src.services.analytics. Read failures are not caught:
    a failed read fails the whole operation.
    """

    def __init__(
        self,
        reader: StoreReader,
        *,
        tz: Optional[tzinfo] = None,
        horizon_days: int = analytics.RESTOCK_HORIZON_DAYS,
        sentinel_days: int = analytics.STOCKOUT_SENTINEL_DAYS,
        span_paid_only: bool = False,
        top_suppliers_limit: int = analytics.DEFAULT_TOP_SUPPLIERS,
    ) -> None:
        super().__init__(reader)
        self.tz = tz
        self.horizon_days = horizon_days
        self.sentinel_days = sentinel_days
        self.span_paid_only = span_paid_only
        self.top_suppliers_limit = top_suppliers_limit

    @classmethod
    def from_settings(cls, reader: StoreReader, settings: AppSettings) -> "DashboardService":
        """Build a service configured from AppSettings analytics options."""
        return cls(
            reader,
            tz=resolve_timezone(settings.REPORT_TIMEZONE),
            horizon_days=settings.RESTOCK_HORIZON_DAYS,
            sentinel_days=settings.STOCKOUT_SENTINEL_DAYS,
            span_paid_only=settings.RESTOCK_SPAN_PAID_ONLY,
            top_suppliers_limit=settings.TOP_SUPPLIERS_LIMIT,
        )

    # PUBLIC_INTERFACE
    async def load_dashboard(self) -> DashboardSnapshot:
        """
        Load all four collections concurrently and compute every dashboard view.

        The reads are awaited together; if any of them fails the exception
        propagates and no snapshot is produced.

        Returns:
            DashboardSnapshot stamped with a new sequence number.
        """
        sequence = next(_load_sequence)
        logger.info("Dashboard load #%d started", sequence)
        invoices, items, purchase_orders, suppliers = await asyncio.gather(
            self.reader.list_invoices(),
            self.reader.list_inventory_items(),
            self.reader.list_purchase_orders(),
            self.reader.list_suppliers(),
        )
        logger.info(
            "Dashboard load #%d fetched invoices=%d items=%d purchase_orders=%d suppliers=%d",
            sequence,
            len(invoices),
            len(items),
            len(purchase_orders),
            len(suppliers),
        )
        return self.build_snapshot(sequence, invoices, items, purchase_orders, suppliers)

    def build_snapshot(
        self,
        sequence: int,
        invoices: Sequence[InvoiceRead],
        items: Sequence[InventoryItemRead],
        purchase_orders: Sequence[PurchaseOrderRead],
        suppliers: Sequence[SupplierRead],
    ) -> DashboardSnapshot:
        """Derive every view from one fetched snapshot of the source records."""
        return DashboardSnapshot(
            sequence=sequence,
            stats=analytics.calculate_total_stats(invoices, items),
            sales=analytics.calculate_sales_data(invoices),
            low_stock=analytics.get_low_stock_items(items),
            revenue=analytics.calculate_revenue_by_date(invoices, self.tz),
            suppliers=analytics.calculate_supplier_analytics(suppliers, purchase_orders),
            restock=self._restock(items, invoices),
        )

    def _restock(
        self, items: Sequence[InventoryItemRead], invoices: Sequence[InvoiceRead]
    ) -> List[RestockPrediction]:
        return analytics.calculate_restock_predictions(
            items,
            invoices,
            horizon_days=self.horizon_days,
            sentinel_days=self.sentinel_days,
            span_paid_only=self.span_paid_only,
        )

    # PUBLIC_INTERFACE
    async def get_total_stats(self) -> TotalStats:
        """Top-line stats (reads invoices and inventory)."""
        invoices, items = await asyncio.gather(
            self.reader.list_invoices(), self.reader.list_inventory_items()
        )
        return analytics.calculate_total_stats(invoices, items)

    # PUBLIC_INTERFACE
    async def get_sales_data(self) -> List[SalesData]:
        """Per-item sales over paid invoices, best sellers first."""
        return analytics.calculate_sales_data(await self.reader.list_invoices())

    # PUBLIC_INTERFACE
    async def get_low_stock_items(self) -> List[InventoryItemRead]:
        """Items at or below their reorder threshold, most depleted first."""
        return analytics.get_low_stock_items(await self.reader.list_inventory_items())

    # PUBLIC_INTERFACE
    async def get_revenue_by_date(self) -> List[RevenuePoint]:
        """Daily paid revenue in the reporting timezone."""
        return analytics.calculate_revenue_by_date(await self.reader.list_invoices(), self.tz)

    # PUBLIC_INTERFACE
    async def get_restock_predictions(self) -> List[RestockPrediction]:
        """Restock projection for every inventory item."""
        items, invoices = await asyncio.gather(
            self.reader.list_inventory_items(), self.reader.list_invoices()
        )
        return self._restock(items, invoices)

    # PUBLIC_INTERFACE
    async def get_supplier_analytics(self) -> List[SupplierAnalytic]:
        """Supplier scorecards, highest spend first."""
        suppliers, purchase_orders = await asyncio.gather(
            self.reader.list_suppliers(), self.reader.list_purchase_orders()
        )
        return analytics.calculate_supplier_analytics(suppliers, purchase_orders)

    # PUBLIC_INTERFACE
    async def get_top_suppliers(self, limit: Optional[int] = None) -> List[SupplierAnalytic]:
        """The `limit` highest-spend suppliers (configured default when None)."""
        suppliers, purchase_orders = await asyncio.gather(
            self.reader.list_suppliers(), self.reader.list_purchase_orders()
        )
        return analytics.get_top_suppliers(
            suppliers,
            purchase_orders,
            limit=self.top_suppliers_limit if limit is None else limit,
        )
