"""
Aggregation engine for the business-intelligence dashboard.

Every function here is pure: it takes already-fetched record collections,
never mutates them, and returns freshly built derived views. Nothing in this
module performs I/O or catches errors; fetch failures are the caller's concern.

Only paid invoices count towards revenue, sales and velocity figures.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, timezone, tzinfo
from typing import Dict, List, Optional, Sequence
from uuid import UUID

from src.schemas.analytics import (
    RestockPrediction,
    RevenuePoint,
    SalesData,
    SupplierAnalytic,
    TotalStats,
)
from src.schemas.inventory import InventoryItemRead
from src.schemas.procurement import PurchaseOrderRead, SupplierRead
from src.schemas.sales import InvoiceRead

SECONDS_PER_DAY = 86400

# Items projected to run out within this many days need restocking.
RESTOCK_HORIZON_DAYS = 30
# Reported days-until-stockout when no sales were observed for an item.
STOCKOUT_SENTINEL_DAYS = 999

DEFAULT_TOP_SUPPLIERS = 5
UNKNOWN_SUPPLIER_NAME = "Unknown"


def _round_half_up(value: float, places: int = 0) -> float:
    """Round halves up for non-negative values (0.125 -> 0.13, 50.5 -> 51)."""
    factor = 10 ** places
    return math.floor(value * factor + 0.5) / factor


def _paid(invoices: Sequence[InvoiceRead]) -> List[InvoiceRead]:
    return [inv for inv in invoices if inv.is_paid]


def _epoch_seconds(ts: datetime) -> float:
    # Naive timestamps are read as UTC so mixed inputs still order consistently.
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.timestamp()


def _calendar_day(ts: datetime, tz: Optional[tzinfo]) -> date:
    if tz is None or ts.tzinfo is None:
        return ts.date()
    return ts.astimezone(tz).date()


@dataclass
class _SalesAccumulator:
    item_name: str
    total_quantity: int = 0
    total_revenue: float = 0.0
    invoice_count: int = 0


@dataclass
class _RevenueAccumulator:
    revenue: float = 0.0
    invoices: int = 0


@dataclass
class _SupplierAccumulator:
    name: str
    total_orders: int = 0
    total_spend: float = 0.0
    received_orders: int = 0
    pending_orders: int = 0
    cancelled_orders: int = 0
    last_order_date: Optional[date] = None


# PUBLIC_INTERFACE
def calculate_sales_data(invoices: Sequence[InvoiceRead]) -> List[SalesData]:
    """
    Aggregate paid invoice lines per inventory item.

    Each line adds its quantity and total to the item and counts once towards
    invoice_count (per line occurrence, not per unit). Items never sold on a
    paid invoice are absent from the result.

    Returns:
        List[SalesData]: ordered by total_revenue descending; ties keep the
        order in which items were first encountered.
    """
    acc: Dict[UUID, _SalesAccumulator] = {}
    for invoice in _paid(invoices):
        for line in invoice.items:
            entry = acc.get(line.inventory_item_id)
            if entry is None:
                entry = acc[line.inventory_item_id] = _SalesAccumulator(item_name=line.name)
            entry.total_quantity += line.quantity
            entry.total_revenue += line.total
            entry.invoice_count += 1

    rows = [
        SalesData(
            item_id=item_id,
            item_name=entry.item_name,
            total_quantity=entry.total_quantity,
            total_revenue=entry.total_revenue,
            invoice_count=entry.invoice_count,
        )
        for item_id, entry in acc.items()
    ]
    # sorted() is stable, also with reverse=True
    return sorted(rows, key=lambda r: r.total_revenue, reverse=True)


# PUBLIC_INTERFACE
def get_low_stock_items(items: Sequence[InventoryItemRead]) -> List[InventoryItemRead]:
    """Items at or below their reorder threshold, most depleted first (stable)."""
    return sorted((item for item in items if item.is_low_stock), key=lambda item: item.stock)


# PUBLIC_INTERFACE
def calculate_revenue_by_date(
    invoices: Sequence[InvoiceRead], tz: Optional[tzinfo] = None
) -> List[RevenuePoint]:
    """
    Daily revenue series over paid invoices.

    Invoices are bucketed by the calendar day of created_at as seen in `tz`
    (the reporting timezone). Naive timestamps are taken as already local.
    With tz=None the timestamp's own calendar day is used.

    Returns:
        List[RevenuePoint]: one point per day with at least one paid invoice,
        in chronological order.
    """
    buckets: Dict[date, _RevenueAccumulator] = {}
    for invoice in _paid(invoices):
        day = _calendar_day(invoice.created_at, tz)
        entry = buckets.setdefault(day, _RevenueAccumulator())
        entry.revenue += invoice.total
        entry.invoices += 1

    return [
        RevenuePoint(date=day, revenue=entry.revenue, invoices=entry.invoices)
        for day, entry in sorted(buckets.items(), key=lambda kv: kv[0])
    ]


# PUBLIC_INTERFACE
def calculate_total_stats(
    invoices: Sequence[InvoiceRead], items: Sequence[InventoryItemRead]
) -> TotalStats:
    """Top-line figures: paid revenue and count, product count, low-stock count."""
    total_revenue = 0.0
    total_invoices = 0
    for invoice in invoices:
        if invoice.is_paid:
            total_revenue += invoice.total
            total_invoices += 1

    return TotalStats(
        total_revenue=total_revenue,
        total_invoices=total_invoices,
        total_products=len(items),
        low_stock_count=sum(1 for item in items if item.is_low_stock),
    )


def days_covered(invoices: Sequence[InvoiceRead]) -> int:
    """
    Whole days spanned by the invoices' created_at values, at least 1.

    An empty collection spans 1 day, so velocities come out as zero rather
    than undefined.
    """
    if not invoices:
        return 1
    stamps = [_epoch_seconds(inv.created_at) for inv in invoices]
    span_days = math.ceil((max(stamps) - min(stamps)) / SECONDS_PER_DAY)
    return max(1, span_days)


# PUBLIC_INTERFACE
def calculate_restock_predictions(
    items: Sequence[InventoryItemRead],
    invoices: Sequence[InvoiceRead],
    *,
    horizon_days: int = RESTOCK_HORIZON_DAYS,
    sentinel_days: int = STOCKOUT_SENTINEL_DAYS,
    span_paid_only: bool = False,
) -> List[RestockPrediction]:
    """
    Project days until stockout for every inventory item.

    Velocity is units sold on paid invoices divided by the number of days the
    invoice history spans. By default that span is measured over every invoice,
    drafts and cancellations included, while only paid quantities are summed.
    Pass span_paid_only=True to measure the span over paid invoices only.

    Parameters:
        items: inventory snapshot; output keeps this order and length.
        invoices: all invoices, any status.
        horizon_days: projected stockout sooner than this flags needs_restock.
        sentinel_days: days_until_stockout when the item has no recorded sales.
        span_paid_only: measure the day span over paid invoices only.

    Returns:
        List[RestockPrediction]: one entry per item.
    """
    paid = _paid(invoices)
    span = days_covered(paid if span_paid_only else invoices)

    sold: Dict[UUID, int] = {}
    for invoice in paid:
        for line in invoice.items:
            sold[line.inventory_item_id] = sold.get(line.inventory_item_id, 0) + line.quantity

    predictions: List[RestockPrediction] = []
    for item in items:
        avg_daily_sales = sold.get(item.id, 0) / span
        if avg_daily_sales > 0:
            days_until_stockout = math.floor(item.stock / avg_daily_sales)
        else:
            days_until_stockout = sentinel_days

        predictions.append(
            RestockPrediction(
                **item.model_dump(),
                avg_daily_sales=_round_half_up(avg_daily_sales, 2),
                days_until_stockout=days_until_stockout,
                needs_restock=days_until_stockout < horizon_days or item.is_low_stock,
            )
        )
    return predictions


# PUBLIC_INTERFACE
def calculate_supplier_analytics(
    suppliers: Sequence[SupplierRead], purchase_orders: Sequence[PurchaseOrderRead]
) -> List[SupplierAnalytic]:
    """
    Per-supplier purchase order scorecard.

    Orders are grouped by their supplier_id, so orders whose supplier record was
    deleted still aggregate under that id. The name comes from the supplier
    record when it exists, else from the first order's supplier_name, else
    "Unknown". Spend covers every status; reliability is the rounded share of
    orders that were received.

    Returns:
        List[SupplierAnalytic]: ordered by total_spend descending (stable).
        Suppliers without any purchase order are not included.
    """
    names = {supplier.id: supplier.name for supplier in suppliers}
    acc: Dict[UUID, _SupplierAccumulator] = {}

    for po in purchase_orders:
        entry = acc.get(po.supplier_id)
        if entry is None:
            name = names.get(po.supplier_id) or po.supplier_name or UNKNOWN_SUPPLIER_NAME
            entry = acc[po.supplier_id] = _SupplierAccumulator(name=name)

        entry.total_orders += 1
        entry.total_spend += po.total_amount
        if po.status == "received":
            entry.received_orders += 1
        elif po.status == "pending":
            entry.pending_orders += 1
        elif po.status == "cancelled":
            entry.cancelled_orders += 1
        if po.order_date is not None and (
            entry.last_order_date is None or po.order_date > entry.last_order_date
        ):
            entry.last_order_date = po.order_date

    rows = []
    for supplier_id, entry in acc.items():
        reliability = 0
        if entry.total_orders > 0:
            reliability = int(_round_half_up(entry.received_orders / entry.total_orders * 100))
        rows.append(
            SupplierAnalytic(
                supplier_id=supplier_id,
                name=entry.name,
                total_orders=entry.total_orders,
                total_spend=entry.total_spend,
                received_orders=entry.received_orders,
                pending_orders=entry.pending_orders,
                cancelled_orders=entry.cancelled_orders,
                last_order_date=entry.last_order_date,
                reliability=reliability,
            )
        )
    return sorted(rows, key=lambda r: r.total_spend, reverse=True)


# PUBLIC_INTERFACE
def get_top_suppliers(
    suppliers: Sequence[SupplierRead],
    purchase_orders: Sequence[PurchaseOrderRead],
    limit: int = DEFAULT_TOP_SUPPLIERS,
) -> List[SupplierAnalytic]:
    """First `limit` entries of calculate_supplier_analytics()."""
    return calculate_supplier_analytics(suppliers, purchase_orders)[: max(0, limit)]
