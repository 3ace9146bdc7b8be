from __future__ import annotations

import datetime as dt
from datetime import date, datetime, timezone
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from src.schemas.inventory import InventoryItemRead


class SalesData(BaseModel):
    """Per-item sales aggregate over paid invoices."""
    item_id: UUID = Field(..., description="Inventory item ID")
    item_name: str = Field(..., description="Item name (from first sale seen)")
    total_quantity: int = Field(..., description="Units sold")
    total_revenue: float = Field(..., description="Sum of line totals")
    invoice_count: int = Field(..., description="Number of invoice lines for the item")


class RevenuePoint(BaseModel):
    """Revenue for one calendar day (reporting timezone)."""
    date: dt.date = Field(..., description="Calendar day")
    revenue: float = Field(..., description="Sum of paid invoice totals")
    invoices: int = Field(..., description="Number of paid invoices")


class TotalStats(BaseModel):
    """Top-line dashboard figures."""
    total_revenue: float = Field(0.0)
    total_invoices: int = Field(0, description="Paid invoices")
    total_products: int = Field(0, description="All inventory items")
    low_stock_count: int = Field(0, description="Items with stock <= min_stock")


class RestockPrediction(InventoryItemRead):
    """Inventory item with its projected depletion."""
    avg_daily_sales: float = Field(..., description="Units sold per day, rounded to 2 decimals")
    days_until_stockout: int = Field(..., description="Projected days of stock left (sentinel when no sales)")
    needs_restock: bool = Field(..., description="Projected to run out soon or already at/below min_stock")


class SupplierAnalytic(BaseModel):
    """Per-supplier purchase order scorecard."""
    supplier_id: UUID = Field(..., description="Supplier reference from the purchase orders")
    name: str = Field(..., description="Supplier name or 'Unknown'")
    total_orders: int = Field(...)
    total_spend: float = Field(..., description="Sum of PO totals across every status")
    received_orders: int = Field(0)
    pending_orders: int = Field(0)
    cancelled_orders: int = Field(0)
    last_order_date: Optional[date] = Field(None, description="Most recent order date")
    reliability: int = Field(..., ge=0, le=100, description="Percentage of orders received")


class DashboardSnapshot(BaseModel):
    """
    Every derived view computed from one consistent load.

    `sequence` increases with each load served by the process; clients should
    discard a snapshot whose sequence is lower than one already displayed.
    """
    sequence: int = Field(..., description="Monotonic load sequence number")
    generated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    stats: TotalStats
    sales: List[SalesData] = Field(default_factory=list)
    low_stock: List[InventoryItemRead] = Field(default_factory=list)
    revenue: List[RevenuePoint] = Field(default_factory=list)
    suppliers: List[SupplierAnalytic] = Field(default_factory=list)
    restock: List[RestockPrediction] = Field(default_factory=list)
