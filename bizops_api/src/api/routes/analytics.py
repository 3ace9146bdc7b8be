from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from src.core.deps import get_dashboard_service
from src.schemas.analytics import (
    DashboardSnapshot,
    RestockPrediction,
    RevenuePoint,
    SalesData,
    SupplierAnalytic,
    TotalStats,
)
from src.schemas.inventory import InventoryItemRead
from src.services.dashboard import DashboardService

router = APIRouter(prefix="/analytics", tags=["Analytics"])


# PUBLIC_INTERFACE
@router.get(
    "/dashboard",
    response_model=DashboardSnapshot,
    summary="Business intelligence dashboard",
    description=(
        "Load invoices, inventory, purchase orders and suppliers together and return every "
        "derived view. Fails as a whole if any read fails."
    ),
)
async def get_dashboard(svc: DashboardService = Depends(get_dashboard_service)) -> DashboardSnapshot:
    """
    Return the full dashboard snapshot.

    Clients issuing overlapping refreshes should keep the response with the highest `sequence`.
    """
    return await svc.load_dashboard()


# PUBLIC_INTERFACE
@router.get(
    "/stats",
    response_model=TotalStats,
    summary="Top-line stats",
    description="Paid revenue, paid invoice count, product count and low-stock count.",
)
async def get_stats(svc: DashboardService = Depends(get_dashboard_service)) -> TotalStats:
    return await svc.get_total_stats()


# PUBLIC_INTERFACE
@router.get(
    "/sales",
    response_model=List[SalesData],
    summary="Sales by item",
    description="Per-item quantity and revenue over paid invoices, highest revenue first.",
)
async def get_sales(svc: DashboardService = Depends(get_dashboard_service)) -> List[SalesData]:
    return await svc.get_sales_data()


# PUBLIC_INTERFACE
@router.get(
    "/low-stock",
    response_model=List[InventoryItemRead],
    summary="Low-stock items",
    description="Items with stock at or below their minimum, most depleted first.",
)
async def get_low_stock(svc: DashboardService = Depends(get_dashboard_service)) -> List[InventoryItemRead]:
    return await svc.get_low_stock_items()


# PUBLIC_INTERFACE
@router.get(
    "/revenue",
    response_model=List[RevenuePoint],
    summary="Revenue by day",
    description="Paid revenue and invoice count per calendar day in the reporting timezone.",
)
async def get_revenue(svc: DashboardService = Depends(get_dashboard_service)) -> List[RevenuePoint]:
    return await svc.get_revenue_by_date()


# PUBLIC_INTERFACE
@router.get(
    "/restock",
    response_model=List[RestockPrediction],
    summary="Restock predictions",
    description="Sales velocity and projected days until stockout for every inventory item.",
)
async def get_restock(
    svc: DashboardService = Depends(get_dashboard_service),
    needs_restock: Optional[bool] = Query(None, description="Only items with this needs_restock flag"),
) -> List[RestockPrediction]:
    predictions = await svc.get_restock_predictions()
    if needs_restock is None:
        return predictions
    return [p for p in predictions if p.needs_restock == needs_restock]


# PUBLIC_INTERFACE
@router.get(
    "/suppliers",
    response_model=List[SupplierAnalytic],
    summary="Supplier scorecards",
    description="Order counts, spend, last order date and reliability per supplier, highest spend first.",
)
async def get_supplier_analytics(
    svc: DashboardService = Depends(get_dashboard_service),
) -> List[SupplierAnalytic]:
    return await svc.get_supplier_analytics()


# PUBLIC_INTERFACE
@router.get(
    "/suppliers/top",
    response_model=List[SupplierAnalytic],
    summary="Top suppliers by spend",
)
async def get_top_suppliers(
    svc: DashboardService = Depends(get_dashboard_service),
    limit: Optional[int] = Query(None, ge=1, le=100, description="Number of suppliers (default from settings)"),
) -> List[SupplierAnalytic]:
    return await svc.get_top_suppliers(limit)
