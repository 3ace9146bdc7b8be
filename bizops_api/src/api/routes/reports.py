from __future__ import annotations

import io
from datetime import datetime, timezone
from typing import Callable, Dict, Iterable, List, Literal, Tuple

import pandas as pd
from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from pydantic import BaseModel

from src.core.deps import get_dashboard_service
from src.services.dashboard import DashboardService

ExportFormat = Literal["csv", "xlsx", "pdf"]

# PUBLIC_INTERFACE
router = APIRouter(
    prefix="/reports",
    tags=["Reports"],
)

SALES_COLUMNS = ["item_id", "item_name", "total_quantity", "total_revenue", "invoice_count"]
REVENUE_COLUMNS = ["date", "revenue", "invoices"]
RESTOCK_COLUMNS = [
    "sku",
    "name",
    "category",
    "stock",
    "min_stock",
    "avg_daily_sales",
    "days_until_stockout",
    "needs_restock",
]
SUPPLIER_COLUMNS = [
    "supplier_id",
    "name",
    "total_orders",
    "total_spend",
    "received_orders",
    "pending_orders",
    "cancelled_orders",
    "last_order_date",
    "reliability",
]


def rows_to_dataframe(rows: Iterable[BaseModel], columns: List[str]) -> pd.DataFrame:
    """Flatten derived view models into a DataFrame with a fixed column order."""
    data = [row.model_dump(mode="json", include=set(columns)) for row in rows]
    return pd.DataFrame(data, columns=columns)


def _write_csv(df: pd.DataFrame, title: str) -> bytes:
    return df.to_csv(index=False).encode("utf-8")


def _write_xlsx(df: pd.DataFrame, title: str) -> bytes:
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name=title[:31])
    return buffer.getvalue()


def _write_pdf(df: pd.DataFrame, title: str) -> bytes:
    from reportlab.lib import colors
    from reportlab.lib.pagesizes import landscape, letter
    from reportlab.lib.styles import getSampleStyleSheet
    from reportlab.platypus import Paragraph, SimpleDocTemplate, Table, TableStyle

    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer, pagesize=landscape(letter), leftMargin=18, rightMargin=18, topMargin=18, bottomMargin=18
    )
    generated = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M UTC")
    table = Table([list(df.columns)] + df.astype(str).values.tolist(), repeatRows=1)
    table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ("FONTSIZE", (0, 0), (-1, -1), 8),
                ("GRID", (0, 0), (-1, -1), 0.25, colors.grey),
            ]
        )
    )
    doc.build([Paragraph(f"{title} ({generated})", getSampleStyleSheet()["Title"]), table])
    return buffer.getvalue()


# format -> (media type, writer)
_EXPORTERS: Dict[str, Tuple[str, Callable[[pd.DataFrame, str], bytes]]] = {
    "csv": ("text/csv", _write_csv),
    "xlsx": ("application/vnd.openxmlformats-officedocument.spreadsheetml.sheet", _write_xlsx),
    "pdf": ("application/pdf", _write_pdf),
}


def _export_dataframe(df: pd.DataFrame, filename_base: str, export_format: str) -> StreamingResponse:
    """Render the DataFrame in the requested format as a file download."""
    media_type, write = _EXPORTERS[export_format]
    title = filename_base.replace("_", " ").title()
    return StreamingResponse(
        io.BytesIO(write(df, title)),
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename_base}.{export_format}"'},
    )


# PUBLIC_INTERFACE
@router.get(
    "/sales",
    summary="Sales by item report",
    description="Exports per-item quantity and revenue over paid invoices.",
    response_description="File stream (CSV/XLSX/PDF)",
)
async def sales_report(
    svc: DashboardService = Depends(get_dashboard_service),
    format: ExportFormat = Query("csv", description="Export format: csv | xlsx | pdf"),
):
    """Generate a Sales by Item report, best sellers first."""
    df = rows_to_dataframe(await svc.get_sales_data(), SALES_COLUMNS)
    return _export_dataframe(df, "sales_by_item", format)


# PUBLIC_INTERFACE
@router.get(
    "/revenue",
    summary="Daily revenue report",
    description="Exports paid revenue and invoice count per calendar day.",
    response_description="File stream (CSV/XLSX/PDF)",
)
async def revenue_report(
    svc: DashboardService = Depends(get_dashboard_service),
    format: ExportFormat = Query("csv", description="Export format: csv | xlsx | pdf"),
):
    """Generate a Daily Revenue report in chronological order."""
    df = rows_to_dataframe(await svc.get_revenue_by_date(), REVENUE_COLUMNS)
    return _export_dataframe(df, "daily_revenue", format)


# PUBLIC_INTERFACE
@router.get(
    "/restock",
    summary="Restock planning report",
    description="Exports sales velocity and projected stockout for inventory items.",
    response_description="File stream (CSV/XLSX/PDF)",
)
async def restock_report(
    svc: DashboardService = Depends(get_dashboard_service),
    only_needing_restock: bool = Query(False, description="Only items flagged needs_restock"),
    format: ExportFormat = Query("csv", description="Export format: csv | xlsx | pdf"),
):
    """
    Generate a Restock Planning report.

    Rows are sorted by days_until_stockout ascending so the most urgent items lead.
    """
    predictions = await svc.get_restock_predictions()
    if only_needing_restock:
        predictions = [p for p in predictions if p.needs_restock]
    df = rows_to_dataframe(predictions, RESTOCK_COLUMNS)
    df = df.sort_values("days_until_stockout", kind="stable").reset_index(drop=True)
    return _export_dataframe(df, "restock_planning", format)


# PUBLIC_INTERFACE
@router.get(
    "/supplier-scorecard",
    summary="Supplier scorecard report",
    description="Exports purchase order counts, spend and reliability per supplier.",
    response_description="File stream (CSV/XLSX/PDF)",
)
async def supplier_scorecard_report(
    svc: DashboardService = Depends(get_dashboard_service),
    format: ExportFormat = Query("csv", description="Export format: csv | xlsx | pdf"),
):
    """Generate a Supplier Scorecard report, highest spend first."""
    df = rows_to_dataframe(await svc.get_supplier_analytics(), SUPPLIER_COLUMNS)
    return _export_dataframe(df, "supplier_scorecard", format)
