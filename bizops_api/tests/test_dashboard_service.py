"""DashboardService orchestration over a fake reader."""

import asyncio
from datetime import date, timedelta, timezone

import pytest
from pydantic import ValidationError

from factories import NOW, FakeStoreReader, make_invoice, make_item, make_line, make_po, make_supplier
from src.core.settings import AppSettings
from src.services.dashboard import DashboardService


def _create_reader(**kwargs):
    widget = make_item("Widget", stock=3, min_stock=5, price=10.0)
    gadget = make_item("Gadget", stock=40, min_stock=2, price=25.0)
    acme = make_supplier("Acme")
    defaults = dict(
        invoices=[
            make_invoice([make_line(widget, 2), make_line(gadget, 1)], created_at=NOW),
            make_invoice([make_line(gadget, 2)], created_at=NOW + timedelta(days=1)),
            make_invoice([make_line(widget, 9)], status="draft", created_at=NOW + timedelta(days=2)),
        ],
        items=[widget, gadget],
        purchase_orders=[
            make_po(acme.id, 100.0, status="received", order_date=date(2024, 3, 1)),
            make_po(acme.id, 50.0, status="pending", order_date=date(2024, 3, 8)),
        ],
        suppliers=[acme],
    )
    defaults.update(kwargs)
    return FakeStoreReader(**defaults)


class TestLoadDashboard:

    def test_builds_every_view(self):
        service = DashboardService(_create_reader(), tz=timezone.utc)
        snapshot = asyncio.run(service.load_dashboard())

        assert snapshot.stats.total_revenue == 95.0
        assert snapshot.stats.total_invoices == 2
        assert snapshot.stats.total_products == 2
        assert snapshot.stats.low_stock_count == 1
        assert [s.item_name for s in snapshot.sales] == ["Gadget", "Widget"]
        assert [i.name for i in snapshot.low_stock] == ["Widget"]
        assert [p.date for p in snapshot.revenue] == [date(2024, 3, 10), date(2024, 3, 11)]
        assert snapshot.suppliers[0].total_spend == 150.0
        assert snapshot.suppliers[0].reliability == 50
        assert [r.name for r in snapshot.restock] == ["Widget", "Gadget"]

    def test_reads_run_concurrently(self):
        reader = _create_reader()
        asyncio.run(DashboardService(reader).load_dashboard())
        assert sorted(reader.calls) == [
            "list_inventory_items",
            "list_invoices",
            "list_purchase_orders",
            "list_suppliers",
        ]
        assert reader.max_in_flight == 4

    def test_failed_read_fails_the_whole_load(self):
        error = RuntimeError("supplier table unavailable")
        reader = _create_reader(errors={"list_suppliers": error})
        with pytest.raises(RuntimeError) as exc_info:
            asyncio.run(DashboardService(reader).load_dashboard())
        assert exc_info.value is error

    def test_sequence_increases_per_load(self):
        service = DashboardService(_create_reader())
        first = asyncio.run(service.load_dashboard())
        second = asyncio.run(service.load_dashboard())
        other = asyncio.run(DashboardService(_create_reader()).load_dashboard())
        assert first.sequence < second.sequence < other.sequence

    def test_overlapping_loads_get_distinct_sequences(self):
        service = DashboardService(_create_reader())

        async def _two_loads():
            return await asyncio.gather(service.load_dashboard(), service.load_dashboard())

        a, b = asyncio.run(_two_loads())
        assert a.sequence != b.sequence

    def test_same_snapshot_gives_same_views(self):
        reader = _create_reader()
        service = DashboardService(reader)
        first = asyncio.run(service.load_dashboard())
        second = asyncio.run(service.load_dashboard())
        skip = {"sequence", "generated_at"}
        assert first.model_dump(exclude=skip) == second.model_dump(exclude=skip)

    def test_empty_store(self):
        reader = FakeStoreReader()
        snapshot = asyncio.run(DashboardService(reader).load_dashboard())
        assert snapshot.stats.total_revenue == 0
        assert snapshot.sales == []
        assert snapshot.revenue == []
        assert snapshot.suppliers == []
        assert snapshot.restock == []


class TestSingleViews:

    def test_top_suppliers_uses_configured_default(self):
        suppliers = [make_supplier(f"S{i}") for i in range(4)]
        pos = [make_po(s.id, float(10 - i)) for i, s in enumerate(suppliers)]
        service = DashboardService(_create_reader(suppliers=suppliers, purchase_orders=pos), top_suppliers_limit=2)
        assert [r.name for r in asyncio.run(service.get_top_suppliers())] == ["S0", "S1"]
        assert len(asyncio.run(service.get_top_suppliers(3))) == 3

    def test_restock_uses_configured_span_policy(self):
        reader = _create_reader()
        default = asyncio.run(DashboardService(reader).get_restock_predictions())
        paid_only = asyncio.run(DashboardService(reader, span_paid_only=True).get_restock_predictions())
        # all invoices span 2 days; paid invoices span 1 day
        assert default[0].avg_daily_sales == 1.0
        assert paid_only[0].avg_daily_sales == 2.0

    def test_single_view_failure_propagates(self):
        reader = _create_reader(errors={"list_invoices": ConnectionError("reset")})
        with pytest.raises(ConnectionError):
            asyncio.run(DashboardService(reader).get_sales_data())


class TestFromSettings:

    def test_applies_analytics_settings(self):
        settings = AppSettings(
            REPORT_TIMEZONE="UTC",
            RESTOCK_HORIZON_DAYS=14,
            STOCKOUT_SENTINEL_DAYS=365,
            RESTOCK_SPAN_PAID_ONLY=True,
            TOP_SUPPLIERS_LIMIT=3,
        )
        service = DashboardService.from_settings(FakeStoreReader(), settings)
        assert service.tz is timezone.utc
        assert service.horizon_days == 14
        assert service.sentinel_days == 365
        assert service.span_paid_only is True
        assert service.top_suppliers_limit == 3

    def test_unknown_timezone_is_rejected(self):
        with pytest.raises(ValidationError):
            AppSettings(REPORT_TIMEZONE="Nowhere/Special")
