"""HTTP surface with the store replaced by an in-memory reader."""

from datetime import date, timedelta
from uuid import UUID, uuid4

import pytest
from fastapi import Depends
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError, ProgrammingError

from factories import NOW, FakeStoreReader, make_invoice, make_item, make_line, make_po, make_supplier
from src.api.main import app
from src.core.deps import get_settings_dep, get_store_reader, get_tenant_id
from src.core.settings import AppSettings

TENANT = str(uuid4())
HEADERS = {"X-Tenant-ID": TENANT}


class MissingTableError(Exception):
    sqlstate = "42P01"


def _create_reader(**kwargs):
    widget = make_item("Widget", stock=3, min_stock=5, price=10.0)
    gadget = make_item("Gadget", stock=400, min_stock=2, price=25.0)
    acme, globex = make_supplier("Acme"), make_supplier("Globex")
    defaults = dict(
        invoices=[
            make_invoice([make_line(widget, 2), make_line(gadget, 1)], created_at=NOW),
            make_invoice([make_line(gadget, 2)], created_at=NOW + timedelta(days=1)),
            make_invoice([make_line(widget, 9)], status="cancelled", created_at=NOW),
        ],
        items=[widget, gadget],
        purchase_orders=[
            make_po(acme.id, 100.0, status="received", order_date=date(2024, 3, 1)),
            make_po(acme.id, 50.0, order_date=date(2024, 3, 8)),
            make_po(globex.id, 20.0, status="cancelled"),
        ],
        suppliers=[acme, globex],
    )
    defaults.update(kwargs)
    return FakeStoreReader(**defaults)


@pytest.fixture
def client():
    # Not used as a context manager, so startup migrations never run.
    yield TestClient(app)
    app.dependency_overrides.clear()


def _use_reader(reader):
    def _reader_for_tenant(tenant_id: UUID = Depends(get_tenant_id)):
        return reader

    app.dependency_overrides[get_store_reader] = _reader_for_tenant
    app.dependency_overrides[get_settings_dep] = lambda: AppSettings(REPORT_TIMEZONE="UTC")


class TestHealth:

    def test_health(self, client):
        resp = client.get("/api/v1/health")
        assert resp.status_code == 200
        assert resp.json()["message"] == "Healthy"
        assert "X-Correlation-ID" in resp.headers

    def test_tenant_echo(self, client):
        resp = client.get("/api/v1/health/tenant", headers=HEADERS)
        assert resp.json() == {"tenant_id": TENANT}

    def test_correlation_id_is_echoed(self, client):
        resp = client.get("/api/v1/health", headers={"X-Correlation-ID": "abc-123"})
        assert resp.headers["X-Correlation-ID"] == "abc-123"


class TestTenantHeader:

    def test_missing_header(self, client):
        _use_reader(_create_reader())
        resp = client.get("/api/v1/analytics/stats")
        body = resp.json()
        assert resp.status_code == 400
        assert body["error"]["type"] == "http_error"
        assert "X-Tenant-ID" in body["error"]["message"]

    def test_malformed_header(self, client):
        _use_reader(_create_reader())
        resp = client.get("/api/v1/analytics/stats", headers={"X-Tenant-ID": "not-a-uuid"})
        assert resp.status_code == 400


class TestAnalyticsRoutes:

    def test_dashboard(self, client):
        _use_reader(_create_reader())
        body = client.get("/api/v1/analytics/dashboard", headers=HEADERS).json()
        assert body["sequence"] >= 1
        assert body["stats"] == {
            "total_revenue": 95.0,
            "total_invoices": 2,
            "total_products": 2,
            "low_stock_count": 1,
        }
        assert [r["date"] for r in body["revenue"]] == ["2024-03-10", "2024-03-11"]
        assert [s["name"] for s in body["suppliers"]] == ["Acme", "Globex"]

    def test_dashboard_sequence_increases(self, client):
        _use_reader(_create_reader())
        first = client.get("/api/v1/analytics/dashboard", headers=HEADERS).json()
        second = client.get("/api/v1/analytics/dashboard", headers=HEADERS).json()
        assert second["sequence"] > first["sequence"]

    def test_sales(self, client):
        _use_reader(_create_reader())
        rows = client.get("/api/v1/analytics/sales", headers=HEADERS).json()
        assert [(r["item_name"], r["total_quantity"], r["total_revenue"]) for r in rows] == [
            ("Gadget", 3, 75.0),
            ("Widget", 2, 20.0),
        ]

    def test_low_stock(self, client):
        _use_reader(_create_reader())
        rows = client.get("/api/v1/analytics/low-stock", headers=HEADERS).json()
        assert [r["name"] for r in rows] == ["Widget"]

    def test_restock_filter(self, client):
        _use_reader(_create_reader())
        everything = client.get("/api/v1/analytics/restock", headers=HEADERS).json()
        flagged = client.get(
            "/api/v1/analytics/restock", headers=HEADERS, params={"needs_restock": "true"}
        ).json()
        assert len(everything) == 2
        assert [r["name"] for r in flagged] == ["Widget"]

    def test_supplier_reliability(self, client):
        _use_reader(_create_reader())
        rows = client.get("/api/v1/analytics/suppliers", headers=HEADERS).json()
        acme = rows[0]
        assert acme["total_orders"] == 2
        assert acme["total_spend"] == 150.0
        assert acme["reliability"] == 50
        assert acme["last_order_date"] == "2024-03-08"

    def test_top_suppliers_limit(self, client):
        _use_reader(_create_reader())
        rows = client.get("/api/v1/analytics/suppliers/top", headers=HEADERS, params={"limit": 1}).json()
        assert [r["name"] for r in rows] == ["Acme"]

    def test_top_suppliers_rejects_zero_limit(self, client):
        _use_reader(_create_reader())
        resp = client.get("/api/v1/analytics/suppliers/top", headers=HEADERS, params={"limit": 0})
        assert resp.status_code == 422
        assert resp.json()["error"]["type"] == "validation_error"


class TestStoreFailures:

    def test_missing_schema_is_503(self, client):
        error = ProgrammingError("SELECT * FROM invoices", {}, MissingTableError('relation "invoices" does not exist'))
        _use_reader(_create_reader(errors={"list_invoices": error}))
        resp = client.get("/api/v1/analytics/dashboard", headers=HEADERS)
        body = resp.json()
        assert resp.status_code == 503
        assert body["error"]["type"] == "schema_not_provisioned"
        assert "hint" in body["error"]["details"]
        assert body["tenant_id"] == TENANT

    def test_other_store_failure_is_500(self, client):
        error = OperationalError("SELECT 1", {}, ConnectionRefusedError("connection refused"))
        _use_reader(_create_reader(errors={"list_purchase_orders": error}))
        resp = client.get("/api/v1/analytics/dashboard", headers=HEADERS)
        assert resp.status_code == 500
        assert resp.json()["error"]["type"] == "unknown_error"

    def test_unexpected_failure_keeps_correlation_id(self):
        _use_reader(_create_reader(errors={"list_inventory_items": RuntimeError("boom")}))
        client = TestClient(app, raise_server_exceptions=False)
        try:
            resp = client.get(
                "/api/v1/analytics/dashboard",
                headers={**HEADERS, "X-Correlation-ID": "corr-500"},
            )
        finally:
            app.dependency_overrides.clear()
        assert resp.status_code == 500
        assert resp.json()["error"]["type"] == "internal_error"
        assert resp.json()["correlation_id"] == "corr-500"
        assert resp.headers["X-Correlation-ID"] == "corr-500"


class TestReports:

    def test_sales_csv(self, client):
        _use_reader(_create_reader())
        resp = client.get("/api/v1/reports/sales", headers=HEADERS)
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/csv")
        assert 'filename="sales_by_item.csv"' in resp.headers["content-disposition"]
        lines = resp.text.strip().splitlines()
        assert lines[0] == "item_id,item_name,total_quantity,total_revenue,invoice_count"
        assert len(lines) == 3

    def test_restock_csv_most_urgent_first(self, client):
        _use_reader(_create_reader())
        resp = client.get(
            "/api/v1/reports/restock", headers=HEADERS, params={"only_needing_restock": "true"}
        )
        lines = resp.text.strip().splitlines()
        assert lines[0].startswith("sku,name,")
        assert len(lines) == 2
        assert ",Widget," in lines[1]

    def test_supplier_scorecard_xlsx(self, client):
        _use_reader(_create_reader())
        resp = client.get("/api/v1/reports/supplier-scorecard", headers=HEADERS, params={"format": "xlsx"})
        assert resp.status_code == 200
        assert resp.content[:2] == b"PK"

    def test_revenue_pdf(self, client):
        _use_reader(_create_reader())
        resp = client.get("/api/v1/reports/revenue", headers=HEADERS, params={"format": "pdf"})
        assert resp.status_code == 200
        assert resp.content[:4] == b"%PDF"

    def test_unknown_format_rejected(self, client):
        _use_reader(_create_reader())
        resp = client.get("/api/v1/reports/sales", headers=HEADERS, params={"format": "docx"})
        assert resp.status_code == 422
