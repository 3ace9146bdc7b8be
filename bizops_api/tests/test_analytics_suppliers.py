"""Supplier scorecards and top suppliers."""

from datetime import date
from uuid import uuid4

from factories import make_po, make_supplier
from src.services.analytics import calculate_supplier_analytics, get_top_suppliers


class TestSupplierAnalytics:

    def test_counts_spend_and_reliability(self):
        s1 = make_supplier("Acme Supply")
        pos = [
            make_po(s1.id, 100.0, status="received"),
            make_po(s1.id, 50.0, status="pending"),
        ]
        [row] = calculate_supplier_analytics([s1], pos)
        assert row.supplier_id == s1.id
        assert row.name == "Acme Supply"
        assert row.total_orders == 2
        assert row.total_spend == 150.0
        assert row.received_orders == 1
        assert row.pending_orders == 1
        assert row.cancelled_orders == 0
        assert row.reliability == 50

    def test_cancelled_orders_count_towards_spend(self):
        s1 = make_supplier("Acme")
        pos = [make_po(s1.id, 20.0, status="cancelled"), make_po(s1.id, 5.0, status="received")]
        [row] = calculate_supplier_analytics([s1], pos)
        assert row.total_spend == 25.0
        assert row.cancelled_orders == 1

    def test_reliability_rounds_half_up(self):
        s1 = make_supplier("Acme")
        pos = [make_po(s1.id, 1.0, status="received")] + [make_po(s1.id, 1.0) for _ in range(7)]
        assert calculate_supplier_analytics([s1], pos)[0].reliability == 13

    def test_reliability_two_thirds(self):
        s1 = make_supplier("Acme")
        pos = [
            make_po(s1.id, 1.0, status="received"),
            make_po(s1.id, 1.0, status="received"),
            make_po(s1.id, 1.0, status="cancelled"),
        ]
        assert calculate_supplier_analytics([s1], pos)[0].reliability == 67

    def test_last_order_date_is_most_recent(self):
        s1 = make_supplier("Acme")
        pos = [
            make_po(s1.id, 1.0, order_date=date(2024, 2, 1)),
            make_po(s1.id, 1.0, order_date=date(2024, 3, 15)),
            make_po(s1.id, 1.0, order_date=date(2023, 12, 31)),
        ]
        assert calculate_supplier_analytics([s1], pos)[0].last_order_date == date(2024, 3, 15)

    def test_orders_of_deleted_supplier_use_order_name(self):
        missing_id = uuid4()
        pos = [make_po(missing_id, 10.0, supplier_name="Gone Ltd")]
        [row] = calculate_supplier_analytics([], pos)
        assert row.supplier_id == missing_id
        assert row.name == "Gone Ltd"

    def test_unknown_name_when_nothing_to_go_on(self):
        pos = [make_po(uuid4(), 10.0)]
        assert calculate_supplier_analytics([], pos)[0].name == "Unknown"

    def test_supplier_record_name_wins_over_order_name(self):
        s1 = make_supplier("Current Name")
        pos = [make_po(s1.id, 10.0, supplier_name="Old Name")]
        assert calculate_supplier_analytics([s1], pos)[0].name == "Current Name"

    def test_suppliers_without_orders_are_omitted(self):
        s1, s2 = make_supplier("Busy"), make_supplier("Idle")
        rows = calculate_supplier_analytics([s1, s2], [make_po(s1.id, 1.0)])
        assert [r.name for r in rows] == ["Busy"]

    def test_sorted_by_spend_descending(self):
        a, b, c = make_supplier("A"), make_supplier("B"), make_supplier("C")
        pos = [make_po(a.id, 10.0), make_po(b.id, 300.0), make_po(c.id, 40.0), make_po(a.id, 5.0)]
        assert [r.name for r in calculate_supplier_analytics([a, b, c], pos)] == ["B", "C", "A"]

    def test_empty_input(self):
        assert calculate_supplier_analytics([], []) == []


class TestTopSuppliers:

    def _suppliers_and_orders(self, count):
        suppliers = [make_supplier(f"S{i}") for i in range(count)]
        pos = [make_po(s.id, float(100 - i)) for i, s in enumerate(suppliers)]
        return suppliers, pos

    def test_default_limit_is_five(self):
        suppliers, pos = self._suppliers_and_orders(8)
        top = get_top_suppliers(suppliers, pos)
        assert [r.name for r in top] == ["S0", "S1", "S2", "S3", "S4"]

    def test_custom_limit(self):
        suppliers, pos = self._suppliers_and_orders(4)
        assert [r.name for r in get_top_suppliers(suppliers, pos, limit=2)] == ["S0", "S1"]

    def test_limit_larger_than_population(self):
        suppliers, pos = self._suppliers_and_orders(2)
        assert len(get_top_suppliers(suppliers, pos, limit=10)) == 2

    def test_zero_limit(self):
        suppliers, pos = self._suppliers_and_orders(3)
        assert get_top_suppliers(suppliers, pos, limit=0) == []
