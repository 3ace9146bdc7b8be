"""TenantStoreReader over a fake session."""

import asyncio
from types import SimpleNamespace
from uuid import uuid4

import pytest

from factories import NOW
from src.services.store import TenantStoreReader


class FakeResult:
    def __init__(self, rows):
        self._rows = rows

    def scalars(self):
        return iter(self._rows)

    def scalar_one_or_none(self):
        return self._rows[0] if self._rows else None


class FakeSession:
    """Records SQL text; tenant GUC statements succeed, queries return `rows` or raise `error`."""

    def __init__(self, rows=(), error=None):
        self.rows = list(rows)
        self.error = error
        self.statements = []
        self.rolled_back = False

    async def execute(self, statement, params=None):
        sql = str(statement)
        self.statements.append((sql, params))
        if "set_config" in sql:
            return FakeResult([])
        if self.error is not None:
            raise self.error
        return FakeResult(self.rows)

    async def rollback(self):
        self.rolled_back = True

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False


def _create_reader(session, tenant_id=None):
    return TenantStoreReader(lambda: session, tenant_id or uuid4())


def _supplier_row(name):
    return SimpleNamespace(
        id=uuid4(),
        name=name,
        contact_person=None,
        email=None,
        phone=None,
        address=None,
        notes=None,
        last_transaction_date=None,
        created_at=NOW,
        updated_at=NOW,
    )


class TestTenantStoreReader:

    def test_scopes_query_to_tenant(self):
        tenant_id = uuid4()
        session = FakeSession(rows=[_supplier_row("Acme")])
        suppliers = asyncio.run(_create_reader(session, tenant_id).list_suppliers())

        assert [s.name for s in suppliers] == ["Acme"]
        first_sql, first_params = session.statements[0]
        assert "set_config('app.tenant_id'" in first_sql
        assert first_params == {"tenant_id": str(tenant_id)}
        assert "FROM suppliers" in session.statements[1][0]
        assert "set_config('app.tenant_id', ''" in session.statements[-1][0]
        assert session.rolled_back is False

    def test_query_error_propagates_unchanged_and_rolls_back(self):
        error = RuntimeError('relation "suppliers" does not exist')
        session = FakeSession(error=error)
        with pytest.raises(RuntimeError) as exc_info:
            asyncio.run(_create_reader(session).list_suppliers())

        assert exc_info.value is error
        assert session.rolled_back is True
        # nothing is issued on the aborted transaction
        assert len(session.statements) == 2

    def test_each_read_opens_its_own_session(self):
        opened = []

        def session_maker():
            session = FakeSession()
            opened.append(session)
            return session

        reader = TenantStoreReader(session_maker, uuid4())

        async def _read_all():
            return await asyncio.gather(
                reader.list_invoices(),
                reader.list_inventory_items(),
                reader.list_purchase_orders(),
                reader.list_suppliers(),
            )

        results = asyncio.run(_read_all())
        assert results == [[], [], [], []]
        assert len(opened) == 4
