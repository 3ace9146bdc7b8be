"""Data store failure classification."""

from sqlalchemy.exc import OperationalError, ProgrammingError

from src.core.errors import StoreErrorKind, classify_store_error


class FakeDriverError(Exception):
    def __init__(self, message, sqlstate=None):
        super().__init__(message)
        self.sqlstate = sqlstate


class UndefinedTableError(Exception):
    pass


class FakeApiError(Exception):
    def __init__(self, message, code):
        super().__init__(message)
        self.code = code


class TestClassifyStoreError:

    def test_undefined_table_sqlstate(self):
        exc = FakeDriverError("boom", sqlstate="42P01")
        assert classify_store_error(exc) is StoreErrorKind.SCHEMA_NOT_PROVISIONED

    def test_relation_does_not_exist_message(self):
        exc = FakeDriverError('relation "invoices" does not exist')
        assert classify_store_error(exc) is StoreErrorKind.SCHEMA_NOT_PROVISIONED

    def test_schema_cache_message(self):
        exc = Exception("Could not find the table 'public.suppliers' in the schema cache")
        assert classify_store_error(exc) is StoreErrorKind.SCHEMA_NOT_PROVISIONED

    def test_postgrest_codes(self):
        for code in ("PGRST204", "PGRST205"):
            exc = FakeApiError("missing", code=code)
            assert classify_store_error(exc) is StoreErrorKind.SCHEMA_NOT_PROVISIONED

    def test_driver_exception_type_name(self):
        assert classify_store_error(UndefinedTableError("x")) is StoreErrorKind.SCHEMA_NOT_PROVISIONED

    def test_wrapped_by_sqlalchemy(self):
        orig = FakeDriverError("no such thing", sqlstate="42P01")
        exc = ProgrammingError("SELECT * FROM invoices", {}, orig)
        assert classify_store_error(exc) is StoreErrorKind.SCHEMA_NOT_PROVISIONED

    def test_found_through_cause_chain(self):
        try:
            try:
                raise FakeDriverError("x", sqlstate="42P01")
            except FakeDriverError as inner:
                raise RuntimeError("load failed") from inner
        except RuntimeError as outer:
            assert classify_store_error(outer) is StoreErrorKind.SCHEMA_NOT_PROVISIONED

    def test_other_failures_are_unknown(self):
        assert classify_store_error(ConnectionError("timed out")) is StoreErrorKind.UNKNOWN
        assert classify_store_error(FakeDriverError("deadlock", sqlstate="40P01")) is StoreErrorKind.UNKNOWN

    def test_wrapped_connection_failure_is_unknown(self):
        exc = OperationalError("SELECT 1", {}, ConnectionRefusedError("connection refused"))
        assert classify_store_error(exc) is StoreErrorKind.UNKNOWN

    def test_undefined_column_is_unknown(self):
        exc = FakeDriverError('column "x" of relation "y" does not exist', sqlstate="42703")
        assert classify_store_error(exc) is StoreErrorKind.UNKNOWN

    def test_wrapped_undefined_column_is_unknown(self):
        orig = FakeDriverError('column "x" of relation "y" does not exist', sqlstate="42703")
        exc = ProgrammingError("SELECT x FROM y", {}, orig)
        assert classify_store_error(exc) is StoreErrorKind.UNKNOWN

    def test_wrapped_message_only_error_uses_message(self):
        exc = ProgrammingError("SELECT * FROM invoices", {}, FakeDriverError('relation "invoices" does not exist'))
        assert classify_store_error(exc) is StoreErrorKind.SCHEMA_NOT_PROVISIONED

    def test_kind_values_are_wire_codes(self):
        assert StoreErrorKind.SCHEMA_NOT_PROVISIONED.value == "schema_not_provisioned"
        assert StoreErrorKind.UNKNOWN.value == "unknown_error"
