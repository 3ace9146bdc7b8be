"""
Classification of failures raised by the backing data store.

Reads propagate driver errors unmodified; only the HTTP layer classifies them,
so that a missing schema can be reported as a recoverable setup problem rather
than a generic failure.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterator, Optional

from sqlalchemy.exc import SQLAlchemyError

# Postgres SQLSTATE for "undefined_table"
UNDEFINED_TABLE_SQLSTATE = "42P01"

# PostgREST codes for a table missing from the schema cache
POSTGREST_MISSING_TABLE_CODES = frozenset({"PGRST204", "PGRST205"})

_MISSING_TABLE_MARKERS = (
    "could not find the table",
    "undefinedtableerror",
)


class StoreErrorKind(str, Enum):
    """Failure categories surfaced to API clients."""

    SCHEMA_NOT_PROVISIONED = "schema_not_provisioned"
    UNKNOWN = "unknown_error"


def _error_chain(exc: BaseException) -> Iterator[BaseException]:
    """Yield exc, the wrapped DBAPI error (if any) and its causes, once each."""
    seen: set[int] = set()
    pending: list[Optional[BaseException]] = [exc]
    while pending:
        current = pending.pop(0)
        if current is None or id(current) in seen:
            continue
        seen.add(id(current))
        yield current
        pending.append(getattr(current, "orig", None))
        pending.append(current.__cause__)


def _error_code(exc: BaseException) -> Optional[str]:
    attrs = ("sqlstate", "pgcode")
    # SQLAlchemy's own `code` names its docs page, not a database error.
    if not isinstance(exc, SQLAlchemyError):
        attrs += ("code",)
    for attr in attrs:
        value = getattr(exc, attr, None)
        if isinstance(value, str) and value:
            return value
    return None


def _looks_like_missing_relation(message: str) -> bool:
    lowered = message.lower()
    if any(marker in lowered for marker in _MISSING_TABLE_MARKERS):
        return True
    return "relation" in lowered and "does not exist" in lowered


# PUBLIC_INTERFACE
def classify_store_error(exc: BaseException) -> StoreErrorKind:
    """
    Classify a data store failure.

    Any SQLSTATE/PostgREST code in the chain decides the outcome. The message
    text is only consulted when no code was found. Anything unrecognised is UNKNOWN.
    """
    chain = list(_error_chain(exc))
    codes = [code for code in map(_error_code, chain) if code]
    if codes:
        if any(code == UNDEFINED_TABLE_SQLSTATE or code in POSTGREST_MISSING_TABLE_CODES for code in codes):
            return StoreErrorKind.SCHEMA_NOT_PROVISIONED
        return StoreErrorKind.UNKNOWN
    for err in chain:
        if _looks_like_missing_relation(str(err)) or _looks_like_missing_relation(type(err).__name__):
            return StoreErrorKind.SCHEMA_NOT_PROVISIONED
    return StoreErrorKind.UNKNOWN
