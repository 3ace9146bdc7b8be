"""
Process logging setup.

Request middleware stores the correlation id and tenant id in contextvars; the
filter below copies them onto every record so all log lines of one request,
including those from the concurrent dashboard reads, can be grouped.
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from typing import Optional, Union

correlation_id_var: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)
tenant_id_var: ContextVar[Optional[str]] = ContextVar("tenant_id", default=None)

LOG_FORMAT = "%(asctime)s %(levelname)-7s [%(correlation_id)s tenant=%(tenant_id)s] %(name)s: %(message)s"

# Libraries that are chatty at INFO
_QUIET_LOGGERS = ("sqlalchemy.engine", "alembic.runtime.migration", "uvicorn.access")


class RequestContextFilter(logging.Filter):
    """Attach correlation_id and tenant_id ("-" when unset) to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = correlation_id_var.get() or "-"
        record.tenant_id = tenant_id_var.get() or "-"
        return True


def _resolve_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


# PUBLIC_INTERFACE
def configure_logging(level: Union[int, str] = logging.INFO) -> None:
    """
    Route root logging to stdout with request context on every line.

    Replaces existing root handlers, so calling it again only changes the level.
    """
    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(RequestContextFilter())

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)

    resolved = _resolve_level(level)
    root.setLevel(resolved)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(resolved, logging.WARNING))
