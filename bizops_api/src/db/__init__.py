"""
Database package initializer exposing configuration, engine/session management
and tenant context helpers.
"""

from .base import Base
from .config import get_settings, Settings
from .session import (
    dispose_engine,
    get_engine,
    get_async_session,
    get_session_maker,
    set_current_tenant,
    tenant_context,
)

# Import models so they are registered with SQLAlchemy metadata.
from . import models as models  # noqa: F401

__all__ = [
    "Base",
    "Settings",
    "get_settings",
    "dispose_engine",
    "get_engine",
    "get_async_session",
    "get_session_maker",
    "set_current_tenant",
    "tenant_context",
    "models",
]
