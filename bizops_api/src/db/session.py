"""
Async engine, session factory and tenant scoping for Postgres Row-Level Security.

The engine is created on first use so importing the app never needs a reachable
database (tests and OpenAPI generation rely on that).
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional, Union
from uuid import UUID

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from .config import get_settings

logger = logging.getLogger(__name__)

_ENGINE: Optional[AsyncEngine] = None
_SESSION_MAKER: Optional[async_sessionmaker[AsyncSession]] = None

# Transaction-local (is_local=true): the setting vanishes on commit or rollback.
_SET_TENANT_SQL = text("SELECT set_config('app.tenant_id', :tenant_id, true)")
_CLEAR_TENANT_SQL = text("SELECT set_config('app.tenant_id', '', true)")


# PUBLIC_INTERFACE
def get_engine() -> AsyncEngine:
    """Return the process-wide AsyncEngine, creating it on first call."""
    global _ENGINE
    if _ENGINE is None:
        settings = get_settings()
        _ENGINE = create_async_engine(
            settings.async_database_url,
            echo=settings.SQL_ECHO,
            pool_pre_ping=True,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
        )
        logger.info("Created database engine (pool_size=%d)", settings.DB_POOL_SIZE)
    return _ENGINE


# PUBLIC_INTERFACE
def get_session_maker() -> async_sessionmaker[AsyncSession]:
    """Return the session factory; callers needing several concurrent sessions open one each."""
    global _SESSION_MAKER
    if _SESSION_MAKER is None:
        _SESSION_MAKER = async_sessionmaker(bind=get_engine(), expire_on_commit=False, autoflush=False)
    return _SESSION_MAKER


# PUBLIC_INTERFACE
async def dispose_engine() -> None:
    """Close pooled connections and forget the engine (app shutdown)."""
    global _ENGINE, _SESSION_MAKER
    if _ENGINE is not None:
        await _ENGINE.dispose()
    _ENGINE = None
    _SESSION_MAKER = None


# PUBLIC_INTERFACE
async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield an AsyncSession for FastAPI dependency injection."""
    async with get_session_maker()() as session:
        yield session


# PUBLIC_INTERFACE
async def set_current_tenant(session: AsyncSession, tenant_id: Union[str, UUID]) -> None:
    """
    Scope the session's current transaction to a tenant.

    RLS policies compare rows against current_setting('app.tenant_id', true).
    """
    await session.execute(_SET_TENANT_SQL, {"tenant_id": str(tenant_id)})


# PUBLIC_INTERFACE
@asynccontextmanager
async def tenant_context(
    session: AsyncSession, tenant_id: Union[str, UUID]
) -> AsyncGenerator[AsyncSession, None]:
    """
    Run the enclosed queries under the given tenant.

    On success the setting is cleared explicitly. On failure the transaction is
    rolled back instead, which drops the setting with it; issuing more SQL on an
    aborted transaction would replace the original error.

    Usage:
        async with tenant_context(session, tenant_id):
            ...
    """
    await set_current_tenant(session, tenant_id)
    try:
        yield session
    except BaseException:
        await session.rollback()
        raise
    await session.execute(_CLEAR_TENANT_SQL)
