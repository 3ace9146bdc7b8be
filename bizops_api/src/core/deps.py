from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import AsyncGenerator, Optional, TypeVar
from uuid import UUID

from fastapi import Depends, Header, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.settings import AppSettings, get_app_settings
from src.db.session import get_async_session, get_session_maker, tenant_context
from src.services.dashboard import DashboardService
from src.services.store import StoreReader, TenantStoreReader

logger = logging.getLogger(__name__)

T = TypeVar("T")


# PUBLIC_INTERFACE
async def get_tenant_id(x_tenant_id: str | None = Header(default=None, alias="X-Tenant-ID")) -> UUID:
    """
    Extract and validate the tenant id from the X-Tenant-ID header.

    Raises:
        HTTPException: 400 Bad Request if header missing or invalid UUID.
    Returns:
        UUID: tenant identifier
    """
    if not x_tenant_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="X-Tenant-ID header is required.",
        )
    try:
        return UUID(x_tenant_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="X-Tenant-ID header must be a valid UUID string.",
        )


# PUBLIC_INTERFACE
async def get_tenant_session(
    tenant_id: UUID = Depends(get_tenant_id),
    session: AsyncSession = Depends(get_async_session),
) -> AsyncGenerator[AsyncSession, None]:
    """
    Yield an AsyncSession with Row-Level Security (RLS) configured for the given tenant.

    The `app.tenant_id` setting is active while the route uses the session and is
    dropped afterwards.
    """
    async with tenant_context(session, tenant_id):
        yield session


# PUBLIC_INTERFACE
def get_settings_dep() -> AppSettings:
    """Application settings as a dependency (overridable in tests)."""
    return get_app_settings()


# PUBLIC_INTERFACE
def get_store_reader(tenant_id: UUID = Depends(get_tenant_id)) -> StoreReader:
    """
    Build the tenant-scoped read collaborator.

    Each read opens its own session so a dashboard load can run them concurrently.
    """
    return TenantStoreReader(get_session_maker(), tenant_id)


# PUBLIC_INTERFACE
def get_dashboard_service(
    reader: StoreReader = Depends(get_store_reader),
    settings: AppSettings = Depends(get_settings_dep),
) -> DashboardService:
    """Return a DashboardService bound to the tenant reader and analytics settings."""
    return DashboardService.from_settings(reader, settings)


@dataclass(frozen=True)
class Pagination:
    limit: int
    offset: int


# PUBLIC_INTERFACE
def get_pagination(
    limit: int = Query(100, ge=1, le=1000, description="Max records"),
    offset: int = Query(0, ge=0, description="Records to skip"),
) -> Pagination:
    """limit/offset query parameters shared by the listing endpoints."""
    return Pagination(limit=limit, offset=offset)


# PUBLIC_INTERFACE
def found_or_404(row: Optional[T], what: str) -> T:
    """Return row, or raise 404 '<what> not found' when it is None."""
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{what} not found")
    return row
