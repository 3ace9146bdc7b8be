"""
FastAPI application: middleware, lifecycle hooks, health checks and routers.

Run with:
    uvicorn src.api.main:app --reload
"""

from __future__ import annotations

import asyncio
import logging
from uuid import UUID, uuid4

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from src.api.errors import install_error_handlers
from src.api.routes.analytics import router as analytics_router
from src.api.routes.inventory import router as inventory_router
from src.api.routes.invoices import router as invoices_router
from src.api.routes.procurement import router as procurement_router
from src.api.routes.reports import router as reports_router
from src.core.deps import get_tenant_id
from src.core.logging import configure_logging, correlation_id_var, tenant_id_var
from src.core.settings import get_app_settings
from src.db.run_migrations import main as run_alembic
from src.db.session import dispose_engine
from src.schemas.common import MessageResponse, TenantEcho

settings = get_app_settings()
configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    openapi_tags=[
        {"name": "Health", "description": "Liveness and tenant header checks."},
        {"name": "Inventory", "description": "Inventory items and stock levels."},
        {"name": "Invoices", "description": "Customer invoices and their line items."},
        {"name": "Procurement", "description": "Suppliers and purchase orders."},
        {"name": "Analytics", "description": "Business intelligence dashboard views."},
        {"name": "Reports", "description": "Analytics views as CSV, Excel or PDF downloads."},
    ],
)

# Browsers reject credentialed requests against a wildcard origin.
allow_credentials = settings.CORS_ALLOW_CREDENTIALS and settings.CORS_ORIGINS != ["*"]
if settings.CORS_ALLOW_CREDENTIALS and not allow_credentials:
    logger.warning("Ignoring CORS_ALLOW_CREDENTIALS because CORS_ORIGINS is '*'.")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=allow_credentials,
    allow_methods=settings.CORS_ALLOW_METHODS,
    allow_headers=settings.CORS_ALLOW_HEADERS,
)

install_error_handlers(app)


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    """Bind correlation and tenant ids to the log context and echo X-Correlation-ID."""
    correlation_id = (
        request.headers.get("X-Correlation-ID") or request.headers.get("X-Request-ID") or uuid4().hex
    )
    tenant = request.headers.get("X-Tenant-ID")
    request.state.correlation_id = correlation_id
    request.state.tenant_id = tenant

    corr_token = correlation_id_var.set(correlation_id)
    tenant_token = tenant_id_var.set(tenant)
    try:
        logger.info("%s %s", request.method, request.url.path)
        response = await call_next(request)
    finally:
        correlation_id_var.reset(corr_token)
        tenant_id_var.reset(tenant_token)

    response.headers["X-Correlation-ID"] = correlation_id
    return response


@app.on_event("startup")
async def on_startup() -> None:
    """
    Apply pending migrations when RUN_MIGRATIONS_ON_STARTUP is set.

    A failure is logged and the service still starts; requests that hit missing
    tables then answer 503 schema_not_provisioned.
    """
    if not settings.RUN_MIGRATIONS_ON_STARTUP:
        return
    try:
        # env.py drives its own event loop, so keep it off this one.
        await asyncio.to_thread(run_alembic, ["upgrade", "head"])
        logger.info("Database schema is at head.")
    except Exception:
        logger.exception("Startup migration failed")


@app.on_event("shutdown")
async def on_shutdown() -> None:
    await dispose_engine()


api_v1 = APIRouter(prefix="/api/v1")


# PUBLIC_INTERFACE
@api_v1.get("/health", response_model=MessageResponse, summary="Health Check", tags=["Health"])
def health_check() -> MessageResponse:
    """Liveness check; does not touch the database."""
    return MessageResponse(message="Healthy")


# PUBLIC_INTERFACE
@api_v1.get(
    "/health/tenant",
    response_model=TenantEcho,
    summary="Tenant Health Echo",
    description="Echo the X-Tenant-ID header back, validating that it is a UUID.",
    tags=["Health"],
)
async def tenant_health_echo(tenant_id: UUID = Depends(get_tenant_id)) -> TenantEcho:
    return TenantEcho(tenant_id=tenant_id)


for router in (inventory_router, invoices_router, procurement_router, analytics_router, reports_router):
    api_v1.include_router(router)

app.include_router(api_v1)
