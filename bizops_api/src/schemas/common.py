from __future__ import annotations

from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, Field


class MessageResponse(BaseModel):
    message: str = Field(..., description="Status message")
    details: Optional[dict] = Field(default=None)


class TenantEcho(BaseModel):
    """Tenant id as parsed from the X-Tenant-ID header."""
    tenant_id: UUID


class ErrorInfo(BaseModel):
    """
    What went wrong.

    `type` is one of: http_error, validation_error, schema_not_provisioned,
    unknown_error, internal_error.
    """
    type: str = Field(..., description="Error code for programmatic handling")
    message: str = Field(..., description="Message suitable for display")
    details: Optional[Any] = Field(default=None, description="Validation issues or a remediation hint")


# PUBLIC_INTERFACE
class ErrorResponse(BaseModel):
    """Body of every non-2xx JSON response."""
    status: int
    error: ErrorInfo
    correlation_id: Optional[str] = Field(default=None, description="Echo of X-Correlation-ID (generated if absent)")
    tenant_id: Optional[str] = Field(default=None, description="Raw X-Tenant-ID header, if sent")
    path: Optional[str] = None
    method: Optional[str] = None
    timestamp: datetime = Field(..., description="When the error was produced (UTC)")
