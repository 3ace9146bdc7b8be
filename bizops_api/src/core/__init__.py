"""
Core application utilities for settings, logging, errors and FastAPI dependencies.

This package provides:
- Application-level settings (separate from DB settings)
- Structured logging with correlation/tenant context
- Data store error classification
- Dependency helpers (tenant extraction, tenant-scoped DB session, dashboard service)
"""
