"""
Repository layer for data access.

Repositories encapsulate SQLAlchemy queries for inventory, invoices and
procurement. They assume the provided AsyncSession has tenant context
configured (e.g., using src.core.deps.get_tenant_session dependency).
"""
