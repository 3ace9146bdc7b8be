"""
API route modules.

- inventory, invoices, procurement: tenant-scoped listings of the source records
- analytics: dashboard views derived from those records
- reports: the same views exported as CSV, Excel or PDF

Routers are included from src.api.main under the /api/v1 prefix.
"""
