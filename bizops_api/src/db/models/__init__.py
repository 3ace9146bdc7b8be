"""
ORM models for the console's source records: tenants, inventory, invoices,
suppliers and purchase orders.

Importing this package ensures model classes are registered with the Base
metadata for Alembic and runtime usage.
"""

from .tenancy import Tenant  # noqa: F401
from .inventory import InventoryItem  # noqa: F401
from .sales import (  # noqa: F401
    Invoice,
    InvoiceItem,
)
from .procurement import (  # noqa: F401
    Supplier,
    PurchaseOrder,
    PurchaseOrderItem,
)
