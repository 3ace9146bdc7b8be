from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field

InvoiceStatus = Literal["draft", "paid", "cancelled"]


class InvoiceItemRead(BaseModel):
    """Invoice line. `total` is the discount-applied line amount."""
    id: Optional[UUID] = Field(None, description="Line ID")
    inventory_item_id: UUID = Field(..., description="Referenced inventory item")
    name: str = Field(..., description="Item name at time of sale")
    sku: Optional[str] = Field(None)
    quantity: int = Field(..., description="Units sold")
    price: float = Field(0.0, description="Unit price")
    discount: float = Field(0.0, description="Discount percentage")
    total: float = Field(..., description="Line total")

    class Config:
        from_attributes = True


class InvoiceRead(BaseModel):
    """Invoice read model with its ordered line items."""
    id: UUID = Field(..., description="Invoice ID")
    invoice_number: str = Field(..., description="Invoice number")
    customer_name: str = Field(..., description="Customer name")
    customer_email: Optional[str] = Field(None)
    customer_phone: Optional[str] = Field(None)
    items: List[InvoiceItemRead] = Field(default_factory=list)
    subtotal: float = Field(0.0)
    tax: float = Field(0.0)
    discount: float = Field(0.0)
    total: float = Field(..., description="Invoice grand total")
    status: InvoiceStatus = Field(..., description="draft | paid | cancelled")
    created_at: datetime = Field(..., description="Created at")
    updated_at: datetime = Field(..., description="Updated at")

    class Config:
        from_attributes = True

    @property
    def is_paid(self) -> bool:
        return self.status == "paid"
