from __future__ import annotations

from datetime import date, datetime
from typing import List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field

PurchaseOrderStatus = Literal["pending", "received", "cancelled"]


class SupplierRead(BaseModel):
    """Supplier read model."""
    id: UUID = Field(..., description="Supplier ID")
    name: str = Field(..., description="Supplier name")
    contact_person: Optional[str] = Field(None)
    email: Optional[str] = Field(None)
    phone: Optional[str] = Field(None)
    address: Optional[str] = Field(None)
    notes: Optional[str] = Field(None)
    last_transaction_date: Optional[datetime] = Field(None)
    created_at: datetime = Field(..., description="Created at")
    updated_at: datetime = Field(..., description="Updated at")

    class Config:
        from_attributes = True


class PurchaseOrderItemRead(BaseModel):
    """PO line read model."""
    product_id: UUID = Field(..., description="Ordered inventory item")
    product_name: str = Field(..., description="Item name at time of order")
    quantity: int = Field(..., description="Ordered qty")
    unit_price: float = Field(..., description="Unit cost")
    total: float = Field(..., description="Line total")

    class Config:
        from_attributes = True


class PurchaseOrderRead(BaseModel):
    """PO header read model with its lines."""
    id: UUID = Field(..., description="PO ID")
    po_number: str = Field(..., description="PO number")
    supplier_id: UUID = Field(..., description="Supplier reference (the supplier may no longer exist)")
    supplier_name: Optional[str] = Field(None, description="Supplier name at time of order")
    order_date: date = Field(..., description="Order date")
    expected_delivery_date: Optional[date] = Field(None)
    received_date: Optional[datetime] = Field(None)
    status: PurchaseOrderStatus = Field(..., description="pending | received | cancelled")
    items: List[PurchaseOrderItemRead] = Field(default_factory=list)
    total_amount: float = Field(0.0, description="Order total")
    notes: Optional[str] = Field(None)
    created_at: datetime = Field(..., description="Created at")
    updated_at: datetime = Field(..., description="Updated at")

    class Config:
        from_attributes = True
