from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class InventoryItemRead(BaseModel):
    """Read model for a stocked inventory item."""
    id: UUID = Field(..., description="Item ID")
    name: str = Field(..., description="Item name")
    description: Optional[str] = Field(None, description="Free-text description")
    sku: str = Field(..., description="Stock keeping unit")
    category: Optional[str] = Field(None, description="Item category")
    price: float = Field(0.0, description="Unit price")
    discount: float = Field(0.0, ge=0, le=100, description="Discount percentage (0-100)")
    stock: int = Field(0, ge=0, description="Quantity on hand")
    min_stock: int = Field(0, ge=0, description="Reorder threshold; low stock when stock <= min_stock")
    image_url: Optional[str] = Field(None, description="Product image URL")
    created_at: datetime = Field(..., description="Creation timestamp (UTC)")
    updated_at: datetime = Field(..., description="Last update timestamp (UTC)")

    class Config:
        from_attributes = True

    @property
    def is_low_stock(self) -> bool:
        return self.stock <= self.min_stock
