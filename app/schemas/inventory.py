from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.response import Quantity


class SupplierRequest(BaseModel):
    restaurant_id: str = Field(..., max_length=255)
    name: str = Field(..., max_length=255, description="Supplier display name.")
    contact: Optional[str] = Field(None, max_length=255)


class SupplierResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    restaurant_id: str
    name: str
    contact: Optional[str] = None


class InventoryItemRequest(BaseModel):
    restaurant_id: str = Field(..., max_length=255)
    name: str = Field(..., max_length=255, description="Name of the stock item (e.g., Cheese).")
    unit: str = Field(..., max_length=10, description="Unit of measure (e.g., kg, pcs).")
    quantity: Decimal = Field(..., ge=0, decimal_places=3, description="Initial stock, up to 3 decimal places.")
    supplier_id: Optional[int] = None


class InventoryItemUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=255)
    unit: Optional[str] = Field(None, max_length=10)
    # Direct overwrite, not checked against concurrent sales
    quantity: Optional[Decimal] = Field(None, ge=0, decimal_places=3)
    supplier_id: Optional[int] = None


class InventoryItemResponse(BaseModel):
    """Schema for fetching inventory stock."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    restaurant_id: str
    name: str
    unit: str
    quantity: Quantity
    supplier_id: Optional[int] = None
    updated_at: Optional[datetime] = None
