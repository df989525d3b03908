from typing import List, Optional

from pydantic import BaseModel, Field

from app.models.order import OrderStatus
from app.schemas.response import Money


class OrderItemRequest(BaseModel):
    """Schema for a single item in the order request."""
    menu_item_id: int
    quantity: int = Field(..., gt=0)


class OrderRequest(BaseModel):
    """Schema for the full order placement request body."""
    restaurant_id: str = Field(..., max_length=255)
    user_id: int
    table_number: Optional[str] = Field(None, max_length=32)
    device_token: Optional[str] = Field(None, max_length=255)
    items: List[OrderItemRequest] = Field(..., min_length=1)


class OrderStatusUpdate(BaseModel):
    """Schema for updating an order status."""
    status: OrderStatus
    payment_type: Optional[str] = Field(None, max_length=32, description="Recorded on completion.")


class OrderItemResponse(BaseModel):
    """Schema for an item inside the detailed order response."""
    item_id: int
    item_name: str
    quantity: int
    price: Money
    item_total: Money


class OrderDetailResponse(BaseModel):
    """Schema for fetching detailed order information."""
    id: int
    restaurant_id: str
    table_number: Optional[str] = None
    user_id: int
    status: OrderStatus
    items: List[OrderItemResponse]
    total: Money
    created_at: str
    updated_at: str
