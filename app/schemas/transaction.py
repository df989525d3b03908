from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from app.schemas.response import Money
from app.schemas.stock import LineItem


class TransactionRequest(BaseModel):
    restaurant_id: str = Field(..., max_length=255)
    user_id: int
    items: List[LineItem] = Field(..., min_length=1)
    tax: Decimal = Field(Decimal("0"), ge=0)
    discount: Decimal = Field(Decimal("0"), ge=0)
    type: str = Field(..., max_length=32, description="Payment type (cash, card, ...).")
    table_number: Optional[str] = Field(None, max_length=32)


class TransactionItemResponse(BaseModel):
    item_id: int
    item_name: str
    quantity: int
    price: Money


class TransactionResponse(BaseModel):
    id: int
    restaurant_id: str
    user_id: int
    order_id: Optional[int] = None
    table_number: Optional[str] = None
    items: List[TransactionItemResponse]
    tax: Money
    discount: Money
    sub_total: Money
    total: Money
    payment_type: str
    created_at: str
