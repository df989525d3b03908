from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.response import Money, Quantity
from app.schemas.stock import RecipeComponent


class MenuItemRequest(BaseModel):
    restaurant_id: str = Field(..., max_length=255)
    name: str = Field(..., max_length=255, description="Name of the dish (e.g., Margherita Pizza).")
    price: Decimal = Field(..., ge=0, decimal_places=2, description="Selling price of the item.")
    category_id: Optional[int] = None
    is_active: bool = Field(True, description="Whether the menu item is active.")
    stock: Optional[int] = Field(None, description="Legacy per-dish counter, not tied to inventory.")


class MenuItemUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=255)
    price: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    category_id: Optional[int] = None
    is_active: Optional[bool] = None
    stock: Optional[int] = None


class MenuItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    restaurant_id: str
    name: str
    price: Money
    category_id: Optional[int] = None
    is_active: bool
    stock: Optional[int] = None


class RecipeLineRequest(BaseModel):
    restaurant_id: str = Field(..., max_length=255)
    menu_item_id: int
    inventory_item_id: int
    quantity: Decimal = Field(..., ge=Decimal("0.001"), decimal_places=3, description="Consumed per unit sold.")


class RecipeLineUpdate(BaseModel):
    inventory_item_id: Optional[int] = None
    quantity: Optional[Decimal] = Field(None, ge=Decimal("0.001"), decimal_places=3)


class RecipeLineResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    restaurant_id: str
    menu_item_id: int
    inventory_item_id: int
    quantity: Quantity


class RecipeResponse(BaseModel):
    menu_item_id: int
    components: List[RecipeComponent]
