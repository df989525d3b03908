from decimal import Decimal
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from app.schemas.response import Quantity


class LineItem(BaseModel):
    """A sold menu item as the reconciliation engine sees it."""
    menu_item_id: int
    quantity: int = Field(..., gt=0, description="Units sold.")
    price: Optional[Decimal] = Field(None, ge=0, description="Unit price at sale time.")


class RecipeComponent(BaseModel):
    inventory_item_id: int
    quantity_per_unit: Quantity


class DecrementResult(BaseModel):
    """Outcome of a single ledger decrement. `available` is the quantity after the call."""
    applied: bool
    available: Quantity


class Shortfall(BaseModel):
    inventory_item_id: int
    required: Quantity
    available: Quantity
    shortfall: Quantity


class ReconciliationResult(BaseModel):
    status: Literal["committed", "rejected"]
    reason: Optional[Literal["insufficient_stock", "not_found", "invalid_argument"]] = None
    message: str = ""
    shortfalls: List[Shortfall] = Field(default_factory=list)
    missing: List[int] = Field(default_factory=list)
    # Aggregated demand per inventory item id
    demand: Dict[int, Quantity] = Field(default_factory=dict)

    @property
    def committed(self) -> bool:
        return self.status == "committed"
