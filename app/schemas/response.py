from decimal import Decimal
from pydantic import BaseModel, Field, PlainSerializer
from typing import Annotated, Any, Optional

import uuid


def _rid():
    return uuid.uuid4().hex


def _fixed_point(places: str):
    """JSON serializer that renders a Decimal with a fixed number of places (the ORM normalizes them)."""
    quant = Decimal(places)
    return PlainSerializer(lambda v: str(Decimal(v).quantize(quant)), return_type=str, when_used="json")


# Decimal types for response bodies
Money = Annotated[Decimal, _fixed_point("0.01")]
Quantity = Annotated[Decimal, _fixed_point("0.001")]


class SuccessResponse(BaseModel):
    """Simple success response wrapper with just data, success, and request_id"""
    success: Optional[bool] = Field(default=True)
    request_id: str = Field(default_factory=_rid)
    data: Optional[Any] = None
