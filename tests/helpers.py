from decimal import Decimal

from app.models.inventory import InventoryItem

RESTAURANT_ID = "resto-1"
OTHER_RESTAURANT_ID = "resto-2"


async def stock_of(item) -> Decimal:
    """Current stored quantity of an inventory item."""
    return (await InventoryItem.get(id=item.id)).quantity
