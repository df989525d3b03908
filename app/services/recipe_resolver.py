from typing import Any, List, Optional

from app.core.exceptions import NotFoundError
from app.models.menu import MenuInventory, MenuItem
from app.schemas.stock import RecipeComponent


async def resolve_recipe(
    menu_item_id: int,
    restaurant_id: Optional[str] = None,
    conn: Any = None,
) -> List[RecipeComponent]:
    """
    Returns the (inventory item, quantity per unit) pairs on file for a menu item,
    ordered by recipe line. An empty list is valid: the dish tracks no stock.

    Raises NotFoundError when the menu item does not exist, or belongs to
    another restaurant when `restaurant_id` is given.
    """
    query = MenuItem.filter(id=menu_item_id)
    if restaurant_id is not None:
        query = query.filter(restaurant_id=restaurant_id)
    if not await query.using_db(conn).exists():
        raise NotFoundError(f"Menu item {menu_item_id} not found.")

    lines = await MenuInventory.filter(menu_item_id=menu_item_id).order_by("id").using_db(conn)
    return [
        RecipeComponent(inventory_item_id=line.inventory_item_id, quantity_per_unit=line.quantity)
        for line in lines
    ]
