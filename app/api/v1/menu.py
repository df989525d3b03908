import logging
from fastapi import APIRouter, HTTPException, status
from app.core.exceptions import NotFoundError
from app.models.inventory import InventoryItem
from app.models.menu import MenuInventory, MenuItem
from app.schemas.menu import (
    MenuItemRequest,
    MenuItemResponse,
    MenuItemUpdate,
    RecipeLineRequest,
    RecipeLineResponse,
    RecipeLineUpdate,
    RecipeResponse,
)
from app.schemas.response import SuccessResponse
from app.services.recipe_resolver import resolve_recipe

log = logging.getLogger("uvicorn")

router = APIRouter()


@router.get("/items", response_model=SuccessResponse)
async def list_menu_items(restaurant_id: str, active_only: bool = False):
    query = MenuItem.filter(restaurant_id=restaurant_id)
    if active_only:
        query = query.filter(is_active=True)
    items = await query.order_by("name")
    return SuccessResponse(data=[MenuItemResponse.model_validate(m).model_dump(mode="json") for m in items])


@router.post("/items", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
async def add_menu_item(item_data: MenuItemRequest):
    menu_item = await MenuItem.create(**item_data.model_dump())
    log.info(f"Menu item '{menu_item.name}' added for restaurant {menu_item.restaurant_id}.")
    return SuccessResponse(data=MenuItemResponse.model_validate(menu_item).model_dump(mode="json"))


@router.get("/items/{menu_item_id}", response_model=SuccessResponse)
async def get_menu_item(menu_item_id: int):
    menu_item = await MenuItem.get_or_none(id=menu_item_id)
    if not menu_item:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Menu item not found.")
    return SuccessResponse(data=MenuItemResponse.model_validate(menu_item).model_dump(mode="json"))


@router.put("/items/{menu_item_id}", response_model=SuccessResponse)
async def update_menu_item(menu_item_id: int, item_data: MenuItemUpdate):
    menu_item = await MenuItem.get_or_none(id=menu_item_id)
    if not menu_item:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Menu item not found.")
    menu_item.update_from_dict(item_data.model_dump(exclude_unset=True, exclude_none=True))
    await menu_item.save()
    return SuccessResponse(data=MenuItemResponse.model_validate(menu_item).model_dump(mode="json"))


@router.get("/items/{menu_item_id}/recipe", response_model=SuccessResponse)
async def get_menu_item_recipe(menu_item_id: int):
    """Inventory consumed by one unit of the dish."""
    try:
        components = await resolve_recipe(menu_item_id)
    except NotFoundError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())
    data = RecipeResponse(menu_item_id=menu_item_id, components=components).model_dump(mode="json")
    return SuccessResponse(data=data)


@router.get("/recipe-lines", response_model=SuccessResponse)
async def list_recipe_lines(restaurant_id: str):
    lines = await MenuInventory.filter(restaurant_id=restaurant_id).order_by("menu_item_id", "id")
    return SuccessResponse(data=[RecipeLineResponse.model_validate(line).model_dump(mode="json") for line in lines])


@router.post("/recipe-lines", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
async def add_recipe_line(line_data: RecipeLineRequest):
    """Links a menu item to the inventory item it consumes."""
    menu_item = await MenuItem.get_or_none(id=line_data.menu_item_id, restaurant_id=line_data.restaurant_id)
    if not menu_item:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Menu item not found.")
    inventory_item = await InventoryItem.get_or_none(
        id=line_data.inventory_item_id, restaurant_id=line_data.restaurant_id
    )
    if not inventory_item:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Inventory item not found.")

    line = await MenuInventory.create(
        restaurant_id=line_data.restaurant_id,
        menu_item=menu_item,
        inventory_item=inventory_item,
        quantity=line_data.quantity,
    )
    return SuccessResponse(data=RecipeLineResponse.model_validate(line).model_dump(mode="json"))


@router.put("/recipe-lines/{line_id}", response_model=SuccessResponse)
async def update_recipe_line(line_id: int, line_data: RecipeLineUpdate):
    line = await MenuInventory.get_or_none(id=line_id)
    if not line:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Recipe line not found.")

    changes = line_data.model_dump(exclude_unset=True, exclude_none=True)
    if "inventory_item_id" in changes:
        exists = await InventoryItem.filter(
            id=changes["inventory_item_id"], restaurant_id=line.restaurant_id
        ).exists()
        if not exists:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Inventory item not found.")
    line.update_from_dict(changes)
    await line.save()
    return SuccessResponse(data=RecipeLineResponse.model_validate(line).model_dump(mode="json"))


@router.delete("/recipe-lines/{line_id}", response_model=SuccessResponse)
async def delete_recipe_line(line_id: int):
    deleted = await MenuInventory.filter(id=line_id).delete()
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Recipe line not found.")
    return SuccessResponse(data={"message": "Recipe line deleted successfully"})
