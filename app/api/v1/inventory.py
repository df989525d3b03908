import logging
from fastapi import APIRouter, HTTPException, status
from app.models.inventory import InventoryItem, Supplier
from app.schemas.inventory import (
    InventoryItemRequest,
    InventoryItemResponse,
    InventoryItemUpdate,
    SupplierRequest,
    SupplierResponse,
)
from app.schemas.response import SuccessResponse

log = logging.getLogger("uvicorn")

router = APIRouter()


async def _check_supplier(supplier_id, restaurant_id: str):
    if supplier_id is None:
        return
    if not await Supplier.filter(id=supplier_id, restaurant_id=restaurant_id).exists():
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Supplier with ID {supplier_id} not found."
        )


@router.get("/suppliers", response_model=SuccessResponse)
async def list_suppliers(restaurant_id: str):
    suppliers = await Supplier.filter(restaurant_id=restaurant_id).order_by("name")
    return SuccessResponse(data=[SupplierResponse.model_validate(s).model_dump(mode="json") for s in suppliers])


@router.post("/suppliers", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
async def add_supplier(supplier_data: SupplierRequest):
    supplier = await Supplier.create(**supplier_data.model_dump())
    log.info(f"Supplier {supplier.id} created for restaurant {supplier.restaurant_id}.")
    return SuccessResponse(data=SupplierResponse.model_validate(supplier).model_dump(mode="json"))


@router.get("/items", response_model=SuccessResponse)
async def list_inventory_items(restaurant_id: str):
    """Lists stock items for a restaurant."""
    items = await InventoryItem.filter(restaurant_id=restaurant_id).order_by("name")
    return SuccessResponse(data=[InventoryItemResponse.model_validate(i).model_dump(mode="json") for i in items])


@router.post("/items", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
async def add_inventory_item(item_data: InventoryItemRequest):
    """Adds a stock item with its initial quantity."""
    await _check_supplier(item_data.supplier_id, item_data.restaurant_id)
    item = await InventoryItem.create(**item_data.model_dump())
    log.info(f"Inventory item '{item.name}' added for restaurant {item.restaurant_id}.")
    return SuccessResponse(data=InventoryItemResponse.model_validate(item).model_dump(mode="json"))


@router.get("/items/{item_id}", response_model=SuccessResponse)
async def get_inventory_item(item_id: int):
    """Fetches the available stock for a specific inventory item."""
    item = await InventoryItem.get_or_none(id=item_id)
    if not item:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Inventory item not found.")
    return SuccessResponse(data=InventoryItemResponse.model_validate(item).model_dump(mode="json"))


@router.put("/items/{item_id}", response_model=SuccessResponse)
async def update_inventory_item(item_id: int, item_data: InventoryItemUpdate):
    """
    Overwrites stock item fields. A quantity set here bypasses the ledger and
    is not serialized against in-flight sales.
    """
    item = await InventoryItem.get_or_none(id=item_id)
    if not item:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Inventory item not found.")

    changes = item_data.model_dump(exclude_unset=True, exclude_none=True)
    if "supplier_id" in changes:
        await _check_supplier(changes["supplier_id"], item.restaurant_id)
    item.update_from_dict(changes)
    await item.save()
    return SuccessResponse(data=InventoryItemResponse.model_validate(item).model_dump(mode="json"))


@router.delete("/items/{item_id}", response_model=SuccessResponse)
async def delete_inventory_item(item_id: int):
    deleted = await InventoryItem.filter(id=item_id).delete()
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Inventory item not found.")
    return SuccessResponse(data={"message": "Inventory item deleted successfully"})
