import logging
from fastapi import APIRouter, HTTPException, status
from app.core.exceptions import RestaurantServiceError
from app.schemas.response import SuccessResponse
from app.services.order_service import (
    create_order,
    delete_order,
    get_order_by_id,
    get_unseen_orders,
    list_orders,
    mark_order_seen,
    order_total,
    transition_order_status,
)
from app.models.order import Order
from app.schemas.order import OrderRequest, OrderStatusUpdate, OrderDetailResponse, OrderItemResponse

router = APIRouter()
log = logging.getLogger("uvicorn")


def _order_detail(order: Order) -> dict:
    """Shapes an order with prefetched items for output."""
    items = [
        OrderItemResponse(
            item_id=i.menu_item_id,
            item_name=i.menu_item.name,
            quantity=i.quantity,
            price=i.unit_price,
            item_total=i.unit_price * i.quantity,
        )
        for i in order.items
    ]
    return OrderDetailResponse(
        id=order.id,
        restaurant_id=order.restaurant_id,
        table_number=order.table_number,
        user_id=order.user_id,
        status=order.status,
        items=items,
        total=order_total(order),
        created_at=str(order.created_at),
        updated_at=str(order.updated_at),
    ).model_dump(mode="json")


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
async def create_order_endpoint(request_data: OrderRequest):
    """Places a new order in the `processing` state."""
    try:
        items_data = [
            {"menu_item_id": item.menu_item_id, "quantity": item.quantity}
            for item in request_data.items
        ]
        order = await create_order(
            restaurant_id=request_data.restaurant_id,
            user_id=request_data.user_id,
            items=items_data,
            table_number=request_data.table_number,
            device_token=request_data.device_token,
        )
        log.info(f"Order {order.id} placed successfully for user {request_data.user_id}.")
        order = await get_order_by_id(order.id)
        return SuccessResponse(data=_order_detail(order))
    except RestaurantServiceError as e:
        log.error(f"Error placing order: {e.message}")
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())


@router.get("/", response_model=SuccessResponse)
async def list_orders_endpoint(restaurant_id: str):
    """Lists a restaurant's orders, newest first."""
    orders = await list_orders(restaurant_id)
    return SuccessResponse(data=[_order_detail(o) for o in orders])


@router.get("/notifications/{restaurant_id}", response_model=SuccessResponse)
async def unseen_orders_endpoint(restaurant_id: str):
    """Orders the restaurant staff has not acknowledged yet."""
    orders = await get_unseen_orders(restaurant_id)
    data = [
        {"id": o.id, "table_number": o.table_number, "status": o.status.value, "created_at": str(o.created_at)}
        for o in orders
    ]
    return SuccessResponse(data=data)


@router.get("/{order_id}", response_model=SuccessResponse)
async def get_order_endpoint(order_id: int):
    """Fetches details for a specific order."""
    order = await get_order_by_id(order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return SuccessResponse(data=_order_detail(order))


@router.put("/{order_id}/status", response_model=SuccessResponse)
async def update_status_endpoint(order_id: int, payload: OrderStatusUpdate):
    """
    Updates status ('accept', 'reject', 'complete'). Completing an order
    consumes inventory; a stock shortfall leaves the order unchanged.
    """
    try:
        await transition_order_status(order_id, payload.status, payload.payment_type)
    except RestaurantServiceError as e:
        log.error(f"Error updating order {order_id} status: {e.message}")
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())

    order = await get_order_by_id(order_id)
    return SuccessResponse(data={
        "message": "Order status updated successfully",
        "order": _order_detail(order),
    })


@router.patch("/{order_id}/notification", response_model=SuccessResponse)
async def mark_seen_endpoint(order_id: int, restaurant_id: str):
    try:
        await mark_order_seen(order_id, restaurant_id)
    except RestaurantServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())
    return SuccessResponse(data={"message": "Notification status updated successfully"})


@router.delete("/{order_id}", response_model=SuccessResponse)
async def delete_order_endpoint(order_id: int):
    """Deletes an order. Inventory consumed by it is not restocked."""
    try:
        await delete_order(order_id)
    except RestaurantServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())
    return SuccessResponse(data={"message": "Order deleted successfully"})
