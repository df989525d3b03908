import logging
from decimal import Decimal
from typing import Dict, List, Optional, Set

from tortoise.transactions import in_transaction

from app.core.config import DEFAULT_PAYMENT_TYPE
from app.core.exceptions import InvalidArgumentError, InvalidTransitionError, NotFoundError
from app.events.outbox_utility import create_outbox_event
from app.models.menu import MenuItem
from app.models.order import Order, OrderItem, OrderStatus
from app.schemas.stock import LineItem
from app.services.transaction_service import record_sale

log = logging.getLogger("order_service")

# Completed and Rejected have no outgoing transitions.
ALLOWED_TRANSITIONS: Dict[OrderStatus, Set[OrderStatus]] = {
    OrderStatus.PROCESSING: {OrderStatus.ACCEPTED, OrderStatus.REJECTED, OrderStatus.COMPLETED},
    OrderStatus.ACCEPTED: {OrderStatus.COMPLETED, OrderStatus.REJECTED},
    OrderStatus.COMPLETED: set(),
    OrderStatus.REJECTED: set(),
}


async def create_order(
    restaurant_id: str,
    user_id: int,
    items: List[Dict],
    table_number: Optional[str] = None,
    device_token: Optional[str] = None,
) -> Order:
    """
    Creates the Order header and its lines in the initial `processing` status.
    Unit prices are captured from the menu at order time. Stock is untouched
    until the order completes.
    """
    if not items:
        raise InvalidArgumentError("Order must contain items.")

    async with in_transaction() as conn:
        menu_item_ids = [int(it["menu_item_id"]) for it in items]
        menu_items = await MenuItem.filter(
            id__in=menu_item_ids, restaurant_id=restaurant_id, is_active=True
        ).using_db(conn)
        menu_map = {m.id: m for m in menu_items}

        order = await Order.create(
            restaurant_id=restaurant_id,
            user_id=user_id,
            table_number=table_number,
            device_token=device_token,
            status=OrderStatus.PROCESSING,
            using_db=conn
        )

        for it in items:
            mid = int(it["menu_item_id"])
            qty = int(it["quantity"])
            menu = menu_map.get(mid)

            if not menu:
                raise NotFoundError(f"Menu item {mid} not found or inactive.")
            if qty <= 0:
                raise InvalidArgumentError(f"Quantity for menu item {mid} must be positive.")

            await OrderItem.create(
                order=order,
                menu_item=menu,
                quantity=qty,
                unit_price=menu.price,
                using_db=conn
            )

    log.info(f"Order {order.id} created for restaurant {restaurant_id}")
    return order


async def get_order_by_id(order_id: int) -> Optional[Order]:
    """Fetches order details with items, including the menu item name."""
    return await Order.get_or_none(id=order_id).prefetch_related('items', 'items__menu_item')


async def list_orders(restaurant_id: str) -> List[Order]:
    return await Order.filter(restaurant_id=restaurant_id).order_by('-created_at').prefetch_related(
        'items', 'items__menu_item'
    )


def order_total(order: Order) -> Decimal:
    return sum((item.unit_price * item.quantity for item in order.items), Decimal("0"))


async def transition_order_status(
    order_id: int,
    new_status: OrderStatus,
    payment_type: Optional[str] = None,
) -> Order:
    """
    Moves an order through its lifecycle.

    Entering `complete` reconciles stock for the order's lines and records the
    sale as a Transaction, in the same database transaction as the status
    write. If reconciliation is rejected, ReconciliationFailedError propagates
    and the order keeps its previous status. Every other allowed transition is
    a plain status write.
    """
    async with in_transaction() as conn:
        # Lock the order row so two completions of the same order serialize
        order = await Order.filter(id=order_id).select_for_update().using_db(conn).first()
        if not order:
            raise NotFoundError(f"Order {order_id} not found.")

        old_status = order.status
        if new_status not in ALLOWED_TRANSITIONS[old_status]:
            if not ALLOWED_TRANSITIONS[old_status]:
                raise InvalidTransitionError(
                    f"Order is already in a final state: {old_status.value}. Status cannot be updated."
                )
            raise InvalidTransitionError(
                f"Cannot move order from {old_status.value} to {new_status.value}."
            )

        if new_status == OrderStatus.COMPLETED:
            order_items = await OrderItem.filter(order_id=order.id).order_by('id').using_db(conn)
            lines = [
                LineItem(menu_item_id=item.menu_item_id, quantity=item.quantity, price=item.unit_price)
                for item in order_items
            ]
            await record_sale(
                conn,
                restaurant_id=order.restaurant_id,
                user_id=order.user_id,
                items=lines,
                tax=Decimal("0"),
                discount=Decimal("0"),
                payment_type=payment_type or DEFAULT_PAYMENT_TYPE,
                table_number=order.table_number,
                order=order,
            )

        order.status = new_status
        await order.save(update_fields=['status', 'updated_at'], using_db=conn)

        # Notification for the customer's device, dispatched by the outbox poller
        await create_outbox_event(
            aggregate_type="order",
            aggregate_id=order.id,
            event_type=f"order.status.{new_status.value}.v1",
            payload={
                "order_id": order.id,
                "restaurant_id": order.restaurant_id,
                "old_status": old_status.value,
                "new_status": new_status.value,
                "user_id": order.user_id,
                "device_token": order.device_token,
            },
            conn=conn
        )

    log.info(f"Order {order_id} moved from {old_status.value} to {new_status.value}")
    return order


async def delete_order(order_id: int) -> None:
    """Deletes the order. Stock consumed by a completed order is not restored."""
    deleted = await Order.filter(id=order_id).delete()
    if not deleted:
        raise NotFoundError(f"Order {order_id} not found.")
    log.info(f"Order {order_id} deleted; inventory left unchanged")


async def get_unseen_orders(restaurant_id: str) -> List[Order]:
    """Orders staff have not acknowledged yet."""
    return await Order.filter(restaurant_id=restaurant_id, notification=False).order_by('created_at')


async def mark_order_seen(order_id: int, restaurant_id: str) -> None:
    updated = await Order.filter(id=order_id, restaurant_id=restaurant_id).update(notification=True)
    if not updated:
        raise NotFoundError(f"Order {order_id} not found for restaurant {restaurant_id}.")
