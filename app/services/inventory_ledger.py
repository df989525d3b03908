import logging
from decimal import Decimal
from typing import Any, Dict, List

from tortoise.transactions import in_transaction

from app.core.exceptions import InvalidArgumentError, NotFoundError
from app.models.inventory import InventoryItem
from app.schemas.stock import DecrementResult, Shortfall

log = logging.getLogger("inventory_ledger")

QUANTITY_STEP = Decimal("0.001")


def quantize_quantity(value) -> Decimal:
    """Rounds a stock quantity to the 3 decimal places the ledger stores."""
    return Decimal(value).quantize(QUANTITY_STEP)


async def try_decrement(inventory_item_id: int, amount: Decimal, conn: Any = None) -> DecrementResult:
    """
    Decrements one inventory item if it holds at least `amount`.

    The row is locked for the read-compare-write, so concurrent decrements
    against the same item are serialized by the database. Without a `conn`
    the call runs in its own transaction.
    """
    amount = quantize_quantity(amount)
    if amount <= 0:
        raise InvalidArgumentError(f"Decrement amount must be positive, got {amount}.")

    if conn is None:
        async with in_transaction() as own_conn:
            return await _try_decrement_locked(inventory_item_id, amount, own_conn)
    return await _try_decrement_locked(inventory_item_id, amount, conn)


async def _try_decrement_locked(inventory_item_id: int, amount: Decimal, conn: Any) -> DecrementResult:
    item = await InventoryItem.filter(id=inventory_item_id).select_for_update().using_db(conn).first()
    if item is None:
        raise NotFoundError(f"Inventory item {inventory_item_id} not found.")

    current = quantize_quantity(item.quantity)
    if current < amount:
        log.warning(
            f"Insufficient stock for inventory item {inventory_item_id}: "
            f"requested {amount}, available {current}"
        )
        return DecrementResult(applied=False, available=current)

    item.quantity = current - amount
    await item.save(update_fields=["quantity", "updated_at"], using_db=conn)
    log.info(f"Inventory item {inventory_item_id} decremented by {amount}, now {item.quantity}")
    return DecrementResult(applied=True, available=item.quantity)


async def decrement_many(restaurant_id: str, demand: Dict[int, Decimal], conn: Any) -> List[Shortfall]:
    """
    Applies aggregated demand as one unit: every row is locked in ascending id
    order and checked before any write, so either all decrements land or none do.

    Returns the shortfalls (empty when applied). Raises NotFoundError, before
    writing anything, if an item is missing or belongs to another restaurant.
    Must run inside a database transaction (`conn`).
    """
    if not demand:
        return []
    for item_id, amount in demand.items():
        if amount <= 0:
            raise InvalidArgumentError(f"Decrement amount for inventory item {item_id} must be positive.")

    item_ids = sorted(demand)
    # CRITICAL: lock order by primary key, so two reconciliations touching the
    # same items cannot deadlock each other.
    locked = await (
        InventoryItem.filter(id__in=item_ids, restaurant_id=restaurant_id)
        .order_by("id")
        .select_for_update()
        .using_db(conn)
    )
    items = {item.id: item for item in locked}

    missing = [item_id for item_id in item_ids if item_id not in items]
    if missing:
        raise NotFoundError(
            f"Inventory items {missing} not found for restaurant {restaurant_id}.",
            details={"missing": missing},
        )

    shortfalls = []
    for item_id in item_ids:
        available = quantize_quantity(items[item_id].quantity)
        required = quantize_quantity(demand[item_id])
        if available < required:
            shortfalls.append(Shortfall(
                inventory_item_id=item_id,
                required=required,
                available=available,
                shortfall=required - available,
            ))
    if shortfalls:
        return shortfalls

    for item_id in item_ids:
        item = items[item_id]
        item.quantity = quantize_quantity(item.quantity) - quantize_quantity(demand[item_id])
        await item.save(update_fields=["quantity", "updated_at"], using_db=conn)
        log.info(f"Inventory item {item_id} decremented by {demand[item_id]}, now {item.quantity}")
    return []
