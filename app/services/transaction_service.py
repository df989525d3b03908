import logging
from decimal import Decimal
from typing import Any, List, Optional, Sequence

from tortoise.transactions import in_transaction

from app.core.exceptions import InvalidArgumentError, NotFoundError, ReconciliationFailedError
from app.models.menu import MenuItem
from app.models.order import Order
from app.models.transaction import Transaction, TransactionItem
from app.schemas.stock import LineItem
from app.services.reconciliation import reconcile

log = logging.getLogger("transaction_service")

MONEY_STEP = Decimal("0.01")


async def record_sale(
    conn: Any,
    restaurant_id: str,
    user_id: int,
    items: Sequence[LineItem],
    tax: Decimal,
    discount: Decimal,
    payment_type: str,
    table_number: Optional[str] = None,
    order: Optional[Order] = None,
) -> Transaction:
    """
    Reconciles stock for a sale and writes the Transaction with its items.

    Runs inside the caller's database transaction: nothing is written unless
    reconciliation commits, and any exception rolls the caller back.
    """
    if not items:
        raise InvalidArgumentError("Transaction must contain items.")

    menu_item_ids = {line.menu_item_id for line in items}
    menu_items = await MenuItem.filter(id__in=menu_item_ids, restaurant_id=restaurant_id).using_db(conn)
    menu_map = {m.id: m for m in menu_items}
    missing = sorted(menu_item_ids - set(menu_map))
    if missing:
        raise NotFoundError(f"Menu items {missing} not found.", details={"missing": missing})

    sub_total = Decimal("0")
    for line in items:
        price = line.price if line.price is not None else menu_map[line.menu_item_id].price
        sub_total += Decimal(price) * line.quantity
    sub_total = sub_total.quantize(MONEY_STEP)
    total = (sub_total + tax - discount).quantize(MONEY_STEP)
    if total < 0:
        raise InvalidArgumentError(f"Discount {discount} exceeds the amount due ({sub_total + tax}).")

    result = await reconcile(restaurant_id, items, conn=conn)
    if not result.committed:
        raise ReconciliationFailedError(result)

    transaction = await Transaction.create(
        restaurant_id=restaurant_id,
        user_id=user_id,
        table_number=table_number,
        order=order,
        tax=tax,
        discount=discount,
        sub_total=sub_total,
        total=total,
        payment_type=payment_type,
        using_db=conn,
    )
    for line in items:
        menu = menu_map[line.menu_item_id]
        await TransactionItem.create(
            transaction=transaction,
            menu_item=menu,
            item_name=menu.name,
            quantity=line.quantity,
            price=line.price if line.price is not None else menu.price,
            using_db=conn,
        )

    log.info(f"Transaction {transaction.id} recorded for restaurant {restaurant_id}, total {total}")
    return transaction


async def create_transaction(
    restaurant_id: str,
    user_id: int,
    items: Sequence[LineItem],
    tax: Decimal = Decimal("0"),
    discount: Decimal = Decimal("0"),
    payment_type: str = "cash",
    table_number: Optional[str] = None,
) -> Transaction:
    """Point-of-sale entry: records a sale that did not come through an order."""
    async with in_transaction() as conn:
        transaction = await record_sale(
            conn,
            restaurant_id=restaurant_id,
            user_id=user_id,
            items=items,
            tax=tax,
            discount=discount,
            payment_type=payment_type,
            table_number=table_number,
        )
    return await get_transaction_by_id(transaction.id)


async def get_transaction_by_id(transaction_id: int) -> Optional[Transaction]:
    return await Transaction.get_or_none(id=transaction_id).prefetch_related('items')


async def list_transactions(restaurant_id: str) -> List[Transaction]:
    return await Transaction.filter(restaurant_id=restaurant_id).order_by('-created_at').prefetch_related('items')


async def delete_transaction(transaction_id: int) -> None:
    """Deletes the record only. Consumed stock is not returned to inventory."""
    deleted = await Transaction.filter(id=transaction_id).delete()
    if not deleted:
        raise NotFoundError(f"Transaction {transaction_id} not found.")
    log.info(f"Transaction {transaction_id} deleted; inventory left unchanged")
