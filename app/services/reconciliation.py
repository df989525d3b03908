"""
Stock reconciliation: converts sold menu items into inventory decrements.

Demand is aggregated per inventory item before anything is written, and the
whole set is applied by the ledger in one locked step. A rejected
reconciliation leaves every inventory quantity untouched.
"""
import logging
from decimal import Decimal
from typing import Any, Dict, List, Sequence

from tortoise.transactions import in_transaction

from app.core.exceptions import InvalidArgumentError, NotFoundError
from app.schemas.stock import LineItem, RecipeComponent, ReconciliationResult
from app.services.inventory_ledger import decrement_many, quantize_quantity
from app.services.recipe_resolver import resolve_recipe

log = logging.getLogger("reconciliation")


async def compute_demand(
    restaurant_id: str,
    line_items: Sequence[LineItem],
    conn: Any = None,
) -> Dict[int, Decimal]:
    """Sums recipe consumption per inventory item id across all line items."""
    recipes: Dict[int, List[RecipeComponent]] = {}
    demand: Dict[int, Decimal] = {}

    for line in line_items:
        if line.quantity <= 0:
            raise InvalidArgumentError(f"Quantity for menu item {line.menu_item_id} must be positive.")
        if line.menu_item_id not in recipes:
            recipes[line.menu_item_id] = await resolve_recipe(line.menu_item_id, restaurant_id, conn)

        for component in recipes[line.menu_item_id]:
            needed = quantize_quantity(component.quantity_per_unit * line.quantity)
            demand[component.inventory_item_id] = demand.get(component.inventory_item_id, Decimal("0")) + needed

    return demand


async def reconcile(
    restaurant_id: str,
    line_items: Sequence[LineItem],
    conn: Any = None,
) -> ReconciliationResult:
    """
    Resolves recipes for `line_items`, aggregates demand and decrements stock
    all-or-nothing.

    With `conn` the work joins the caller's database transaction; otherwise a
    transaction is opened here. Failures come back as a rejected result.
    """
    if not line_items:
        return ReconciliationResult(
            status="rejected",
            reason="invalid_argument",
            message="At least one line item is required.",
        )

    if conn is None:
        async with in_transaction() as own_conn:
            return await _reconcile(restaurant_id, line_items, own_conn)
    return await _reconcile(restaurant_id, line_items, conn)


async def _reconcile(restaurant_id: str, line_items: Sequence[LineItem], conn: Any) -> ReconciliationResult:
    try:
        demand = await compute_demand(restaurant_id, line_items, conn)
        shortfalls = await decrement_many(restaurant_id, demand, conn)
    except NotFoundError as e:
        missing = (e.details or {}).get("missing", [])
        log.warning(f"Reconciliation rejected for restaurant {restaurant_id}: {e.message}")
        return ReconciliationResult(status="rejected", reason="not_found", message=e.message, missing=missing)
    except InvalidArgumentError as e:
        log.warning(f"Reconciliation rejected for restaurant {restaurant_id}: {e.message}")
        return ReconciliationResult(status="rejected", reason="invalid_argument", message=e.message)

    if shortfalls:
        ids = [s.inventory_item_id for s in shortfalls]
        message = f"Not enough stock for inventory items {ids}."
        log.warning(f"Reconciliation rejected for restaurant {restaurant_id}: {message}")
        return ReconciliationResult(
            status="rejected",
            reason="insufficient_stock",
            message=message,
            shortfalls=shortfalls,
            demand=demand,
        )

    log.info(f"Reconciliation committed for restaurant {restaurant_id}: {len(demand)} inventory items decremented")
    return ReconciliationResult(status="committed", message="Stock reconciled.", demand=demand)
