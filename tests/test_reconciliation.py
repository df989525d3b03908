import asyncio
from decimal import Decimal

import pytest

from app.models.inventory import InventoryItem
from app.models.menu import MenuInventory, MenuItem
from app.schemas.stock import LineItem
from app.services.reconciliation import reconcile
from helpers import OTHER_RESTAURANT_ID, RESTAURANT_ID, stock_of


def lines(*pairs):
    return [LineItem(menu_item_id=item.id, quantity=qty) for item, qty in pairs]


@pytest.mark.asyncio
async def test_order_within_stock_commits(kitchen):
    """Pizza x2 + Calzone x1 needs 4 + 3 = 7 cheese out of 10."""
    result = await reconcile(RESTAURANT_ID, lines((kitchen.pizza, 2), (kitchen.calzone, 1)))

    assert result.committed
    assert result.demand == {kitchen.cheese.id: Decimal("7")}
    assert await stock_of(kitchen.cheese) == Decimal("3")


@pytest.mark.asyncio
async def test_order_over_stock_is_rejected_untouched(kitchen):
    """Pizza x3 + Calzone x2 needs 6 + 6 = 12 cheese out of 10."""
    result = await reconcile(RESTAURANT_ID, lines((kitchen.pizza, 3), (kitchen.calzone, 2)))

    assert result.status == "rejected"
    assert result.reason == "insufficient_stock"
    assert len(result.shortfalls) == 1
    shortfall = result.shortfalls[0]
    assert shortfall.inventory_item_id == kitchen.cheese.id
    assert shortfall.required == Decimal("12")
    assert shortfall.available == Decimal("10")
    assert shortfall.shortfall == Decimal("2")
    assert await stock_of(kitchen.cheese) == Decimal("10")


@pytest.mark.asyncio
async def test_shared_ingredient_demand_is_summed_before_checking(kitchen):
    """
    With 5 cheese, Pizza x2 (4) alone fits and Calzone x1 (3) alone fits;
    together they do not, and neither line may be applied.
    """
    kitchen.cheese.quantity = Decimal("5")
    await kitchen.cheese.save()

    result = await reconcile(RESTAURANT_ID, lines((kitchen.pizza, 2), (kitchen.calzone, 1)))

    assert result.reason == "insufficient_stock"
    assert result.shortfalls[0].required == Decimal("7")
    assert await stock_of(kitchen.cheese) == Decimal("5")


@pytest.mark.asyncio
async def test_repeated_menu_item_lines_decrement_once_by_the_sum(kitchen):
    result = await reconcile(RESTAURANT_ID, lines((kitchen.pizza, 1), (kitchen.pizza, 2)))

    assert result.committed
    assert result.demand == {kitchen.cheese.id: Decimal("6")}
    assert await stock_of(kitchen.cheese) == Decimal("4")


@pytest.mark.asyncio
async def test_one_short_ingredient_leaves_every_item_unchanged(kitchen):
    flour = await InventoryItem.create(
        restaurant_id=RESTAURANT_ID, name="Flour", unit="kg", quantity=Decimal("1.000")
    )
    await MenuInventory.create(
        restaurant_id=RESTAURANT_ID, menu_item=kitchen.pizza, inventory_item=flour, quantity=Decimal("0.500")
    )

    result = await reconcile(RESTAURANT_ID, lines((kitchen.pizza, 3)))

    assert result.reason == "insufficient_stock"
    assert [s.inventory_item_id for s in result.shortfalls] == [flour.id]
    assert await stock_of(kitchen.cheese) == Decimal("10")
    assert await stock_of(flour) == Decimal("1")


@pytest.mark.asyncio
async def test_fractional_recipe_quantities(kitchen):
    basil = await InventoryItem.create(restaurant_id=RESTAURANT_ID, name="Basil", unit="kg", quantity=Decimal("0.010"))
    await MenuInventory.create(
        restaurant_id=RESTAURANT_ID, menu_item=kitchen.pizza, inventory_item=basil, quantity=Decimal("0.003")
    )

    result = await reconcile(RESTAURANT_ID, lines((kitchen.pizza, 3)))

    assert result.committed
    assert await stock_of(basil) == Decimal("0.001")
    assert await stock_of(kitchen.cheese) == Decimal("4")


@pytest.mark.asyncio
async def test_items_without_recipe_commit_without_stock_change(kitchen):
    result = await reconcile(RESTAURANT_ID, lines((kitchen.water, 5)))

    assert result.committed
    assert result.demand == {}
    assert await stock_of(kitchen.cheese) == Decimal("10")


@pytest.mark.asyncio
async def test_unknown_menu_item_is_rejected(kitchen):
    result = await reconcile(
        RESTAURANT_ID, [LineItem(menu_item_id=kitchen.pizza.id, quantity=1), LineItem(menu_item_id=777, quantity=1)]
    )

    assert result.status == "rejected"
    assert result.reason == "not_found"
    assert "777" in result.message
    assert await stock_of(kitchen.cheese) == Decimal("10")


@pytest.mark.asyncio
async def test_menu_item_of_another_restaurant_is_rejected(kitchen):
    result = await reconcile(OTHER_RESTAURANT_ID, lines((kitchen.pizza, 1)))

    assert result.reason == "not_found"
    assert await stock_of(kitchen.cheese) == Decimal("10")


@pytest.mark.asyncio
async def test_recipe_pointing_at_foreign_inventory_is_rejected(kitchen):
    foreign = await InventoryItem.create(
        restaurant_id=OTHER_RESTAURANT_ID, name="Ham", unit="kg", quantity=Decimal("50")
    )
    await MenuInventory.create(
        restaurant_id=RESTAURANT_ID, menu_item=kitchen.calzone, inventory_item=foreign, quantity=Decimal("1")
    )

    result = await reconcile(RESTAURANT_ID, lines((kitchen.calzone, 1)))

    assert result.reason == "not_found"
    assert result.missing == [foreign.id]
    assert await stock_of(kitchen.cheese) == Decimal("10")
    assert await stock_of(foreign) == Decimal("50")


@pytest.mark.asyncio
async def test_empty_line_items_are_invalid(kitchen):
    result = await reconcile(RESTAURANT_ID, [])

    assert result.status == "rejected"
    assert result.reason == "invalid_argument"


@pytest.mark.asyncio
async def test_concurrent_reconciliations_never_oversell(db):
    """Q=10, a=3, N=5: exactly floor(10/3)=3 commits, 2 rejections, 1 left."""
    tomato = await InventoryItem.create(
        restaurant_id=RESTAURANT_ID, name="Tomato", unit="kg", quantity=Decimal("10")
    )
    bruschetta = await MenuItem.create(restaurant_id=RESTAURANT_ID, name="Bruschetta", price=Decimal("6.00"))
    await MenuInventory.create(
        restaurant_id=RESTAURANT_ID, menu_item=bruschetta, inventory_item=tomato, quantity=Decimal("3")
    )

    results = await asyncio.gather(*[
        reconcile(RESTAURANT_ID, lines((bruschetta, 1))) for _ in range(5)
    ])

    committed = [r for r in results if r.committed]
    rejected = [r for r in results if not r.committed]
    assert len(committed) == 3
    assert len(rejected) == 2
    assert all(r.reason == "insufficient_stock" for r in rejected)
    assert await stock_of(tomato) == Decimal("1")
