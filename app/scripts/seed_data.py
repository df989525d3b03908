# scripts/seed_data.py
import asyncio
import logging
from decimal import Decimal

from app.core.db import init_db, close_db
from app.models.inventory import InventoryItem, Supplier
from app.models.menu import MenuInventory, MenuItem

log = logging.getLogger("seed_data")

RESTAURANT_ID = "demo-restaurant"


async def seed():
    supplier, _ = await Supplier.get_or_create(restaurant_id=RESTAURANT_ID, name="Dairy Farm Co.")

    cheese, _ = await InventoryItem.get_or_create(
        restaurant_id=RESTAURANT_ID, name="Cheese",
        defaults={"unit": "kg", "quantity": Decimal("10.000"), "supplier": supplier},
    )
    dough, _ = await InventoryItem.get_or_create(
        restaurant_id=RESTAURANT_ID, name="Dough",
        defaults={"unit": "kg", "quantity": Decimal("25.000")},
    )

    pizza, _ = await MenuItem.get_or_create(
        restaurant_id=RESTAURANT_ID, name="Pizza", defaults={"price": Decimal("12.50")}
    )
    calzone, _ = await MenuItem.get_or_create(
        restaurant_id=RESTAURANT_ID, name="Calzone", defaults={"price": Decimal("14.00")}
    )
    # No tracked ingredients
    await MenuItem.get_or_create(restaurant_id=RESTAURANT_ID, name="Bottled Water", defaults={"price": Decimal("2.00")})

    recipe = [
        (pizza, cheese, "2.000"),
        (pizza, dough, "0.300"),
        (calzone, cheese, "3.000"),
        (calzone, dough, "0.400"),
    ]
    for menu_item, inventory_item, qty in recipe:
        await MenuInventory.get_or_create(
            restaurant_id=RESTAURANT_ID, menu_item=menu_item, inventory_item=inventory_item,
            defaults={"quantity": Decimal(qty)},
        )

    # Reset stock so the demo is repeatable
    cheese.quantity = Decimal("10.000")
    dough.quantity = Decimal("25.000")
    await cheese.save()
    await dough.save()

    log.info(f"Seeded restaurant {RESTAURANT_ID}: pizza={pizza.id}, calzone={calzone.id}, cheese={cheese.id}")


async def main():
    await init_db()
    try:
        await seed()
    finally:
        await close_db()

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    asyncio.run(main())
