from decimal import Decimal
from types import SimpleNamespace

import pytest
import pytest_asyncio

from app.core.db import init_db, close_db
from app.models.inventory import InventoryItem
from app.models.menu import MenuInventory, MenuItem
from app.services.notification_service import LoggingNotificationService, set_notification_service
from helpers import RESTAURANT_ID


@pytest_asyncio.fixture
async def db():
    """Fresh in-memory database per test."""
    await init_db("sqlite://:memory:")
    yield
    await close_db()


@pytest_asyncio.fixture
async def kitchen(db):
    """
    Cheese qty=10.0; Pizza consumes 2.0 cheese per unit, Calzone 3.0.
    Bottled water tracks no stock.
    """
    cheese = await InventoryItem.create(
        restaurant_id=RESTAURANT_ID, name="Cheese", unit="kg", quantity=Decimal("10.000")
    )
    pizza = await MenuItem.create(restaurant_id=RESTAURANT_ID, name="Pizza", price=Decimal("12.50"))
    calzone = await MenuItem.create(restaurant_id=RESTAURANT_ID, name="Calzone", price=Decimal("14.00"))
    water = await MenuItem.create(restaurant_id=RESTAURANT_ID, name="Bottled Water", price=Decimal("2.00"))

    await MenuInventory.create(
        restaurant_id=RESTAURANT_ID, menu_item=pizza, inventory_item=cheese, quantity=Decimal("2.000")
    )
    await MenuInventory.create(
        restaurant_id=RESTAURANT_ID, menu_item=calzone, inventory_item=cheese, quantity=Decimal("3.000")
    )
    return SimpleNamespace(cheese=cheese, pizza=pizza, calzone=calzone, water=water)


@pytest.fixture
def restore_notification_service():
    yield
    set_notification_service(LoggingNotificationService())


