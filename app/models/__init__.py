# app/models/__init__.py
from .inventory import InventoryItem, Supplier
from .menu import MenuInventory, MenuItem
from .order import Order, OrderItem, OrderStatus
from .transaction import Transaction, TransactionItem
from .outbox import OutboxEvent
from .processed_event import ProcessedEvent

# Export all models
__all__ = [
    "InventoryItem",
    "MenuInventory",
    "MenuItem",
    "Order",
    "OrderItem",
    "OrderStatus",
    "OutboxEvent",
    "ProcessedEvent",
    "Supplier",
    "Transaction",
    "TransactionItem",
]
