from enum import Enum
from tortoise import fields, models


class OrderStatus(str, Enum):
    PROCESSING = "processing"  # Initial state on creation
    ACCEPTED = "accept"
    REJECTED = "reject"        # Terminal
    COMPLETED = "complete"     # Terminal, stock consumed


class Order(models.Model):
    id = fields.IntField(primary_key=True)
    restaurant_id = fields.CharField(max_length=255)
    table_number = fields.CharField(max_length=32, null=True)
    user_id = fields.IntField()
    status = fields.CharEnumField(OrderStatus, max_length=16, default=OrderStatus.PROCESSING)
    # Staff has seen the order in the dashboard
    notification = fields.BooleanField(default=False)
    device_token = fields.CharField(max_length=255, null=True)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "orders"
        indexes = [
            ("restaurant_id",),          # Restaurant order queries
            ("status",),                 # Status-based filtering
            ("user_id",),                # Customer order history
            ("restaurant_id", "notification"),  # Unseen orders per restaurant
        ]


class OrderItem(models.Model):
    id = fields.IntField(primary_key=True)
    order = fields.ForeignKeyField("models.Order", related_name="items", on_delete=fields.CASCADE)
    menu_item = fields.ForeignKeyField("models.MenuItem", related_name="order_items")
    quantity = fields.IntField()
    unit_price = fields.DecimalField(max_digits=12, decimal_places=2)

    class Meta:
        table = "order_items"
        indexes = [
            ("order_id",),              # Order line items
            ("menu_item_id",),          # Menu item popularity
        ]
