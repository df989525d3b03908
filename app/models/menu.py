from tortoise import fields, models


class MenuItem(models.Model):
    id = fields.IntField(primary_key=True)
    restaurant_id = fields.CharField(max_length=255)
    name = fields.CharField(max_length=255)
    price = fields.DecimalField(max_digits=12, decimal_places=2)
    category_id = fields.IntField(null=True)
    is_active = fields.BooleanField(default=True)
    # Legacy per-dish counter. Not reconciled with inventory stock.
    stock = fields.IntField(null=True)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "menu_items"
        indexes = [
            ("restaurant_id",),  # Fast restaurant menu queries
            ("restaurant_id", "is_active"),  # Composite: restaurant's active items
        ]


class MenuInventory(models.Model):
    """Recipe line: how much of an inventory item one unit of a dish consumes."""
    id = fields.IntField(primary_key=True)
    restaurant_id = fields.CharField(max_length=255)
    menu_item = fields.ForeignKeyField("models.MenuItem", related_name="recipe_lines", on_delete=fields.CASCADE)
    inventory_item = fields.ForeignKeyField(
        "models.InventoryItem", related_name="recipe_lines", on_delete=fields.CASCADE
    )
    quantity = fields.DecimalField(max_digits=8, decimal_places=3)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "menu_inventory"
        indexes = [
            ("menu_item_id",),       # Recipe lookup
            ("inventory_item_id",),  # Which dishes use an ingredient
            ("restaurant_id",),
        ]
