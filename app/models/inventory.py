from tortoise import fields, models


class Supplier(models.Model):
    id = fields.IntField(primary_key=True)
    restaurant_id = fields.CharField(max_length=255)
    name = fields.CharField(max_length=255)
    contact = fields.CharField(max_length=255, null=True)
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "suppliers"
        indexes = [
            ("restaurant_id",),
        ]


class InventoryItem(models.Model):
    """
    A unit of shared stock (e.g. cheese, flour) owned by one restaurant.
    `quantity` never goes below zero through the ledger; admin updates may
    set it directly.
    """
    id = fields.IntField(primary_key=True)
    restaurant_id = fields.CharField(max_length=255)
    name = fields.CharField(max_length=255)
    unit = fields.CharField(max_length=10)
    quantity = fields.DecimalField(max_digits=12, decimal_places=3, default=0)
    supplier = fields.ForeignKeyField(
        "models.Supplier", related_name="inventory_items", null=True, on_delete=fields.SET_NULL
    )
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "inventory_items"
        indexes = [
            ("restaurant_id",),  # Per-restaurant stock listing
        ]
