from tortoise import fields, models


class Transaction(models.Model):
    """A recorded point-of-sale payment."""
    id = fields.IntField(primary_key=True)
    restaurant_id = fields.CharField(max_length=255)
    user_id = fields.IntField()
    table_number = fields.CharField(max_length=32, null=True)
    # Set when the sale was recorded by completing an order
    order = fields.ForeignKeyField(
        "models.Order", related_name="transactions", null=True, on_delete=fields.SET_NULL
    )
    tax = fields.DecimalField(max_digits=12, decimal_places=2, default=0)
    discount = fields.DecimalField(max_digits=12, decimal_places=2, default=0)
    sub_total = fields.DecimalField(max_digits=14, decimal_places=2)
    total = fields.DecimalField(max_digits=14, decimal_places=2)
    payment_type = fields.CharField(max_length=32)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "transactions"
        indexes = [
            ("restaurant_id",),
            ("restaurant_id", "created_at"),
        ]


class TransactionItem(models.Model):
    id = fields.IntField(primary_key=True)
    transaction = fields.ForeignKeyField("models.Transaction", related_name="items", on_delete=fields.CASCADE)
    menu_item = fields.ForeignKeyField("models.MenuItem", related_name="transaction_items")
    item_name = fields.CharField(max_length=255)
    quantity = fields.IntField()
    price = fields.DecimalField(max_digits=12, decimal_places=2)

    class Meta:
        table = "transaction_items"
        indexes = [
            ("transaction_id",),
        ]
