import pytest
from decimal import Decimal
from fastapi.testclient import TestClient
from unittest.mock import patch, AsyncMock, MagicMock

from app.main import app
from app.core.exceptions import InvalidTransitionError, NotFoundError, ReconciliationFailedError
from app.models.order import OrderStatus
from app.schemas.stock import ReconciliationResult, Shortfall


@pytest.fixture
def client():
    return TestClient(app)


def make_order(status=OrderStatus.PROCESSING):
    """Stand-in for an Order with prefetched items."""
    item = MagicMock()
    item.menu_item_id = 1
    item.menu_item.name = "Pizza"
    item.quantity = 2
    item.unit_price = Decimal("12.5")

    order = MagicMock()
    order.id = 42
    order.restaurant_id = "resto-1"
    order.table_number = "T1"
    order.user_id = 7
    order.status = status
    order.items = [item]
    order.created_at = "2024-10-27T10:30:00"
    order.updated_at = "2024-10-27T10:31:00"
    return order


class TestOrderRoutes:
    def test_create_order_success(self, client):
        """Order creation returns 201 with the order in processing"""
        with patch('app.api.v1.orders.create_order', new_callable=AsyncMock) as mock_create, \
                patch('app.api.v1.orders.get_order_by_id', new_callable=AsyncMock) as mock_get:
            mock_create.return_value = make_order()
            mock_get.return_value = make_order()

            order_data = {
                "restaurant_id": "resto-1",
                "user_id": 7,
                "items": [{"menu_item_id": 1, "quantity": 2}]
            }

            response = client.post("/api/v1/orders/", json=order_data)
            assert response.status_code == 201
            data = response.json()["data"]
            assert data["status"] == "processing"
            assert data["total"] == "25.00"
            assert data["items"][0]["price"] == "12.50"
            mock_create.assert_awaited_once()

    def test_create_order_empty_items(self, client):
        """Validation rejects an order without items"""
        order_data = {"restaurant_id": "resto-1", "user_id": 7, "items": []}

        response = client.post("/api/v1/orders/", json=order_data)
        assert response.status_code == 422
        assert response.json()["error"]["code"] == "validation_error"

    def test_create_order_unknown_menu_item(self, client):
        with patch('app.api.v1.orders.create_order', new_callable=AsyncMock) as mock_create:
            mock_create.side_effect = NotFoundError("Menu item 9 not found or inactive.")
            response = client.post(
                "/api/v1/orders/",
                json={"restaurant_id": "resto-1", "user_id": 7, "items": [{"menu_item_id": 9, "quantity": 1}]},
            )
        assert response.status_code == 404
        assert response.json()["success"] is False

    def test_get_order_not_found(self, client):
        with patch('app.api.v1.orders.get_order_by_id', new_callable=AsyncMock) as mock_get:
            mock_get.return_value = None
            response = client.get("/api/v1/orders/5")
        assert response.status_code == 404

    def test_complete_order(self, client):
        with patch('app.api.v1.orders.transition_order_status', new_callable=AsyncMock) as mock_transition, \
                patch('app.api.v1.orders.get_order_by_id', new_callable=AsyncMock) as mock_get:
            mock_get.return_value = make_order(OrderStatus.COMPLETED)

            response = client.put("/api/v1/orders/42/status", json={"status": "complete", "payment_type": "card"})

        assert response.status_code == 200
        assert response.json()["data"]["order"]["status"] == "complete"
        mock_transition.assert_awaited_once_with(42, OrderStatus.COMPLETED, "card")

    def test_complete_order_insufficient_stock(self, client):
        result = ReconciliationResult(
            status="rejected",
            reason="insufficient_stock",
            message="Not enough stock for inventory items [3].",
            shortfalls=[Shortfall(
                inventory_item_id=3, required=Decimal("12"), available=Decimal("10"), shortfall=Decimal("2")
            )],
        )
        with patch('app.api.v1.orders.transition_order_status', new_callable=AsyncMock) as mock_transition:
            mock_transition.side_effect = ReconciliationFailedError(result)
            response = client.put("/api/v1/orders/42/status", json={"status": "complete"})

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "reconciliation_failed"
        assert error["details"]["shortfalls"][0] == {
            "inventory_item_id": 3, "required": "12.000", "available": "10.000", "shortfall": "2.000"
        }

    def test_transition_from_final_state(self, client):
        with patch('app.api.v1.orders.transition_order_status', new_callable=AsyncMock) as mock_transition:
            mock_transition.side_effect = InvalidTransitionError("Order is already in a final state: complete.")
            response = client.put("/api/v1/orders/42/status", json={"status": "accept"})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "invalid_transition"

    def test_unknown_status_value(self, client):
        response = client.put("/api/v1/orders/42/status", json={"status": "cooking"})
        assert response.status_code == 422


class TestTransactionRoutes:
    def test_missing_menu_item_is_404(self, client):
        result = ReconciliationResult(status="rejected", reason="not_found", message="Menu item 9 not found.")
        with patch('app.api.v1.transactions.create_transaction', new_callable=AsyncMock) as mock_create:
            mock_create.side_effect = ReconciliationFailedError(result)
            response = client.post("/api/v1/transactions/", json={
                "restaurant_id": "resto-1",
                "user_id": 7,
                "items": [{"menu_item_id": 9, "quantity": 1}],
                "type": "cash",
            })

        assert response.status_code == 404
        assert response.json()["error"]["message"] == "Menu item 9 not found."

    def test_non_positive_quantity_is_rejected_on_ingress(self, client):
        response = client.post("/api/v1/transactions/", json={
            "restaurant_id": "resto-1",
            "user_id": 7,
            "items": [{"menu_item_id": 1, "quantity": 0}],
            "type": "cash",
        })
        assert response.status_code == 422
