import logging
from typing import Any, Dict
from uuid import UUID

from app.models.processed_event import ProcessedEvent
from app.services.notification_service import get_notification_service

log = logging.getLogger("notification_consumer")

STATUS_MESSAGES = {
    "accept": ("Order accepted", "Your order #{order_id} has been accepted by the restaurant."),
    "reject": ("Order rejected", "Sorry, your order #{order_id} could not be accepted."),
    "complete": ("Order completed", "Your order #{order_id} is complete. Enjoy your meal!"),
    "processing": ("Order received", "Your order #{order_id} is being processed."),
}


async def handle_order_status_changed(event_payload: Dict[str, Any], event_id: UUID):
    """
    Consumer logic for 'order.status.<status>.v1'. Pushes a message to the
    customer's device. Delivery failures are logged and never retried, so a
    broken push gateway cannot hold up the outbox.
    """
    order_id = event_payload.get("order_id")
    new_status = event_payload.get("new_status")
    device_token = event_payload.get("device_token")
    event_id_str = str(event_id)

    # Idempotency Check
    if await ProcessedEvent.filter(event_id=event_id_str).exists():
        log.info(f"Idempotency: Event {event_id_str} already processed.")
        return

    if not device_token:
        log.info(f"Order {order_id} has no device token; skipping notification.")
    elif new_status not in STATUS_MESSAGES:
        log.warning(f"No notification template for status {new_status} (order {order_id}).")
    else:
        title, body = STATUS_MESSAGES[new_status]
        try:
            await get_notification_service().send_message(
                device_token,
                title,
                body.format(order_id=order_id),
                {"order_id": order_id, "status": new_status},
            )
        except Exception as e:
            log.error(f"Notification for order {order_id} failed: {e}")

    await ProcessedEvent.create(event_id=event_id_str)
