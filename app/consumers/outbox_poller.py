import asyncio
import logging

from app.models.outbox import OutboxEvent
from app.consumers.notification_consumer import handle_order_status_changed
from app.core.db import init_db, close_db
from app.core.config import POLLING_INTERVAL, MAX_ATTEMPTS, BATCH_SIZE, LOG_LEVEL

log = logging.getLogger("outbox_poller")


async def dispatch_event(event: OutboxEvent) -> bool:
    """
    Routes an OutboxEvent to the correct handler.
    Returns False when no handler exists for the event type.
    """
    event_type = event.event_type
    log.info(f"Poller DISPATCHING: {event_type} (ID: {event.id.hex[:8]}...)")

    if event_type.startswith("order.status."):
        await handle_order_status_changed(event.payload, event.id)
        return True

    log.warning(f"No handler found for event type: {event_type}")
    return False


async def poll_outbox_for_new_events() -> int:
    """
    Queries the Outbox table for unpublished events and attempts to dispatch them.
    Returns the number of events published.
    """
    # Select events that haven't been published and haven't exceeded max attempts
    events = await OutboxEvent.filter(published=False, attempts__lt=MAX_ATTEMPTS).order_by('created_at').limit(BATCH_SIZE)

    published = 0
    for event in events:
        try:
            await dispatch_event(event)

            event.published = True
            await event.save(update_fields=['published'])
            published += 1
        except Exception:
            # Increment attempts on failure and save
            event.attempts += 1
            await event.save(update_fields=['attempts'])
            log.exception(f"Dispatch failed for event {event.id} (attempt {event.attempts})")
    return published


async def start_outbox_poller():
    """Main loop for the poller service."""
    await init_db()
    log.info("--- Outbox Poller Service Started ---")

    try:
        while True:
            try:
                await poll_outbox_for_new_events()
            except Exception as e:
                log.error(f"Poller encountered a critical DB error: {e}.")

            await asyncio.sleep(POLLING_INTERVAL)
    finally:
        await close_db()


if __name__ == "__main__":
    logging.basicConfig(level=LOG_LEVEL, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    try:
        asyncio.run(start_outbox_poller())
    except KeyboardInterrupt:
        log.info("Poller service stopped.")
