import logging
from typing import Any, Dict, Optional

log = logging.getLogger("notification_service")


class NotificationService:
    """Push-message sender. Callers treat delivery as fire-and-forget."""

    async def send_message(
        self,
        device_token: str,
        title: str,
        body: str,
        payload: Optional[Dict[str, Any]] = None,
    ) -> None:
        raise NotImplementedError


class LoggingNotificationService(NotificationService):
    """Default sender: writes the message to the log instead of a push gateway."""

    async def send_message(self, device_token, title, body, payload=None):
        log.info(f"PUSH to {device_token[:12]}...: {title} - {body} {payload or {}}")


_service: NotificationService = LoggingNotificationService()


def get_notification_service() -> NotificationService:
    return _service


def set_notification_service(service: NotificationService) -> None:
    """Swaps the sender, e.g. for a real push gateway client at startup."""
    global _service
    _service = service
