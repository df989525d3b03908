from typing import Any, Dict, Optional


class RestaurantServiceError(Exception):
    """Base class for domain errors surfaced to API callers."""
    code = "service_error"
    status_code = 400

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_detail(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class NotFoundError(RestaurantServiceError):
    """A referenced order, menu item or inventory item does not exist."""
    code = "not_found"
    status_code = 404


class InvalidArgumentError(RestaurantServiceError):
    """Non-positive quantity or a malformed line-item list."""
    code = "invalid_argument"


class InvalidTransitionError(RestaurantServiceError):
    """Order status change not allowed from its current state."""
    code = "invalid_transition"


class ReconciliationFailedError(RestaurantServiceError):
    """
    Raised by the order and transaction paths when the reconciliation engine
    rejects a sale. Carries the engine's result so callers can report which
    inventory items failed.
    """
    code = "reconciliation_failed"

    def __init__(self, result):
        super().__init__(result.message, details=result.model_dump(mode="json"))
        self.result = result
        if result.reason == "not_found":
            self.status_code = 404
