"""Order domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.  Registry failures
(``StatusNotFound``, ``MissingRequiredStatus``, ``EmptyStatusRegistry``)
live in ``modules.statuses.exceptions`` and are re-exported here.
"""

from __future__ import annotations

from decimal import Decimal

from modules.statuses.exceptions import (  # noqa: F401
    EmptyStatusRegistry,
    MissingRequiredStatus,
    StatusNotFound,
)


class OrderNotFound(Exception):
    """The requested order does not exist in the caller's company."""


class PaymentMethodRequired(Exception):
    """Payment confirmation was attempted without a payment method."""


class InvalidPayment(Exception):
    """Payment method, status or amount is not acceptable for the order."""


class BalanceDue(Exception):
    """The order cannot be delivered until the remaining balance is collected."""

    def __init__(self, remaining: Decimal) -> None:
        self.remaining = remaining
        super().__init__(
            f"Balance of {remaining} is due. Collect it before delivery."
        )


class OrderPersistenceError(Exception):
    """Writing the order failed; nothing was changed."""

    def __init__(self, operation: str, cause: Exception) -> None:
        self.operation = operation
        self.cause = cause
        super().__init__(f"{operation} failed: {cause}")


class InvalidAttachment(Exception):
    """The upload is missing a file or uses an unknown file type."""


class AttachmentUploadFailed(Exception):
    """The file could not be stored or its metadata could not be saved."""
