"""Payment rules of the order lifecycle.

Pure functions over amounts; the lifecycle service calls them before any
write so every rejection happens with the order untouched.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Optional

from modules.orders.constants import (
    CONFIRMATION_METHODS,
    SETTLEMENT_METHODS,
    PaymentMethod,
    PaymentStatus,
)
from modules.orders.exceptions import InvalidPayment, PaymentMethodRequired

ZERO = Decimal("0.00")
CENTS = Decimal("0.01")


def _money(value) -> Decimal:
    try:
        return Decimal(value).quantize(CENTS)
    except (InvalidOperation, TypeError, ValueError) as exc:
        raise InvalidPayment(f"Invalid amount: {value!r}.") from exc


def _status_for(amount: Decimal, total: Decimal) -> str:
    if amount >= total:
        return PaymentStatus.PAID
    if amount <= 0:
        return PaymentStatus.UNPAID
    return PaymentStatus.PARTIAL


def payment_terms(
    payment_method: Optional[str],
    total_price: Decimal,
    payment_status: Optional[str] = None,
    paid_amount: Optional[Decimal] = None,
) -> tuple[str, str, Decimal]:
    """Resolve ``(method, payment_status, paid_amount)`` for a confirmation.

    - ``cash``: defaults to the full total.
    - ``advanced``: a deposit with ``0 < deposit <= total`` is required and
      the order stays ``partial`` until it is settled at delivery.
    - ``cod``: defaults to nothing paid yet.

    An explicit ``payment_status`` must agree with the amount.

    Raises:
        PaymentMethodRequired: *payment_method* is empty.
        InvalidPayment: unknown method, amount out of bounds, or a status
            that contradicts the amount.
    """
    method = (payment_method or "").strip().lower()
    if not method:
        raise PaymentMethodRequired("Payment method is required.")
    if method not in CONFIRMATION_METHODS:
        allowed = ", ".join(sorted(CONFIRMATION_METHODS))
        raise InvalidPayment(f"Invalid payment method. Allowed methods: {allowed}")

    total = _money(total_price)
    if paid_amount is None:
        if method == PaymentMethod.ADVANCED:
            raise InvalidPayment("A deposit amount is required for advanced payment.")
        amount = total if method == PaymentMethod.CASH else ZERO
    else:
        amount = _money(paid_amount)

    if amount < 0:
        raise InvalidPayment("Paid amount cannot be negative.")
    if amount > total:
        raise InvalidPayment(f"Paid amount {amount} exceeds the order total {total}.")
    if method == PaymentMethod.ADVANCED and amount <= 0:
        raise InvalidPayment("Deposit must be greater than 0.")

    if method == PaymentMethod.ADVANCED:
        derived = PaymentStatus.PARTIAL
    else:
        derived = _status_for(amount, total)
    if payment_status:
        status = payment_status.strip().lower()
        if status not in PaymentStatus.values:
            raise InvalidPayment(f"Invalid payment status '{payment_status}'.")
        if status != derived:
            raise InvalidPayment(
                f"Payment status '{status}' does not match paid amount {amount}."
            )
    return method, derived, amount


def settlement_method(collection_method: Optional[str]) -> str:
    """Validate how an outstanding balance was collected at delivery."""
    method = (collection_method or "").strip().lower()
    if not method:
        raise PaymentMethodRequired("Choose how the remaining balance was collected.")
    if method not in SETTLEMENT_METHODS:
        allowed = ", ".join(sorted(SETTLEMENT_METHODS))
        raise InvalidPayment(f"Invalid collection method. Allowed methods: {allowed}")
    return method
