"""Quotation vocabulary and the role gates of the quotation endpoints."""

from django.db import models

from modules.accounts.models import Role


class QuotationStatus(models.TextChoices):
    DRAFT = "draft", "Draft"
    SENT = "sent", "Sent"
    ACCEPTED = "accepted", "Accepted"
    REJECTED = "rejected", "Rejected"
    CONVERTED = "converted", "Converted"


# Manual moves; ``converted`` is only reached by converting to an order.
ALLOWED_TRANSITIONS: dict[str, frozenset[str]] = {
    QuotationStatus.DRAFT: frozenset(
        {QuotationStatus.SENT, QuotationStatus.ACCEPTED, QuotationStatus.REJECTED}
    ),
    QuotationStatus.SENT: frozenset(
        {QuotationStatus.ACCEPTED, QuotationStatus.REJECTED}
    ),
    QuotationStatus.ACCEPTED: frozenset({QuotationStatus.REJECTED}),
    QuotationStatus.REJECTED: frozenset(),
    QuotationStatus.CONVERTED: frozenset(),
}

CONVERTIBLE_STATUSES: frozenset[str] = frozenset(
    {QuotationStatus.DRAFT, QuotationStatus.SENT, QuotationStatus.ACCEPTED}
)

_READERS = frozenset({Role.ADMIN, Role.SALES, Role.ACCOUNTANT})
_EDITORS = frozenset({Role.ADMIN, Role.SALES})

ACTION_ROLES: dict[str, frozenset[str]] = {
    "list": _READERS,
    "retrieve": _READERS,
    "create": _EDITORS,
    "partial_update": _EDITORS,
    "convert": _EDITORS,
}

QUOTATION_NUMBER_MAX_RETRIES = 5
