"""Order domain constants.

Order *statuses* are not listed here: they come from each company's status
registry (``modules.statuses``).  This module holds the fixed vocabularies
of payments, delivery and attachments, plus the role gates of the order
endpoints.
"""

from django.db import models

from modules.accounts.models import Role


class PaymentMethod(models.TextChoices):
    ADVANCED = "advanced", "Advance deposit"
    CASH = "cash", "Cash"
    COD = "cod", "Cash on delivery"
    CARD = "card", "Card"


class PaymentStatus(models.TextChoices):
    UNPAID = "unpaid", "Unpaid"
    PARTIAL = "partial", "Partially paid"
    PAID = "paid", "Paid"


class DeliveryMethod(models.TextChoices):
    PICKUP = "pickup", "Pickup"
    DELIVERY = "delivery", "Delivery"


class AttachmentType(models.TextChoices):
    DESIGN_MOCKUP = "design_mockup", "Design mockup"
    PRINT_FILE = "print_file", "Print file"
    CLIENT_REFERENCE = "client_reference", "Client reference"


# Methods accepted when an accountant confirms payment.
CONFIRMATION_METHODS: frozenset[str] = frozenset(
    {PaymentMethod.ADVANCED, PaymentMethod.CASH, PaymentMethod.COD}
)

# Methods accepted when the outstanding balance is collected at delivery.
SETTLEMENT_METHODS: frozenset[str] = frozenset({PaymentMethod.CASH, PaymentMethod.CARD})

ATTACHMENT_SHORT_CODES: dict[str, str] = {
    AttachmentType.DESIGN_MOCKUP: "PROOF",
    AttachmentType.PRINT_FILE: "PRINT",
    AttachmentType.CLIENT_REFERENCE: "REF",
}

ACTION_ROLES: dict[str, frozenset[str]] = {
    "create": frozenset({Role.ADMIN, Role.SALES}),
    "partial_update": frozenset(
        {Role.ADMIN, Role.SALES, Role.DESIGNER, Role.PRODUCTION}
    ),
    "confirm_payment": frozenset({Role.ADMIN, Role.ACCOUNTANT}),
    "deliver": frozenset({Role.ADMIN, Role.PRODUCTION, Role.ACCOUNTANT}),
}

ORDER_NUMBER_MAX_RETRIES = 5
