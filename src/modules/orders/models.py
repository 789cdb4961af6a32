"""Order, OrderItem, OrderStatusHistory, OrderAttachment and OrderComment models.

Business rules implemented:
- ``status`` holds a name from the company's status registry; it is only
  written by ``OrderLifecycleService`` (and by the registry itself when an
  admin renames a status).
- ``total_price`` and ``paid_amount`` are non-negative and
  ``paid_amount <= total_price`` is enforced by a check constraint.
- ``total_price_company`` is ``total_price`` converted to the company's
  base currency with the ``exchange_rate`` snapshot taken at creation.
- OrderItem snapshots the unit price (tier markup applied) and
  ``item_total`` is always ``quantity * unit_price``.
- History rows are append-only; orders are soft-deleted only.
- Comments are append-only notes; ``is_internal`` marks staff-only ones.
"""

from __future__ import annotations

import secrets
from decimal import Decimal
from typing import Any

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from modules.core.models import BaseModel, SoftDeleteModel, TenantModel
from modules.orders.constants import (
    ORDER_NUMBER_MAX_RETRIES,
    AttachmentType,
    DeliveryMethod,
    PaymentMethod,
    PaymentStatus,
)
from shared.domain.events import DomainEventMixin

MONEY = {"max_digits": 12, "decimal_places": 2}


class Order(DomainEventMixin, SoftDeleteModel):
    """Order aggregate root.

    ``order_number`` is a human-readable identifier auto-generated on first
    save (format: ``ORD-YYYYMMDD-XXXXXX``).  The UUIDv7 ``id`` is used for
    all internal references, API lookups and attachment names.
    """

    order_number: models.CharField = models.CharField(
        max_length=20, unique=True, editable=False
    )
    client_name: models.CharField = models.CharField(max_length=255)
    email: models.EmailField = models.EmailField()
    phone: models.CharField = models.CharField(max_length=30, blank=True, default="")
    delivery_date: models.DateField = models.DateField()
    delivery_method: models.CharField = models.CharField(
        max_length=10,
        choices=DeliveryMethod.choices,
        default=DeliveryMethod.PICKUP,
    )
    needs_design: models.BooleanField = models.BooleanField(default=False)
    status: models.CharField = models.CharField(max_length=100)

    currency: models.ForeignKey = models.ForeignKey(
        "pricing.Currency",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="+",
    )
    exchange_rate: models.DecimalField = models.DecimalField(
        max_digits=18, decimal_places=6, default=Decimal("1")
    )
    total_price: models.DecimalField = models.DecimalField(
        **MONEY, default=Decimal("0.00")
    )
    total_price_company: models.DecimalField = models.DecimalField(
        **MONEY, default=Decimal("0.00")
    )
    paid_amount: models.DecimalField = models.DecimalField(
        **MONEY, default=Decimal("0.00")
    )
    payment_method: models.CharField = models.CharField(
        max_length=10, choices=PaymentMethod.choices, blank=True, default=""
    )
    payment_status: models.CharField = models.CharField(
        max_length=10,
        choices=PaymentStatus.choices,
        default=PaymentStatus.UNPAID,
    )
    client: models.ForeignKey = models.ForeignKey(
        "clients.Client",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders",
    )
    pricing_tier: models.ForeignKey = models.ForeignKey(
        "pricing.PricingTier",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders",
    )
    notes: models.TextField = models.TextField(blank=True, default="")
    created_by: models.ForeignKey = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    idempotency_key: models.CharField = models.CharField(
        max_length=255,
        unique=True,
        null=True,
        blank=True,
    )

    class Meta:
        db_table = "orders"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["company", "status"], name="orders_company_status_idx"),
            models.Index(fields=["-created_at"], name="orders_created_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(total_price__gte=0),
                name="orders_total_price_non_negative",
            ),
            models.CheckConstraint(
                condition=models.Q(paid_amount__gte=0),
                name="orders_paid_amount_non_negative",
            ),
            models.CheckConstraint(
                condition=models.Q(paid_amount__lte=models.F("total_price")),
                name="orders_paid_not_above_total",
            ),
        ]

    # ------------------------------------------------------------------
    # Money helpers
    # ------------------------------------------------------------------

    @property
    def remaining_balance(self) -> Decimal:
        """``total_price - paid_amount``; may be negative on bad data."""
        return Decimal(self.total_price) - Decimal(self.paid_amount or 0)

    @property
    def is_fully_paid(self) -> bool:
        return self.remaining_balance <= 0

    # ------------------------------------------------------------------
    # Order number generation
    # ------------------------------------------------------------------

    @staticmethod
    def generate_order_number() -> str:
        """Generate a human-readable order number: ``ORD-YYYYMMDD-XXXXXX``."""
        now = timezone.now()
        suffix = secrets.token_hex(3).upper()
        return f"ORD-{now:%Y%m%d}-{suffix}"

    def save(self, *args: Any, **kwargs: Any) -> None:
        if not self.order_number:
            for _attempt in range(ORDER_NUMBER_MAX_RETRIES):
                candidate = self.generate_order_number()
                if not Order.objects.filter(order_number=candidate).exists():
                    self.order_number = candidate
                    break
            else:
                raise RuntimeError(
                    f"Failed to generate unique order_number after "
                    f"{ORDER_NUMBER_MAX_RETRIES} attempts"
                )
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.order_number} ({self.status})"


class OrderItem(BaseModel):
    """Line item of an order.

    ``unit_price`` is a **snapshot** taken at creation with the pricing tier
    markup already applied; later tier changes never touch it.
    """

    order: models.ForeignKey = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="items",
    )
    description: models.CharField = models.CharField(max_length=255)
    quantity: models.PositiveIntegerField = models.PositiveIntegerField(
        default=1,
        validators=[MinValueValidator(1)],
    )
    unit_price: models.DecimalField = models.DecimalField(**MONEY)
    item_total: models.DecimalField = models.DecimalField(**MONEY, editable=False)

    class Meta:
        db_table = "order_items"
        ordering = ["created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="order_items_quantity_positive",
            ),
        ]

    def clean(self) -> None:
        super().clean()
        if self.quantity is not None and self.quantity < 1:
            raise ValidationError({"quantity": "Quantity must be at least 1."})

    def save(self, *args: Any, **kwargs: Any) -> None:
        self.item_total = self.quantity * Decimal(self.unit_price)
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.description} x{self.quantity} ({self.item_total})"


class OrderStatusHistory(TenantModel):
    """Append-only audit trail of order transitions.

    One row per lifecycle transition, written in the same transaction as
    the order update.  ``user`` is ``None`` for system changes.
    """

    order: models.ForeignKey = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="status_history",
    )
    old_status: models.CharField = models.CharField(  # noqa: DJ01
        max_length=100,
        null=True,
        blank=True,
    )
    new_status: models.CharField = models.CharField(max_length=100)
    user: models.ForeignKey = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    notes: models.TextField = models.TextField(blank=True, default="")

    class Meta:
        db_table = "order_status_history"
        ordering = ["-created_at"]
        indexes = [
            models.Index(
                fields=["order", "-created_at"],
                name="osh_order_created_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.order} : {self.old_status} -> {self.new_status}"


class OrderAttachment(TenantModel):
    """File attached to an order (mockup, print file or client reference)."""

    order: models.ForeignKey = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="attachments",
    )
    file_name: models.CharField = models.CharField(max_length=255)
    file_url: models.CharField = models.CharField(max_length=500)
    file_type: models.CharField = models.CharField(
        max_length=20, choices=AttachmentType.choices
    )
    file_size: models.PositiveBigIntegerField = models.PositiveBigIntegerField(default=0)
    uploader: models.ForeignKey = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )

    class Meta:
        db_table = "order_attachments"
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return self.file_name


class OrderComment(TenantModel):
    """Note left on an order by a member (revision feedback, designer notes)."""

    order: models.ForeignKey = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="comments",
    )
    user: models.ForeignKey = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    content: models.TextField = models.TextField()
    is_internal: models.BooleanField = models.BooleanField(default=False)

    class Meta:
        db_table = "order_comments"
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.order} : {self.content[:40]}"
