"""Quotation and QuotationItem models.

Business rules implemented:
- Item prices are a snapshot: the product list price with the tier markup,
  expressed in the quotation currency.  Later catalogue or tier changes
  never touch a quotation.
- ``total_price_company`` is ``total_price`` in the company's base
  currency at the ``exchange_rate`` used for pricing.
- A quotation is converted to at most one order; ``order`` keeps the link.
"""

from __future__ import annotations

import secrets
from datetime import date
from decimal import Decimal
from typing import Any

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from modules.core.models import BaseModel, SoftDeleteModel
from modules.quotations.constants import QUOTATION_NUMBER_MAX_RETRIES, QuotationStatus

MONEY = {"max_digits": 12, "decimal_places": 2}


class Quotation(SoftDeleteModel):
    quotation_number = models.CharField(max_length=20, unique=True, editable=False)
    client = models.ForeignKey(
        "clients.Client",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="quotations",
    )
    client_name = models.CharField(max_length=255)
    email = models.EmailField(blank=True, default="")
    phone = models.CharField(max_length=30, blank=True, default="")
    valid_until = models.DateField()
    status = models.CharField(
        max_length=10, choices=QuotationStatus.choices, default=QuotationStatus.DRAFT
    )
    currency = models.ForeignKey(
        "pricing.Currency",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="+",
    )
    exchange_rate = models.DecimalField(
        max_digits=18, decimal_places=6, default=Decimal("1")
    )
    total_price = models.DecimalField(**MONEY, default=Decimal("0.00"))
    total_price_company = models.DecimalField(**MONEY, default=Decimal("0.00"))
    pricing_tier = models.ForeignKey(
        "pricing.PricingTier",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    notes = models.TextField(blank=True, default="")
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    converted_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "quotations"
        ordering = ["-created_at"]
        indexes = [
            models.Index(
                fields=["company", "status"], name="quotations_company_status_idx"
            ),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(total_price__gte=0),
                name="quotations_total_price_non_negative",
            ),
        ]

    def is_expired(self, today: date | None = None) -> bool:
        return self.valid_until < (today or timezone.localdate())

    @staticmethod
    def generate_quotation_number() -> str:
        """``QUO-YYYYMMDD-XXXXXX``"""
        return f"QUO-{timezone.now():%Y%m%d}-{secrets.token_hex(3).upper()}"

    def save(self, *args: Any, **kwargs: Any) -> None:
        if not self.quotation_number:
            for _attempt in range(QUOTATION_NUMBER_MAX_RETRIES):
                candidate = self.generate_quotation_number()
                if not Quotation.objects.filter(quotation_number=candidate).exists():
                    self.quotation_number = candidate
                    break
            else:
                raise RuntimeError(
                    f"Failed to generate unique quotation_number after "
                    f"{QUOTATION_NUMBER_MAX_RETRIES} attempts"
                )
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.quotation_number} ({self.status})"


class QuotationItem(BaseModel):
    quotation = models.ForeignKey(
        "quotations.Quotation",
        on_delete=models.CASCADE,
        related_name="items",
    )
    product = models.ForeignKey(
        "catalog.Product",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    description = models.CharField(max_length=255)
    quantity = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    unit_price = models.DecimalField(**MONEY)
    item_total = models.DecimalField(**MONEY, editable=False)

    class Meta:
        db_table = "quotation_items"
        ordering = ["created_at"]

    def save(self, *args: Any, **kwargs: Any) -> None:
        self.item_total = self.quantity * Decimal(self.unit_price)
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.description} x{self.quantity} ({self.item_total})"
