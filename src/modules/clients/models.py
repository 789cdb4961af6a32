"""Client directory of a print shop.

A client carries contact details plus the defaults a quotation starts
from: the pricing tier and the currency the client is usually billed in.
Clients are soft-deleted so past quotations and orders keep their link.
"""

from __future__ import annotations

from django.db import models

from modules.core.models import SoftDeleteModel


class Client(SoftDeleteModel):
    full_name = models.CharField(max_length=255)
    business_name = models.CharField(max_length=255, blank=True, default="")
    email = models.EmailField(blank=True, default="")
    phone = models.CharField(max_length=30, blank=True, default="")
    secondary_phone = models.CharField(max_length=30, blank=True, default="")
    address = models.TextField(blank=True, default="")
    city = models.CharField(max_length=100, blank=True, default="")
    tax_number = models.CharField(max_length=50, blank=True, default="")
    notes = models.TextField(blank=True, default="")
    default_currency = models.ForeignKey(
        "pricing.Currency",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    default_pricing_tier = models.ForeignKey(
        "pricing.PricingTier",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )

    class Meta:
        db_table = "clients"
        ordering = ["full_name"]
        indexes = [
            models.Index(
                fields=["company", "full_name"], name="clients_company_name_idx"
            ),
        ]

    def __str__(self) -> str:
        if self.business_name:
            return f"{self.full_name} ({self.business_name})"
        return self.full_name
