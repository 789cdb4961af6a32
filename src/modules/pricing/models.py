"""Currency, exchange-rate and pricing-tier models.

Business rules implemented:
- ``Currency`` is global reference data (not tenant-owned).
- ``ExchangeRate.rate_to_company_currency`` is strictly positive and
  converts one unit of the foreign currency into the company's base
  currency.  Several active rates per (company, currency) are tolerated;
  readers pick the latest ``valid_from``.
- ``PricingTier.markup_percent`` is non-negative; at most one tier per
  company carries ``is_default`` (partial unique constraint).
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from modules.core.models import BaseModel, TenantModel

TWO_PLACES = Decimal("0.01")


class Currency(BaseModel):
    code = models.CharField(max_length=3, unique=True)
    name = models.CharField(max_length=100)
    symbol = models.CharField(max_length=8, blank=True, default="")

    class Meta:
        db_table = "currencies"
        ordering = ["code"]
        verbose_name_plural = "currencies"

    def __str__(self) -> str:
        return self.code


class ExchangeRate(TenantModel):
    currency = models.ForeignKey(
        "pricing.Currency",
        on_delete=models.PROTECT,
        related_name="exchange_rates",
    )
    rate_to_company_currency = models.DecimalField(max_digits=18, decimal_places=6)
    valid_from = models.DateTimeField(default=timezone.now)
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = "exchange_rates"
        ordering = ["-valid_from", "-created_at"]
        indexes = [
            models.Index(
                fields=["company", "currency", "is_active"],
                name="exchange_rates_lookup_idx",
            ),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(rate_to_company_currency__gt=0),
                name="exchange_rates_rate_positive",
            ),
        ]

    def __str__(self) -> str:
        return (
            f"1 {self.currency} = {self.rate_to_company_currency} "
            f"(from {self.valid_from:%Y-%m-%d})"
        )


class PricingTier(TenantModel):
    name = models.CharField(max_length=100)
    label = models.CharField(max_length=100, blank=True, default="")
    markup_percent = models.DecimalField(
        max_digits=6,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0"))],
    )
    is_default = models.BooleanField(default=False)

    class Meta:
        db_table = "pricing_tiers"
        ordering = ["name"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(markup_percent__gte=0),
                name="pricing_tiers_markup_non_negative",
            ),
            models.UniqueConstraint(
                fields=["company"],
                condition=models.Q(is_default=True),
                name="pricing_tiers_single_default",
            ),
        ]

    def apply_markup(self, amount: Decimal) -> Decimal:
        """Return *amount* raised by the tier markup, rounded to cents."""
        factor = Decimal("1") + (self.markup_percent / Decimal("100"))
        return (Decimal(amount) * factor).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)

    @property
    def display_name(self) -> str:
        return self.label or self.name

    def __str__(self) -> str:
        return f"{self.display_name} (+{self.markup_percent}%)"
