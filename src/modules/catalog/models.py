"""Product catalogue of a print shop.

Business rules implemented:
- ``sku`` is normalised to uppercase and unique among a company's live
  products.
- ``unit_price`` is the list price in the company's base currency; tier
  markups are applied on top of it when a quotation is priced.
- ``unit_price`` and ``stock_quantity`` are never negative.
"""

from __future__ import annotations

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import SoftDeleteModel


class Product(SoftDeleteModel):
    sku = models.CharField(max_length=64)
    product_code = models.CharField(max_length=64, blank=True, default="")
    name_en = models.CharField(max_length=255)
    name_ar = models.CharField(max_length=255, blank=True, default="")
    category = models.CharField(max_length=100)
    unit_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0"))],
    )
    description = models.TextField(blank=True, default="")
    image_url = models.URLField(max_length=500, blank=True, default="")
    stock_quantity = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "products"
        ordering = ["name_en"]
        indexes = [
            models.Index(fields=["company", "category"], name="products_company_cat_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["company", "sku"],
                condition=models.Q(deleted_at__isnull=True),
                name="products_company_sku_unique",
            ),
            models.CheckConstraint(
                condition=models.Q(unit_price__gte=0),
                name="products_unit_price_non_negative",
            ),
        ]

    @staticmethod
    def normalize_sku(sku: str) -> str:
        return (sku or "").strip().upper()

    def save(self, *args, **kwargs) -> None:
        self.sku = self.normalize_sku(self.sku)
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.sku} - {self.name_en}"
