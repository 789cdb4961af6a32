"""Catalogue DTOs (Pydantic v2, immutable).

- ``CreateProductDTO`` / ``UpdateProductDTO``: catalogue maintenance input.
- ``TierPriceDTO``: a product's price under one pricing tier.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator


def _not_blank(value: Optional[str], message: str) -> Optional[str]:
    if value is not None and not value.strip():
        raise ValueError(message)
    return value.strip() if value is not None else value


class CreateProductDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    sku: str
    name_en: str
    category: str
    unit_price: Decimal
    product_code: Optional[str] = ""
    name_ar: Optional[str] = ""
    description: Optional[str] = ""
    image_url: Optional[str] = ""
    stock_quantity: int = 0

    @field_validator("sku")
    @classmethod
    def sku_not_blank(cls, v: str) -> str:
        return _not_blank(v, "SKU is required.").upper()

    @field_validator("name_en")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        return _not_blank(v, "Product name is required.")

    @field_validator("category")
    @classmethod
    def category_not_blank(cls, v: str) -> str:
        return _not_blank(v, "Category is required.")

    @field_validator("unit_price")
    @classmethod
    def price_not_negative(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError("Unit price cannot be negative.")
        return v

    @field_validator("stock_quantity")
    @classmethod
    def stock_not_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Stock quantity cannot be negative.")
        return v


class UpdateProductDTO(BaseModel):
    """Partial update: ``None`` leaves a field untouched."""

    model_config = ConfigDict(frozen=True)

    sku: Optional[str] = None
    name_en: Optional[str] = None
    category: Optional[str] = None
    unit_price: Optional[Decimal] = None
    product_code: Optional[str] = None
    name_ar: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    stock_quantity: Optional[int] = None

    @field_validator("sku")
    @classmethod
    def sku_not_blank(cls, v: Optional[str]) -> Optional[str]:
        v = _not_blank(v, "SKU is required.")
        return v.upper() if v is not None else v

    @field_validator("name_en")
    @classmethod
    def name_not_blank(cls, v: Optional[str]) -> Optional[str]:
        return _not_blank(v, "Product name is required.")

    @field_validator("category")
    @classmethod
    def category_not_blank(cls, v: Optional[str]) -> Optional[str]:
        return _not_blank(v, "Category is required.")

    @field_validator("unit_price")
    @classmethod
    def price_not_negative(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        if v is not None and v < 0:
            raise ValueError("Unit price cannot be negative.")
        return v

    @field_validator("stock_quantity")
    @classmethod
    def stock_not_negative(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 0:
            raise ValueError("Stock quantity cannot be negative.")
        return v


class TierPriceDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    pricing_tier_id: UUID
    name: str
    markup_percent: Decimal
    is_default: bool
    unit_price: Decimal
