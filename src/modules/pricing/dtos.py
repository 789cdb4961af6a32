"""Pricing DTOs (Pydantic v2, immutable)."""

from __future__ import annotations

from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator


class CreateExchangeRateDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    currency_id: UUID
    rate_to_company_currency: Decimal

    @field_validator("rate_to_company_currency")
    @classmethod
    def rate_must_be_positive(cls, v: Decimal) -> Decimal:
        if v <= 0:
            raise ValueError("Exchange rate must be greater than 0.")
        return v


class UpdateExchangeRateDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    rate_to_company_currency: Decimal

    @field_validator("rate_to_company_currency")
    @classmethod
    def rate_must_be_positive(cls, v: Decimal) -> Decimal:
        if v <= 0:
            raise ValueError("Exchange rate must be greater than 0.")
        return v


class PricingTierDTO(BaseModel):
    """Create (all required except label/default) or partial update input."""

    model_config = ConfigDict(frozen=True)

    name: Optional[str] = None
    label: Optional[str] = None
    markup_percent: Optional[Decimal] = None
    is_default: Optional[bool] = None

    @field_validator("markup_percent")
    @classmethod
    def markup_not_negative(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        if v is not None and v < 0:
            raise ValueError("Markup percent cannot be negative.")
        return v


class CompanyCurrencyDTO(BaseModel):
    """The tenant's base currency as seen by price displays."""

    model_config = ConfigDict(frozen=True)

    currency_id: Optional[UUID]
    code: str
    symbol: Optional[str] = None
