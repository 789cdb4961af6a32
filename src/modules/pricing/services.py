"""Pricing service layer.

Resolves a company's base currency, picks the active exchange rate for a
foreign currency and converts amounts, and manages the admin-editable
rates and pricing tiers.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Any, List, Optional
from uuid import UUID

import structlog
from django.conf import settings
from django.db import transaction
from django.utils import timezone

from modules.pricing.dtos import (
    CompanyCurrencyDTO,
    CreateExchangeRateDTO,
    PricingTierDTO,
    UpdateExchangeRateDTO,
)
from modules.pricing.exceptions import (
    CurrencyNotFound,
    ExchangeRateAlreadyExists,
    ExchangeRateNotFound,
    PricingTierNotFound,
)
from modules.pricing.models import PricingTier
from modules.pricing.rates import convert_to_base, select_active_rate

if TYPE_CHECKING:
    from modules.accounts.models import Company
    from modules.pricing.models import Currency, ExchangeRate
    from modules.pricing.repositories.interfaces import IPricingRepository

logger = structlog.get_logger(__name__)


class PricingService:
    def __init__(self, pricing_repository: IPricingRepository) -> None:
        self._repo = pricing_repository

    # ------------------------------------------------------------------
    # Currency resolution
    # ------------------------------------------------------------------

    def list_currencies(self) -> List[Currency]:
        return self._repo.list_currencies()

    def get_currency(self, currency_id: UUID) -> Currency:
        currency = self._repo.get_currency(currency_id)
        if currency is None:
            raise CurrencyNotFound(f"Currency {currency_id} not found.")
        return currency

    @staticmethod
    def company_currency(company: Company) -> CompanyCurrencyDTO:
        """Base currency of *company*, defaulting to the configured code."""
        currency = company.currency
        if currency is None:
            return CompanyCurrencyDTO(
                currency_id=None, code=settings.DEFAULT_CURRENCY_CODE, symbol=None
            )
        return CompanyCurrencyDTO(
            currency_id=currency.id,
            code=currency.code,
            symbol=currency.symbol or None,
        )

    def active_rate(self, company_id: UUID, currency_id: UUID) -> ExchangeRate:
        """The currently active rate for *currency_id*.

        Raises:
            ExchangeRateNotFound: no active rate exists.
        """
        rate = select_active_rate(
            self._repo.active_rates(company_id, currency_id), currency_id
        )
        if rate is None:
            raise ExchangeRateNotFound(
                f"No active exchange rate for currency {currency_id}."
            )
        return rate

    def to_base(
        self, company: Company, amount: Decimal, currency_id: Optional[UUID]
    ) -> tuple[Decimal, Decimal]:
        """Convert *amount* to the company's base currency.

        Returns ``(amount_in_base, rate_used)``.  Amounts already in the base
        currency (or with no currency) are returned unchanged with rate 1.
        """
        if currency_id is None or currency_id == company.currency_id:
            return Decimal(amount), Decimal("1")
        rate = self.active_rate(company.id, currency_id)
        return (
            convert_to_base(amount, rate.rate_to_company_currency),
            rate.rate_to_company_currency,
        )

    # ------------------------------------------------------------------
    # Exchange rate administration
    # ------------------------------------------------------------------

    def list_active_rates(self, company_id: UUID) -> List[ExchangeRate]:
        return self._repo.active_rates(company_id)

    @transaction.atomic
    def add_rate(self, company: Company, dto: CreateExchangeRateDTO) -> ExchangeRate:
        currency = self.get_currency(dto.currency_id)
        if currency.id == company.currency_id:
            raise ExchangeRateAlreadyExists(
                f"{currency.code} is the company base currency."
            )
        if self._repo.active_rates(company.id, currency.id):
            raise ExchangeRateAlreadyExists(
                f"An active rate for {currency.code} already exists."
            )
        return self._repo.create_rate(
            company.id,
            {
                "currency_id": currency.id,
                "rate_to_company_currency": dto.rate_to_company_currency,
            },
        )

    @transaction.atomic
    def update_rate(
        self, company_id: UUID, rate_id: Any, dto: UpdateExchangeRateDTO
    ) -> ExchangeRate:
        """Change a rate; ``valid_from`` restarts at the time of the change."""
        rate = self._get_rate(company_id, rate_id)
        rate.rate_to_company_currency = dto.rate_to_company_currency
        rate.valid_from = timezone.now()
        self._repo.save_rate(rate, ["rate_to_company_currency", "valid_from"])
        logger.info(
            "exchange_rate.updated",
            company_id=str(company_id),
            rate_id=str(rate_id),
            rate=str(dto.rate_to_company_currency),
        )
        return rate

    @transaction.atomic
    def deactivate_rate(self, company_id: UUID, rate_id: Any) -> ExchangeRate:
        rate = self._get_rate(company_id, rate_id)
        rate.is_active = False
        self._repo.save_rate(rate, ["is_active"])
        logger.info(
            "exchange_rate.deactivated", company_id=str(company_id), rate_id=str(rate_id)
        )
        return rate

    def _get_rate(self, company_id: UUID, rate_id: Any) -> ExchangeRate:
        rate = self._repo.get_rate(company_id, rate_id)
        if rate is None:
            raise ExchangeRateNotFound(f"Exchange rate {rate_id} not found.")
        return rate

    # ------------------------------------------------------------------
    # Pricing tiers
    # ------------------------------------------------------------------

    def list_tiers(self, company_id: UUID) -> List[PricingTier]:
        return self._repo.list(company_id)

    def get_tier(self, company_id: UUID, tier_id: Any) -> PricingTier:
        tier = self._repo.get_by_id(company_id, tier_id)
        if tier is None:
            raise PricingTierNotFound(f"Pricing tier {tier_id} not found.")
        return tier

    def resolve_tier(self, company_id: UUID, tier_id: Any = None) -> Optional[PricingTier]:
        """The requested tier, else the company default, else ``None``."""
        if tier_id is not None:
            return self.get_tier(company_id, tier_id)
        return self._repo.default_tier(company_id)

    def create_tier(self, company_id: UUID, dto: PricingTierDTO) -> PricingTier:
        if not dto.name:
            raise ValueError("Tier name is required.")
        tier = PricingTier(
            company_id=company_id,
            name=dto.name,
            label=dto.label or "",
            markup_percent=dto.markup_percent or Decimal("0"),
            is_default=bool(dto.is_default),
        )
        self._repo.save_tier(tier)
        logger.info(
            "pricing_tier.created", company_id=str(company_id), tier_id=str(tier.id)
        )
        return tier

    def update_tier(
        self, company_id: UUID, tier_id: Any, dto: PricingTierDTO
    ) -> PricingTier:
        tier = self.get_tier(company_id, tier_id)
        for field, value in dto.model_dump(exclude_none=True).items():
            setattr(tier, field, value)
        self._repo.save_tier(tier)
        logger.info(
            "pricing_tier.updated", company_id=str(company_id), tier_id=str(tier.id)
        )
        return tier
