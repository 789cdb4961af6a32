"""Django ORM implementation of the Pricing repository."""

from __future__ import annotations

from typing import Any, Dict, List, Optional
from uuid import UUID

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction

from modules.pricing.models import Currency, ExchangeRate, PricingTier
from modules.pricing.repositories.interfaces import IPricingRepository

logger = structlog.get_logger(__name__)


class PricingDjangoRepository(IPricingRepository):
    """Concrete pricing repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Pricing tiers (ITenantRepository contract)
    # ------------------------------------------------------------------

    def get_by_id(self, company_id: UUID, id: Any) -> Optional[PricingTier]:
        try:
            return PricingTier.objects.for_company(company_id).filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(
        self, company_id: UUID, filters: Optional[Dict[str, Any]] = None
    ) -> List[PricingTier]:
        queryset = PricingTier.objects.for_company(company_id)
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset.order_by("name"))

    def default_tier(self, company_id: UUID) -> Optional[PricingTier]:
        return PricingTier.objects.for_company(company_id).filter(is_default=True).first()

    @transaction.atomic
    def save_tier(self, tier: PricingTier) -> PricingTier:
        if tier.is_default:
            cleared = (
                PricingTier.objects.for_company(tier.company_id)
                .filter(is_default=True)
                .exclude(id=tier.id)
                .update(is_default=False)
            )
            if cleared:
                logger.info(
                    "pricing_tier.default_moved",
                    company_id=str(tier.company_id),
                    tier_id=str(tier.id),
                )
        tier.save()
        return tier

    # ------------------------------------------------------------------
    # Currencies
    # ------------------------------------------------------------------

    def list_currencies(self) -> List[Currency]:
        return list(Currency.objects.order_by("code"))

    def get_currency(self, currency_id: UUID) -> Optional[Currency]:
        try:
            return Currency.objects.filter(id=currency_id).first()
        except (ValueError, ValidationError):
            return None

    # ------------------------------------------------------------------
    # Exchange rates
    # ------------------------------------------------------------------

    def active_rates(
        self, company_id: UUID, currency_id: Optional[UUID] = None
    ) -> List[ExchangeRate]:
        queryset = (
            ExchangeRate.objects.for_company(company_id)
            .filter(is_active=True)
            .select_related("currency")
        )
        if currency_id is not None:
            queryset = queryset.filter(currency_id=currency_id)
        return list(queryset.order_by("-valid_from", "-created_at"))

    def get_rate(self, company_id: UUID, rate_id: Any) -> Optional[ExchangeRate]:
        try:
            return (
                ExchangeRate.objects.for_company(company_id)
                .select_related("currency")
                .filter(id=rate_id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def create_rate(self, company_id: UUID, data: Dict[str, Any]) -> ExchangeRate:
        rate = ExchangeRate.objects.create(company_id=company_id, is_active=True, **data)
        logger.info(
            "exchange_rate.created",
            company_id=str(company_id),
            currency_id=str(rate.currency_id),
            rate=str(rate.rate_to_company_currency),
        )
        return rate

    def save_rate(self, rate: ExchangeRate, fields: List[str]) -> ExchangeRate:
        rate.save(update_fields=fields)
        return rate
