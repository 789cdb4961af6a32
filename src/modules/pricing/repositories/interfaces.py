"""Pricing repository interface.

Covers the global currency catalogue and the tenant-owned exchange rates
and pricing tiers.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional
from uuid import UUID

from modules.core.repositories.interfaces import ITenantRepository

if TYPE_CHECKING:
    from modules.pricing.models import Currency, ExchangeRate, PricingTier


class IPricingRepository(ITenantRepository["PricingTier"]):
    # Currencies -------------------------------------------------------

    @abstractmethod
    def list_currencies(self) -> List[Currency]:
        """All currencies ordered by code."""

    @abstractmethod
    def get_currency(self, currency_id: UUID) -> Optional[Currency]:
        """Look a currency up by id."""

    # Exchange rates ---------------------------------------------------

    @abstractmethod
    def active_rates(
        self, company_id: UUID, currency_id: Optional[UUID] = None
    ) -> List[ExchangeRate]:
        """Active rates of a company, most recent ``valid_from`` first."""

    @abstractmethod
    def get_rate(self, company_id: UUID, rate_id: Any) -> Optional[ExchangeRate]:
        """Look a rate up inside the company."""

    @abstractmethod
    def create_rate(self, company_id: UUID, data: Dict[str, Any]) -> ExchangeRate:
        """Insert a new active rate."""

    @abstractmethod
    def save_rate(self, rate: ExchangeRate, fields: List[str]) -> ExchangeRate:
        """Persist the given fields of *rate*."""

    # Pricing tiers ----------------------------------------------------

    @abstractmethod
    def default_tier(self, company_id: UUID) -> Optional[PricingTier]:
        """The company's default tier, if one is flagged."""

    @abstractmethod
    def save_tier(self, tier: PricingTier) -> PricingTier:
        """Persist *tier*; a default tier clears the flag on its siblings."""
