"""Quotation repository interface."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional
from uuid import UUID

from modules.core.repositories.interfaces import ITenantRepository

if TYPE_CHECKING:
    from modules.orders.models import Order
    from modules.quotations.models import Quotation


class IQuotationRepository(ITenantRepository["Quotation"]):
    @abstractmethod
    def create(self, company_id: UUID, data: Dict[str, Any]) -> Quotation:
        """Create a quotation with its items.

        ``data`` holds the quotation fields plus ``items``: a list of dicts
        with ``product_id``, ``description``, ``quantity`` and ``unit_price``.
        """

    @abstractmethod
    def get_by_id(self, company_id: UUID, id: Any) -> Optional[Quotation]:
        """Retrieve a live quotation with its items."""

    @abstractmethod
    def list(
        self, company_id: UUID, filters: Optional[Dict[str, Any]] = None
    ) -> Any:
        """Queryset of the company's live quotations, newest first."""

    @abstractmethod
    def save(self, quotation: Quotation, fields: List[str]) -> Quotation:
        """Write *fields* of *quotation*."""

    @abstractmethod
    def mark_converted(self, quotation: Quotation, order: Order) -> Quotation:
        """Link *quotation* to *order* and flag it ``converted``."""
