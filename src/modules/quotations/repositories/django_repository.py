"""Django ORM implementation of the Quotation repository."""

from __future__ import annotations

from typing import Any, Dict, List, Optional
from uuid import UUID

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from modules.orders.models import Order
from modules.quotations.constants import QuotationStatus
from modules.quotations.models import Quotation, QuotationItem
from modules.quotations.repositories.interfaces import IQuotationRepository

logger = structlog.get_logger(__name__)


class QuotationDjangoRepository(IQuotationRepository):
    @transaction.atomic
    def create(self, company_id: UUID, data: Dict[str, Any]) -> Quotation:
        items = data.pop("items", [])
        quotation = Quotation(company_id=company_id, **data)
        quotation.save()
        for item_data in items:
            QuotationItem(quotation=quotation, **item_data).save()
        logger.info(
            "quotation.persisted",
            quotation_id=str(quotation.id),
            item_count=len(items),
        )
        return quotation

    def _base_queryset(self, company_id: UUID):
        return (
            Quotation.objects.for_company(company_id)
            .alive()
            .select_related("company__currency", "currency", "pricing_tier", "client")
        )

    def get_by_id(self, company_id: UUID, id: Any) -> Optional[Quotation]:
        try:
            return (
                self._base_queryset(company_id)
                .prefetch_related("items")
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def list(self, company_id: UUID, filters: Optional[Dict[str, Any]] = None):
        queryset = self._base_queryset(company_id)
        if filters:
            queryset = queryset.filter(**filters)
        return queryset.order_by("-created_at", "-id")

    def save(self, quotation: Quotation, fields: List[str]) -> Quotation:
        quotation.save(update_fields=fields)
        return quotation

    def mark_converted(self, quotation: Quotation, order: Order) -> Quotation:
        quotation.status = QuotationStatus.CONVERTED
        quotation.order = order
        quotation.converted_at = timezone.now()
        quotation.save(update_fields=["status", "order", "converted_at"])
        return quotation
