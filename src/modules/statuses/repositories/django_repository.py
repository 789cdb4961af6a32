"""Django ORM implementation of the status repository."""

from __future__ import annotations

from typing import Any, Dict, List, Optional
from uuid import UUID

import structlog
from django.core.exceptions import ValidationError

from modules.statuses.models import OrderStatus
from modules.statuses.repositories.interfaces import IStatusRepository

logger = structlog.get_logger(__name__)


class StatusDjangoRepository(IStatusRepository):
    """Concrete status repository backed by Django ORM."""

    def get_by_id(self, company_id: UUID, id: Any) -> Optional[OrderStatus]:
        try:
            return OrderStatus.objects.for_company(company_id).filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(
        self, company_id: UUID, filters: Optional[Dict[str, Any]] = None
    ) -> List[OrderStatus]:
        queryset = OrderStatus.objects.for_company(company_id)
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset.order_by("sort_order", "name"))

    def get_by_name(self, company_id: UUID, name: str) -> Optional[OrderStatus]:
        return OrderStatus.objects.for_company(company_id).filter(name=name).first()

    def create(self, company_id: UUID, data: Dict[str, Any]) -> OrderStatus:
        return OrderStatus.objects.create(company_id=company_id, **data)

    def save(self, status: OrderStatus, fields: List[str]) -> OrderStatus:
        status.save(update_fields=fields)
        return status

    def delete(self, status: OrderStatus) -> None:
        status.delete()

    def name_in_use(self, company_id: UUID, name: str) -> bool:
        from modules.orders.models import Order

        return Order.objects.for_company(company_id).alive().filter(status=name).exists()

    def rename_in_orders(self, company_id: UUID, old_name: str, new_name: str) -> List[UUID]:
        from modules.orders.models import Order

        queryset = Order.objects.for_company(company_id).filter(status=old_name)
        order_ids = list(queryset.values_list("id", flat=True))
        if order_ids:
            queryset.update(status=new_name)
            logger.info(
                "order_status.orders_renamed",
                company_id=str(company_id),
                old_name=old_name,
                new_name=new_name,
                order_count=len(order_ids),
            )
        return order_ids
