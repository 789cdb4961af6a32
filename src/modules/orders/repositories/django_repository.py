"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.  Every query
starts from ``for_company`` so no method can reach another tenant's rows.

Lifecycle transitions are written with a single ``QuerySet.update()`` on
the order row; concurrent transitions on the same order are not
coordinated (last write wins).
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Optional
from uuid import UUID

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from modules.core.outbox import flush_domain_events
from modules.orders.models import (
    Order,
    OrderAttachment,
    OrderComment,
    OrderItem,
    OrderStatusHistory,
)
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)

OUTBOX_TOPIC = "orders"


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Create (aggregate root + children)
    # ------------------------------------------------------------------

    @transaction.atomic
    def create(self, company_id: UUID, data: Dict[str, Any]) -> Order:
        items = data.pop("items", [])
        order = Order(company_id=company_id, **data)
        order.save()

        total = Decimal("0.00")
        for item_data in items:
            item = OrderItem(order=order, **item_data)
            item.save()
            total += item.item_total

        log = logger.bind(order_id=str(order.id), item_count=len(items))
        log.info("order.persisted", total_price=str(total))
        return order

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def _base_queryset(self, company_id: UUID):
        return (
            Order.objects.for_company(company_id)
            .alive()
            .select_related("company", "company__currency", "currency", "pricing_tier")
        )

    def get_by_id(self, company_id: UUID, id: Any) -> Optional[Order]:
        """Retrieve an order with eager-loaded relations.

        Returns ``None`` for non-existent, soft-deleted, foreign-tenant or
        malformed IDs.
        """
        try:
            return (
                self._base_queryset(company_id)
                .prefetch_related("items", "status_history", "attachments")
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def list(self, company_id: UUID, filters: Optional[Dict[str, Any]] = None):
        queryset = self._base_queryset(company_id)
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    def get_by_idempotency_key(self, company_id: UUID, key: str) -> Optional[Order]:
        return self._base_queryset(company_id).filter(idempotency_key=key).first()

    # ------------------------------------------------------------------
    # Lifecycle writes
    # ------------------------------------------------------------------

    @transaction.atomic
    def apply_transition(self, order: Order, changes: Dict[str, Any]) -> Order:
        now = timezone.now()
        updated = (
            Order.objects.for_company(order.company_id)
            .alive()
            .filter(id=order.id)
            .update(**changes, updated_at=now)
        )
        if not updated:
            raise Order.DoesNotExist(f"Order {order.id} not found.")

        for field, value in changes.items():
            setattr(order, field, value)
        order.updated_at = now

        event_count = flush_domain_events(order, OUTBOX_TOPIC)
        logger.info(
            "order.transition_applied",
            order_id=str(order.id),
            fields=sorted(changes),
            event_count=event_count,
        )
        return order

    def add_history(
        self,
        order: Order,
        new_status: str,
        old_status: Optional[str] = None,
        user_id: Any = None,
        notes: str = "",
    ) -> OrderStatusHistory:
        history = OrderStatusHistory.objects.create(
            company_id=order.company_id,
            order=order,
            old_status=old_status,
            new_status=new_status,
            user_id=user_id,
            notes=notes,
        )
        logger.info(
            "order.history_added",
            order_id=str(order.id),
            old_status=old_status,
            new_status=new_status,
        )
        return history

    def record_events(self, order: Order) -> int:
        return flush_domain_events(order, OUTBOX_TOPIC)

    # ------------------------------------------------------------------
    # Attachments
    # ------------------------------------------------------------------

    def list_attachments(self, order: Order) -> List[OrderAttachment]:
        return list(
            OrderAttachment.objects.for_company(order.company_id)
            .filter(order_id=order.id)
            .order_by("-created_at")
        )

    @transaction.atomic
    def add_attachment(self, order: Order, data: Dict[str, Any]) -> OrderAttachment:
        attachment = OrderAttachment.objects.create(
            company_id=order.company_id, order=order, **data
        )
        flush_domain_events(order, OUTBOX_TOPIC)
        return attachment

    # ------------------------------------------------------------------
    # Comments
    # ------------------------------------------------------------------

    def list_comments(self, order: Order) -> List[OrderComment]:
        return list(
            OrderComment.objects.for_company(order.company_id)
            .filter(order_id=order.id)
            .select_related("user", "user__membership")
            .order_by("-created_at", "-id")
        )

    def add_comment(self, order: Order, data: Dict[str, Any]) -> OrderComment:
        return OrderComment.objects.create(
            company_id=order.company_id, order=order, **data
        )
