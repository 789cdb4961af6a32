"""Event handlers for Orders domain events.

Handlers run when ``core.dispatch_outbox_events`` publishes rows from the
outbox, i.e. after the transition has been committed.
"""

from __future__ import annotations

import structlog

from modules.orders.events import (
    AttachmentUploaded,
    OrderCreated,
    OrderDelivered,
    OrderStatusChanged,
    PaymentConfirmed,
)
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class OrderCreatedHandler(IEventHandler[OrderCreated]):
    def handle(self, event: OrderCreated) -> None:
        logger.info(
            "order.event.created",
            order_id=str(event.aggregate_id),
            company_id=str(event.company_id),
            status=event.status,
        )


class OrderStatusChangedHandler(IEventHandler[OrderStatusChanged]):
    def handle(self, event: OrderStatusChanged) -> None:
        logger.info(
            "order.event.status_changed",
            order_id=str(event.aggregate_id),
            company_id=str(event.company_id),
            old_status=event.old_status,
            new_status=event.new_status,
        )


class PaymentConfirmedHandler(IEventHandler[PaymentConfirmed]):
    def handle(self, event: PaymentConfirmed) -> None:
        logger.info(
            "order.event.payment_confirmed",
            order_id=str(event.aggregate_id),
            company_id=str(event.company_id),
            payment_method=event.payment_method,
            payment_status=event.payment_status,
            paid_amount=event.paid_amount,
        )


class OrderDeliveredHandler(IEventHandler[OrderDelivered]):
    def handle(self, event: OrderDelivered) -> None:
        logger.info(
            "order.event.delivered",
            order_id=str(event.aggregate_id),
            company_id=str(event.company_id),
            balance_collected=event.balance_collected,
            collection_method=event.collection_method,
        )


class AttachmentUploadedHandler(IEventHandler[AttachmentUploaded]):
    def handle(self, event: AttachmentUploaded) -> None:
        logger.info(
            "order.event.attachment_uploaded",
            order_id=str(event.aggregate_id),
            company_id=str(event.company_id),
            file_name=event.file_name,
            file_type=event.file_type,
        )


order_created_handler = OrderCreatedHandler()
order_status_changed_handler = OrderStatusChangedHandler()
payment_confirmed_handler = PaymentConfirmedHandler()
order_delivered_handler = OrderDeliveredHandler()
attachment_uploaded_handler = AttachmentUploadedHandler()
