"""Asynchronous tasks of the core module."""

from __future__ import annotations

import structlog
from celery import shared_task

from modules.core.models import EventStatus, OutboxEvent
from shared.infrastructure.bus import event_bus

logger = structlog.get_logger(__name__)

OUTBOX_BATCH_SIZE = 100


@shared_task(name="core.dispatch_outbox_events")
def dispatch_outbox_events(batch_size: int = OUTBOX_BATCH_SIZE) -> dict:
    """Publish pending outbox events on the in-process event bus.

    Each event is handled on its own; a failing handler marks only that
    row as ``FAILED`` and the batch continues.
    """
    pending = list(
        OutboxEvent.objects.filter(status=EventStatus.PENDING).order_by("created_at")[
            :batch_size
        ]
    )
    published = failed = 0
    for outbox_event in pending:
        log = logger.bind(
            outbox_event_id=str(outbox_event.id),
            event_type=outbox_event.event_type,
        )
        event_class = event_bus.event_class_for(outbox_event.event_type)
        if event_class is None:
            log.warning("outbox.unknown_event_type")
            outbox_event.mark_as_failed(
                f"No handler registered for {outbox_event.event_type}"
            )
            failed += 1
            continue
        try:
            event_bus.publish(event_class.from_payload(outbox_event.payload))
        except Exception as exc:
            log.exception("outbox.dispatch_failed")
            outbox_event.mark_as_failed(str(exc))
            failed += 1
            continue
        outbox_event.mark_as_published()
        published += 1

    if pending:
        logger.info("outbox.dispatched", published=published, failed=failed)
    return {"published": published, "failed": failed}
