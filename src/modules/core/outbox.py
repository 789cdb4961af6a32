"""Helpers that move collected domain events into the outbox table."""

from __future__ import annotations

from typing import Any

import structlog

from modules.core.models import OutboxEvent

logger = structlog.get_logger(__name__)


def flush_domain_events(entity: Any, topic: str) -> int:
    """Persist every pending event of *entity* and clear them.

    Must be called inside the transaction that wrote the entity.
    """
    events = entity.domain_events if hasattr(entity, "domain_events") else []
    for event in events:
        OutboxEvent.objects.create(
            event_type=event.event_name,
            aggregate_id=str(event.aggregate_id),
            payload=event.to_payload(),
            topic=topic,
        )
    if hasattr(entity, "clear_domain_events"):
        entity.clear_domain_events()
    if events:
        logger.info("outbox.events_recorded", topic=topic, event_count=len(events))
    return len(events)
