"""In-memory event bus implementation."""

from __future__ import annotations

from typing import Dict, List, Optional, Type

import structlog

from shared.domain.bus import IEventBus, IEventHandler
from shared.domain.events import DomainEvent

logger = structlog.get_logger(__name__)


class InMemoryEventBus(IEventBus):
    """Simple in-process event bus."""

    def __init__(self) -> None:
        self._handlers: Dict[Type[DomainEvent], List[IEventHandler]] = {}

    def subscribe(self, event_class: Type[DomainEvent], handler: IEventHandler) -> None:
        handlers = self._handlers.setdefault(event_class, [])
        if handler not in handlers:
            handlers.append(handler)

    def publish(self, event: DomainEvent) -> None:
        handlers = self._handlers.get(type(event), [])
        if not handlers:
            logger.debug("event_bus.no_handlers", event_name=event.event_name)
        for handler in handlers:
            handler.handle(event)

    def event_class_for(self, event_name: str) -> Optional[Type[DomainEvent]]:
        for event_class in self._handlers:
            if event_class.__name__ == event_name:
                return event_class
        return None


# Global bus instance (singleton)

event_bus = InMemoryEventBus()
