"""Domain bus interfaces for in-process event handling."""

from __future__ import annotations

from typing import Generic, Optional, Protocol, Type, TypeVar

from shared.domain.events import DomainEvent

E = TypeVar("E", bound=DomainEvent, contravariant=True)


class IEventHandler(Protocol, Generic[E]):
    """Handler interface for domain events."""

    def handle(self, event: E) -> None: ...


class IEventBus(Protocol):
    """Event bus interface.

    Besides publish/subscribe the bus knows every event class it has a
    subscription for, so the outbox dispatcher can rebuild events from
    their stored ``event_type`` name.
    """

    def publish(self, event: DomainEvent) -> None: ...

    def subscribe(self, event_class: Type[E], handler: IEventHandler[E]) -> None: ...

    def event_class_for(self, event_name: str) -> Optional[Type[DomainEvent]]: ...
