"""Domain events for the Orders bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class OrderCreated(DomainEvent):
    """Raised when an order is created."""

    status: Optional[str] = None


@dataclass(frozen=True)
class OrderStatusChanged(DomainEvent):
    """Raised when an order moves to another registry status."""

    old_status: Optional[str] = None
    new_status: Optional[str] = None


@dataclass(frozen=True)
class PaymentConfirmed(DomainEvent):
    """Raised when payment is confirmed and the order enters production."""

    payment_method: Optional[str] = None
    payment_status: Optional[str] = None
    paid_amount: Optional[str] = None


@dataclass(frozen=True)
class OrderDelivered(DomainEvent):
    """Raised when an order is settled and delivered."""

    balance_collected: Optional[str] = None
    collection_method: Optional[str] = None


@dataclass(frozen=True)
class AttachmentUploaded(DomainEvent):
    """Raised when a file is attached to an order."""

    file_name: Optional[str] = None
    file_type: Optional[str] = None
