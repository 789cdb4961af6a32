"""Order repository interface.

Extends ``ITenantRepository[Order]`` with the writes the lifecycle needs:
atomic creation with items, the single-statement transition update, the
audit trail, attachments and comments.

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional
from uuid import UUID

from modules.core.repositories.interfaces import ITenantRepository

if TYPE_CHECKING:
    from modules.orders.models import (
        Order,
        OrderAttachment,
        OrderComment,
        OrderStatusHistory,
    )


class IOrderRepository(ITenantRepository["Order"]):
    """Repository contract for the Order aggregate root.

    The Order aggregate includes OrderItem children, OrderStatusHistory
    records and OrderAttachment rows.  Every method is scoped to one
    company.
    """

    @abstractmethod
    def create(self, company_id: UUID, data: Dict[str, Any]) -> Order:
        """Create an order with its items.

        ``data`` holds the order fields plus ``items``: a list of dicts with
        ``description``, ``quantity`` and ``unit_price``.
        """

    @abstractmethod
    def get_by_id(self, company_id: UUID, id: Any) -> Optional[Order]:
        """Retrieve a live order with prefetched items and history."""

    @abstractmethod
    def list(
        self, company_id: UUID, filters: Optional[Dict[str, Any]] = None
    ) -> Any:
        """Queryset of the company's live orders."""

    @abstractmethod
    def apply_transition(self, order: Order, changes: Dict[str, Any]) -> Order:
        """Write *changes* to the order row in one ``UPDATE`` statement.

        Pending domain events of *order* are recorded in the outbox in the
        same transaction.
        """

    @abstractmethod
    def add_history(
        self,
        order: Order,
        new_status: str,
        old_status: Optional[str] = None,
        user_id: Any = None,
        notes: str = "",
    ) -> OrderStatusHistory:
        """Record a transition in the order's audit trail."""

    @abstractmethod
    def record_events(self, order: Order) -> int:
        """Move pending domain events of *order* into the outbox."""

    @abstractmethod
    def get_by_idempotency_key(self, company_id: UUID, key: str) -> Optional[Order]:
        """Retrieve an order by its idempotency key."""

    @abstractmethod
    def list_attachments(self, order: Order) -> List[OrderAttachment]:
        """Attachments of *order*, newest first."""

    @abstractmethod
    def add_attachment(self, order: Order, data: Dict[str, Any]) -> OrderAttachment:
        """Persist attachment metadata and record pending events."""

    @abstractmethod
    def list_comments(self, order: Order) -> List[OrderComment]:
        """Comments on *order*, newest first."""

    @abstractmethod
    def add_comment(self, order: Order, data: Dict[str, Any]) -> OrderComment:
        """Persist a comment on *order*."""
