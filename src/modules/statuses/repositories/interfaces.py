"""Order status repository interface."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional
from uuid import UUID

from modules.core.repositories.interfaces import ITenantRepository

if TYPE_CHECKING:
    from modules.statuses.models import OrderStatus


class IStatusRepository(ITenantRepository["OrderStatus"]):
    """Status-specific persistence contract."""

    @abstractmethod
    def list(
        self, company_id: UUID, filters: Optional[Dict[str, Any]] = None
    ) -> List[OrderStatus]:
        """Statuses of the company ordered by ``sort_order``."""

    @abstractmethod
    def get_by_name(self, company_id: UUID, name: str) -> Optional[OrderStatus]:
        """Look a status up by its exact name."""

    @abstractmethod
    def create(self, company_id: UUID, data: Dict[str, Any]) -> OrderStatus:
        """Insert a new status."""

    @abstractmethod
    def save(self, status: OrderStatus, fields: List[str]) -> OrderStatus:
        """Persist the given fields of an existing status."""

    @abstractmethod
    def delete(self, status: OrderStatus) -> None:
        """Remove a status from the registry."""

    @abstractmethod
    def name_in_use(self, company_id: UUID, name: str) -> bool:
        """Whether any live order of the company is in status *name*."""

    @abstractmethod
    def rename_in_orders(self, company_id: UUID, old_name: str, new_name: str) -> List[UUID]:
        """Move every order in *old_name* to *new_name*; return their ids."""
