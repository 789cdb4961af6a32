"""Client repository interface."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Optional
from uuid import UUID

from modules.core.repositories.interfaces import ITenantRepository

if TYPE_CHECKING:
    from modules.clients.models import Client


class IClientRepository(ITenantRepository["Client"]):
    @abstractmethod
    def get_by_id(self, company_id: UUID, id: Any) -> Optional[Client]:
        """Retrieve a live client; ``None`` for deleted or malformed ids."""

    @abstractmethod
    def list(
        self, company_id: UUID, filters: Optional[Dict[str, Any]] = None
    ) -> Any:
        """Queryset of the company's live clients, ordered by name."""

    @abstractmethod
    def save(self, client: Client) -> Client:
        """Insert or update *client*."""

    @abstractmethod
    def delete(self, client: Client) -> None:
        """Soft-delete *client*."""
