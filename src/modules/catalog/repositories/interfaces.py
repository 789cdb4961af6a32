"""Product repository interface."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Optional
from uuid import UUID

from modules.core.repositories.interfaces import ITenantRepository

if TYPE_CHECKING:
    from modules.catalog.models import Product


class IProductRepository(ITenantRepository["Product"]):
    @abstractmethod
    def get_by_id(self, company_id: UUID, id: Any) -> Optional[Product]:
        """Retrieve a live product; ``None`` for deleted or malformed ids."""

    @abstractmethod
    def get_by_sku(self, company_id: UUID, sku: str) -> Optional[Product]:
        """Retrieve a live product by its normalised SKU."""

    @abstractmethod
    def list(
        self, company_id: UUID, filters: Optional[Dict[str, Any]] = None
    ) -> Any:
        """Queryset of the company's live products, ordered by name."""

    @abstractmethod
    def save(self, product: Product) -> Product:
        """Insert or update *product*."""

    @abstractmethod
    def delete(self, product: Product) -> None:
        """Soft-delete *product*."""
