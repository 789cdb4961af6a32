"""Generic repository interface (Dependency Inversion Principle).

Provides ``ITenantRepository[T]``, the base abstract class that every
domain-specific repository interface extends.  Every read takes the
caller's ``company_id``: a repository never returns another tenant's rows.
Service-layer code depends on this abstraction, never on Django ORM directly.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, Iterable, Optional, TypeVar
from uuid import UUID

T = TypeVar("T")


class ITenantRepository(ABC, Generic[T]):
    """Base generic repository contract for tenant-owned entities."""

    @abstractmethod
    def get_by_id(self, company_id: UUID, id: Any) -> Optional[T]:
        """Retrieve an entity of *company_id* by primary key."""

    @abstractmethod
    def list(
        self, company_id: UUID, filters: Optional[Dict[str, Any]] = None
    ) -> Iterable[T]:
        """List the tenant's entities with optional filters."""
