"""Membership repository interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Optional
from uuid import UUID

if TYPE_CHECKING:
    from modules.accounts.models import Membership


class IMembershipRepository(ABC):
    @abstractmethod
    def get_for_user(self, user_id: Any) -> Optional[Membership]:
        """Return the role record of a user, or ``None``."""

    @abstractmethod
    def email_exists(self, email: str) -> bool:
        """Whether any user already uses *email*."""

    @abstractmethod
    def create_member(
        self,
        *,
        email: str,
        password: str,
        full_name: str,
        role: str,
        company_id: UUID,
    ) -> Membership:
        """Create the auth user and its membership atomically."""
