"""Accounts repositories package."""

from modules.accounts.repositories.django_repository import MembershipDjangoRepository
from modules.accounts.repositories.interfaces import IMembershipRepository

__all__ = ["IMembershipRepository", "MembershipDjangoRepository"]
