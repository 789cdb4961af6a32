"""Django ORM implementation of the Membership repository."""

from __future__ import annotations

from typing import Any, Optional
from uuid import UUID

import structlog
from django.contrib.auth import get_user_model
from django.db import transaction

from modules.accounts.models import Membership
from modules.accounts.repositories.interfaces import IMembershipRepository

logger = structlog.get_logger(__name__)


class MembershipDjangoRepository(IMembershipRepository):
    def get_for_user(self, user_id: Any) -> Optional[Membership]:
        return (
            Membership.objects.select_related("company", "company__currency")
            .filter(user_id=user_id)
            .first()
        )

    def email_exists(self, email: str) -> bool:
        User = get_user_model()
        return (
            User.objects.filter(email__iexact=email).exists()
            or User.objects.filter(username__iexact=email).exists()
        )

    @transaction.atomic
    def create_member(
        self,
        *,
        email: str,
        password: str,
        full_name: str,
        role: str,
        company_id: UUID,
    ) -> Membership:
        User = get_user_model()
        user = User.objects.create_user(username=email, email=email, password=password)
        membership = Membership.objects.create(
            user=user,
            company_id=company_id,
            role=role,
            full_name=full_name,
        )
        logger.info(
            "membership.created",
            user_id=user.pk,
            company_id=str(company_id),
            role=role,
        )
        return membership
