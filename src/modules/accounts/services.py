"""Privileged account operations.

User creation follows two rules that must hold regardless of input:

1. Only an ``admin`` (looked up server-side) may create users.
2. The new user always joins the **caller's** company.  Any company id in
   the request is ignored.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog
from django.db import DatabaseError, IntegrityError, transaction

from modules.accounts.dtos import CreateUserDTO, ProvisionedUserDTO
from modules.accounts.exceptions import (
    MembershipNotFound,
    NotCompanyAdmin,
    UserAlreadyExists,
    UserProvisioningFailed,
)

if TYPE_CHECKING:
    from modules.accounts.models import Membership
    from modules.accounts.repositories.interfaces import IMembershipRepository

logger = structlog.get_logger(__name__)


class UserProvisioningService:
    def __init__(self, membership_repository: IMembershipRepository) -> None:
        self._memberships = membership_repository

    def authorize_admin(self, user_id: Any) -> Membership:
        """Return the caller's membership if they are a company admin.

        Raises:
            MembershipNotFound: the caller has no role record.
            NotCompanyAdmin: the caller's role is not ``admin``.
        """
        membership = self._memberships.get_for_user(user_id)
        if membership is None:
            logger.warning("user_provisioning.role_lookup_failed", caller_id=user_id)
            raise MembershipNotFound("Unable to verify user role")
        if not membership.is_admin:
            logger.warning(
                "user_provisioning.caller_not_admin",
                caller_id=user_id,
                role=membership.role,
            )
            raise NotCompanyAdmin("Only admins can create users")
        return membership

    @transaction.atomic
    def create_user(self, caller: Membership, dto: CreateUserDTO) -> ProvisionedUserDTO:
        """Create a user inside the caller's company.

        Raises:
            NotCompanyAdmin: *caller* is not an admin.
            UserAlreadyExists: the e-mail is already registered.
            UserProvisioningFailed: the write failed for another reason.
        """
        if not caller.is_admin:
            raise NotCompanyAdmin("Only admins can create users")

        target_company_id = caller.company_id
        log = logger.bind(
            caller_id=caller.user_id,
            company_id=str(target_company_id),
            role=dto.role,
        )
        if dto.requested_company_id and dto.requested_company_id != str(
            target_company_id
        ):
            log.warning(
                "user_provisioning.company_override",
                requested_company_id=dto.requested_company_id,
            )

        if self._memberships.email_exists(dto.email):
            raise UserAlreadyExists("A user with this email already exists")

        try:
            membership = self._memberships.create_member(
                email=dto.email,
                password=dto.password,
                full_name=dto.full_name,
                role=dto.role,
                company_id=target_company_id,
            )
        except IntegrityError as exc:
            raise UserAlreadyExists("A user with this email already exists") from exc
        except DatabaseError as exc:
            log.exception("user_provisioning.write_failed")
            raise UserProvisioningFailed("Failed to create user") from exc

        log.info("user_provisioning.user_created", user_id=membership.user_id)
        return ProvisionedUserDTO(
            id=membership.user_id,
            email=dto.email,
            full_name=membership.full_name,
            role=membership.role,
            company_id=membership.company_id,
        )
