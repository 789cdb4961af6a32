"""Tenant resolution and role gates for DRF views.

``get_membership(request)`` resolves the caller's company and role once per
request and binds them into the log context.  Views declare
``action_roles`` (DRF action name -> allowed roles); actions not listed are
open to any member of the tenant.
"""

from __future__ import annotations

from typing import Optional

import structlog
from rest_framework import permissions

from modules.accounts.models import Membership, Role

_MEMBERSHIP_ATTR = "_tenant_membership"

ANY_MEMBER: frozenset[str] = frozenset(Role.values)
ADMIN_ONLY: frozenset[str] = frozenset({Role.ADMIN})


def get_membership(request) -> Optional[Membership]:
    if not hasattr(request, _MEMBERSHIP_ATTR):
        membership = None
        user = getattr(request, "user", None)
        if user is not None and user.is_authenticated:
            membership = (
                Membership.objects.select_related("company", "company__currency")
                .filter(user=user)
                .first()
            )
        if membership is not None:
            structlog.contextvars.bind_contextvars(
                company_id=str(membership.company_id), role=str(membership.role)
            )
        setattr(request, _MEMBERSHIP_ATTR, membership)
    return getattr(request, _MEMBERSHIP_ATTR)


class HasCompanyRole(permissions.BasePermission):
    """
    Permission: caller must belong to a company and, for gated actions,
    hold one of the roles listed in ``view.action_roles``.
    """

    message = "You do not have a role that allows this action."

    def has_permission(self, request, view):
        membership = get_membership(request)
        if membership is None:
            self.message = "Unable to verify user role."
            return False
        action_roles = getattr(view, "action_roles", {})
        allowed = action_roles.get(getattr(view, "action", None), ANY_MEMBER)
        return membership.role in allowed

    def has_object_permission(self, request, view, obj):
        membership = get_membership(request)
        return membership is not None and obj.company_id == membership.company_id


class AllowPreflight(permissions.BasePermission):
    """Let ``OPTIONS`` through before authentication-dependent checks."""

    def has_permission(self, request, view):
        return request.method == "OPTIONS" or bool(
            request.user and request.user.is_authenticated
        )


class TenantViewMixin:
    """Gives DRF views ``self.membership`` / ``self.company_id``."""

    @property
    def membership(self) -> Membership:
        return get_membership(self.request)

    @property
    def company_id(self):
        return self.membership.company_id
