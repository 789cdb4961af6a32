"""Accounts domain exceptions.

Raised by the Service Layer; the views translate them into HTTP
responses.
"""

from __future__ import annotations


class MembershipNotFound(Exception):
    """The caller has no role record, so their tenant cannot be resolved."""


class NotCompanyAdmin(Exception):
    """The caller is not an admin of their company."""


class UserAlreadyExists(Exception):
    """A user with the requested e-mail already exists."""


class UserProvisioningFailed(Exception):
    """The user row could not be written for an unexpected reason."""
