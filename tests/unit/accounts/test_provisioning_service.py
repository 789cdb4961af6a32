"""Unit tests for UserProvisioningService with a mocked repository."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from django.db import DatabaseError, IntegrityError
from pydantic import ValidationError

from modules.accounts.dtos import CreateUserDTO
from modules.accounts.exceptions import (
    MembershipNotFound,
    NotCompanyAdmin,
    UserAlreadyExists,
    UserProvisioningFailed,
)
from modules.accounts.services import UserProvisioningService

pytestmark = pytest.mark.unit


def _dto(**overrides):
    data = {
        "email": "new.designer@printshop.example.com",
        "password": "s3cret-pass",
        "full_name": "New Designer",
        "role": "designer",
    }
    data.update(overrides)
    return CreateUserDTO(**data)


@pytest.fixture()
def caller():
    return SimpleNamespace(user_id=1, company_id=uuid4(), role="admin", is_admin=True)


@pytest.fixture()
def repo(caller):
    repo = MagicMock()
    repo.email_exists.return_value = False
    repo.create_member.side_effect = lambda **kw: SimpleNamespace(
        user_id=42, full_name=kw["full_name"], role=kw["role"], company_id=kw["company_id"]
    )
    repo.get_for_user.return_value = caller
    return repo


@pytest.fixture()
def service(repo):
    return UserProvisioningService(repo)


class TestAuthorizeAdmin:
    def test_admin(self, service, caller):
        assert service.authorize_admin(1) is caller

    def test_no_membership(self, service, repo):
        repo.get_for_user.return_value = None
        with pytest.raises(MembershipNotFound, match="Unable to verify user role"):
            service.authorize_admin(1)

    def test_non_admin(self, service, repo):
        repo.get_for_user.return_value = SimpleNamespace(
            user_id=2, company_id=uuid4(), role="sales", is_admin=False
        )
        with pytest.raises(NotCompanyAdmin, match="Only admins can create users"):
            service.authorize_admin(2)


class TestCreateUser:
    def test_user_joins_callers_company(self, service, repo, caller):
        user = service.create_user(caller, _dto(requested_company_id=str(uuid4())))

        assert repo.create_member.call_args.kwargs["company_id"] == caller.company_id
        assert user.company_id == caller.company_id
        assert user.id == 42
        assert user.role == "designer"

    def test_non_admin_caller(self, service, repo):
        caller = SimpleNamespace(user_id=3, company_id=uuid4(), is_admin=False)
        with pytest.raises(NotCompanyAdmin):
            service.create_user(caller, _dto())
        repo.create_member.assert_not_called()

    def test_duplicate_email(self, service, repo, caller):
        repo.email_exists.return_value = True
        with pytest.raises(UserAlreadyExists):
            service.create_user(caller, _dto())
        repo.create_member.assert_not_called()

    def test_integrity_error_is_duplicate(self, service, repo, caller):
        repo.create_member.side_effect = IntegrityError("unique")
        with pytest.raises(UserAlreadyExists):
            service.create_user(caller, _dto())

    def test_database_error_is_generic(self, service, repo, caller):
        repo.create_member.side_effect = DatabaseError("disk full")
        with pytest.raises(UserProvisioningFailed) as exc_info:
            service.create_user(caller, _dto())
        assert "disk full" not in str(exc_info.value)


class TestCreateUserDTO:
    def test_admin_role_cannot_be_assigned(self):
        with pytest.raises(ValidationError, match="Invalid role"):
            _dto(role="admin")

    def test_invalid_email(self):
        with pytest.raises(ValidationError):
            _dto(email="not-an-email")

    def test_blank_full_name(self):
        with pytest.raises(ValidationError, match="Full name is required"):
            _dto(full_name="   ")
