"""Accounts DTOs (Pydantic v2, immutable)."""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, field_validator

from modules.accounts.models import ASSIGNABLE_ROLES, Role

_ROLE_ORDER = [Role.SALES, Role.DESIGNER, Role.PRODUCTION, Role.ACCOUNTANT]


class CreateUserDTO(BaseModel):
    """Input for privileged user creation.

    ``requested_company_id`` is carried only so the service can log when a
    caller tried to target another tenant; it is never used for the write.
    """

    model_config = ConfigDict(frozen=True)

    email: EmailStr
    password: str
    full_name: str
    role: str
    requested_company_id: Optional[str] = None

    @field_validator("full_name")
    @classmethod
    def full_name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Full name is required.")
        return v.strip()

    @field_validator("role")
    @classmethod
    def role_must_be_assignable(cls, v: str) -> str:
        if v not in ASSIGNABLE_ROLES:
            allowed = ", ".join(str(role) for role in _ROLE_ORDER)
            raise ValueError(f"Invalid role. Allowed roles: {allowed}")
        return v


class ProvisionedUserDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    email: str
    full_name: str
    role: str
    company_id: UUID
