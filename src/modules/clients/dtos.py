"""Client DTOs (Pydantic v2, immutable)."""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, field_validator


class CreateClientDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    full_name: str
    business_name: Optional[str] = ""
    email: Optional[EmailStr] = None
    phone: Optional[str] = ""
    secondary_phone: Optional[str] = ""
    address: Optional[str] = ""
    city: Optional[str] = ""
    tax_number: Optional[str] = ""
    notes: Optional[str] = ""
    default_currency_id: Optional[UUID] = None
    default_pricing_tier_id: Optional[UUID] = None

    @field_validator("full_name")
    @classmethod
    def full_name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Client name is required.")
        return v.strip()


class UpdateClientDTO(BaseModel):
    """Partial update: ``None`` leaves a field untouched."""

    model_config = ConfigDict(frozen=True)

    full_name: Optional[str] = None
    business_name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    secondary_phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    tax_number: Optional[str] = None
    notes: Optional[str] = None
    default_currency_id: Optional[UUID] = None
    default_pricing_tier_id: Optional[UUID] = None

    @field_validator("full_name")
    @classmethod
    def full_name_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("Client name is required.")
        return v.strip() if v is not None else v
