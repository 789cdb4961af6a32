"""Quotation DTOs (Pydantic v2, immutable).

- ``CreateQuotationItemDTO`` / ``CreateQuotationDTO``: a quotation priced
  from catalogue products.
- ``ConvertQuotationDTO``: what an order needs beyond the quotation.
"""

from __future__ import annotations

from datetime import date
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, field_validator

from modules.orders.constants import DeliveryMethod


class CreateQuotationItemDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    product_id: UUID
    quantity: int = 1

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Quantity must be at least 1.")
        return v


class CreateQuotationDTO(BaseModel):
    """Quotation request.

    Contact fields left empty are taken from ``client_id``'s record; the
    pricing tier and currency default to the client's, then to the
    company's default tier and base currency.
    """

    model_config = ConfigDict(frozen=True)

    client_id: Optional[UUID] = None
    client_name: Optional[str] = ""
    email: Optional[EmailStr] = None
    phone: Optional[str] = ""
    valid_until: date
    pricing_tier_id: Optional[UUID] = None
    currency_id: Optional[UUID] = None
    notes: Optional[str] = ""
    items: List[CreateQuotationItemDTO]

    @field_validator("items")
    @classmethod
    def items_must_not_be_empty(
        cls, v: List[CreateQuotationItemDTO]
    ) -> List[CreateQuotationItemDTO]:
        if not v:
            raise ValueError("Quotation must have at least one item.")
        return v


class ConvertQuotationDTO(BaseModel):
    """``email`` is only needed when the quotation has none."""

    model_config = ConfigDict(frozen=True)

    delivery_date: date
    delivery_method: DeliveryMethod = DeliveryMethod.PICKUP
    needs_design: bool = False
    email: Optional[EmailStr] = None
    notes: Optional[str] = ""
