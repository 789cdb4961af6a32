"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Serializers)
and the Service layer.  DTOs are immutable (``frozen=True``).

- ``CreateOrderItemDTO`` / ``CreateOrderDTO``: order creation input.
- ``ConfirmPaymentDTO``: accountant payment confirmation input.
- ``DeliverDTO``: delivery input (balance collection method).
- ``AddCommentDTO``: a note left on an order.
- ``SettlementQuoteDTO``: what is still owed before delivery.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, field_validator

from modules.orders.constants import DeliveryMethod

# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CreateOrderItemDTO(BaseModel):
    """A single line of a new order.

    ``unit_price`` is the list price; the pricing tier markup is applied by
    the service.
    """

    model_config = ConfigDict(frozen=True)

    description: str
    quantity: int
    unit_price: Decimal

    @field_validator("description")
    @classmethod
    def description_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Item description is required.")
        return v.strip()

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Quantity must be at least 1.")
        return v

    @field_validator("unit_price")
    @classmethod
    def price_not_negative(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError("Unit price cannot be negative.")
        return v


class CreateOrderDTO(BaseModel):
    """Order creation request.

    ``currency_id`` is the transaction currency; ``None`` means the
    company's base currency.  ``apply_tier_markup`` is ``False`` when the
    item prices were already quoted with the tier markup.
    """

    model_config = ConfigDict(frozen=True)

    client_name: str
    email: EmailStr
    phone: Optional[str] = ""
    delivery_date: date
    delivery_method: DeliveryMethod = DeliveryMethod.PICKUP
    needs_design: bool = False
    currency_id: Optional[UUID] = None
    pricing_tier_id: Optional[UUID] = None
    client_id: Optional[UUID] = None
    items: List[CreateOrderItemDTO]
    notes: Optional[str] = ""
    idempotency_key: Optional[str] = None
    apply_tier_markup: bool = True

    @field_validator("client_name")
    @classmethod
    def client_name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Client name is required.")
        return v.strip()

    @field_validator("items")
    @classmethod
    def items_must_not_be_empty(
        cls, v: List[CreateOrderItemDTO]
    ) -> List[CreateOrderItemDTO]:
        if not v:
            raise ValueError("Order must have at least one item.")
        return v


class ConfirmPaymentDTO(BaseModel):
    """Payment confirmation request.

    ``payment_method`` stays optional here so that a missing method is
    reported by the lifecycle service as ``PaymentMethodRequired``.
    """

    model_config = ConfigDict(frozen=True)

    payment_method: Optional[str] = None
    payment_status: Optional[str] = None
    paid_amount: Optional[Decimal] = None
    notes: Optional[str] = ""


class AddCommentDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    content: str
    is_internal: bool = False

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Comment cannot be empty.")
        return v.strip()


class DeliverDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    collection_method: Optional[str] = None
    notes: Optional[str] = ""


# ---------------------------------------------------------------------------
# Output DTOs
# ---------------------------------------------------------------------------


class SettlementQuoteDTO(BaseModel):
    """Balance check performed before delivery."""

    model_config = ConfigDict(frozen=True)

    order_id: UUID
    total_price: Decimal
    paid_amount: Decimal
    remaining: Decimal
    balance_due: bool
