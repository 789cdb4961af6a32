"""Quotation service layer (Use Cases).

``create_quotation`` prices catalogue products for a client:

    unit_price = tier.apply_markup(product.unit_price) / exchange_rate

rounded half-up to cents.  The tier is the requested one, else the
client's default, else the company default; the currency follows the same
order and ends at the company's base currency.

``convert_to_order`` creates the order through ``OrderService`` with the
quoted prices (no second markup) and links both records in one
transaction.  Expired, rejected and already converted quotations are
refused.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING, Any, Dict, Optional
from uuid import UUID

import structlog
from django.db import transaction
from django.utils import timezone
from pydantic import ValidationError as PydanticValidationError

from modules.catalog.exceptions import ProductNotFound
from modules.clients.exceptions import ClientNotFound
from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO
from modules.pricing.formatting import TWO_PLACES
from modules.pricing.rates import convert_to_base
from modules.quotations.constants import (
    ALLOWED_TRANSITIONS,
    CONVERTIBLE_STATUSES,
    QuotationStatus,
)
from modules.quotations.exceptions import (
    InvalidQuotation,
    InvalidQuotationTransition,
    QuotationAlreadyConverted,
    QuotationExpired,
    QuotationNotFound,
)

if TYPE_CHECKING:
    from modules.accounts.models import Company
    from modules.catalog.repositories.interfaces import IProductRepository
    from modules.clients.repositories.interfaces import IClientRepository
    from modules.orders.services import OrderService, OrderWriteResult
    from modules.pricing.services import PricingService
    from modules.quotations.dtos import ConvertQuotationDTO, CreateQuotationDTO
    from modules.quotations.models import Quotation
    from modules.quotations.repositories.interfaces import IQuotationRepository

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class QuotationConversion:
    quotation: Quotation
    order_result: OrderWriteResult


def quoted_unit_price(
    list_price: Decimal, tier: Any, exchange_rate: Decimal
) -> Decimal:
    """Unit price in the quotation currency."""
    price = tier.apply_markup(list_price) if tier is not None else Decimal(list_price)
    return (price / Decimal(exchange_rate)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


class QuotationService:
    def __init__(
        self,
        quotation_repository: IQuotationRepository,
        client_repository: IClientRepository,
        product_repository: IProductRepository,
        pricing_service: PricingService,
        order_service: OrderService,
    ) -> None:
        self._repo = quotation_repository
        self._clients = client_repository
        self._products = product_repository
        self._pricing = pricing_service
        self._orders = order_service

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_quotation(
        self, company: Company, dto: CreateQuotationDTO, user_id: Any = None
    ) -> Quotation:
        """Price and store a draft quotation.

        Raises:
            ClientNotFound: ``client_id`` is not a client of the company.
            ProductNotFound: an item references an unknown product.
            InvalidQuotation: no client name, or a validity date in the past.
            PricingTierNotFound: the requested tier is not the company's.
            CurrencyNotFound: unknown currency.
            ExchangeRateNotFound: foreign currency without an active rate.
        """
        log = logger.bind(company_id=str(company.id))

        client = None
        if dto.client_id is not None:
            client = self._clients.get_by_id(company.id, dto.client_id)
            if client is None:
                raise ClientNotFound(f"Client {dto.client_id} not found.")

        client_name = (dto.client_name or "").strip() or (
            client.full_name if client else ""
        )
        if not client_name:
            raise InvalidQuotation("Client name is required.")
        if dto.valid_until < timezone.localdate():
            raise InvalidQuotation("Valid-until date cannot be in the past.")

        tier_id = dto.pricing_tier_id
        currency_id = dto.currency_id
        if client is not None:
            tier_id = tier_id or client.default_pricing_tier_id
            currency_id = currency_id or client.default_currency_id
        tier = self._pricing.resolve_tier(company.id, tier_id)

        if currency_id is not None:
            self._pricing.get_currency(currency_id)
        if currency_id is None or currency_id == company.currency_id:
            currency_id = None
            rate = Decimal("1")
        else:
            rate = self._pricing.active_rate(
                company.id, currency_id
            ).rate_to_company_currency

        items = []
        total = Decimal("0.00")
        for item in dto.items:
            product = self._products.get_by_id(company.id, item.product_id)
            if product is None:
                raise ProductNotFound(f"Product {item.product_id} not found.")
            unit_price = quoted_unit_price(product.unit_price, tier, rate)
            items.append(
                {
                    "product_id": product.id,
                    "description": product.name_en,
                    "quantity": item.quantity,
                    "unit_price": unit_price,
                }
            )
            total += unit_price * item.quantity

        with transaction.atomic():
            quotation = self._repo.create(
                company.id,
                {
                    "client_id": client.id if client else None,
                    "client_name": client_name,
                    "email": dto.email or (client.email if client else ""),
                    "phone": dto.phone or (client.phone if client else ""),
                    "valid_until": dto.valid_until,
                    "status": QuotationStatus.DRAFT,
                    "currency_id": currency_id,
                    "exchange_rate": rate,
                    "total_price": total,
                    "total_price_company": convert_to_base(total, rate),
                    "pricing_tier_id": tier.id if tier else None,
                    "notes": dto.notes or "",
                    "created_by_id": user_id,
                    "items": items,
                },
            )
        log.info(
            "quotation.created",
            quotation_id=str(quotation.id),
            total_price=str(total),
        )
        return self._repo.get_by_id(company.id, quotation.id) or quotation

    @transaction.atomic
    def change_status(
        self, company_id: UUID, quotation_id: Any, new_status: str
    ) -> Quotation:
        """Move a quotation along ``ALLOWED_TRANSITIONS``.

        Raises:
            QuotationNotFound: missing or another tenant's quotation.
            InvalidQuotationTransition: the move is not allowed.
        """
        quotation = self.get_quotation(company_id, quotation_id)
        if new_status == quotation.status:
            return quotation
        if new_status not in ALLOWED_TRANSITIONS.get(quotation.status, frozenset()):
            raise InvalidQuotationTransition(
                f"Cannot move a {quotation.status} quotation to '{new_status}'."
            )
        old_status = quotation.status
        quotation.status = new_status
        self._repo.save(quotation, ["status"])
        logger.info(
            "quotation.status_changed",
            quotation_id=str(quotation.id),
            old_status=old_status,
            new_status=new_status,
        )
        return quotation

    def convert_to_order(
        self,
        company: Company,
        quotation_id: Any,
        dto: ConvertQuotationDTO,
        user_id: Any = None,
    ) -> QuotationConversion:
        """Create an order from a quotation.

        Raises:
            QuotationNotFound: missing or another tenant's quotation.
            QuotationAlreadyConverted: an order already exists for it.
            InvalidQuotationTransition: the quotation was rejected.
            QuotationExpired: ``valid_until`` has passed.
            InvalidQuotation: no email to create the order with.
            Any error of ``OrderService.create_order``.
        """
        quotation = self.get_quotation(company.id, quotation_id)
        log = logger.bind(company_id=str(company.id), quotation_id=str(quotation.id))

        if quotation.order_id or quotation.status == QuotationStatus.CONVERTED:
            raise QuotationAlreadyConverted(quotation.order_id)
        if quotation.status not in CONVERTIBLE_STATUSES:
            raise InvalidQuotationTransition(
                f"A {quotation.status} quotation cannot be converted."
            )
        if quotation.is_expired():
            log.info("quotation.expired", valid_until=str(quotation.valid_until))
            raise QuotationExpired(
                f"Quotation expired on {quotation.valid_until:%Y-%m-%d}."
            )

        try:
            order_dto = CreateOrderDTO(
                client_name=quotation.client_name,
                email=dto.email or quotation.email,
                phone=quotation.phone,
                delivery_date=dto.delivery_date,
                delivery_method=dto.delivery_method,
                needs_design=dto.needs_design,
                currency_id=quotation.currency_id,
                pricing_tier_id=quotation.pricing_tier_id,
                client_id=quotation.client_id,
                items=[
                    CreateOrderItemDTO(
                        description=item.description,
                        quantity=item.quantity,
                        unit_price=item.unit_price,
                    )
                    for item in quotation.items.all()
                ],
                notes=dto.notes or quotation.notes,
                idempotency_key=f"quotation-{quotation.id}",
                apply_tier_markup=False,
            )
        except PydanticValidationError as exc:
            fields = {str(error["loc"][0]) for error in exc.errors() if error["loc"]}
            if "email" in fields:
                raise InvalidQuotation(
                    "An email address is required to create an order."
                ) from exc
            raise InvalidQuotation(str(exc)) from exc

        with transaction.atomic():
            result = self._orders.create_order(company, order_dto, user_id=user_id)
            self._repo.mark_converted(quotation, result.order)

        log.info("quotation.converted", order_id=str(result.order.id))
        return QuotationConversion(quotation, result)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_quotation(self, company_id: UUID, quotation_id: Any) -> Quotation:
        quotation = self._repo.get_by_id(company_id, quotation_id)
        if quotation is None:
            raise QuotationNotFound(f"Quotation {quotation_id} not found.")
        return quotation

    def list_quotations(
        self, company_id: UUID, filters: Optional[Dict[str, Any]] = None
    ):
        return self._repo.list(company_id, filters)
