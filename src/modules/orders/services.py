"""Order service layer (Use Cases).

``OrderService`` creates and reads orders.  ``OrderLifecycleService`` is
the only writer of ``Order.status`` and the payment fields:

- ``advance_status``: move to any status of the company's registry
  (``Delivered`` only once nothing is owed).
- ``confirm_payment``: record payment terms and hand the order to
  production (``Ready for Production``) in one update.
- ``settlement_quote`` / ``mark_delivered``: collect any remaining
  balance, then settle in full and mark the order ``Delivered``.

Every transition is one ``UPDATE`` of the order row plus its history and
outbox rows, inside one transaction.  Database failures surface as
``OrderPersistenceError("<operation> failed: <cause>")`` and are never
retried.  Each command returns the read paths it made stale.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING, Any, Dict, FrozenSet, Iterator, Optional
from uuid import UUID

import structlog
from django.core.exceptions import ObjectDoesNotExist
from django.db import DatabaseError, transaction

from modules.core import cache
from modules.orders.constants import PaymentStatus
from modules.orders.dtos import SettlementQuoteDTO
from modules.orders.events import (
    OrderCreated,
    OrderDelivered,
    OrderStatusChanged,
    PaymentConfirmed,
)
from modules.orders.exceptions import (
    BalanceDue,
    OrderNotFound,
    OrderPersistenceError,
    PaymentMethodRequired,
)
from modules.orders.payments import CENTS, payment_terms, settlement_method
from modules.statuses.registry import DELIVERED, READY_FOR_PRODUCTION, StatusRegistry

if TYPE_CHECKING:
    from modules.accounts.models import Company
    from modules.orders.dtos import ConfirmPaymentDTO, CreateOrderDTO, DeliverDTO
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.pricing.services import PricingService
    from modules.statuses.repositories.interfaces import IStatusRepository

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class OrderWriteResult:
    """Outcome of an order command.

    ``affected_read_paths`` lists exactly the cached views the API layer
    must drop; ``changed`` is ``False`` for no-op commands.
    """

    order: Order
    affected_read_paths: FrozenSet[str]
    changed: bool = True


def order_read_paths(order_id: Any) -> FrozenSet[str]:
    return frozenset({cache.ORDERS, cache.read_path(cache.ORDER_DETAILS, order_id)})


@contextmanager
def persisting(operation: str, log) -> Iterator[None]:
    """Run a write inside a transaction and normalise its failures."""
    try:
        with transaction.atomic():
            yield
    except ObjectDoesNotExist as exc:
        raise OrderNotFound(str(exc)) from exc
    except DatabaseError as exc:
        log.error("order.persistence_failed", operation=operation, error=str(exc))
        raise OrderPersistenceError(operation, exc) from exc


class OrderService:
    """Application service for order creation and queries.

    Receives repositories via constructor injection (DIP).
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        status_repository: IStatusRepository,
        pricing_service: PricingService,
    ) -> None:
        self._order_repo = order_repository
        self._status_repo = status_repository
        self._pricing = pricing_service

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_order(
        self, company: Company, dto: CreateOrderDTO, user_id: Any = None
    ) -> OrderWriteResult:
        """Create an order in the first status of the company's registry.

        Steps:
        1. Return the existing order when the idempotency key was used.
        2. Resolve the initial status, the pricing tier (requested or
           company default) and the transaction currency.
        3. Snapshot item prices with the tier markup (unless the prices
           were quoted with it already) and total them.
        4. Convert the total to the base currency with the active rate.
        5. Persist order, items, initial history and ``OrderCreated``.

        Raises:
            EmptyStatusRegistry: the company has no statuses.
            PricingTierNotFound: the requested tier is not the company's.
            CurrencyNotFound: unknown transaction currency.
            ExchangeRateNotFound: foreign currency without an active rate.
            OrderPersistenceError: the write failed.
        """
        log = logger.bind(company_id=str(company.id))
        log.info("order.creation_started")

        if dto.idempotency_key:
            existing = self._order_repo.get_by_idempotency_key(
                company.id, dto.idempotency_key
            )
            if existing:
                log.info(
                    "order.idempotency_hit",
                    order_id=str(existing.id),
                    key=dto.idempotency_key,
                )
                return OrderWriteResult(existing, frozenset(), changed=False)

        registry = StatusRegistry.from_statuses(self._status_repo.list(company.id))
        initial_status = registry.initial

        tier = self._pricing.resolve_tier(company.id, dto.pricing_tier_id)
        items = []
        total = Decimal("0.00")
        for item in dto.items:
            if tier is not None and dto.apply_tier_markup:
                unit_price = tier.apply_markup(item.unit_price)
            else:
                unit_price = item.unit_price.quantize(CENTS, rounding=ROUND_HALF_UP)
            items.append(
                {
                    "description": item.description,
                    "quantity": item.quantity,
                    "unit_price": unit_price,
                }
            )
            total += unit_price * item.quantity

        if dto.currency_id is not None:
            self._pricing.get_currency(dto.currency_id)
        total_company, rate = self._pricing.to_base(company, total, dto.currency_id)

        with persisting("Create order", log):
            order = self._order_repo.create(
                company.id,
                {
                    "client_name": dto.client_name,
                    "email": dto.email,
                    "phone": dto.phone or "",
                    "delivery_date": dto.delivery_date,
                    "delivery_method": dto.delivery_method,
                    "needs_design": dto.needs_design,
                    "status": initial_status,
                    "currency_id": dto.currency_id,
                    "exchange_rate": rate,
                    "total_price": total,
                    "total_price_company": total_company,
                    "pricing_tier_id": tier.id if tier else None,
                    "client_id": dto.client_id,
                    "notes": dto.notes or "",
                    "created_by_id": user_id,
                    "idempotency_key": dto.idempotency_key,
                    "items": items,
                },
            )
            self._order_repo.add_history(
                order, initial_status, user_id=user_id, notes="Order created"
            )
            order.add_domain_event(
                OrderCreated(
                    aggregate_id=order.id, company_id=company.id, status=initial_status
                )
            )
            self._order_repo.record_events(order)

        log.info("order.created", order_id=str(order.id), total_price=str(total))
        order = self._order_repo.get_by_id(company.id, order.id) or order
        return OrderWriteResult(order, frozenset({cache.ORDERS}))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, company_id: UUID, order_id: Any) -> Order:
        """Retrieve a single order of the company.

        Raises:
            OrderNotFound: missing, soft-deleted or another tenant's order.
        """
        order = self._order_repo.get_by_id(company_id, order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    def list_orders(self, company_id: UUID, filters: Optional[Dict[str, Any]] = None):
        """Return the company's orders, optionally filtered."""
        return self._order_repo.list(company_id, filters)


class OrderLifecycleService:
    """Guarded order transitions.

    The registry is loaded once per call and every status name is
    validated against it before the order is touched.
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        status_repository: IStatusRepository,
    ) -> None:
        self._order_repo = order_repository
        self._status_repo = status_repository

    def _registry(self, company_id: UUID) -> StatusRegistry:
        return StatusRegistry.from_statuses(self._status_repo.list(company_id))

    def _get(self, company_id: UUID, order_id: Any) -> Order:
        order = self._order_repo.get_by_id(company_id, order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    def _reload(self, order: Order) -> Order:
        return self._order_repo.get_by_id(order.company_id, order.id) or order

    # ------------------------------------------------------------------
    # Generic transition
    # ------------------------------------------------------------------

    def advance_status(
        self,
        company_id: UUID,
        order_id: Any,
        new_status: str,
        user_id: Any = None,
        notes: str = "",
    ) -> OrderWriteResult:
        """Move the order to *new_status*.

        Re-applying the current status succeeds without writing.  Moving to
        ``Delivered`` while a balance is owed is refused: that goes through
        ``mark_delivered``, which settles the order.

        Raises:
            StatusNotFound: *new_status* is not in the registry.
            OrderNotFound: unknown order.
            BalanceDue: *new_status* is ``Delivered`` and a balance remains.
            OrderPersistenceError: the write failed.
        """
        target = self._registry(company_id).resolve(new_status)
        order = self._get(company_id, order_id)
        log = logger.bind(
            order_id=str(order.id),
            company_id=str(company_id),
            current_status=order.status,
            new_status=target,
        )
        paths = order_read_paths(order.id)

        if order.status == target:
            log.info("order.status_unchanged")
            return OrderWriteResult(order, paths, changed=False)

        if target == DELIVERED and order.remaining_balance > 0:
            log.info("order.balance_due", remaining=str(order.remaining_balance))
            raise BalanceDue(order.remaining_balance)

        old_status = order.status
        with persisting("Update status", log):
            order.add_domain_event(
                OrderStatusChanged(
                    aggregate_id=order.id,
                    company_id=company_id,
                    old_status=old_status,
                    new_status=target,
                )
            )
            self._order_repo.apply_transition(order, {"status": target})
            self._order_repo.add_history(
                order, target, old_status=old_status, user_id=user_id, notes=notes
            )

        log.info("order.status_advanced")
        return OrderWriteResult(self._reload(order), paths)

    # ------------------------------------------------------------------
    # Payment confirmation
    # ------------------------------------------------------------------

    def confirm_payment(
        self,
        company_id: UUID,
        order_id: Any,
        dto: ConfirmPaymentDTO,
        user_id: Any = None,
    ) -> OrderWriteResult:
        """Record payment and hand the order to production atomically.

        Raises:
            PaymentMethodRequired: no payment method (checked first).
            MissingRequiredStatus: ``Ready for Production`` is not configured.
            OrderNotFound: unknown order.
            InvalidPayment: method, status or amount are not acceptable.
            OrderPersistenceError: the write failed.
        """
        if not (dto.payment_method or "").strip():
            raise PaymentMethodRequired("Payment method is required.")

        target = self._registry(company_id).require(READY_FOR_PRODUCTION)
        order = self._get(company_id, order_id)
        log = logger.bind(order_id=str(order.id), company_id=str(company_id))

        method, payment_status, paid_amount = payment_terms(
            dto.payment_method, order.total_price, dto.payment_status, dto.paid_amount
        )
        old_status = order.status
        changes = {
            "payment_method": method,
            "payment_status": payment_status,
            "paid_amount": paid_amount,
            "status": target,
        }
        note = f"Payment confirmed ({method}, {payment_status}, {paid_amount})."
        if dto.notes:
            note = f"{note} {dto.notes}"

        with persisting("Confirm payment", log):
            order.add_domain_event(
                PaymentConfirmed(
                    aggregate_id=order.id,
                    company_id=company_id,
                    payment_method=method,
                    payment_status=payment_status,
                    paid_amount=str(paid_amount),
                )
            )
            self._order_repo.apply_transition(order, changes)
            self._order_repo.add_history(
                order, target, old_status=old_status, user_id=user_id, notes=note
            )

        log.info(
            "order.payment_confirmed",
            payment_method=method,
            payment_status=payment_status,
            paid_amount=str(paid_amount),
        )
        return OrderWriteResult(self._reload(order), order_read_paths(order.id))

    # ------------------------------------------------------------------
    # Delivery & settlement
    # ------------------------------------------------------------------

    def settlement_quote(self, company_id: UUID, order_id: Any) -> SettlementQuoteDTO:
        """What must still be collected before the order can be delivered."""
        order = self._get(company_id, order_id)
        remaining = order.remaining_balance
        return SettlementQuoteDTO(
            order_id=order.id,
            total_price=order.total_price,
            paid_amount=order.paid_amount or Decimal("0.00"),
            remaining=remaining,
            balance_due=remaining > 0,
        )

    def mark_delivered(
        self,
        company_id: UUID,
        order_id: Any,
        dto: DeliverDTO,
        user_id: Any = None,
    ) -> OrderWriteResult:
        """Settle the order in full and mark it ``Delivered``.

        With a balance outstanding the caller must say how it was collected
        (``cash`` or ``card``).  Settlement always records
        ``paid_amount = total_price``.

        Raises:
            MissingRequiredStatus: ``Delivered`` is not configured.
            OrderNotFound: unknown order.
            BalanceDue: a balance remains and no collection method was given.
            InvalidPayment: the collection method is not accepted.
            OrderPersistenceError: the write failed.
        """
        target = self._registry(company_id).require(DELIVERED)
        order = self._get(company_id, order_id)
        log = logger.bind(order_id=str(order.id), company_id=str(company_id))

        remaining = order.remaining_balance
        collected = Decimal("0.00")
        method = None
        if remaining > 0:
            if not (dto.collection_method or "").strip():
                log.info("order.balance_due", remaining=str(remaining))
                raise BalanceDue(remaining)
            method = settlement_method(dto.collection_method)
            collected = remaining

        old_status = order.status
        changes = {
            "status": target,
            "payment_status": PaymentStatus.PAID,
            "paid_amount": order.total_price,
        }
        note = "Delivered."
        if method:
            note = f"Delivered. Balance of {collected} collected by {method}."
        if dto.notes:
            note = f"{note} {dto.notes}"

        with persisting("Mark delivered", log):
            order.add_domain_event(
                OrderDelivered(
                    aggregate_id=order.id,
                    company_id=company_id,
                    balance_collected=str(collected),
                    collection_method=method,
                )
            )
            self._order_repo.apply_transition(order, changes)
            self._order_repo.add_history(
                order, target, old_status=old_status, user_id=user_id, notes=note
            )

        log.info("order.delivered", balance_collected=str(collected))
        return OrderWriteResult(self._reload(order), order_read_paths(order.id))
