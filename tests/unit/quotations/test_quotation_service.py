"""Unit tests for QuotationService pricing, status moves and conversion."""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import MagicMock
from uuid import uuid4

import pytest

from modules.catalog.exceptions import ProductNotFound
from modules.clients.exceptions import ClientNotFound
from modules.pricing.models import PricingTier
from modules.quotations.dtos import (
    ConvertQuotationDTO,
    CreateQuotationDTO,
    CreateQuotationItemDTO,
)
from modules.quotations.exceptions import (
    InvalidQuotation,
    InvalidQuotationTransition,
    QuotationAlreadyConverted,
    QuotationExpired,
)
from modules.quotations.services import QuotationService, quoted_unit_price

pytestmark = pytest.mark.unit

NEXT_WEEK = date.today() + timedelta(days=7)
USD_ID = uuid4()


@pytest.fixture()
def company():
    base_id = uuid4()
    return SimpleNamespace(id=uuid4(), currency_id=base_id)


@pytest.fixture()
def tier():
    return PricingTier(id=uuid4(), name="corporate", markup_percent=Decimal("10"))


@pytest.fixture()
def product():
    return SimpleNamespace(id=uuid4(), name_en="Business cards", unit_price=Decimal("100.00"))


@pytest.fixture()
def repos(product, tier):
    quotations = MagicMock()
    quotations.create.side_effect = lambda company_id, data: SimpleNamespace(
        id=uuid4(), company_id=company_id, **data
    )
    quotations.get_by_id.return_value = None
    products = MagicMock()
    products.get_by_id.return_value = product
    pricing = MagicMock()
    pricing.resolve_tier.return_value = tier
    pricing.active_rate.return_value = SimpleNamespace(
        rate_to_company_currency=Decimal("3.6725")
    )
    return SimpleNamespace(
        quotations=quotations,
        clients=MagicMock(),
        products=products,
        pricing=pricing,
        orders=MagicMock(),
    )


@pytest.fixture()
def service(repos):
    return QuotationService(
        quotation_repository=repos.quotations,
        client_repository=repos.clients,
        product_repository=repos.products,
        pricing_service=repos.pricing,
        order_service=repos.orders,
    )


def _dto(product, **overrides) -> CreateQuotationDTO:
    fields = {
        "client_name": "Mariam Saeed",
        "email": "mariam@example.com",
        "valid_until": NEXT_WEEK,
        "items": [CreateQuotationItemDTO(product_id=product.id, quantity=2)],
    }
    fields.update(overrides)
    return CreateQuotationDTO(**fields)


class TestQuotedUnitPrice:
    def test_markup_then_rate(self, tier):
        # 100 * 1.10 / 3.6725 = 29.952...
        assert quoted_unit_price(Decimal("100"), tier, Decimal("3.6725")) == Decimal(
            "29.95"
        )

    def test_without_tier(self):
        assert quoted_unit_price(Decimal("10"), None, Decimal("1")) == Decimal("10.00")


class TestCreateQuotation:
    def test_base_currency_with_tier_markup(self, service, company, product):
        quotation = service.create_quotation(company, _dto(product))

        assert quotation.status == "draft"
        assert quotation.currency_id is None
        assert quotation.exchange_rate == Decimal("1")
        assert quotation.items[0]["unit_price"] == Decimal("110.00")
        assert quotation.items[0]["description"] == "Business cards"
        assert quotation.total_price == Decimal("220.00")
        assert quotation.total_price_company == Decimal("220.00")

    def test_foreign_currency_divides_by_rate(self, service, repos, company, product):
        quotation = service.create_quotation(
            company, _dto(product, currency_id=USD_ID)
        )

        repos.pricing.active_rate.assert_called_once_with(company.id, USD_ID)
        assert quotation.items[0]["unit_price"] == Decimal("29.95")
        assert quotation.total_price == Decimal("59.90")
        # 59.90 * 3.6725 = 219.98275
        assert quotation.total_price_company == Decimal("219.98")

    def test_client_defaults_fill_the_gaps(self, service, repos, company, product):
        client = SimpleNamespace(
            id=uuid4(),
            full_name="Gulf Events LLC",
            email="events@example.com",
            phone="+97140000000",
            default_pricing_tier_id=uuid4(),
            default_currency_id=USD_ID,
        )
        repos.clients.get_by_id.return_value = client

        quotation = service.create_quotation(
            company, _dto(product, client_id=client.id, client_name="", email=None)
        )

        repos.pricing.resolve_tier.assert_called_once_with(
            company.id, client.default_pricing_tier_id
        )
        assert quotation.client_name == "Gulf Events LLC"
        assert quotation.email == "events@example.com"
        assert quotation.currency_id == USD_ID

    def test_name_required_without_client(self, service, company, product):
        with pytest.raises(InvalidQuotation, match="Client name is required"):
            service.create_quotation(company, _dto(product, client_name="  "))

    def test_validity_in_the_past(self, service, company, product):
        with pytest.raises(InvalidQuotation, match="in the past"):
            service.create_quotation(
                company, _dto(product, valid_until=date.today() - timedelta(days=1))
            )

    def test_unknown_client(self, service, repos, company, product):
        repos.clients.get_by_id.return_value = None

        with pytest.raises(ClientNotFound):
            service.create_quotation(company, _dto(product, client_id=uuid4()))

    def test_unknown_product(self, service, repos, company, product):
        repos.products.get_by_id.return_value = None

        with pytest.raises(ProductNotFound):
            service.create_quotation(company, _dto(product))

        repos.quotations.create.assert_not_called()


def _quotation(status="draft", expired=False, **overrides):
    items = [
        SimpleNamespace(description="Business cards", quantity=2, unit_price=Decimal("110.00"))
    ]
    fields = {
        "id": uuid4(),
        "status": status,
        "order_id": None,
        "client_id": uuid4(),
        "client_name": "Mariam Saeed",
        "email": "mariam@example.com",
        "phone": "",
        "currency_id": None,
        "pricing_tier_id": uuid4(),
        "notes": "",
        "valid_until": NEXT_WEEK,
        "is_expired": lambda: expired,
        "items": SimpleNamespace(all=lambda: items),
    }
    fields.update(overrides)
    return SimpleNamespace(**fields)


class TestChangeStatus:
    def test_draft_to_sent(self, service, repos):
        quotation = _quotation()
        repos.quotations.get_by_id.return_value = quotation

        service.change_status(uuid4(), quotation.id, "sent")

        assert quotation.status == "sent"
        repos.quotations.save.assert_called_once_with(quotation, ["status"])

    @pytest.mark.parametrize(
        "current, target", [("sent", "draft"), ("draft", "converted"), ("rejected", "sent")]
    )
    def test_refused_moves(self, service, repos, current, target):
        repos.quotations.get_by_id.return_value = _quotation(status=current)

        with pytest.raises(InvalidQuotationTransition):
            service.change_status(uuid4(), uuid4(), target)

        repos.quotations.save.assert_not_called()


class TestConvertToOrder:
    def _convert(self, service, company, **dto_fields):
        dto = ConvertQuotationDTO(delivery_date=NEXT_WEEK, **dto_fields)
        return service.convert_to_order(company, uuid4(), dto, user_id=7)

    def test_creates_order_with_quoted_prices(self, service, repos, company):
        quotation = _quotation(status="accepted")
        repos.quotations.get_by_id.return_value = quotation
        order = SimpleNamespace(id=uuid4())
        repos.orders.create_order.return_value = SimpleNamespace(
            order=order, affected_read_paths=frozenset({"orders"})
        )

        conversion = self._convert(service, company, needs_design=True)

        order_dto = repos.orders.create_order.call_args.args[1]
        assert order_dto.apply_tier_markup is False
        assert order_dto.items[0].unit_price == Decimal("110.00")
        assert order_dto.client_id == quotation.client_id
        assert order_dto.pricing_tier_id == quotation.pricing_tier_id
        assert order_dto.needs_design is True
        assert order_dto.idempotency_key == f"quotation-{quotation.id}"
        repos.quotations.mark_converted.assert_called_once_with(quotation, order)
        assert conversion.order_result.order is order

    def test_already_converted(self, service, repos, company):
        repos.quotations.get_by_id.return_value = _quotation(
            status="converted", order_id=uuid4()
        )

        with pytest.raises(QuotationAlreadyConverted):
            self._convert(service, company)

        repos.orders.create_order.assert_not_called()

    def test_expired(self, service, repos, company):
        repos.quotations.get_by_id.return_value = _quotation(expired=True)

        with pytest.raises(QuotationExpired):
            self._convert(service, company)

        repos.orders.create_order.assert_not_called()

    def test_rejected(self, service, repos, company):
        repos.quotations.get_by_id.return_value = _quotation(status="rejected")

        with pytest.raises(InvalidQuotationTransition):
            self._convert(service, company)

    def test_email_required(self, service, repos, company):
        repos.quotations.get_by_id.return_value = _quotation(email="")

        with pytest.raises(InvalidQuotation, match="email address is required"):
            self._convert(service, company)

    def test_email_can_be_supplied_at_conversion(self, service, repos, company):
        repos.quotations.get_by_id.return_value = _quotation(email="")
        repos.orders.create_order.return_value = SimpleNamespace(
            order=SimpleNamespace(id=uuid4()), affected_read_paths=frozenset()
        )

        self._convert(service, company, email="desk@example.com")

        order_dto = repos.orders.create_order.call_args.args[1]
        assert order_dto.email == "desk@example.com"
