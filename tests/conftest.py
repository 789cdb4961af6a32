from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from django.core.cache import cache
from rest_framework.test import APIClient

from modules.accounts.models import Company, Membership, Role
from modules.catalog.models import Product
from modules.clients.models import Client
from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.pricing.models import Currency, ExchangeRate, PricingTier
from modules.pricing.repositories.django_repository import PricingDjangoRepository
from modules.pricing.services import PricingService
from modules.statuses.repositories.django_repository import StatusDjangoRepository
from modules.statuses.services import StatusService

User = get_user_model()


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture(autouse=True)
def _clear_cache():
    """Read-path entries and throttle counters must not leak between tests."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


# ---------------------------------------------------------------------------
# Tenants & members
# ---------------------------------------------------------------------------


@pytest.fixture()
def aed():
    return Currency.objects.create(code="AED", name="UAE Dirham", symbol="AED")


@pytest.fixture()
def usd():
    return Currency.objects.create(code="USD", name="US Dollar", symbol="$")


@pytest.fixture()
def company(aed):
    return Company.objects.create(name="Brain Socket Prints", currency=aed)


@pytest.fixture()
def other_company(aed):
    return Company.objects.create(name="Rival Prints", currency=aed)


@pytest.fixture()
def statuses(company):
    """The default status vocabulary of ``company``."""
    return StatusService(StatusDjangoRepository()).seed_defaults(company.id)


@pytest.fixture()
def usd_rate(company, usd):
    return ExchangeRate.objects.create(
        company=company, currency=usd, rate_to_company_currency=Decimal("3.672500")
    )


@pytest.fixture()
def make_member():
    """Create a user with a membership: ``make_member(company, role)``."""
    counter = {"n": 0}

    def _make(company, role=Role.ADMIN, full_name="Test Member"):
        counter["n"] += 1
        email = f"{role}-{counter['n']}@printshop.example.com"
        user = User.objects.create_user(username=email, email=email, password="pw-12345")
        Membership.objects.create(
            user=user, company=company, role=role, full_name=full_name
        )
        return user

    return _make


@pytest.fixture()
def client_for(make_member):
    """Authenticated APIClient for a member: ``client_for(company, role)``."""

    def _client(company, role=Role.ADMIN):
        client = APIClient()
        client.force_authenticate(user=make_member(company, role))
        return client

    return _client


@pytest.fixture()
def admin_client(client_for, company, statuses):
    return client_for(company, Role.ADMIN)


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------


@pytest.fixture()
def order_service():
    return OrderService(
        order_repository=OrderDjangoRepository(),
        status_repository=StatusDjangoRepository(),
        pricing_service=PricingService(PricingDjangoRepository()),
    )


@pytest.fixture()
def make_order(order_service):
    """Create an order through the service: ``make_order(company, unit_price=...)``."""

    def _make(company, unit_price="100.00", quantity=1, **overrides):
        data = {
            "client_name": "Jane O'Brien",
            "email": "jane@example.com",
            "delivery_date": date.today() + timedelta(days=7),
            "items": [
                CreateOrderItemDTO(
                    description="Roll-up banner",
                    quantity=quantity,
                    unit_price=Decimal(unit_price),
                )
            ],
        }
        data.update(overrides)
        return order_service.create_order(company, CreateOrderDTO(**data)).order

    return _make


# ---------------------------------------------------------------------------
# Clients, catalogue & quotations
# ---------------------------------------------------------------------------


@pytest.fixture()
def corporate_tier(company):
    return PricingTier.objects.create(
        company=company,
        name="corporate",
        label="Corporate",
        markup_percent=Decimal("10"),
    )


@pytest.fixture()
def make_client():
    """Create a directory client: ``make_client(company, full_name=...)``."""

    def _make(company, full_name="Layla Hassan", **fields):
        fields.setdefault("email", "layla@example.com")
        return Client.objects.create(company=company, full_name=full_name, **fields)

    return _make


@pytest.fixture()
def make_product():
    """Create a catalogue product: ``make_product(company, sku=..., unit_price=...)``."""
    counter = {"n": 0}

    def _make(company, sku=None, unit_price="100.00", **fields):
        counter["n"] += 1
        fields.setdefault("name_en", f"Product {counter['n']}")
        fields.setdefault("category", "Banners")
        return Product.objects.create(
            company=company,
            sku=sku or f"SKU-{counter['n']:03d}",
            unit_price=Decimal(unit_price),
            **fields,
        )

    return _make
