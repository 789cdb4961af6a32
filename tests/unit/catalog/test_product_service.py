"""Unit tests for ProductService with mocked repository and pricing."""

from __future__ import annotations

from decimal import Decimal
from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from pydantic import ValidationError

from modules.catalog.dtos import CreateProductDTO, UpdateProductDTO
from modules.catalog.exceptions import ProductAlreadyExists, ProductNotFound
from modules.catalog.models import Product
from modules.catalog.services import ProductService
from modules.pricing.models import PricingTier

pytestmark = pytest.mark.unit

COMPANY_ID = uuid4()


@pytest.fixture()
def repo():
    mock = MagicMock()
    mock.save.side_effect = lambda product: product
    mock.get_by_sku.return_value = None
    return mock


@pytest.fixture()
def pricing():
    return MagicMock()


@pytest.fixture()
def service(repo, pricing):
    return ProductService(repo, pricing)


def _product(**overrides) -> Product:
    fields = {
        "id": uuid4(),
        "company_id": COMPANY_ID,
        "sku": "BAN-001",
        "name_en": "Roll-up banner",
        "category": "Banners",
        "unit_price": Decimal("120.00"),
    }
    fields.update(overrides)
    return Product(**fields)


def _create_dto(**overrides) -> CreateProductDTO:
    fields = {
        "sku": " ban-001 ",
        "name_en": "Roll-up banner",
        "category": "Banners",
        "unit_price": Decimal("120.00"),
    }
    fields.update(overrides)
    return CreateProductDTO(**fields)


class TestCreateProduct:
    def test_sku_is_normalised(self, service):
        product = service.create_product(COMPANY_ID, _create_dto())

        assert product.sku == "BAN-001"
        assert product.company_id == COMPANY_ID

    def test_duplicate_sku(self, service, repo):
        repo.get_by_sku.return_value = _product()

        with pytest.raises(ProductAlreadyExists, match="BAN-001"):
            service.create_product(COMPANY_ID, _create_dto())

        repo.save.assert_not_called()

    @pytest.mark.parametrize(
        "field, value, message",
        [
            ("sku", "  ", "SKU is required"),
            ("category", "", "Category is required"),
            ("unit_price", Decimal("-1"), "cannot be negative"),
        ],
    )
    def test_invalid_input(self, field, value, message):
        with pytest.raises(ValidationError, match=message):
            _create_dto(**{field: value})


class TestUpdateProduct:
    def test_changes_price_only(self, service, repo):
        product = _product()
        repo.get_by_id.return_value = product

        service.update_product(
            COMPANY_ID, product.id, UpdateProductDTO(unit_price=Decimal("99.50"))
        )

        assert product.unit_price == Decimal("99.50")
        assert product.name_en == "Roll-up banner"

    def test_sku_taken_by_another_product(self, service, repo):
        product = _product()
        repo.get_by_id.return_value = product
        repo.get_by_sku.return_value = _product(sku="BAN-002")

        with pytest.raises(ProductAlreadyExists):
            service.update_product(
                COMPANY_ID, product.id, UpdateProductDTO(sku="ban-002")
            )

    def test_not_found(self, service, repo):
        repo.get_by_id.return_value = None

        with pytest.raises(ProductNotFound):
            service.update_product(COMPANY_ID, uuid4(), UpdateProductDTO(name_en="X"))


class TestTierPrices:
    def test_price_per_tier(self, service, repo, pricing):
        repo.get_by_id.return_value = _product(unit_price=Decimal("50.00"))
        pricing.list_tiers.return_value = [
            PricingTier(
                id=uuid4(), name="retail", markup_percent=Decimal("0"), is_default=True
            ),
            PricingTier(
                id=uuid4(),
                name="rush",
                label="Rush job",
                markup_percent=Decimal("12.5"),
            ),
        ]

        prices = service.tier_prices(COMPANY_ID, uuid4())

        assert [(p.name, p.unit_price) for p in prices] == [
            ("retail", Decimal("50.00")),
            ("Rush job", Decimal("56.25")),
        ]
        assert prices[0].is_default is True

    def test_unknown_product(self, service, repo):
        repo.get_by_id.return_value = None

        with pytest.raises(ProductNotFound):
            service.tier_prices(COMPANY_ID, uuid4())
