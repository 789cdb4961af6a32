"""Integration tests for quotations: pricing, status moves and conversion."""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal

import pytest

from modules.accounts.models import Role
from modules.orders.models import Order
from modules.quotations.models import Quotation

pytestmark = pytest.mark.integration

URL = "/api/v1/quotations/"
NEXT_WEEK = (date.today() + timedelta(days=7)).isoformat()


@pytest.fixture()
def sales(client_for, company, statuses):
    return client_for(company, Role.SALES)


@pytest.fixture()
def quoted(sales, company, corporate_tier, make_client, make_product):
    """A draft quotation for a corporate client: 2 x 100.00 at +10%."""
    client = make_client(company, default_pricing_tier=corporate_tier)
    product = make_product(company, unit_price="100.00", name_en="Roll-up banner")
    response = sales.post(
        URL,
        {
            "client_id": str(client.id),
            "valid_until": NEXT_WEEK,
            "items": [{"product_id": str(product.id), "quantity": 2}],
        },
        format="json",
    )
    assert response.status_code == 201
    return response.data


class TestCreateQuotation:
    def test_priced_with_client_tier(self, quoted, corporate_tier):
        assert quoted["status"] == "draft"
        assert quoted["quotation_number"].startswith("QUO-")
        assert quoted["client_name"] == "Layla Hassan"
        assert quoted["email"] == "layla@example.com"
        assert str(quoted["pricing_tier_id"]) == str(corporate_tier.id)
        assert quoted["items"][0]["description"] == "Roll-up banner"
        assert quoted["items"][0]["unit_price"] == "110.00"
        assert quoted["items"][0]["item_total"] == "220.00"
        assert quoted["total_price"] == "220.00"
        assert quoted["currency_code"] == "AED"

    def test_priced_in_foreign_currency(
        self, sales, company, usd, usd_rate, make_product
    ):
        product = make_product(company, unit_price="100.00")

        response = sales.post(
            URL,
            {
                "client_name": "Walk-in",
                "email": "walkin@example.com",
                "currency_id": str(usd.id),
                "valid_until": NEXT_WEEK,
                "items": [{"product_id": str(product.id)}],
            },
            format="json",
        )

        assert response.status_code == 201
        # 100 / 3.6725 = 27.229...
        assert response.data["total_price"] == "27.23"
        assert response.data["total_price_company"] == "100.00"
        assert response.data["currency_code"] == "USD"

    def test_product_of_another_company(self, sales, other_company, make_product):
        foreign = make_product(other_company)

        response = sales.post(
            URL,
            {
                "client_name": "Walk-in",
                "valid_until": NEXT_WEEK,
                "items": [{"product_id": str(foreign.id)}],
            },
            format="json",
        )

        assert response.status_code == 404
        assert not Quotation.objects.exists()

    def test_validity_in_the_past(self, sales, company, make_product):
        product = make_product(company)

        response = sales.post(
            URL,
            {
                "client_name": "Walk-in",
                "valid_until": (date.today() - timedelta(days=1)).isoformat(),
                "items": [{"product_id": str(product.id)}],
            },
            format="json",
        )

        assert response.status_code == 400
        assert response.data["detail"] == "Valid-until date cannot be in the past."


class TestQuotationStatus:
    def test_send_then_accept(self, sales, quoted):
        detail = f"{URL}{quoted['id']}/"

        assert sales.patch(detail, {"status": "sent"}, format="json").status_code == 200
        response = sales.patch(detail, {"status": "accepted"}, format="json")

        assert response.status_code == 200
        assert response.data["status"] == "accepted"

    def test_back_to_draft_is_refused(self, sales, quoted):
        detail = f"{URL}{quoted['id']}/"
        sales.patch(detail, {"status": "sent"}, format="json")

        response = sales.patch(detail, {"status": "draft"}, format="json")

        assert response.status_code == 409


class TestConvertQuotation:
    def _convert(self, api, quotation_id, **payload):
        payload.setdefault("delivery_date", NEXT_WEEK)
        return api.post(f"{URL}{quotation_id}/convert/", payload, format="json")

    def test_order_keeps_quoted_prices(self, sales, quoted, corporate_tier):
        response = self._convert(sales, quoted["id"], needs_design=True)

        assert response.status_code == 201
        order = response.data["order"]
        assert order["total_price"] == "220.00"
        assert str(order["client_id"]) == str(quoted["client_id"])
        assert str(order["pricing_tier_id"]) == str(corporate_tier.id)
        assert response.data["quotation"]["status"] == "converted"
        assert str(response.data["quotation"]["order_id"]) == str(order["id"])

        stored = Order.objects.get(id=order["id"])
        assert stored.total_price == Decimal("220.00")
        assert [i.unit_price for i in stored.items.all()] == [Decimal("110.00")]

    def test_second_conversion_conflicts(self, sales, quoted):
        first = self._convert(sales, quoted["id"])

        response = self._convert(sales, quoted["id"])

        assert response.status_code == 409
        assert response.data["order_id"] == str(first.data["order"]["id"])
        assert Order.objects.count() == 1

    def test_expired_quotation(self, sales, quoted):
        Quotation.objects.filter(id=quoted["id"]).update(
            valid_until=date.today() - timedelta(days=1)
        )

        response = self._convert(sales, quoted["id"])

        assert response.status_code == 400
        assert not Order.objects.exists()

    def test_rejected_quotation(self, sales, quoted):
        sales.patch(f"{URL}{quoted['id']}/", {"status": "rejected"}, format="json")

        response = self._convert(sales, quoted["id"])

        assert response.status_code == 409
        assert not Order.objects.exists()

    def test_accountant_cannot_convert(self, client_for, company, quoted):
        response = self._convert(client_for(company, Role.ACCOUNTANT), quoted["id"])

        assert response.status_code == 403
        assert not Order.objects.exists()

    def test_quotation_of_another_company(self, client_for, other_company, quoted):
        response = self._convert(client_for(other_company, Role.ADMIN), quoted["id"])

        assert response.status_code == 404
