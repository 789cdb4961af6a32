"""Integration tests for currencies, exchange rates and pricing tiers."""

from __future__ import annotations

from decimal import Decimal

import pytest

from modules.accounts.models import Role
from modules.pricing.models import ExchangeRate, PricingTier

pytestmark = pytest.mark.integration

RATES_URL = "/api/v1/exchange-rates/"
TIERS_URL = "/api/v1/pricing-tiers/"


class TestCurrencies:
    def test_list_currencies(self, admin_client, usd):
        response = admin_client.get("/api/v1/currencies/")

        assert response.status_code == 200
        assert [c["code"] for c in response.data] == ["AED", "USD"]

    def test_company_currency(self, admin_client, aed):
        response = admin_client.get("/api/v1/company-currency/")

        assert response.status_code == 200
        assert response.data["code"] == "AED"
        assert response.data["currency_id"] == str(aed.id)

    def test_company_without_currency_uses_default_code(
        self, client_for, company, settings
    ):
        settings.DEFAULT_CURRENCY_CODE = "SAR"
        company.currency = None
        company.save()

        response = client_for(company, Role.SALES).get("/api/v1/company-currency/")

        assert response.data == {"currency_id": None, "code": "SAR", "symbol": None}


class TestExchangeRates:
    def test_create_rate(self, admin_client, usd):
        response = admin_client.post(
            RATES_URL,
            {"currency_id": str(usd.id), "rate_to_company_currency": "3.6725"},
            format="json",
        )

        assert response.status_code == 201
        assert response.data["currency_code"] == "USD"
        assert Decimal(response.data["rate_to_company_currency"]) == Decimal("3.6725")

    def test_second_active_rate_is_refused(self, admin_client, usd, usd_rate):
        response = admin_client.post(
            RATES_URL,
            {"currency_id": str(usd.id), "rate_to_company_currency": "3.70"},
            format="json",
        )
        assert response.status_code == 409

    def test_base_currency_is_refused(self, admin_client, aed):
        response = admin_client.post(
            RATES_URL,
            {"currency_id": str(aed.id), "rate_to_company_currency": "1"},
            format="json",
        )
        assert response.status_code == 409

    def test_unknown_currency(self, admin_client):
        response = admin_client.post(
            RATES_URL,
            {
                "currency_id": "0190c0de-0000-7000-8000-000000000001",
                "rate_to_company_currency": "2",
            },
            format="json",
        )
        assert response.status_code == 404

    def test_rate_must_be_positive(self, admin_client, usd):
        response = admin_client.post(
            RATES_URL,
            {"currency_id": str(usd.id), "rate_to_company_currency": "0"},
            format="json",
        )
        assert response.status_code == 400
        assert response.data["detail"] == "Exchange rate must be greater than 0."

    def test_update_rate(self, admin_client, usd_rate):
        response = admin_client.patch(
            f"{RATES_URL}{usd_rate.id}/",
            {"rate_to_company_currency": "3.70"},
            format="json",
        )

        assert response.status_code == 200
        usd_rate.refresh_from_db()
        assert usd_rate.rate_to_company_currency == Decimal("3.700000")

    def test_delete_deactivates(self, admin_client, usd_rate):
        assert len(admin_client.get(RATES_URL).data) == 1

        response = admin_client.delete(f"{RATES_URL}{usd_rate.id}/")

        assert response.status_code == 204
        usd_rate.refresh_from_db()
        assert usd_rate.is_active is False
        assert admin_client.get(RATES_URL).data == []

    def test_non_admin_cannot_write(self, client_for, company, usd):
        client = client_for(company, Role.ACCOUNTANT)

        response = client.post(
            RATES_URL,
            {"currency_id": str(usd.id), "rate_to_company_currency": "3.6725"},
            format="json",
        )

        assert response.status_code == 403
        assert ExchangeRate.objects.count() == 0


class TestPricingTiers:
    def test_create_and_list(self, admin_client):
        response = admin_client.post(
            TIERS_URL,
            {"name": "Corporate", "label": "Corporate accounts", "markup_percent": "10"},
            format="json",
        )

        assert response.status_code == 201
        assert response.data["display_name"] == "Corporate accounts"
        assert [t["name"] for t in admin_client.get(TIERS_URL).data] == ["Corporate"]

    def test_name_is_required(self, admin_client):
        response = admin_client.post(TIERS_URL, {"markup_percent": "5"}, format="json")
        assert response.status_code == 400

    def test_negative_markup(self, admin_client):
        response = admin_client.post(
            TIERS_URL, {"name": "Odd", "markup_percent": "-1"}, format="json"
        )
        assert response.status_code == 400

    def test_new_default_replaces_old_one(self, admin_client, company):
        retail = PricingTier.objects.create(company=company, name="Retail", is_default=True)

        response = admin_client.post(
            TIERS_URL, {"name": "Rush", "markup_percent": "25", "is_default": True},
            format="json",
        )

        assert response.status_code == 201
        retail.refresh_from_db()
        assert retail.is_default is False

    def test_patch_tier(self, admin_client, company):
        tier = PricingTier.objects.create(company=company, name="Rush")

        response = admin_client.patch(
            f"{TIERS_URL}{tier.id}/", {"markup_percent": "30"}, format="json"
        )

        assert response.status_code == 200
        assert Decimal(response.data["markup_percent"]) == Decimal("30.00")
