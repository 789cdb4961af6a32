"""Integration tests for the client directory API."""

from __future__ import annotations

import pytest

from modules.accounts.models import Role
from modules.clients.models import Client
from modules.pricing.models import PricingTier

pytestmark = pytest.mark.integration

URL = "/api/v1/clients/"


class TestCreateClient:
    def test_create_with_default_tier(self, client_for, company, corporate_tier):
        response = client_for(company, Role.SALES).post(
            URL,
            {
                "full_name": "Layla Hassan",
                "business_name": "Hassan Events",
                "email": "layla@example.com",
                "city": "Dubai",
                "default_pricing_tier_id": str(corporate_tier.id),
            },
            format="json",
        )

        assert response.status_code == 201
        assert response.data["default_pricing_tier_name"] == "Corporate"
        assert response.data["default_currency_code"] is None
        assert Client.objects.get(id=response.data["id"]).company_id == company.id

    def test_name_is_required(self, admin_client):
        response = admin_client.post(URL, {"city": "Abu Dhabi"}, format="json")

        assert response.status_code == 400
        assert response.data["detail"] == "Client name is required."

    def test_tier_of_another_company_is_refused(
        self, admin_client, other_company
    ):
        foreign = PricingTier.objects.create(company=other_company, name="vip")

        response = admin_client.post(
            URL,
            {"full_name": "Omar", "default_pricing_tier_id": str(foreign.id)},
            format="json",
        )

        assert response.status_code == 400

    @pytest.mark.parametrize("role", [Role.DESIGNER, Role.PRODUCTION, Role.ACCOUNTANT])
    def test_other_roles_cannot_create(self, client_for, company, role):
        response = client_for(company, role).post(
            URL, {"full_name": "Omar"}, format="json"
        )

        assert response.status_code == 403
        assert not Client.objects.exists()


class TestReadClients:
    def test_search_by_city(self, client_for, company, make_client):
        make_client(company, "Layla Hassan", city="Dubai")
        make_client(company, "Omar Khalil", city="Sharjah", email="omar@example.com")

        response = client_for(company, Role.ACCOUNTANT).get(URL, {"search": "sharjah"})

        assert response.status_code == 200
        assert [c["full_name"] for c in response.data["results"]] == ["Omar Khalil"]

    def test_list_is_scoped_to_company(
        self, admin_client, company, other_company, make_client
    ):
        make_client(company, "Layla Hassan")
        make_client(other_company, "Rival Client")

        response = admin_client.get(URL)

        assert [c["full_name"] for c in response.data["results"]] == ["Layla Hassan"]

    def test_designer_cannot_read(self, client_for, company, make_client):
        make_client(company)

        response = client_for(company, Role.DESIGNER).get(URL)

        assert response.status_code == 403

    def test_client_of_another_company_is_not_found(
        self, admin_client, other_company, make_client
    ):
        foreign = make_client(other_company)

        response = admin_client.get(f"{URL}{foreign.id}/")

        assert response.status_code == 404


class TestUpdateAndDelete:
    def test_patch_changes_only_sent_fields(self, admin_client, company, make_client):
        client = make_client(company, city="Dubai")

        response = admin_client.patch(
            f"{URL}{client.id}/", {"phone": "+971501234567"}, format="json"
        )

        assert response.status_code == 200
        client.refresh_from_db()
        assert client.phone == "+971501234567"
        assert client.city == "Dubai"

    def test_delete_hides_client(self, admin_client, company, make_client):
        client = make_client(company)

        response = admin_client.delete(f"{URL}{client.id}/")

        assert response.status_code == 204
        assert admin_client.get(f"{URL}{client.id}/").status_code == 404
        assert Client.objects.filter(id=client.id).exists()
