"""Unit tests for ClientService with mocked repository and pricing."""

from __future__ import annotations

from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from pydantic import ValidationError

from modules.clients.dtos import CreateClientDTO, UpdateClientDTO
from modules.clients.exceptions import ClientNotFound, InvalidClientDefaults
from modules.clients.models import Client
from modules.clients.services import ClientService
from modules.pricing.exceptions import PricingTierNotFound

pytestmark = pytest.mark.unit

COMPANY_ID = uuid4()


@pytest.fixture()
def repo():
    mock = MagicMock()
    mock.save.side_effect = lambda client: client
    return mock


@pytest.fixture()
def pricing():
    return MagicMock()


@pytest.fixture()
def service(repo, pricing):
    return ClientService(repo, pricing)


def _client(**overrides) -> Client:
    fields = {"company_id": COMPANY_ID, "full_name": "Omar Khalil", "city": "Dubai"}
    fields.update(overrides)
    return Client(**fields)


class TestCreateClient:
    def test_success(self, service, repo):
        dto = CreateClientDTO(full_name="  Omar Khalil ", email="omar@example.com")

        client = service.create_client(COMPANY_ID, dto)

        assert client.full_name == "Omar Khalil"
        assert client.email == "omar@example.com"
        assert client.company_id == COMPANY_ID
        repo.save.assert_called_once()

    def test_name_is_required(self):
        with pytest.raises(ValidationError, match="Client name is required"):
            CreateClientDTO(full_name="   ")

    def test_default_tier_must_belong_to_company(self, service, repo, pricing):
        pricing.get_tier.side_effect = PricingTierNotFound("Pricing tier x not found.")
        dto = CreateClientDTO(full_name="Omar", default_pricing_tier_id=uuid4())

        with pytest.raises(InvalidClientDefaults, match="not found"):
            service.create_client(COMPANY_ID, dto)

        repo.save.assert_not_called()


class TestUpdateClient:
    def test_only_sent_fields_change(self, service, repo):
        client = _client()
        repo.get_by_id.return_value = client

        service.update_client(COMPANY_ID, client.id, UpdateClientDTO(phone="+971500000"))

        assert client.phone == "+971500000"
        assert client.city == "Dubai"
        assert client.full_name == "Omar Khalil"

    def test_default_tier_can_be_cleared(self, service, repo):
        client = _client(default_pricing_tier_id=uuid4())
        repo.get_by_id.return_value = client

        service.update_client(
            COMPANY_ID, client.id, UpdateClientDTO(default_pricing_tier_id=None)
        )

        assert client.default_pricing_tier_id is None

    def test_not_found(self, service, repo):
        repo.get_by_id.return_value = None

        with pytest.raises(ClientNotFound):
            service.update_client(COMPANY_ID, uuid4(), UpdateClientDTO(city="Sharjah"))


class TestDeleteClient:
    def test_soft_deletes(self, service, repo):
        client = _client()
        repo.get_by_id.return_value = client

        service.delete_client(COMPANY_ID, client.id)

        repo.delete.assert_called_once_with(client)

    def test_foreign_client_is_not_found(self, service, repo):
        repo.get_by_id.return_value = None

        with pytest.raises(ClientNotFound):
            service.delete_client(COMPANY_ID, uuid4())

        repo.delete.assert_not_called()
