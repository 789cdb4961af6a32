"""Client service layer (Use Cases).

Business rules enforced here:
- A client needs a name; every other field is optional.
- Default currency must exist and the default pricing tier must belong to
  the client's company.
- Deleting a client is a soft delete.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional
from uuid import UUID

import structlog
from django.db import transaction

from modules.clients.exceptions import ClientNotFound, InvalidClientDefaults
from modules.clients.models import Client
from modules.pricing.exceptions import CurrencyNotFound, PricingTierNotFound

if TYPE_CHECKING:
    from modules.clients.dtos import CreateClientDTO, UpdateClientDTO
    from modules.clients.repositories.interfaces import IClientRepository
    from modules.pricing.services import PricingService

logger = structlog.get_logger(__name__)

# Fields an update may set back to NULL.
_NULLABLE_FIELDS = frozenset({"default_currency_id", "default_pricing_tier_id"})


class ClientService:
    """Application service for the client directory.

    Receives an ``IClientRepository`` via constructor injection (DIP).
    """

    def __init__(
        self, repository: IClientRepository, pricing_service: PricingService
    ) -> None:
        self._repo = repository
        self._pricing = pricing_service

    def _check_defaults(
        self, company_id: UUID, currency_id: Any, tier_id: Any
    ) -> None:
        try:
            if currency_id is not None:
                self._pricing.get_currency(currency_id)
            if tier_id is not None:
                self._pricing.get_tier(company_id, tier_id)
        except (CurrencyNotFound, PricingTierNotFound) as exc:
            raise InvalidClientDefaults(str(exc)) from exc

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_client(self, company_id: UUID, dto: CreateClientDTO) -> Client:
        """Create a client.

        Raises:
            InvalidClientDefaults: unknown currency or foreign pricing tier.
        """
        self._check_defaults(
            company_id, dto.default_currency_id, dto.default_pricing_tier_id
        )
        client = Client(
            company_id=company_id,
            full_name=dto.full_name,
            business_name=dto.business_name or "",
            email=dto.email or "",
            phone=dto.phone or "",
            secondary_phone=dto.secondary_phone or "",
            address=dto.address or "",
            city=dto.city or "",
            tax_number=dto.tax_number or "",
            notes=dto.notes or "",
            default_currency_id=dto.default_currency_id,
            default_pricing_tier_id=dto.default_pricing_tier_id,
        )
        client = self._repo.save(client)
        logger.info(
            "client.created", company_id=str(company_id), client_id=str(client.id)
        )
        return client

    @transaction.atomic
    def update_client(
        self, company_id: UUID, client_id: Any, dto: UpdateClientDTO
    ) -> Client:
        """Apply the fields present in *dto*.

        Raises:
            ClientNotFound: missing, deleted or another tenant's client.
            InvalidClientDefaults: unknown currency or foreign pricing tier.
        """
        client = self.get_client(company_id, client_id)
        changes = dto.model_dump(exclude_unset=True)
        self._check_defaults(
            company_id,
            changes.get("default_currency_id"),
            changes.get("default_pricing_tier_id"),
        )
        for field, value in changes.items():
            if field in _NULLABLE_FIELDS:
                setattr(client, field, value)
            elif field == "email":
                client.email = value or ""
            elif value is not None:
                setattr(client, field, value)

        client = self._repo.save(client)
        logger.info(
            "client.updated",
            company_id=str(company_id),
            client_id=str(client.id),
            fields=sorted(changes),
        )
        return client

    @transaction.atomic
    def delete_client(self, company_id: UUID, client_id: Any) -> None:
        client = self.get_client(company_id, client_id)
        self._repo.delete(client)
        logger.info(
            "client.soft_deleted", company_id=str(company_id), client_id=str(client_id)
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_client(self, company_id: UUID, client_id: Any) -> Client:
        """Raises ``ClientNotFound`` for missing, deleted or foreign clients."""
        client = self._repo.get_by_id(company_id, client_id)
        if client is None:
            raise ClientNotFound(f"Client {client_id} not found.")
        return client

    def list_clients(self, company_id: UUID, filters: Optional[Dict[str, Any]] = None):
        return self._repo.list(company_id, filters)
