"""Django ORM implementation of the Client repository."""

from __future__ import annotations

from typing import Any, Dict, Optional
from uuid import UUID

from django.core.exceptions import ValidationError

from modules.clients.models import Client
from modules.clients.repositories.interfaces import IClientRepository


class ClientDjangoRepository(IClientRepository):
    def _base_queryset(self, company_id: UUID):
        return (
            Client.objects.for_company(company_id)
            .alive()
            .select_related("default_currency", "default_pricing_tier")
        )

    def get_by_id(self, company_id: UUID, id: Any) -> Optional[Client]:
        try:
            return self._base_queryset(company_id).filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, company_id: UUID, filters: Optional[Dict[str, Any]] = None):
        queryset = self._base_queryset(company_id)
        if filters:
            queryset = queryset.filter(**filters)
        return queryset.order_by("full_name", "id")

    def save(self, client: Client) -> Client:
        client.save()
        return client

    def delete(self, client: Client) -> None:
        client.delete()
