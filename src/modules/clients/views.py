"""Client API views.

Exposes ``ClientService`` over HTTP.  Sales staff and admins manage the
directory; accountants may read it.  The list is paginated and searchable
by name, business name, email, phone and city.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.accounts.models import Role
from modules.accounts.permissions import HasCompanyRole, TenantViewMixin
from modules.clients.dtos import CreateClientDTO, UpdateClientDTO
from modules.clients.exceptions import ClientNotFound, InvalidClientDefaults
from modules.clients.filters import ClientFilter
from modules.clients.models import Client
from modules.clients.repositories.django_repository import ClientDjangoRepository
from modules.clients.serializers import ClientInputSerializer, ClientSerializer
from modules.clients.services import ClientService
from modules.core.pagination import StandardResultsSetPagination
from modules.pricing.repositories.django_repository import PricingDjangoRepository
from modules.pricing.services import PricingService

READERS = frozenset({Role.ADMIN, Role.SALES, Role.ACCOUNTANT})
EDITORS = frozenset({Role.ADMIN, Role.SALES})

ACTION_ROLES = {
    "list": READERS,
    "retrieve": READERS,
    "create": EDITORS,
    "partial_update": EDITORS,
    "destroy": EDITORS,
}


def _validation_error(exc: Exception) -> Response:
    if isinstance(exc, PydanticValidationError):
        first = exc.errors()[0]
        message = str(first.get("ctx", {}).get("error", first["msg"]))
    else:
        message = str(exc)
    return Response({"detail": message}, status=status.HTTP_400_BAD_REQUEST)


def _client_not_found() -> Response:
    return Response({"detail": "Client not found."}, status=status.HTTP_404_NOT_FOUND)


class ClientViewSet(TenantViewMixin, GenericViewSet):
    queryset = Client.objects.none()
    permission_classes = [HasCompanyRole]
    action_roles = ACTION_ROLES
    serializer_class = ClientSerializer
    pagination_class = StandardResultsSetPagination
    filterset_class = ClientFilter
    search_fields = ["full_name", "business_name", "email", "phone", "city"]
    ordering_fields = ["full_name", "created_at", "city"]
    ordering = ["full_name", "id"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = ClientService(
            ClientDjangoRepository(), PricingService(PricingDjangoRepository())
        )

    def get_queryset(self):
        if getattr(self, "swagger_fake_view", False):
            return Client.objects.none()
        return self._service.list_clients(self.company_id)

    def list(self, request: Request) -> Response:
        """GET /api/v1/clients/"""
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        serializer = ClientSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/clients/{pk}/"""
        try:
            client = self._service.get_client(self.company_id, pk)
        except ClientNotFound:
            return _client_not_found()
        return Response(ClientSerializer(client).data)

    def create(self, request: Request) -> Response:
        """POST /api/v1/clients/"""
        serializer = ClientInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = {"full_name": "", **serializer.validated_data}
        try:
            dto = CreateClientDTO(**data)
            client = self._service.create_client(self.company_id, dto)
        except (PydanticValidationError, InvalidClientDefaults) as exc:
            return _validation_error(exc)
        return Response(ClientSerializer(client).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/clients/{pk}/"""
        serializer = ClientInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            dto = UpdateClientDTO(**serializer.validated_data)
            client = self._service.update_client(self.company_id, pk, dto)
        except ClientNotFound:
            return _client_not_found()
        except (PydanticValidationError, InvalidClientDefaults) as exc:
            return _validation_error(exc)
        return Response(ClientSerializer(client).data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/clients/{pk}/ (soft delete)"""
        try:
            self._service.delete_client(self.company_id, pk)
        except ClientNotFound:
            return _client_not_found()
        return Response(status=status.HTTP_204_NO_CONTENT)
