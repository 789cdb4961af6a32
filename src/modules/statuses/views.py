"""Order status registry API.

Any member can read the registry; only admins can change it.
"""

from __future__ import annotations

from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.accounts.permissions import ADMIN_ONLY, HasCompanyRole, TenantViewMixin
from modules.core import cache
from modules.statuses.dtos import CreateStatusDTO, UpdateStatusDTO
from modules.statuses.exceptions import (
    ProtectedStatus,
    StatusAlreadyExists,
    StatusInUse,
    StatusNotFound,
)
from modules.statuses.repositories.django_repository import StatusDjangoRepository
from modules.statuses.serializers import OrderStatusInputSerializer, OrderStatusSerializer
from modules.statuses.services import StatusService


def _first_error(exc: PydanticValidationError) -> str:
    first = exc.errors()[0]
    return str(first.get("ctx", {}).get("error", first["msg"]))


class OrderStatusViewSet(TenantViewMixin, GenericViewSet):
    permission_classes = [HasCompanyRole]
    action_roles = {
        "create": ADMIN_ONLY,
        "partial_update": ADMIN_ONLY,
        "destroy": ADMIN_ONLY,
    }
    serializer_class = OrderStatusSerializer
    pagination_class = None

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = StatusService(StatusDjangoRepository())

    def list(self, request: Request) -> Response:
        """GET /api/v1/statuses/ (sort order ascending)"""
        data = cache.get_or_set(
            self.company_id,
            cache.ORDER_STATUSES,
            lambda: OrderStatusSerializer(
                self._service.list_statuses(self.company_id), many=True
            ).data,
        )
        return Response(data)

    def create(self, request: Request) -> Response:
        """POST /api/v1/statuses/"""
        serializer = OrderStatusInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            dto = CreateStatusDTO(**serializer.validated_data)
        except PydanticValidationError as exc:
            return Response(
                {"detail": _first_error(exc)}, status=status.HTTP_400_BAD_REQUEST
            )

        try:
            result = self._service.create_status(self.company_id, dto)
        except StatusAlreadyExists as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)

        cache.invalidate(self.company_id, result.affected_read_paths)
        return Response(
            OrderStatusSerializer(result.status).data, status=status.HTTP_201_CREATED
        )

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/statuses/{pk}/"""
        serializer = OrderStatusInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            dto = UpdateStatusDTO(**serializer.validated_data)
        except PydanticValidationError as exc:
            return Response(
                {"detail": _first_error(exc)}, status=status.HTTP_400_BAD_REQUEST
            )

        try:
            result = self._service.update_status(self.company_id, pk, dto)
        except StatusNotFound:
            return Response(
                {"detail": "Status not found."}, status=status.HTTP_404_NOT_FOUND
            )
        except (StatusAlreadyExists, ProtectedStatus) as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)

        cache.invalidate(self.company_id, result.affected_read_paths)
        return Response(OrderStatusSerializer(result.status).data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/statuses/{pk}/"""
        try:
            result = self._service.delete_status(self.company_id, pk)
        except StatusNotFound:
            return Response(
                {"detail": "Status not found."}, status=status.HTTP_404_NOT_FOUND
            )
        except (ProtectedStatus, StatusInUse) as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)

        cache.invalidate(self.company_id, result.affected_read_paths)
        return Response(status=status.HTTP_204_NO_CONTENT)
