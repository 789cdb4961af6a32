"""Quotation API views.

Exposes ``QuotationService`` via HTTP.  A quotation is priced from the
catalogue when it is created; ``convert`` turns it into an order and
responds with both records.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.accounts.permissions import HasCompanyRole, TenantViewMixin
from modules.catalog.exceptions import ProductNotFound
from modules.catalog.repositories.django_repository import ProductDjangoRepository
from modules.clients.exceptions import ClientNotFound
from modules.clients.repositories.django_repository import ClientDjangoRepository
from modules.core import cache
from modules.core.pagination import StandardResultsSetPagination
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import OrderSerializer
from modules.orders.services import OrderService
from modules.orders.views import DOMAIN_ERRORS, domain_error_response
from modules.pricing.repositories.django_repository import PricingDjangoRepository
from modules.pricing.services import PricingService
from modules.quotations.constants import ACTION_ROLES
from modules.quotations.dtos import (
    ConvertQuotationDTO,
    CreateQuotationDTO,
    CreateQuotationItemDTO,
)
from modules.quotations.exceptions import (
    InvalidQuotation,
    InvalidQuotationTransition,
    QuotationAlreadyConverted,
    QuotationExpired,
    QuotationNotFound,
)
from modules.quotations.filters import QuotationFilter
from modules.quotations.models import Quotation
from modules.quotations.repositories.django_repository import QuotationDjangoRepository
from modules.quotations.serializers import (
    ConvertQuotationSerializer,
    CreateQuotationSerializer,
    QuotationListSerializer,
    QuotationSerializer,
    QuotationStatusSerializer,
)
from modules.quotations.services import QuotationService
from modules.statuses.repositories.django_repository import StatusDjangoRepository

QUOTATION_ERRORS = (
    QuotationNotFound,
    ClientNotFound,
    ProductNotFound,
    InvalidQuotation,
    QuotationExpired,
    InvalidQuotationTransition,
    QuotationAlreadyConverted,
)


def quotation_error_response(exc: Exception) -> Response:
    if isinstance(exc, QuotationAlreadyConverted):
        return Response(
            {"detail": str(exc), "order_id": str(exc.order_id)},
            status=status.HTTP_409_CONFLICT,
        )
    if isinstance(exc, InvalidQuotationTransition):
        return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)
    if isinstance(exc, (QuotationNotFound, ClientNotFound, ProductNotFound)):
        return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)
    if isinstance(exc, DOMAIN_ERRORS):
        return domain_error_response(exc)
    return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)


def _first_error(exc: PydanticValidationError) -> str:
    first = exc.errors()[0]
    return str(first.get("ctx", {}).get("error", first["msg"]))


class QuotationViewSet(TenantViewMixin, GenericViewSet):
    queryset = Quotation.objects.none()
    permission_classes = [HasCompanyRole]
    action_roles = ACTION_ROLES
    serializer_class = QuotationSerializer
    pagination_class = StandardResultsSetPagination
    filterset_class = QuotationFilter
    search_fields = ["quotation_number", "client_name", "email", "phone"]
    ordering_fields = ["created_at", "valid_until", "total_price"]
    ordering = ["-created_at", "-id"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        pricing = PricingService(PricingDjangoRepository())
        self._service = QuotationService(
            quotation_repository=QuotationDjangoRepository(),
            client_repository=ClientDjangoRepository(),
            product_repository=ProductDjangoRepository(),
            pricing_service=pricing,
            order_service=OrderService(
                order_repository=OrderDjangoRepository(),
                status_repository=StatusDjangoRepository(),
                pricing_service=pricing,
            ),
        )

    def get_queryset(self):
        if getattr(self, "swagger_fake_view", False):
            return Quotation.objects.none()
        return self._service.list_quotations(self.company_id)

    def list(self, request: Request) -> Response:
        """GET /api/v1/quotations/"""
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        return self.get_paginated_response(
            QuotationListSerializer(page, many=True).data
        )

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/quotations/{pk}/"""
        try:
            quotation = self._service.get_quotation(self.company_id, pk)
        except QuotationNotFound as exc:
            return quotation_error_response(exc)
        return Response(QuotationSerializer(quotation).data)

    def create(self, request: Request) -> Response:
        """POST /api/v1/quotations/"""
        serializer = CreateQuotationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            dto = CreateQuotationDTO(
                client_id=data["client_id"],
                client_name=data["client_name"],
                email=data["email"] or None,
                phone=data["phone"],
                valid_until=data["valid_until"],
                pricing_tier_id=data["pricing_tier_id"],
                currency_id=data["currency_id"],
                notes=data["notes"],
                items=[CreateQuotationItemDTO(**item) for item in data["items"]],
            )
        except PydanticValidationError as exc:
            return Response(
                {"detail": _first_error(exc)}, status=status.HTTP_400_BAD_REQUEST
            )

        try:
            quotation = self._service.create_quotation(
                self.membership.company, dto, user_id=request.user.pk
            )
        except (*QUOTATION_ERRORS, *DOMAIN_ERRORS) as exc:
            return quotation_error_response(exc)
        return Response(
            QuotationSerializer(quotation).data, status=status.HTTP_201_CREATED
        )

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/quotations/{pk}/  (status change)"""
        serializer = QuotationStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            quotation = self._service.change_status(
                self.company_id, pk, serializer.validated_data["status"]
            )
        except QUOTATION_ERRORS as exc:
            return quotation_error_response(exc)
        return Response(QuotationSerializer(quotation).data)

    @action(detail=True, methods=["post"])
    def convert(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/quotations/{pk}/convert/"""
        serializer = ConvertQuotationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        try:
            dto = ConvertQuotationDTO(**{**data, "email": data["email"] or None})
        except PydanticValidationError as exc:
            return Response(
                {"detail": _first_error(exc)}, status=status.HTTP_400_BAD_REQUEST
            )

        try:
            conversion = self._service.convert_to_order(
                self.membership.company, pk, dto, user_id=request.user.pk
            )
        except (*QUOTATION_ERRORS, *DOMAIN_ERRORS) as exc:
            return quotation_error_response(exc)

        cache.invalidate(self.company_id, conversion.order_result.affected_read_paths)
        return Response(
            {
                "quotation": QuotationSerializer(conversion.quotation).data,
                "order": OrderSerializer(conversion.order_result.order).data,
            },
            status=status.HTTP_201_CREATED,
        )
