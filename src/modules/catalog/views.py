"""Product API views.

Every role that quotes, bills or produces may browse the catalogue; only
admins change it.
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

from modules.accounts.models import Role
from modules.accounts.permissions import ADMIN_ONLY, HasCompanyRole, TenantViewMixin
from modules.catalog.dtos import CreateProductDTO, UpdateProductDTO
from modules.catalog.exceptions import ProductAlreadyExists, ProductNotFound
from modules.catalog.filters import ProductFilter
from modules.catalog.models import Product
from modules.catalog.repositories.django_repository import ProductDjangoRepository
from modules.catalog.serializers import (
    ProductInputSerializer,
    ProductSerializer,
    TierPriceSerializer,
)
from modules.catalog.services import ProductService
from modules.core.pagination import StandardResultsSetPagination
from modules.pricing.repositories.django_repository import PricingDjangoRepository
from modules.pricing.services import PricingService

READERS = frozenset({Role.ADMIN, Role.SALES, Role.ACCOUNTANT, Role.PRODUCTION})

ACTION_ROLES = {
    "list": READERS,
    "retrieve": READERS,
    "prices": READERS,
    "create": ADMIN_ONLY,
    "partial_update": ADMIN_ONLY,
    "destroy": ADMIN_ONLY,
}


def _first_error(exc: PydanticValidationError) -> str:
    first = exc.errors()[0]
    return str(first.get("ctx", {}).get("error", first["msg"]))


def _product_not_found() -> Response:
    return Response({"detail": "Product not found."}, status=status.HTTP_404_NOT_FOUND)


class ProductViewSet(TenantViewMixin, GenericViewSet):
    queryset = Product.objects.none()
    permission_classes = [HasCompanyRole]
    action_roles = ACTION_ROLES
    serializer_class = ProductSerializer
    pagination_class = StandardResultsSetPagination
    filterset_class = ProductFilter
    search_fields = ["sku", "product_code", "name_en", "name_ar", "category"]
    ordering_fields = ["name_en", "unit_price", "category", "created_at"]
    ordering = ["name_en", "id"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = ProductService(
            ProductDjangoRepository(), PricingService(PricingDjangoRepository())
        )

    def get_queryset(self):
        if getattr(self, "swagger_fake_view", False):
            return Product.objects.none()
        return self._service.list_products(self.company_id)

    def list(self, request: Request) -> Response:
        """GET /api/v1/products/"""
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        return self.get_paginated_response(ProductSerializer(page, many=True).data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/products/{pk}/"""
        try:
            product = self._service.get_product(self.company_id, pk)
        except ProductNotFound:
            return _product_not_found()
        return Response(ProductSerializer(product).data)

    def create(self, request: Request) -> Response:
        """POST /api/v1/products/"""
        serializer = ProductInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = {"sku": "", "name_en": "", "category": "", **serializer.validated_data}
        try:
            dto = CreateProductDTO(**data)
        except PydanticValidationError as exc:
            return Response(
                {"detail": _first_error(exc)}, status=status.HTTP_400_BAD_REQUEST
            )

        try:
            product = self._service.create_product(self.company_id, dto)
        except ProductAlreadyExists as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)
        return Response(ProductSerializer(product).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/products/{pk}/"""
        serializer = ProductInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            dto = UpdateProductDTO(**serializer.validated_data)
        except PydanticValidationError as exc:
            return Response(
                {"detail": _first_error(exc)}, status=status.HTTP_400_BAD_REQUEST
            )

        try:
            product = self._service.update_product(self.company_id, pk, dto)
        except ProductNotFound:
            return _product_not_found()
        except ProductAlreadyExists as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)
        return Response(ProductSerializer(product).data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/products/{pk}/ (soft delete)"""
        try:
            self._service.delete_product(self.company_id, pk)
        except ProductNotFound:
            return _product_not_found()
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["get"])
    def prices(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/products/{pk}/prices/  (unit price per pricing tier)"""
        try:
            prices = self._service.tier_prices(self.company_id, pk)
        except ProductNotFound:
            return _product_not_found()
        return Response(
            TierPriceSerializer([price.model_dump() for price in prices], many=True).data
        )
