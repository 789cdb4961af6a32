"""Pricing API views.

Currencies are global reference data; exchange rates and pricing tiers are
tenant-owned and writable by company admins only.  Domain exceptions are
translated into HTTP status codes here.
"""

from __future__ import annotations

from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework.viewsets import GenericViewSet

from modules.accounts.permissions import ADMIN_ONLY, HasCompanyRole, TenantViewMixin
from modules.core import cache
from modules.pricing.dtos import (
    CreateExchangeRateDTO,
    PricingTierDTO,
    UpdateExchangeRateDTO,
)
from modules.pricing.exceptions import (
    CurrencyNotFound,
    ExchangeRateAlreadyExists,
    ExchangeRateNotFound,
    PricingTierNotFound,
)
from modules.pricing.repositories.django_repository import PricingDjangoRepository
from modules.pricing.serializers import (
    CompanyCurrencySerializer,
    CurrencySerializer,
    ExchangeRateInputSerializer,
    ExchangeRateSerializer,
    PricingTierInputSerializer,
    PricingTierSerializer,
)
from modules.pricing.services import PricingService

ADMIN_WRITES = {
    "create": ADMIN_ONLY,
    "partial_update": ADMIN_ONLY,
    "update": ADMIN_ONLY,
    "destroy": ADMIN_ONLY,
}


def _validation_error(exc: Exception) -> Response:
    if isinstance(exc, PydanticValidationError):
        first = exc.errors()[0]
        message = str(first.get("ctx", {}).get("error", first["msg"]))
    else:
        message = str(exc)
    return Response({"detail": message}, status=status.HTTP_400_BAD_REQUEST)


class CurrencyListView(APIView):
    """GET /api/v1/currencies/"""

    permission_classes = [HasCompanyRole]

    def get(self, request: Request) -> Response:
        service = PricingService(PricingDjangoRepository())
        return Response(CurrencySerializer(service.list_currencies(), many=True).data)


class CompanyCurrencyView(TenantViewMixin, APIView):
    """GET /api/v1/company-currency/"""

    permission_classes = [HasCompanyRole]

    def get(self, request: Request) -> Response:
        dto = PricingService.company_currency(self.membership.company)
        return Response(CompanyCurrencySerializer(dto.model_dump()).data)


class ExchangeRateViewSet(TenantViewMixin, GenericViewSet):
    permission_classes = [HasCompanyRole]
    action_roles = ADMIN_WRITES
    serializer_class = ExchangeRateSerializer
    pagination_class = None

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = PricingService(PricingDjangoRepository())

    def list(self, request: Request) -> Response:
        """GET /api/v1/exchange-rates/ (active rates only)"""
        data = cache.get_or_set(
            self.company_id,
            cache.EXCHANGE_RATES,
            lambda: ExchangeRateSerializer(
                self._service.list_active_rates(self.company_id), many=True
            ).data,
        )
        return Response(data)

    def create(self, request: Request) -> Response:
        """POST /api/v1/exchange-rates/"""
        serializer = ExchangeRateInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            dto = CreateExchangeRateDTO(**serializer.validated_data)
        except PydanticValidationError as exc:
            return _validation_error(exc)

        try:
            rate = self._service.add_rate(self.membership.company, dto)
        except CurrencyNotFound as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)
        except ExchangeRateAlreadyExists as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)

        cache.invalidate(self.company_id, {cache.EXCHANGE_RATES})
        return Response(ExchangeRateSerializer(rate).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/exchange-rates/{pk}/"""
        serializer = ExchangeRateInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            dto = UpdateExchangeRateDTO(
                rate_to_company_currency=serializer.validated_data[
                    "rate_to_company_currency"
                ]
            )
        except PydanticValidationError as exc:
            return _validation_error(exc)

        try:
            rate = self._service.update_rate(self.company_id, pk, dto)
        except ExchangeRateNotFound:
            return Response(
                {"detail": "Exchange rate not found."},
                status=status.HTTP_404_NOT_FOUND,
            )

        cache.invalidate(self.company_id, {cache.EXCHANGE_RATES})
        return Response(ExchangeRateSerializer(rate).data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/exchange-rates/{pk}/ (deactivates, keeps history)"""
        try:
            self._service.deactivate_rate(self.company_id, pk)
        except ExchangeRateNotFound:
            return Response(
                {"detail": "Exchange rate not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        cache.invalidate(self.company_id, {cache.EXCHANGE_RATES})
        return Response(status=status.HTTP_204_NO_CONTENT)


class PricingTierViewSet(TenantViewMixin, GenericViewSet):
    permission_classes = [HasCompanyRole]
    action_roles = ADMIN_WRITES
    serializer_class = PricingTierSerializer
    pagination_class = None

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = PricingService(PricingDjangoRepository())

    def list(self, request: Request) -> Response:
        """GET /api/v1/pricing-tiers/"""
        data = cache.get_or_set(
            self.company_id,
            cache.PRICING_TIERS,
            lambda: PricingTierSerializer(
                self._service.list_tiers(self.company_id), many=True
            ).data,
        )
        return Response(data)

    def create(self, request: Request) -> Response:
        """POST /api/v1/pricing-tiers/"""
        serializer = PricingTierInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            dto = PricingTierDTO(**serializer.validated_data)
            tier = self._service.create_tier(self.company_id, dto)
        except (PydanticValidationError, ValueError) as exc:
            return _validation_error(exc)

        cache.invalidate(self.company_id, {cache.PRICING_TIERS})
        return Response(PricingTierSerializer(tier).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/pricing-tiers/{pk}/"""
        serializer = PricingTierInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            dto = PricingTierDTO(**serializer.validated_data)
        except PydanticValidationError as exc:
            return _validation_error(exc)

        try:
            tier = self._service.update_tier(self.company_id, pk, dto)
        except PricingTierNotFound:
            return Response(
                {"detail": "Pricing tier not found."},
                status=status.HTTP_404_NOT_FOUND,
            )

        cache.invalidate(self.company_id, {cache.PRICING_TIERS})
        return Response(PricingTierSerializer(tier).data)
