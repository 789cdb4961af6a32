"""Order API views.

Exposes ``OrderService``, ``OrderLifecycleService``, ``AttachmentService``
and ``CommentService`` via HTTP using DRF ViewSets.  Domain exceptions are
caught and translated into HTTP status codes; after a successful command
the view drops exactly the read paths the service reported as stale.
"""

from __future__ import annotations

from uuid import UUID

from django_filters.rest_framework import DjangoFilterBackend
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import GenericViewSet

from modules.accounts.permissions import HasCompanyRole, TenantViewMixin
from modules.core import cache
from modules.core.pagination import StandardResultsSetPagination
from modules.orders.attachments import AttachmentService
from modules.orders.comments import CommentService
from modules.orders.constants import ACTION_ROLES
from modules.orders.dtos import (
    AddCommentDTO,
    ConfirmPaymentDTO,
    CreateOrderDTO,
    CreateOrderItemDTO,
    DeliverDTO,
)
from modules.orders.exceptions import (
    AttachmentUploadFailed,
    BalanceDue,
    EmptyStatusRegistry,
    InvalidAttachment,
    InvalidPayment,
    MissingRequiredStatus,
    OrderNotFound,
    OrderPersistenceError,
    PaymentMethodRequired,
    StatusNotFound,
)
from modules.orders.filters import OrderFilter
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import (
    AddCommentSerializer,
    AdvanceStatusSerializer,
    AttachmentUploadSerializer,
    ConfirmPaymentSerializer,
    CreateOrderSerializer,
    DeliverSerializer,
    OrderAttachmentSerializer,
    OrderCommentSerializer,
    OrderListSerializer,
    OrderSerializer,
    SettlementQuoteSerializer,
)
from modules.orders.services import OrderLifecycleService, OrderService
from modules.pricing.exceptions import (
    CurrencyNotFound,
    ExchangeRateNotFound,
    PricingTierNotFound,
)
from modules.pricing.repositories.django_repository import PricingDjangoRepository
from modules.pricing.services import PricingService
from modules.statuses.repositories.django_repository import StatusDjangoRepository

NOT_FOUND_ERRORS = (
    OrderNotFound,
    StatusNotFound,
    CurrencyNotFound,
    ExchangeRateNotFound,
    PricingTierNotFound,
)
VALIDATION_ERRORS = (
    PaymentMethodRequired,
    InvalidPayment,
    MissingRequiredStatus,
    EmptyStatusRegistry,
    InvalidAttachment,
)
DOMAIN_ERRORS = (
    *NOT_FOUND_ERRORS,
    *VALIDATION_ERRORS,
    BalanceDue,
    OrderPersistenceError,
    AttachmentUploadFailed,
)


def domain_error_response(exc: Exception) -> Response:
    """Translate a service-layer exception into an HTTP response."""
    if isinstance(exc, BalanceDue):
        return Response(
            {"detail": str(exc), "remaining": str(exc.remaining)},
            status=status.HTTP_409_CONFLICT,
        )
    if isinstance(exc, (OrderPersistenceError, AttachmentUploadFailed)):
        return Response(
            {"detail": str(exc)}, status=status.HTTP_503_SERVICE_UNAVAILABLE
        )
    if isinstance(exc, NOT_FOUND_ERRORS):
        return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)
    return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)


def _order_not_found() -> Response:
    return Response({"detail": "Order not found."}, status=status.HTTP_404_NOT_FOUND)


def _parse_pk(pk: str | None) -> UUID | None:
    try:
        return UUID(str(pk))
    except ValueError:
        return None


class OrderViewSet(TenantViewMixin, GenericViewSet):
    """ViewSet for Order operations.

    Does **not** extend ``ModelViewSet``: all ORM access goes through
    the service/repository layer.  ``action_roles`` gates each command by
    the caller's role; reads are open to every member of the company.
    """

    queryset = Order.objects.none()
    permission_classes = [HasCompanyRole]
    action_roles = ACTION_ROLES
    filterset_class = OrderFilter
    search_fields = ["order_number", "client_name", "email", "phone"]
    ordering_fields = ["created_at", "delivery_date", "total_price", "status"]
    ordering = ["-created_at", "-id"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    parser_classes = [JSONParser, FormParser, MultiPartParser]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        order_repository = OrderDjangoRepository()
        status_repository = StatusDjangoRepository()
        self._service = OrderService(
            order_repository=order_repository,
            status_repository=status_repository,
            pricing_service=PricingService(PricingDjangoRepository()),
        )
        self._lifecycle = OrderLifecycleService(
            order_repository=order_repository,
            status_repository=status_repository,
        )
        self._attachments = AttachmentService(order_repository)
        self._comments = CommentService(order_repository)

    def get_throttles(self) -> list[BaseThrottle]:
        throttle_scope: str | None
        if self.action == "create":
            throttle_scope = "order_creation"
        elif self.action in {"list", "retrieve"}:
            throttle_scope = "order_listing"
        else:
            throttle_scope = None
        self.throttle_scope = throttle_scope
        return super().get_throttles()

    def get_serializer_context(self) -> dict:
        context = super().get_serializer_context()
        context["price_variant"] = self.request.query_params.get("variant", "inline")
        return context

    def _render(self, order: Order) -> Response:
        serializer = OrderSerializer(order, context=self.get_serializer_context())
        return Response(serializer.data)

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/orders/

        Supports idempotency via the ``Idempotency-Key`` header.
        Returns 200 if the key was already used, 201 for new orders.
        """
        create_serializer = CreateOrderSerializer(data=request.data)
        create_serializer.is_valid(raise_exception=True)
        data = create_serializer.validated_data

        try:
            dto = CreateOrderDTO(
                client_name=data["client_name"],
                email=data["email"],
                phone=data.get("phone", ""),
                delivery_date=data["delivery_date"],
                delivery_method=data["delivery_method"],
                needs_design=data.get("needs_design", False),
                currency_id=data.get("currency_id"),
                pricing_tier_id=data.get("pricing_tier_id"),
                items=[CreateOrderItemDTO(**item) for item in data["items"]],
                notes=data.get("notes", ""),
                idempotency_key=request.headers.get("Idempotency-Key"),
            )
        except PydanticValidationError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        try:
            result = self._service.create_order(
                self.membership.company, dto, user_id=request.user.pk
            )
        except DOMAIN_ERRORS as exc:
            return domain_error_response(exc)

        cache.invalidate(self.company_id, result.affected_read_paths)
        out = OrderSerializer(result.order, context=self.get_serializer_context())
        code = status.HTTP_201_CREATED if result.changed else status.HTTP_200_OK
        return Response(out.data, status=code)

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def get_queryset(self):
        if getattr(self, "swagger_fake_view", False):
            return Order.objects.none()
        return self._service.list_orders(self.company_id)

    def list(self, request: Request) -> Response:
        """GET /api/v1/orders/

        Filtering, search and ordering come from ``filter_backends``.
        The unfiltered first page is cached under the ``orders`` path.
        """

        def produce():
            queryset = self.filter_queryset(self.get_queryset())
            paginator = StandardResultsSetPagination()
            page = paginator.paginate_queryset(queryset, request)
            serializer = OrderListSerializer(
                page, many=True, context=self.get_serializer_context()
            )
            return paginator.get_paginated_response(serializer.data).data

        if request.query_params:
            return Response(produce())
        return Response(cache.get_or_set(self.company_id, cache.ORDERS, produce))

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/"""
        order_id = _parse_pk(pk)
        if order_id is None:
            return _order_not_found()

        def produce():
            order = self._service.get_order(self.company_id, order_id)
            return OrderSerializer(order, context=self.get_serializer_context()).data

        try:
            if "variant" in request.query_params:
                data = produce()
            else:
                data = cache.get_or_set(
                    self.company_id,
                    cache.read_path(cache.ORDER_DETAILS, order_id),
                    produce,
                )
        except OrderNotFound:
            return _order_not_found()
        return Response(data)

    # ------------------------------------------------------------------
    # Lifecycle transitions
    # ------------------------------------------------------------------

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/orders/{pk}/  (advance to another registry status)"""
        order_id = _parse_pk(pk)
        if order_id is None:
            return _order_not_found()

        serializer = AdvanceStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            result = self._lifecycle.advance_status(
                self.company_id,
                order_id,
                serializer.validated_data["status"],
                user_id=request.user.pk,
                notes=serializer.validated_data["notes"],
            )
        except DOMAIN_ERRORS as exc:
            return domain_error_response(exc)

        cache.invalidate(self.company_id, result.affected_read_paths)
        return self._render(result.order)

    @action(detail=True, methods=["post"], url_path="confirm-payment")
    def confirm_payment(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/confirm-payment/"""
        order_id = _parse_pk(pk)
        if order_id is None:
            return _order_not_found()

        serializer = ConfirmPaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dto = ConfirmPaymentDTO(**serializer.validated_data)

        try:
            result = self._lifecycle.confirm_payment(
                self.company_id, order_id, dto, user_id=request.user.pk
            )
        except DOMAIN_ERRORS as exc:
            return domain_error_response(exc)

        cache.invalidate(self.company_id, result.affected_read_paths)
        return self._render(result.order)

    @action(detail=True, methods=["get"])
    def settlement(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/settlement/  (balance still to collect)"""
        order_id = _parse_pk(pk)
        if order_id is None:
            return _order_not_found()
        try:
            quote = self._lifecycle.settlement_quote(self.company_id, order_id)
        except OrderNotFound:
            return _order_not_found()
        return Response(SettlementQuoteSerializer(quote.model_dump()).data)

    @action(detail=True, methods=["post"])
    def deliver(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/deliver/

        Responds 409 with ``remaining`` while a balance is outstanding and
        no ``collection_method`` was sent.
        """
        order_id = _parse_pk(pk)
        if order_id is None:
            return _order_not_found()

        serializer = DeliverSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dto = DeliverDTO(**serializer.validated_data)

        try:
            result = self._lifecycle.mark_delivered(
                self.company_id, order_id, dto, user_id=request.user.pk
            )
        except DOMAIN_ERRORS as exc:
            return domain_error_response(exc)

        cache.invalidate(self.company_id, result.affected_read_paths)
        return self._render(result.order)

    # ------------------------------------------------------------------
    # Attachments
    # ------------------------------------------------------------------

    @action(detail=True, methods=["get", "post"])
    def attachments(self, request: Request, pk: str | None = None) -> Response:
        """GET/POST /api/v1/orders/{pk}/attachments/"""
        order_id = _parse_pk(pk)
        if order_id is None:
            return _order_not_found()

        if request.method == "GET":
            try:
                data = cache.get_or_set(
                    self.company_id,
                    cache.read_path(cache.ORDER_ATTACHMENTS, order_id),
                    lambda: OrderAttachmentSerializer(
                        self._attachments.list_attachments(self.company_id, order_id),
                        many=True,
                    ).data,
                )
            except OrderNotFound:
                return _order_not_found()
            return Response(data)

        serializer = AttachmentUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            result = self._attachments.upload(
                self.company_id,
                order_id,
                serializer.validated_data["file"],
                serializer.validated_data["file_type"],
                uploader_id=request.user.pk,
            )
        except DOMAIN_ERRORS as exc:
            return domain_error_response(exc)

        cache.invalidate(self.company_id, result.affected_read_paths)
        return Response(
            OrderAttachmentSerializer(result.attachment).data,
            status=status.HTTP_201_CREATED,
        )

    # ------------------------------------------------------------------
    # Comments
    # ------------------------------------------------------------------

    @action(detail=True, methods=["get", "post"])
    def comments(self, request: Request, pk: str | None = None) -> Response:
        """GET/POST /api/v1/orders/{pk}/comments/"""
        order_id = _parse_pk(pk)
        if order_id is None:
            return _order_not_found()

        if request.method == "GET":
            try:
                data = cache.get_or_set(
                    self.company_id,
                    cache.read_path(cache.ORDER_COMMENTS, order_id),
                    lambda: OrderCommentSerializer(
                        self._comments.list_comments(self.company_id, order_id),
                        many=True,
                    ).data,
                )
            except OrderNotFound:
                return _order_not_found()
            return Response(data)

        serializer = AddCommentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            dto = AddCommentDTO(**serializer.validated_data)
        except PydanticValidationError:
            return Response(
                {"detail": "Comment cannot be empty."},
                status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            result = self._comments.add_comment(
                self.company_id, order_id, dto, user_id=request.user.pk
            )
        except OrderNotFound:
            return _order_not_found()

        cache.invalidate(self.company_id, result.affected_read_paths)
        return Response(
            OrderCommentSerializer(result.comment).data,
            status=status.HTTP_201_CREATED,
        )
