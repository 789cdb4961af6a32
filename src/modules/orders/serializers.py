"""Order DRF serializers for API input/output.

The serializer operates at the Interface layer (API Views).
Business logic lives in the Service Layer, which receives
Pydantic DTOs from ``dtos.py``.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.orders.constants import AttachmentType, DeliveryMethod
from modules.orders.models import (
    Order,
    OrderAttachment,
    OrderComment,
    OrderItem,
    OrderStatusHistory,
)
from modules.pricing.formatting import VARIANTS, resolve_display

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class CreateOrderItemSerializer(serializers.Serializer):
    """Validates a single item in an order creation request."""

    description = serializers.CharField(max_length=255)
    quantity = serializers.IntegerField(min_value=1)
    unit_price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)


class CreateOrderSerializer(serializers.Serializer):
    """Validates the order creation request payload."""

    client_name = serializers.CharField(max_length=255)
    email = serializers.EmailField()
    phone = serializers.CharField(required=False, default="", allow_blank=True)
    delivery_date = serializers.DateField()
    delivery_method = serializers.ChoiceField(
        choices=DeliveryMethod.choices, default=DeliveryMethod.PICKUP
    )
    needs_design = serializers.BooleanField(required=False, default=False)
    currency_id = serializers.UUIDField(required=False, allow_null=True, default=None)
    pricing_tier_id = serializers.UUIDField(
        required=False, allow_null=True, default=None
    )
    items = CreateOrderItemSerializer(many=True, allow_empty=False)
    notes = serializers.CharField(required=False, default="", allow_blank=True)


class AdvanceStatusSerializer(serializers.Serializer):
    status = serializers.CharField(max_length=100)
    notes = serializers.CharField(required=False, default="", allow_blank=True)


class ConfirmPaymentSerializer(serializers.Serializer):
    """Payment confirmation input; the method is checked by the service."""

    payment_method = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, default=None
    )
    payment_status = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, default=None
    )
    paid_amount = serializers.DecimalField(
        max_digits=12, decimal_places=2, required=False, allow_null=True, default=None
    )
    notes = serializers.CharField(required=False, default="", allow_blank=True)


class DeliverSerializer(serializers.Serializer):
    collection_method = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, default=None
    )
    notes = serializers.CharField(required=False, default="", allow_blank=True)


class AttachmentUploadSerializer(serializers.Serializer):
    file = serializers.FileField()
    file_type = serializers.ChoiceField(choices=AttachmentType.choices)


class AddCommentSerializer(serializers.Serializer):
    content = serializers.CharField(allow_blank=True, trim_whitespace=False)
    is_internal = serializers.BooleanField(required=False, default=False)


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


def price_display(order: Order, variant: str = "inline") -> dict:
    """Total price rendered in the order currency and the company currency."""
    base = order.company.currency
    foreign = order.currency
    rendered = resolve_display(
        order.total_price,
        base.code if base else None,
        foreign.code if foreign else None,
        order.total_price_company if foreign else None,
        variant,
        base_symbol=base.symbol if base else None,
        foreign_symbol=foreign.symbol if foreign else None,
    )
    return rendered.model_dump()


class PriceDisplayMixin(serializers.Serializer):
    price_display = serializers.SerializerMethodField()
    currency_code = serializers.SerializerMethodField()

    def get_price_display(self, obj: Order) -> dict:
        variant = self.context.get("price_variant", "inline")
        if variant not in VARIANTS:
            variant = "inline"
        return price_display(obj, variant)

    def get_currency_code(self, obj: Order) -> str | None:
        currency = obj.currency or obj.company.currency
        return currency.code if currency else None


class OrderItemSerializer(serializers.ModelSerializer):
    """Read serializer for order items with the price snapshot."""

    class Meta:
        model = OrderItem
        fields = ["id", "description", "quantity", "unit_price", "item_total"]
        read_only_fields = fields


class StatusHistorySerializer(serializers.ModelSerializer):
    """Read serializer for order status history records."""

    class Meta:
        model = OrderStatusHistory
        fields = [
            "id",
            "old_status",
            "new_status",
            "user_id",
            "notes",
            "created_at",
        ]
        read_only_fields = fields


class OrderAttachmentSerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderAttachment
        fields = [
            "id",
            "order_id",
            "file_name",
            "file_url",
            "file_type",
            "file_size",
            "uploader_id",
            "created_at",
        ]
        read_only_fields = fields


class OrderCommentSerializer(serializers.ModelSerializer):
    author_name = serializers.SerializerMethodField()

    class Meta:
        model = OrderComment
        fields = [
            "id",
            "order_id",
            "user_id",
            "author_name",
            "content",
            "is_internal",
            "created_at",
        ]
        read_only_fields = fields

    def get_author_name(self, obj: OrderComment) -> str | None:
        membership = getattr(obj.user, "membership", None) if obj.user else None
        if membership and membership.full_name:
            return membership.full_name
        return obj.user.email if obj.user else None


class OrderSerializer(PriceDisplayMixin, serializers.ModelSerializer):
    """Read serializer for orders with nested items and history."""

    items = OrderItemSerializer(many=True, read_only=True)
    status_history = StatusHistorySerializer(many=True, read_only=True)
    remaining_balance = serializers.DecimalField(
        max_digits=12, decimal_places=2, read_only=True
    )

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "client_name",
            "email",
            "phone",
            "delivery_date",
            "delivery_method",
            "needs_design",
            "status",
            "currency_id",
            "currency_code",
            "exchange_rate",
            "total_price",
            "total_price_company",
            "paid_amount",
            "remaining_balance",
            "payment_method",
            "payment_status",
            "pricing_tier_id",
            "client_id",
            "price_display",
            "notes",
            "created_by_id",
            "created_at",
            "updated_at",
            "items",
            "status_history",
        ]
        read_only_fields = fields


class OrderListSerializer(PriceDisplayMixin, serializers.ModelSerializer):
    """Lightweight serializer for order list (no nested relations)."""

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "client_name",
            "status",
            "delivery_date",
            "delivery_method",
            "total_price",
            "currency_code",
            "paid_amount",
            "payment_status",
            "price_display",
            "created_at",
        ]
        read_only_fields = fields


class SettlementQuoteSerializer(serializers.Serializer):
    order_id = serializers.UUIDField()
    total_price = serializers.DecimalField(max_digits=12, decimal_places=2)
    paid_amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    remaining = serializers.DecimalField(max_digits=12, decimal_places=2)
    balance_due = serializers.BooleanField()
