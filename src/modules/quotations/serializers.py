"""Quotation DRF serializers."""

from __future__ import annotations

from rest_framework import serializers

from modules.orders.constants import DeliveryMethod
from modules.quotations.constants import QuotationStatus
from modules.quotations.models import Quotation, QuotationItem

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class CreateQuotationItemSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1, default=1)


class CreateQuotationSerializer(serializers.Serializer):
    client_id = serializers.UUIDField(required=False, allow_null=True, default=None)
    client_name = serializers.CharField(
        max_length=255, required=False, default="", allow_blank=True
    )
    email = serializers.EmailField(required=False, allow_blank=True, default="")
    phone = serializers.CharField(required=False, default="", allow_blank=True)
    valid_until = serializers.DateField()
    pricing_tier_id = serializers.UUIDField(
        required=False, allow_null=True, default=None
    )
    currency_id = serializers.UUIDField(required=False, allow_null=True, default=None)
    notes = serializers.CharField(required=False, default="", allow_blank=True)
    items = CreateQuotationItemSerializer(many=True, allow_empty=False)


class QuotationStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=QuotationStatus.choices)


class ConvertQuotationSerializer(serializers.Serializer):
    delivery_date = serializers.DateField()
    delivery_method = serializers.ChoiceField(
        choices=DeliveryMethod.choices, default=DeliveryMethod.PICKUP
    )
    needs_design = serializers.BooleanField(required=False, default=False)
    email = serializers.EmailField(required=False, allow_blank=True, default="")
    notes = serializers.CharField(required=False, default="", allow_blank=True)


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class QuotationItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = QuotationItem
        fields = [
            "id",
            "product_id",
            "description",
            "quantity",
            "unit_price",
            "item_total",
        ]
        read_only_fields = fields


class QuotationListSerializer(serializers.ModelSerializer):
    currency_code = serializers.SerializerMethodField()
    is_expired = serializers.SerializerMethodField()

    class Meta:
        model = Quotation
        fields = [
            "id",
            "quotation_number",
            "client_id",
            "client_name",
            "status",
            "valid_until",
            "is_expired",
            "currency_code",
            "total_price",
            "total_price_company",
            "order_id",
            "created_at",
        ]
        read_only_fields = fields

    def get_currency_code(self, obj: Quotation) -> str | None:
        currency = obj.currency or obj.company.currency
        return currency.code if currency else None

    def get_is_expired(self, obj: Quotation) -> bool:
        return obj.is_expired()


class QuotationSerializer(QuotationListSerializer):
    items = QuotationItemSerializer(many=True, read_only=True)

    class Meta(QuotationListSerializer.Meta):
        fields = QuotationListSerializer.Meta.fields + [
            "email",
            "phone",
            "exchange_rate",
            "pricing_tier_id",
            "notes",
            "created_by_id",
            "converted_at",
            "updated_at",
            "items",
        ]
        read_only_fields = fields
