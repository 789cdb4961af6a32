"""Pricing DRF serializers."""

from __future__ import annotations

from rest_framework import serializers

from modules.pricing.models import Currency, ExchangeRate, PricingTier


class CurrencySerializer(serializers.ModelSerializer):
    class Meta:
        model = Currency
        fields = ["id", "code", "name", "symbol"]
        read_only_fields = fields


class CompanyCurrencySerializer(serializers.Serializer):
    currency_id = serializers.UUIDField(allow_null=True)
    code = serializers.CharField()
    symbol = serializers.CharField(allow_null=True)


class ExchangeRateSerializer(serializers.ModelSerializer):
    currency_code = serializers.CharField(source="currency.code", read_only=True)

    class Meta:
        model = ExchangeRate
        fields = [
            "id",
            "currency",
            "currency_code",
            "rate_to_company_currency",
            "valid_from",
            "is_active",
            "created_at",
        ]
        read_only_fields = fields


class ExchangeRateInputSerializer(serializers.Serializer):
    currency_id = serializers.UUIDField(required=False)
    rate_to_company_currency = serializers.DecimalField(max_digits=18, decimal_places=6)


class PricingTierSerializer(serializers.ModelSerializer):
    display_name = serializers.CharField(read_only=True)

    class Meta:
        model = PricingTier
        fields = [
            "id",
            "name",
            "label",
            "display_name",
            "markup_percent",
            "is_default",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class PricingTierInputSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100, required=False)
    label = serializers.CharField(max_length=100, required=False, allow_blank=True)
    markup_percent = serializers.DecimalField(
        max_digits=6, decimal_places=2, required=False
    )
    is_default = serializers.BooleanField(required=False)
