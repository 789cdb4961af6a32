"""Client DRF serializers."""

from __future__ import annotations

from rest_framework import serializers

from modules.clients.models import Client


class ClientSerializer(serializers.ModelSerializer):
    default_currency_code = serializers.SerializerMethodField()
    default_pricing_tier_name = serializers.SerializerMethodField()

    class Meta:
        model = Client
        fields = [
            "id",
            "full_name",
            "business_name",
            "email",
            "phone",
            "secondary_phone",
            "address",
            "city",
            "tax_number",
            "notes",
            "default_currency",
            "default_currency_code",
            "default_pricing_tier",
            "default_pricing_tier_name",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_default_currency_code(self, obj: Client):
        return obj.default_currency.code if obj.default_currency else None

    def get_default_pricing_tier_name(self, obj: Client):
        tier = obj.default_pricing_tier
        return tier.display_name if tier else None


class ClientInputSerializer(serializers.Serializer):
    """Create/update payload; ``full_name`` is checked by the DTO."""

    full_name = serializers.CharField(max_length=255, required=False, allow_blank=True)
    business_name = serializers.CharField(
        max_length=255, required=False, allow_blank=True
    )
    email = serializers.EmailField(required=False, allow_blank=True, allow_null=True)
    phone = serializers.CharField(max_length=30, required=False, allow_blank=True)
    secondary_phone = serializers.CharField(
        max_length=30, required=False, allow_blank=True
    )
    address = serializers.CharField(required=False, allow_blank=True)
    city = serializers.CharField(max_length=100, required=False, allow_blank=True)
    tax_number = serializers.CharField(max_length=50, required=False, allow_blank=True)
    notes = serializers.CharField(required=False, allow_blank=True)
    default_currency_id = serializers.UUIDField(required=False, allow_null=True)
    default_pricing_tier_id = serializers.UUIDField(required=False, allow_null=True)

    def validate_email(self, value):
        return value or None
