"""Catalogue DRF serializers."""

from __future__ import annotations

from rest_framework import serializers

from modules.catalog.models import Product


class ProductSerializer(serializers.ModelSerializer):
    class Meta:
        model = Product
        fields = [
            "id",
            "sku",
            "product_code",
            "name_en",
            "name_ar",
            "category",
            "unit_price",
            "description",
            "image_url",
            "stock_quantity",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ProductInputSerializer(serializers.Serializer):
    """Create/update payload; required fields are checked by the DTO."""

    sku = serializers.CharField(max_length=64, required=False, allow_blank=True)
    product_code = serializers.CharField(max_length=64, required=False, allow_blank=True)
    name_en = serializers.CharField(max_length=255, required=False, allow_blank=True)
    name_ar = serializers.CharField(max_length=255, required=False, allow_blank=True)
    category = serializers.CharField(max_length=100, required=False, allow_blank=True)
    unit_price = serializers.DecimalField(
        max_digits=12, decimal_places=2, required=False
    )
    description = serializers.CharField(required=False, allow_blank=True)
    image_url = serializers.URLField(max_length=500, required=False, allow_blank=True)
    stock_quantity = serializers.IntegerField(required=False)


class TierPriceSerializer(serializers.Serializer):
    pricing_tier_id = serializers.UUIDField()
    name = serializers.CharField()
    markup_percent = serializers.DecimalField(max_digits=6, decimal_places=2)
    is_default = serializers.BooleanField()
    unit_price = serializers.DecimalField(max_digits=12, decimal_places=2)
