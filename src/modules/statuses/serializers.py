"""Order status DRF serializers."""

from __future__ import annotations

from rest_framework import serializers

from modules.statuses.models import OrderStatus
from modules.statuses.registry import REQUIRED_STATUS_NAMES, contrast_color


class OrderStatusSerializer(serializers.ModelSerializer):
    text_color = serializers.SerializerMethodField()
    is_required = serializers.SerializerMethodField()

    class Meta:
        model = OrderStatus
        fields = ["id", "name", "sort_order", "color", "text_color", "is_required"]
        read_only_fields = fields

    def get_text_color(self, obj: OrderStatus) -> str:
        return contrast_color(obj.color)

    def get_is_required(self, obj: OrderStatus) -> bool:
        return obj.name in REQUIRED_STATUS_NAMES


class OrderStatusInputSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100, required=False)
    sort_order = serializers.IntegerField(required=False)
    color = serializers.CharField(max_length=7, required=False)
