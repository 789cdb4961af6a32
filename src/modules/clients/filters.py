import django_filters

from modules.clients.models import Client


class ClientFilter(django_filters.FilterSet):
    city = django_filters.CharFilter(field_name="city", lookup_expr="icontains")
    email = django_filters.CharFilter(field_name="email", lookup_expr="iexact")
    pricing_tier = django_filters.UUIDFilter(field_name="default_pricing_tier_id")

    class Meta:
        model = Client
        fields = ["city", "email", "pricing_tier"]
