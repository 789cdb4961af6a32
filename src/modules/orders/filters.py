import django_filters

from modules.orders.models import Order


class OrderFilter(django_filters.FilterSet):
    status = django_filters.CharFilter(field_name="status", lookup_expr="iexact")
    payment_status = django_filters.CharFilter(field_name="payment_status")
    delivery_method = django_filters.CharFilter(field_name="delivery_method")
    needs_design = django_filters.BooleanFilter(field_name="needs_design")
    start_date = django_filters.DateFilter(field_name="created_at", lookup_expr="gte")
    end_date = django_filters.DateFilter(field_name="created_at", lookup_expr="lte")
    delivery_before = django_filters.DateFilter(
        field_name="delivery_date", lookup_expr="lte"
    )
    min_total = django_filters.NumberFilter(
        field_name="total_price", lookup_expr="gte"
    )
    max_total = django_filters.NumberFilter(
        field_name="total_price", lookup_expr="lte"
    )

    class Meta:
        model = Order
        fields = [
            "status",
            "payment_status",
            "delivery_method",
            "needs_design",
            "start_date",
            "end_date",
            "delivery_before",
            "min_total",
            "max_total",
        ]
