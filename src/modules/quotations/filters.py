import django_filters

from modules.quotations.constants import QuotationStatus
from modules.quotations.models import Quotation


class QuotationFilter(django_filters.FilterSet):
    status = django_filters.ChoiceFilter(choices=QuotationStatus.choices)
    client = django_filters.UUIDFilter(field_name="client_id")
    valid_from = django_filters.DateFilter(field_name="valid_until", lookup_expr="gte")

    class Meta:
        model = Quotation
        fields = ["status", "client", "valid_from"]
