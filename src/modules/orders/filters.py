import django_filters
from rest_framework.exceptions import ValidationError

from modules.orders.constants import normalize_status
from modules.orders.exceptions import InvalidStatus
from modules.orders.models import Order


class OrderFilter(django_filters.FilterSet):
    """Query-string filters for order listings.

    ``status`` accepts the same tokens as status updates (any case,
    ``EN_PROCESO``).  Dates compare against the local calendar date of
    ``created_at``.
    """

    status = django_filters.CharFilter(method="filter_status")
    user = django_filters.UUIDFilter(field_name="user_id")
    courier = django_filters.UUIDFilter(field_name="courier_id")
    start_date = django_filters.DateFilter("created_at", lookup_expr="date__gte")
    end_date = django_filters.DateFilter("created_at", lookup_expr="date__lte")
    min_total = django_filters.NumberFilter("total_amount", lookup_expr="gte")
    max_total = django_filters.NumberFilter("total_amount", lookup_expr="lte")

    class Meta:
        model = Order
        fields = ("status",)

    def filter_status(self, queryset, name, value):
        try:
            return queryset.filter(status=normalize_status(value))
        except InvalidStatus as exc:
            raise ValidationError({"status": [str(exc)]}) from exc
