import django_filters

from modules.orders.models import Order


class OrderFilter(django_filters.FilterSet):
    size = django_filters.CharFilter(field_name="size", lookup_expr="iexact")
    base = django_filters.CharFilter(field_name="base", lookup_expr="iexact")
    start_date = django_filters.DateFilter(
        field_name="created_at__date", lookup_expr="gte"
    )
    end_date = django_filters.DateFilter(
        field_name="created_at__date", lookup_expr="lte"
    )
    min_price = django_filters.NumberFilter(field_name="price", lookup_expr="gte")
    max_price = django_filters.NumberFilter(field_name="price", lookup_expr="lte")

    class Meta:
        model = Order
        fields = [
            "size",
            "base",
            "start_date",
            "end_date",
            "min_price",
            "max_price",
        ]
