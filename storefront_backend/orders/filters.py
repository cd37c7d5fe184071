# orders/filters.py

import django_filters

from orders.models import Order


class OrderFilter(django_filters.FilterSet):
    """
    Admin order list filtering.

    ?query= matches the customer's name (case-insensitive contains).
    """

    query = django_filters.CharFilter(field_name="user__name", lookup_expr="icontains")
    is_paid = django_filters.BooleanFilter()
    is_delivered = django_filters.BooleanFilter()

    class Meta:
        model = Order
        fields = ["query", "is_paid", "is_delivered"]
