# purchases/api/filters.py

import django_filters

from purchases.models import PurchaseEntry


class PurchaseEntryFilter(django_filters.FilterSet):
    base_id = django_filters.UUIDFilter(field_name="base_id")
    supplier_id = django_filters.UUIDFilter(field_name="supplier_id")
    order_number = django_filters.CharFilter(field_name="order_number", lookup_expr="icontains")
    start_date = django_filters.DateFilter(field_name="purchase_date", lookup_expr="gte")
    end_date = django_filters.DateFilter(field_name="purchase_date", lookup_expr="lte")

    class Meta:
        model = PurchaseEntry
        fields = ["base_id", "supplier_id", "order_number", "start_date", "end_date"]
