# payables/api/filters.py

import django_filters

from payables.models import PayableRecord, PaymentRecord


class PayableRecordFilter(django_filters.FilterSet):
    supplier = django_filters.CharFilter(field_name="supplier__name", lookup_expr="icontains")
    supplier_id = django_filters.UUIDFilter(field_name="supplier_id")
    base = django_filters.CharFilter(field_name="base__name", lookup_expr="exact")
    base_id = django_filters.UUIDFilter(field_name="base_id")
    status = django_filters.ChoiceFilter(choices=PayableRecord.STATUSES)
    settlement_type = django_filters.CharFilter(field_name="settlement_type")
    currency = django_filters.CharFilter(field_name="currency", lookup_expr="iexact")
    start_date = django_filters.DateFilter(field_name="created_at", lookup_expr="date__gte")
    end_date = django_filters.DateFilter(field_name="created_at", lookup_expr="date__lte")

    class Meta:
        model = PayableRecord
        fields = [
            "supplier",
            "supplier_id",
            "base",
            "base_id",
            "status",
            "settlement_type",
            "currency",
            "start_date",
            "end_date",
        ]


class PaymentRecordFilter(django_filters.FilterSet):
    payable_id = django_filters.UUIDFilter(field_name="payable_id")
    start_date = django_filters.DateFilter(field_name="payment_date", lookup_expr="gte")
    end_date = django_filters.DateFilter(field_name="payment_date", lookup_expr="lte")
    payment_method = django_filters.CharFilter(field_name="payment_method")

    class Meta:
        model = PaymentRecord
        fields = ["payable_id", "start_date", "end_date", "payment_method"]
