# expenses/api/filters.py

import django_filters

from expenses.models import BaseExpense


class BaseExpenseFilter(django_filters.FilterSet):
    base_id = django_filters.UUIDFilter(field_name="base_id")
    category_id = django_filters.UUIDFilter(field_name="category_id")
    start_date = django_filters.DateFilter(field_name="date", lookup_expr="gte")
    end_date = django_filters.DateFilter(field_name="date", lookup_expr="lte")

    class Meta:
        model = BaseExpense
        fields = ["base_id", "category_id", "start_date", "end_date"]
