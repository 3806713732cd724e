# analytics/urls.py

from django.urls import path

from analytics.api.views import (
    BaseExpenseView,
    ExchangeRateListView,
    RefreshMonthlyRangeView,
    RefreshMonthlyView,
    SupplierSpendView,
)

admin_urlpatterns = [
    path("refresh-monthly", RefreshMonthlyView.as_view(), name="refresh-monthly"),
    path("refresh-monthly-range", RefreshMonthlyRangeView.as_view(), name="refresh-monthly-range"),
]

analytics_urlpatterns = [
    path("supplier-spend", SupplierSpendView.as_view(), name="analytics-supplier-spend"),
    path("base-expense", BaseExpenseView.as_view(), name="analytics-base-expense"),
]

rate_urlpatterns = [
    path("list", ExchangeRateListView.as_view(), name="rate-list"),
]
