# payables/api/urls.py

from django.urls import path

from payables.api.views import (
    PayableDetailView,
    PayableListView,
    PayableOverdueView,
    PayableSummaryView,
    PayableUpdateStatusView,
    PaymentCreateView,
    PaymentDeleteView,
    PaymentListView,
)

payable_urlpatterns = [
    path("list", PayableListView.as_view(), name="payable-list"),
    path("detail", PayableDetailView.as_view(), name="payable-detail"),
    path("update-status", PayableUpdateStatusView.as_view(), name="payable-update-status"),
    path("summary", PayableSummaryView.as_view(), name="payable-summary"),
    path("overdue", PayableOverdueView.as_view(), name="payable-overdue"),
]

payment_urlpatterns = [
    path("create", PaymentCreateView.as_view(), name="payment-create"),
    path("list", PaymentListView.as_view(), name="payment-list"),
    path("delete", PaymentDeleteView.as_view(), name="payment-delete"),
]
