# purchases/api/urls.py

from django.urls import path

from purchases.api.views import (
    PurchaseBatchDeleteView,
    PurchaseCreateView,
    PurchaseDeleteView,
    PurchaseListView,
    PurchaseProductSuggestionsView,
    PurchaseSuggestPriceView,
    PurchaseUpdateView,
)

urlpatterns = [
    path("create", PurchaseCreateView.as_view(), name="purchase-create"),
    path("list", PurchaseListView.as_view(), name="purchase-list"),
    path("update", PurchaseUpdateView.as_view(), name="purchase-update"),
    path("delete", PurchaseDeleteView.as_view(), name="purchase-delete"),
    path("batch-delete", PurchaseBatchDeleteView.as_view(), name="purchase-batch-delete"),
    path("suggest-price", PurchaseSuggestPriceView.as_view(), name="purchase-suggest-price"),
    path(
        "product-suggestions",
        PurchaseProductSuggestionsView.as_view(),
        name="purchase-product-suggestions",
    ),
]
