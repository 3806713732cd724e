# products/urls.py

"""
PRODUCTS URLS

Mounted under /api/product/
"""

from django.urls import path

from products.views import (
    ProductListView,
    ProductPurchaseParamUpsertView,
    ProductPurchaseParamView,
    ProductUnitSpecListView,
    ProductUnitSpecUpsertView,
    SupplierPriceCreateView,
)

urlpatterns = [
    path("list", ProductListView.as_view(), name="product-list"),
    path("unit-specs", ProductUnitSpecListView.as_view(), name="product-unit-specs"),
    path("unit-specs/upsert", ProductUnitSpecUpsertView.as_view(), name="product-unit-specs-upsert"),
    path("purchase-param", ProductPurchaseParamView.as_view(), name="product-purchase-param"),
    path(
        "purchase-param/upsert",
        ProductPurchaseParamUpsertView.as_view(),
        name="product-purchase-param-upsert",
    ),
    path("supplier-price/create", SupplierPriceCreateView.as_view(), name="supplier-price-create"),
]
