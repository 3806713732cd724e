# products/views/__init__.py

from .product import (
    ProductListView,
    ProductPurchaseParamUpsertView,
    ProductPurchaseParamView,
    ProductUnitSpecListView,
    ProductUnitSpecUpsertView,
    SupplierPriceCreateView,
)

__all__ = [
    "ProductListView",
    "ProductUnitSpecListView",
    "ProductUnitSpecUpsertView",
    "ProductPurchaseParamView",
    "ProductPurchaseParamUpsertView",
    "SupplierPriceCreateView",
]
