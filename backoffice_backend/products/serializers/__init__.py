# products/serializers/__init__.py

from .product import (
    ProductPurchaseParamSerializer,
    ProductSerializer,
    ProductUnitSpecSerializer,
    SupplierProductPriceSerializer,
)

__all__ = [
    "ProductSerializer",
    "ProductUnitSpecSerializer",
    "ProductPurchaseParamSerializer",
    "SupplierProductPriceSerializer",
]
