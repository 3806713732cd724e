"""
PATH: products/models/__init__.py

Products models export surface.
"""

from .pricing import SupplierProductPrice
from .product import Product
from .units import ProductPurchaseParam, ProductUnitSpec

__all__ = [
    "Product",
    "ProductUnitSpec",
    "ProductPurchaseParam",
    "SupplierProductPrice",
]
