# products/models/pricing.py

import uuid
from decimal import Decimal

from django.db import models

from core.money import DEFAULT_CURRENCY
from suppliers.models import Supplier

from .product import Product


class SupplierProductPrice(models.Model):
    """
    Supplier price history for a product.

    The price effective on a purchase date is the row with the latest
    effective_from that is not after that date.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    supplier = models.ForeignKey(
        Supplier,
        on_delete=models.CASCADE,
        related_name="product_prices",
    )
    product = models.ForeignKey(
        Product,
        on_delete=models.CASCADE,
        related_name="supplier_prices",
    )

    price = models.DecimalField(max_digits=15, decimal_places=2)
    currency = models.CharField(max_length=3, default=DEFAULT_CURRENCY)
    effective_from = models.DateField()

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-effective_from", "-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["supplier", "product", "effective_from"],
                name="uniq_supplier_product_price_from",
            ),
            models.CheckConstraint(
                condition=models.Q(price__gt=Decimal("0.00")),
                name="supplier_price_gt_zero",
            ),
        ]

    def __str__(self):
        return f"{self.supplier_id}/{self.product_id} {self.price} from {self.effective_from}"
