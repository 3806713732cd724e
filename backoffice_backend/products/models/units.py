# products/models/units.py

"""
UNIT CONVERSION MODELS

ProductUnitSpec:       1 `unit` = `factor_to_base` base units (box = 24 bottles)
ProductPurchaseParam:  the purchase-side override, one per product, carrying
                       the unit purchases are usually made in and its price
"""

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models

from .product import Product


class ProductUnitSpec(models.Model):
    KIND_PURCHASE = "purchase"
    KIND_USAGE = "usage"
    KIND_BOTH = "both"

    KINDS = [
        (KIND_PURCHASE, "Purchase"),
        (KIND_USAGE, "Usage"),
        (KIND_BOTH, "Both"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    product = models.ForeignKey(
        Product,
        on_delete=models.CASCADE,
        related_name="unit_specs",
    )
    unit = models.CharField(max_length=32)
    factor_to_base = models.DecimalField(max_digits=18, decimal_places=6)
    kind = models.CharField(max_length=16, choices=KINDS, default=KIND_BOTH)
    is_default = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["product", "unit"]
        constraints = [
            models.UniqueConstraint(
                fields=["product", "unit"],
                name="uniq_product_unit_spec",
            ),
            models.CheckConstraint(
                condition=models.Q(factor_to_base__gt=Decimal("0")),
                name="unit_spec_factor_gt_zero",
            ),
        ]

    def clean(self):
        if not (self.unit or "").strip():
            raise ValidationError({"unit": "unit is required"})
        if self.factor_to_base is None or Decimal(self.factor_to_base) <= 0:
            raise ValidationError({"factor_to_base": "factor_to_base must be > 0"})

    def save(self, *args, **kwargs):
        self.unit = (self.unit or "").strip()
        self.full_clean()
        return super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.product.name}: 1 {self.unit} = {self.factor_to_base}"


class ProductPurchaseParam(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    product = models.OneToOneField(
        Product,
        on_delete=models.CASCADE,
        related_name="purchase_param",
    )
    unit = models.CharField(max_length=32)
    factor_to_base = models.DecimalField(max_digits=18, decimal_places=6)
    purchase_price = models.DecimalField(
        max_digits=15, decimal_places=2, default=Decimal("0.00")
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.CheckConstraint(
                condition=models.Q(factor_to_base__gt=Decimal("0")),
                name="purchase_param_factor_gt_zero",
            ),
            models.CheckConstraint(
                condition=models.Q(purchase_price__gte=Decimal("0.00")),
                name="purchase_param_price_nonnegative",
            ),
        ]

    def clean(self):
        if not (self.unit or "").strip():
            raise ValidationError({"unit": "unit is required"})
        if self.factor_to_base is None or Decimal(self.factor_to_base) <= 0:
            raise ValidationError({"factor_to_base": "factor_to_base must be > 0"})

    def save(self, *args, **kwargs):
        self.unit = (self.unit or "").strip()
        self.full_clean()
        return super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.product.name}: {self.unit} x{self.factor_to_base} @ {self.purchase_price}"
