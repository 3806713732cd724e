# products/models/product.py

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models

from suppliers.models import Supplier


class Product(models.Model):
    """
    Procured product (identity for unit conversions and price history).

    - name is unique: purchase lines without product_id upsert by name
    - base_unit is the unit every quantity is normalised to (bottle, kg, ...)
    - supplier is optional; in strict mode a purchase may only use products
      whose supplier matches the purchase supplier
    """

    STATUS_ACTIVE = "active"
    STATUS_INACTIVE = "inactive"

    STATUSES = [
        (STATUS_ACTIVE, "Active"),
        (STATUS_INACTIVE, "Inactive"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=191, unique=True)
    unit = models.CharField(max_length=32, blank=True, default="")
    base_unit = models.CharField(max_length=32, blank=True, default="")

    # reference purchase price, last fallback of the price chain
    unit_price = models.DecimalField(
        max_digits=15, decimal_places=2, default=Decimal("0.00")
    )

    supplier = models.ForeignKey(
        Supplier,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="products",
    )

    status = models.CharField(max_length=20, choices=STATUSES, default=STATUS_ACTIVE)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        indexes = [
            models.Index(fields=["supplier", "name"], name="product_supplier_name_idx"),
        ]

    def clean(self):
        if not (self.name or "").strip():
            raise ValidationError({"name": "name is required"})
        if self.unit_price is not None and Decimal(self.unit_price) < Decimal("0.00"):
            raise ValidationError({"unit_price": "unit_price cannot be negative"})

    def save(self, *args, **kwargs):
        self.name = (self.name or "").strip()
        self.full_clean()
        return super().save(*args, **kwargs)

    def __str__(self):
        return self.name
