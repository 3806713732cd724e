# purchases/models.py

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

from bases.models import Base
from core.money import DEFAULT_CURRENCY
from products.models import Product
from suppliers.models import Supplier

User = settings.AUTH_USER_MODEL


class PurchaseEntry(models.Model):
    """
    Procurement header.

    total_amount is the authoritative purchase amount: it is what the
    purchase contributes to its supplier payable. Items are owned by the
    header (cascade) and replaced wholesale on update.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    supplier = models.ForeignKey(
        Supplier,
        on_delete=models.PROTECT,
        related_name="purchases",
    )
    base = models.ForeignKey(
        Base,
        on_delete=models.PROTECT,
        related_name="purchases",
    )

    order_number = models.CharField(max_length=64, blank=True, default="")
    purchase_date = models.DateField(default=timezone.localdate)

    total_amount = models.DecimalField(
        max_digits=15, decimal_places=2, default=Decimal("0.00")
    )
    currency = models.CharField(max_length=3, default=DEFAULT_CURRENCY)

    receiver = models.CharField(max_length=100, blank=True, default="")
    notes = models.TextField(blank=True, default="")

    created_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="purchases_created",
    )
    creator_name = models.CharField(max_length=150, blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-purchase_date", "-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(total_amount__gte=Decimal("0.00")),
                name="purchase_entry_total_nonnegative",
            ),
        ]
        indexes = [
            models.Index(
                fields=["supplier", "base", "purchase_date"],
                name="pe_supplier_base_date_idx",
            ),
            models.Index(fields=["base", "purchase_date"], name="pe_base_date_idx"),
            models.Index(fields=["order_number"], name="pe_order_number_idx"),
        ]

    def clean(self):
        if self.total_amount is not None and self.total_amount < Decimal("0.00"):
            raise ValidationError({"total_amount": "total_amount cannot be negative"})

    def save(self, *args, **kwargs):
        self.order_number = (self.order_number or "").strip()
        self.currency = (self.currency or DEFAULT_CURRENCY).strip().upper()
        self.full_clean()
        return super().save(*args, **kwargs)

    def __str__(self):
        ref = self.order_number or str(self.id)[:8]
        return f"{ref} ({self.purchase_date})"


class PurchaseEntryItem(models.Model):
    """
    Purchase line.

    quantity is in the purchase unit; quantity_base = quantity x factor_to_base.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    purchase_entry = models.ForeignKey(
        PurchaseEntry,
        on_delete=models.CASCADE,
        related_name="items",
    )
    product = models.ForeignKey(
        Product,
        on_delete=models.PROTECT,
        related_name="purchase_items",
        null=True,
        blank=True,
    )

    product_name = models.CharField(max_length=191)
    unit = models.CharField(max_length=32, blank=True, default="")

    quantity = models.DecimalField(max_digits=18, decimal_places=4)
    unit_price = models.DecimalField(max_digits=15, decimal_places=2)
    amount = models.DecimalField(max_digits=15, decimal_places=2)
    quantity_base = models.DecimalField(max_digits=18, decimal_places=4)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gt=Decimal("0")),
                name="purchase_item_quantity_gt_zero",
            ),
            models.CheckConstraint(
                condition=models.Q(unit_price__gt=Decimal("0.00")),
                name="purchase_item_unit_price_gt_zero",
            ),
        ]
        indexes = [
            models.Index(fields=["product_name"], name="pei_product_name_idx"),
        ]

    def __str__(self):
        return f"{self.product_name} x {self.quantity} {self.unit}".strip()
