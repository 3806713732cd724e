# payables/models.py

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

from bases.models import Base
from core.money import DEFAULT_CURRENCY
from purchases.models import PurchaseEntry
from suppliers.models import Supplier

User = settings.AUTH_USER_MODEL


class PayableRecord(models.Model):
    """
    Supplier payable (aggregate bucket).

    Two modes:
    - aggregate: purchase_entry is NULL; total = sum of its PayableLinks.
      One open record per (supplier, base, settlement_type, period_month, period_half).
    - immediate: purchase_entry is set; total = that purchase's total; no links.

    paid / remaining / status are derived (payables.services.amounts) and
    never written directly by callers.
    """

    STATUS_PENDING = "pending"
    STATUS_PARTIAL = "partial"
    STATUS_PAID = "paid"

    STATUSES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_PARTIAL, "Partial"),
        (STATUS_PAID, "Paid"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    purchase_entry = models.OneToOneField(
        PurchaseEntry,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="immediate_payable",
    )

    supplier = models.ForeignKey(
        Supplier,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="payables",
    )
    base = models.ForeignKey(
        Base,
        on_delete=models.PROTECT,
        related_name="payables",
    )

    settlement_type = models.CharField(max_length=20, default=Supplier.SETTLEMENT_FLEXIBLE)
    period_month = models.CharField(max_length=7, blank=True, default="")
    period_half = models.CharField(max_length=8, blank=True, default="")

    total_amount = models.DecimalField(
        max_digits=15, decimal_places=2, default=Decimal("0.00")
    )
    paid_amount = models.DecimalField(
        max_digits=15, decimal_places=2, default=Decimal("0.00")
    )
    remaining_amount = models.DecimalField(
        max_digits=15, decimal_places=2, default=Decimal("0.00")
    )

    currency = models.CharField(max_length=3, default=DEFAULT_CURRENCY)
    status = models.CharField(max_length=10, choices=STATUSES, default=STATUS_PENDING)
    due_date = models.DateTimeField(null=True, blank=True)

    created_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="payables_created",
    )

    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(total_amount__gte=Decimal("0.00")),
                name="payable_total_nonnegative",
            ),
            models.CheckConstraint(
                condition=models.Q(paid_amount__gte=Decimal("0.00")),
                name="payable_paid_nonnegative",
            ),
            models.CheckConstraint(
                condition=models.Q(remaining_amount__gte=Decimal("0.00")),
                name="payable_remaining_nonnegative",
            ),
        ]
        indexes = [
            models.Index(
                fields=["supplier", "base", "status"],
                name="payable_sup_base_status_idx",
            ),
            models.Index(
                fields=["supplier", "base", "settlement_type", "period_month", "period_half"],
                name="payable_bucket_idx",
            ),
            models.Index(fields=["due_date"], name="payable_due_date_idx"),
            models.Index(fields=["created_at"], name="payable_created_at_idx"),
        ]

    @property
    def is_immediate(self) -> bool:
        return self.purchase_entry_id is not None

    @property
    def period_label(self) -> str:
        return self.period_month or self.period_half or ""

    def clean(self):
        if self.status not in {self.STATUS_PENDING, self.STATUS_PARTIAL, self.STATUS_PAID}:
            raise ValidationError({"status": "Invalid status"})

    def __str__(self):
        who = getattr(self.supplier, "name", "-")
        label = self.period_label or "immediate"
        return f"{who} / {label} [{self.status}] {self.remaining_amount} {self.currency}"


class PayableLink(models.Model):
    """
    Contribution of one purchase to one aggregate payable.

    A purchase is linked to at most one payable (unique purchase_entry).
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    payable = models.ForeignKey(
        PayableRecord,
        on_delete=models.CASCADE,
        related_name="links",
    )
    purchase_entry = models.ForeignKey(
        PurchaseEntry,
        on_delete=models.PROTECT,
        related_name="payable_links",
    )

    amount = models.DecimalField(max_digits=15, decimal_places=2)
    currency = models.CharField(max_length=3, default=DEFAULT_CURRENCY)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["payable", "purchase_entry"],
                name="uniq_payable_link_pair",
            ),
            models.UniqueConstraint(
                fields=["purchase_entry"],
                name="uniq_payable_link_purchase",
            ),
        ]

    def __str__(self):
        return f"{self.purchase_entry_id} -> {self.payable_id}: {self.amount} {self.currency}"


class PaymentRecord(models.Model):
    """
    Partial (or full) settlement of a payable.

    Currency is inherited from the payable at insert time.
    """

    METHOD_BANK_TRANSFER = "bank_transfer"
    METHOD_CASH = "cash"
    METHOD_SETTLEMENT = "settlement"  # written by an admin "mark paid"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    payable = models.ForeignKey(
        PayableRecord,
        on_delete=models.CASCADE,
        related_name="payments",
    )

    payment_amount = models.DecimalField(max_digits=15, decimal_places=2)
    currency = models.CharField(max_length=3, default=DEFAULT_CURRENCY)
    payment_date = models.DateField(default=timezone.localdate)
    payment_method = models.CharField(max_length=32, default=METHOD_BANK_TRANSFER)
    reference_number = models.CharField(max_length=100, blank=True, default="")
    notes = models.TextField(blank=True, default="")

    created_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="payments_created",
    )

    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["-payment_date", "-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(payment_amount__gt=Decimal("0.00")),
                name="payment_amount_gt_zero",
            ),
        ]
        indexes = [
            models.Index(fields=["payable", "payment_date"], name="payment_payable_date_idx"),
            models.Index(fields=["created_at"], name="payment_created_at_idx"),
            models.Index(fields=["payment_method"], name="payment_method_idx"),
        ]

    def __str__(self):
        return f"{self.payment_amount} {self.currency} on {self.payment_date}"
