# analytics/models.py

"""
Rollup caches and display-time FX.

mv_supplier_monthly_spend / mv_base_expense_month are rebuilt per month by
analytics.services.rollups; nothing else writes them and correctness never
depends on them (partial-month queries read the base tables).
"""

import uuid
from decimal import Decimal

from django.db import models
from django.utils import timezone

from bases.models import Base
from core.money import DEFAULT_CURRENCY
from suppliers.models import Supplier


class ExchangeRate(models.Model):
    """1 unit of `currency` = `rate_to_cny` CNY. Display-time conversion only."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    currency = models.CharField(max_length=3, unique=True)
    rate_to_cny = models.DecimalField(max_digits=18, decimal_places=6)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["currency"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(rate_to_cny__gt=Decimal("0")),
                name="exchange_rate_gt_zero",
            ),
        ]

    def save(self, *args, **kwargs):
        self.currency = (self.currency or "").strip().upper()
        return super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.currency} -> CNY {self.rate_to_cny}"


class SupplierMonthlySpend(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    supplier = models.ForeignKey(
        Supplier,
        on_delete=models.CASCADE,
        related_name="monthly_spend",
    )
    base = models.ForeignKey(
        Base,
        on_delete=models.CASCADE,
        related_name="supplier_monthly_spend",
    )
    month = models.CharField(max_length=7)
    currency = models.CharField(max_length=3, default=DEFAULT_CURRENCY)

    total_purchase = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal("0.00"))
    purchase_count = models.PositiveIntegerField(default=0)
    total_paid = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal("0.00"))
    remaining = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal("0.00"))

    generated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "mv_supplier_monthly_spend"
        ordering = ["month", "supplier_id"]
        constraints = [
            models.UniqueConstraint(
                fields=["supplier", "base", "month", "currency"],
                name="uniq_mv_supplier_month",
            ),
        ]
        indexes = [
            models.Index(fields=["month"], name="mv_sms_month_idx"),
        ]

    def __str__(self):
        return f"{self.month} {self.supplier_id}/{self.base_id}: {self.total_purchase} {self.currency}"


class BaseExpenseMonth(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    base = models.ForeignKey(
        Base,
        on_delete=models.CASCADE,
        related_name="expense_months",
    )
    month = models.CharField(max_length=7)
    currency = models.CharField(max_length=3, default=DEFAULT_CURRENCY)
    total_amount = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal("0.00"))

    generated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "mv_base_expense_month"
        ordering = ["month", "base_id"]
        constraints = [
            models.UniqueConstraint(
                fields=["base", "month", "currency"],
                name="uniq_mv_base_expense_month",
            ),
        ]
        indexes = [
            models.Index(fields=["month"], name="mv_bem_month_idx"),
        ]

    def __str__(self):
        return f"{self.month} {self.base_id}: {self.total_amount} {self.currency}"
