# expenses/models.py

import uuid
from decimal import Decimal

from django.conf import settings
from django.db import models
from django.utils import timezone

from bases.models import Base
from core.money import DEFAULT_CURRENCY

User = settings.AUTH_USER_MODEL


class ExpenseCategory(models.Model):
    STATUS_ACTIVE = "active"
    STATUS_INACTIVE = "inactive"

    STATUSES = [
        (STATUS_ACTIVE, "Active"),
        (STATUS_INACTIVE, "Inactive"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=50, unique=True)
    status = models.CharField(max_length=20, choices=STATUSES, default=STATUS_ACTIVE)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        verbose_name_plural = "expense categories"

    def save(self, *args, **kwargs):
        self.name = (self.name or "").strip()
        self.full_clean()
        return super().save(*args, **kwargs)

    def __str__(self):
        return self.name


class BaseExpense(models.Model):
    """Operating expense of a base; input of the monthly base-expense rollup."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    base = models.ForeignKey(
        Base,
        on_delete=models.PROTECT,
        related_name="expenses",
    )
    category = models.ForeignKey(
        ExpenseCategory,
        on_delete=models.PROTECT,
        related_name="expenses",
    )

    date = models.DateField(default=timezone.localdate)
    amount = models.DecimalField(max_digits=15, decimal_places=2)
    currency = models.CharField(max_length=3, default=DEFAULT_CURRENCY)
    detail = models.TextField(blank=True, default="")

    created_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="expenses_created",
    )
    creator_name = models.CharField(max_length=150, blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-date", "-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(amount__gt=Decimal("0.00")),
                name="base_expense_amount_gt_zero",
            ),
        ]
        indexes = [
            models.Index(fields=["base", "date"], name="expense_base_date_idx"),
            models.Index(fields=["date"], name="expense_date_idx"),
        ]

    def __str__(self):
        return f"{self.base_id} {self.date} {self.amount} {self.currency}"
