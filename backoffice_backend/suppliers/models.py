# suppliers/models.py

import uuid

from django.core.exceptions import ValidationError
from django.db import models


class Supplier(models.Model):
    """
    Supplier master.

    settlement_type drives how purchases are bucketed into payables:
    - immediate: one payable per purchase, due 30 days after the purchase
    - monthly:   one payable per calendar month, due on settlement_day of the next month
    - flexible:  one payable per half-year (H1 / H2), no due date
    """

    SETTLEMENT_IMMEDIATE = "immediate"
    SETTLEMENT_MONTHLY = "monthly"
    SETTLEMENT_FLEXIBLE = "flexible"

    SETTLEMENT_TYPES = [
        (SETTLEMENT_IMMEDIATE, "Immediate"),
        (SETTLEMENT_MONTHLY, "Monthly"),
        (SETTLEMENT_FLEXIBLE, "Flexible"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=191, unique=True)
    contact_person = models.CharField(max_length=100, blank=True, default="")
    phone = models.CharField(max_length=50, blank=True, default="")
    email = models.EmailField(blank=True, default="")
    address = models.TextField(blank=True, default="")

    settlement_type = models.CharField(
        max_length=20, choices=SETTLEMENT_TYPES, default=SETTLEMENT_FLEXIBLE
    )
    settlement_day = models.PositiveSmallIntegerField(null=True, blank=True)

    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(settlement_day__isnull=True)
                | models.Q(settlement_day__gte=1, settlement_day__lte=31),
                name="supplier_settlement_day_range",
            ),
        ]

    def clean(self):
        if not (self.name or "").strip():
            raise ValidationError({"name": "name is required"})
        if self.settlement_day is not None and not (1 <= self.settlement_day <= 31):
            raise ValidationError({"settlement_day": "settlement_day must be 1-31"})

    def save(self, *args, **kwargs):
        self.name = (self.name or "").strip()
        self.settlement_type = (self.settlement_type or "").strip() or self.SETTLEMENT_FLEXIBLE
        self.full_clean()
        return super().save(*args, **kwargs)

    def __str__(self):
        return self.name
