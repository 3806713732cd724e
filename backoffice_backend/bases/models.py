# bases/models.py

import uuid

from django.core.exceptions import ValidationError
from django.db import models

from core.money import DEFAULT_CURRENCY


class Base(models.Model):
    """
    A business site / location.

    - Owns purchases and expenses
    - name and code are both unique
    - currency is the default purchase currency for this base
    """

    STATUS_ACTIVE = "active"
    STATUS_INACTIVE = "inactive"

    STATUSES = [
        (STATUS_ACTIVE, "Active"),
        (STATUS_INACTIVE, "Inactive"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=100, unique=True)
    code = models.CharField(max_length=50, unique=True)
    location = models.CharField(max_length=255, blank=True, default="")
    description = models.TextField(blank=True, default="")

    currency = models.CharField(max_length=3, default=DEFAULT_CURRENCY)
    status = models.CharField(max_length=20, choices=STATUSES, default=STATUS_ACTIVE)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]

    def clean(self):
        if not (self.name or "").strip():
            raise ValidationError({"name": "name is required"})
        if not (self.code or "").strip():
            raise ValidationError({"code": "code is required"})

    def save(self, *args, **kwargs):
        self.name = (self.name or "").strip()
        self.code = (self.code or "").strip().upper()
        self.currency = (self.currency or DEFAULT_CURRENCY).strip().upper()
        self.full_clean()
        return super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.name} ({self.code})"
