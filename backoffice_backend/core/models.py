# core/models.py

import uuid

from django.db import models


class IdempotencyKey(models.Model):
    """
    Client-supplied Idempotency-Key mapped to the resource it created.

    Inserted as the last statement of a successful create transaction and
    never updated. The unique index on `key` is what serialises concurrent
    replays of the same request.
    """

    RESOURCE_PURCHASE = "purchase"
    RESOURCE_PAYMENT = "payment"

    RESOURCES = [
        (RESOURCE_PURCHASE, "Purchase"),
        (RESOURCE_PAYMENT, "Payment"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    key = models.CharField(max_length=128, unique=True)
    resource = models.CharField(max_length=32, choices=RESOURCES)
    ref_id = models.CharField(max_length=64)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["resource", "key"], name="idem_resource_key_idx"),
        ]

    def __str__(self):
        return f"{self.resource}:{self.key} -> {self.ref_id}"
