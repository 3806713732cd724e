# payables/services/status_service.py

"""
Admin status override.

Status is never written directly; the request is turned into payment rows
so that paid = SUM(payments) keeps holding:

- paid:    insert a settlement payment for the outstanding amount
- pending: remove every payment of the payable

Both are idempotent.
"""

from __future__ import annotations

import logging

from django.db import transaction
from django.utils import timezone

from core.exceptions import InvalidStatus, PayableMissing
from core.money import ZERO, money
from payables.models import PayableRecord, PaymentRecord
from payables.services.amounts import sum_payments, update_amounts

logger = logging.getLogger("payables")

SETTABLE_STATUSES = (PayableRecord.STATUS_PAID, PayableRecord.STATUS_PENDING)


@transaction.atomic
def set_payable_status(*, payable_id, status: str, user=None) -> PayableRecord:
    status = (status or "").strip().lower()
    if status not in SETTABLE_STATUSES:
        raise InvalidStatus()

    try:
        payable = PayableRecord.objects.select_for_update().get(id=payable_id)
    except PayableRecord.DoesNotExist as exc:
        raise PayableMissing() from exc

    if status == PayableRecord.STATUS_PAID:
        outstanding = money(payable.total_amount) - sum_payments(payable.id)
        if outstanding > ZERO:
            PaymentRecord.objects.create(
                payable=payable,
                payment_amount=outstanding,
                currency=payable.currency,
                payment_date=timezone.localdate(),
                payment_method=PaymentRecord.METHOD_SETTLEMENT,
                notes="Marked paid by administrator",
                created_by=user,
            )
    else:
        PaymentRecord.objects.filter(payable_id=payable.id).delete()

    payable.paid_amount = sum_payments(payable.id)
    update_amounts(payable)
    payable.save(update_fields=["paid_amount", "remaining_amount", "status", "updated_at"])

    logger.info(
        "Payable status set",
        extra={
            "payable_id": str(payable.id),
            "requested": status,
            "status": payable.status,
            "by": str(getattr(user, "pk", "")),
        },
    )
    return payable
