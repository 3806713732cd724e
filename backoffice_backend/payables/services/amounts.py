# payables/services/amounts.py

"""
Single point of truth for payable status derivation.

    remaining = total - paid
    remaining <= EPSILON  -> paid,    remaining = 0
    paid > 0              -> partial
    otherwise             -> pending

Callers change total_amount / paid_amount, then call update_amounts().
paid_amount itself is always re-summed from PaymentRecord rows.
"""

from __future__ import annotations

from decimal import Decimal

from django.db.models import Sum

from core.money import EPSILON, ZERO, money
from payables.models import PayableRecord, PaymentRecord


def derive_amounts(total, paid) -> tuple[Decimal, str]:
    total = money(total)
    paid = money(paid)
    remaining = total - paid

    if remaining <= EPSILON:
        return ZERO, PayableRecord.STATUS_PAID
    if paid > ZERO:
        return remaining, PayableRecord.STATUS_PARTIAL
    return remaining, PayableRecord.STATUS_PENDING


def update_amounts(payable: PayableRecord) -> PayableRecord:
    payable.total_amount = money(payable.total_amount)
    payable.paid_amount = money(payable.paid_amount)
    payable.remaining_amount, payable.status = derive_amounts(
        payable.total_amount, payable.paid_amount
    )
    return payable


def sum_payments(payable_id) -> Decimal:
    agg = PaymentRecord.objects.filter(payable_id=payable_id).aggregate(s=Sum("payment_amount"))
    return money(agg["s"] or ZERO)
