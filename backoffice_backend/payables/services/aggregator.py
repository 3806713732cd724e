# payables/services/aggregator.py

"""
======================================================
PATH: payables/services/aggregator.py
======================================================
PAYABLE AGGREGATOR

Turns a saved PurchaseEntry into payable state.

Immediate suppliers:
- one PayableRecord pinned to the purchase (purchase_entry set, no links)

Monthly / flexible suppliers:
1) Lock every PayableRecord of (supplier, base)       <- bucket range lock
2) Find the open record of the bucket (oldest wins)
3) Reuse it (currency must match) or create it with zero totals
4) Link the purchase (unique on purchase_entry)
5) total = SUM(link.amount); paid = SUM(payment); update_amounts()

The range lock serialises find-or-create for one (supplier, base); the link
unique index catches double linking. All functions expect to run inside the
caller's transaction.atomic() block.
"""

from __future__ import annotations

import logging

from django.db import IntegrityError, transaction
from django.db.models import Sum

from core.exceptions import CurrencyMismatch, SettledPurchaseLocked
from core.money import ZERO, money
from payables.models import PayableLink, PayableRecord, PaymentRecord
from payables.services.amounts import sum_payments, update_amounts
from payables.services.periods import PeriodBucket, classify_for_supplier

logger = logging.getLogger("payables")


# ---------------------------------------------------------------------
# Locks / lookups
# ---------------------------------------------------------------------
def lock_bucket_range(*, supplier_id, base_id) -> list:
    """
    FOR UPDATE over every payable row of (supplier, base).

    Returns the locked ids (evaluating the queryset is what takes the lock).
    """
    rows = (
        PayableRecord.objects.select_for_update()
        .filter(supplier_id=supplier_id, base_id=base_id)
        .order_by("id")
        .only("id")
    )
    return [r.id for r in rows]


def lock_payable(payable_id) -> PayableRecord:
    return PayableRecord.objects.select_for_update().get(id=payable_id)


def find_open_payable(*, supplier_id, base_id, bucket: PeriodBucket) -> PayableRecord | None:
    return (
        PayableRecord.objects.filter(
            supplier_id=supplier_id,
            base_id=base_id,
            purchase_entry__isnull=True,
            settlement_type=bucket.settlement_type,
            period_month=bucket.period_month,
            period_half=bucket.period_half,
        )
        .exclude(status=PayableRecord.STATUS_PAID)
        .order_by("created_at", "id")
        .first()
    )


def same_bucket(payable: PayableRecord, *, purchase, bucket: PeriodBucket) -> bool:
    return (
        payable.purchase_entry_id is None
        and not bucket.is_immediate
        and str(payable.supplier_id) == str(purchase.supplier_id)
        and str(payable.base_id) == str(purchase.base_id)
        and (payable.settlement_type, payable.period_month, payable.period_half) == bucket.key
        and payable.currency == purchase.currency
    )


# ---------------------------------------------------------------------
# Recompute
# ---------------------------------------------------------------------
def recompute_payable(payable: PayableRecord) -> PayableRecord:
    """
    Re-derive total / paid / remaining / status from the rows.

    Aggregate: total = SUM(links). Immediate: total = purchase total.
    """
    if payable.purchase_entry_id is not None:
        total = payable.purchase_entry.total_amount
    else:
        agg = PayableLink.objects.filter(payable_id=payable.id).aggregate(s=Sum("amount"))
        total = agg["s"] or ZERO

    payable.total_amount = money(total)
    payable.paid_amount = sum_payments(payable.id)
    update_amounts(payable)
    payable.save(
        update_fields=["total_amount", "paid_amount", "remaining_amount", "status", "updated_at"]
    )
    return payable


# ---------------------------------------------------------------------
# Link
# ---------------------------------------------------------------------
def _create_immediate_payable(*, purchase, bucket: PeriodBucket, user=None) -> PayableRecord:
    payable = PayableRecord(
        purchase_entry=purchase,
        supplier_id=purchase.supplier_id,
        base_id=purchase.base_id,
        settlement_type=bucket.settlement_type,
        period_month="",
        period_half="",
        total_amount=money(purchase.total_amount),
        paid_amount=ZERO,
        currency=purchase.currency,
        due_date=bucket.due_date,
        created_by=user,
    )
    update_amounts(payable)
    payable.save()

    logger.info(
        "Immediate payable created",
        extra={
            "payable_id": str(payable.id),
            "purchase_id": str(purchase.id),
            "total": str(payable.total_amount),
        },
    )
    return payable


def _attach_link(*, payable: PayableRecord, purchase) -> PayableRecord:
    amount = money(purchase.total_amount)
    try:
        with transaction.atomic():
            PayableLink.objects.create(
                payable=payable,
                purchase_entry=purchase,
                amount=amount,
                currency=purchase.currency,
            )
    except IntegrityError:
        existing = PayableLink.objects.select_for_update().get(purchase_entry_id=purchase.id)
        existing.amount = amount
        existing.currency = purchase.currency
        existing.save(update_fields=["amount", "currency"])
        logger.warning(
            "Purchase already linked; amount refreshed",
            extra={"purchase_id": str(purchase.id), "payable_id": str(existing.payable_id)},
        )
        if existing.payable_id != payable.id:
            payable = lock_payable(existing.payable_id)
    return payable


def link_purchase_to_payable(*, purchase, supplier=None, user=None, bucket: PeriodBucket | None = None) -> PayableRecord:
    supplier = supplier or purchase.supplier
    bucket = bucket or classify_for_supplier(purchase_date=purchase.purchase_date, supplier=supplier)

    if bucket.is_immediate:
        return _create_immediate_payable(purchase=purchase, bucket=bucket, user=user)

    lock_bucket_range(supplier_id=purchase.supplier_id, base_id=purchase.base_id)

    opened = None
    target = find_open_payable(
        supplier_id=purchase.supplier_id,
        base_id=purchase.base_id,
        bucket=bucket,
    )

    if target is not None:
        if target.currency != purchase.currency:
            raise CurrencyMismatch(
                f"Payable is in {target.currency}, purchase is in {purchase.currency}"
            )
    else:
        target = PayableRecord.objects.create(
            supplier_id=purchase.supplier_id,
            base_id=purchase.base_id,
            settlement_type=bucket.settlement_type,
            period_month=bucket.period_month,
            period_half=bucket.period_half,
            total_amount=ZERO,
            paid_amount=ZERO,
            remaining_amount=ZERO,
            currency=purchase.currency,
            status=PayableRecord.STATUS_PENDING,
            due_date=bucket.due_date,
            created_by=user,
        )
        opened = target
        logger.info(
            "Aggregate payable opened",
            extra={
                "payable_id": str(target.id),
                "supplier_id": str(purchase.supplier_id),
                "base_id": str(purchase.base_id),
                "period": bucket.period_month or bucket.period_half,
            },
        )

    attached = _attach_link(payable=target, purchase=purchase)
    if opened is not None and attached.id != opened.id:
        # the purchase was already linked elsewhere; the new bucket stays empty
        PayableRecord.objects.filter(id=opened.id).delete()
        logger.info("Unused aggregate payable dropped", extra={"payable_id": str(opened.id)})
    return recompute_payable(attached)


# ---------------------------------------------------------------------
# Unlink
# ---------------------------------------------------------------------
def _has_payments(payable_id) -> bool:
    return PaymentRecord.objects.filter(payable_id=payable_id).exists()


def remove_immediate_payable(*, purchase) -> None:
    payable = (
        PayableRecord.objects.select_for_update()
        .filter(purchase_entry_id=purchase.id)
        .first()
    )
    if payable is None:
        return

    if _has_payments(payable.id):
        raise SettledPurchaseLocked()

    logger.info(
        "Immediate payable removed",
        extra={"payable_id": str(payable.id), "purchase_id": str(purchase.id)},
    )
    payable.delete()


def settle_after_unlink(payable: PayableRecord) -> PayableRecord | None:
    """
    Recompute an aggregate payable after one of its links was removed.

    No links left: delete it, unless payments exist (SettledPurchaseLocked).
    Returns None when the payable was deleted.
    """
    if PayableLink.objects.filter(payable_id=payable.id).exists():
        return recompute_payable(payable)

    if _has_payments(payable.id):
        raise SettledPurchaseLocked(
            "Payable would be left without purchases but already has payments"
        )

    logger.info("Empty aggregate payable removed", extra={"payable_id": str(payable.id)})
    payable.delete()
    return None


def unlink_purchase(*, purchase) -> list[PayableRecord]:
    """
    Detach a purchase from payable state.

    Returns the aggregate payables that lost a link; the caller decides when
    to settle them (after all purchases of a batch are unlinked).
    """
    affected = []
    links = list(PayableLink.objects.filter(purchase_entry_id=purchase.id))
    for link in links:
        affected.append(lock_payable(link.payable_id))
    PayableLink.objects.filter(purchase_entry_id=purchase.id).delete()

    remove_immediate_payable(purchase=purchase)
    return affected
