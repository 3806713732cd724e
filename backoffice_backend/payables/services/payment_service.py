# payables/services/payment_service.py

"""
======================================================
PATH: payables/services/payment_service.py
======================================================
PAYMENT APPLICATOR

create_payment():
1) Idempotency-Key known -> return the stored payment (replay, base scoped);
   a key whose payment was deleted is re-pointed at the new one
2) Lock the payable row
3) Validate amount (> 0, <= remaining + EPSILON)
4) Insert payment in the payable's currency
5) paid = SUM(payments) (re-sum, never incremental); update_amounts()
6) Remember the key as the LAST statement

A concurrent twin with the same key loses on the IdempotencyKey unique
index: its transaction rolls back and it returns the winner's payment.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date

from django.db import IntegrityError, transaction
from django.utils import timezone

from core.exceptions import InvalidAmount, Overpayment, PayableMissing, PaymentMissing
from core.idempotency import find_reference, remember
from core.models import IdempotencyKey
from core.money import EPSILON, ZERO, money
from payables.models import PayableRecord, PaymentRecord
from payables.services.amounts import sum_payments, update_amounts

logger = logging.getLogger("payments")


@dataclass(frozen=True)
class PaymentResult:
    payment: PaymentRecord
    replayed: bool = False


def _apply_sum(payable: PayableRecord) -> PayableRecord:
    payable.paid_amount = sum_payments(payable.id)
    update_amounts(payable)
    payable.save(update_fields=["paid_amount", "remaining_amount", "status", "updated_at"])
    return payable


def _replay(ref_id, claims=None) -> PaymentResult | None:
    payment = PaymentRecord.objects.select_related("payable").filter(id=ref_id).first()
    if payment is None:
        return None
    if claims is not None:
        claims.require_base(payment.payable.base_id)
    return PaymentResult(payment=payment, replayed=True)


def create_payment(
    *,
    payable_id,
    amount,
    payment_date: date | None = None,
    payment_method: str = "",
    reference_number: str = "",
    notes: str = "",
    user=None,
    claims=None,
    idempotency_key: str = "",
) -> PaymentResult:
    ref = find_reference(resource=IdempotencyKey.RESOURCE_PAYMENT, key=idempotency_key)
    if ref:
        replay = _replay(ref, claims)
        if replay is not None:
            return replay

    try:
        amount = money(amount)
    except ValueError as exc:
        raise InvalidAmount(str(exc)) from exc

    try:
        with transaction.atomic():
            try:
                payable = PayableRecord.objects.select_for_update().get(id=payable_id)
            except PayableRecord.DoesNotExist as exc:
                raise PayableMissing() from exc

            if claims is not None:
                claims.require_base(payable.base_id)

            # twin that waited on the row lock sees the winner's key now
            ref = find_reference(resource=IdempotencyKey.RESOURCE_PAYMENT, key=idempotency_key)
            if ref:
                replay = _replay(ref, claims)
                if replay is not None:
                    return replay

            if amount <= ZERO:
                raise InvalidAmount()

            if amount > money(payable.remaining_amount) + EPSILON:
                raise Overpayment(
                    f"Payment {amount} exceeds remaining {payable.remaining_amount} {payable.currency}"
                )

            payment = PaymentRecord.objects.create(
                payable=payable,
                payment_amount=amount,
                currency=payable.currency,
                payment_date=payment_date or timezone.localdate(),
                payment_method=(payment_method or PaymentRecord.METHOD_BANK_TRANSFER).strip(),
                reference_number=(reference_number or "").strip(),
                notes=notes or "",
                created_by=user,
            )

            _apply_sum(payable)

            remember(
                resource=IdempotencyKey.RESOURCE_PAYMENT,
                key=idempotency_key,
                ref_id=payment.id,
                replace=bool(ref),
            )
    except IntegrityError:
        if not idempotency_key:
            raise
        ref = find_reference(resource=IdempotencyKey.RESOURCE_PAYMENT, key=idempotency_key)
        replay = _replay(ref, claims) if ref else None
        if replay is None:
            raise
        logger.info(
            "Concurrent payment replay resolved",
            extra={"key": idempotency_key, "payment_id": str(replay.payment.id)},
        )
        return replay

    logger.info(
        "Payment recorded",
        extra={
            "payment_id": str(payment.id),
            "payable_id": str(payable.id),
            "amount": str(amount),
            "status": payable.status,
        },
    )
    return PaymentResult(payment=payment)


@transaction.atomic
def delete_payment(*, payment_id) -> PayableRecord:
    payment = PaymentRecord.objects.filter(id=payment_id).only("id", "payable_id").first()
    if payment is None:
        raise PaymentMissing()

    payable = PayableRecord.objects.select_for_update().get(id=payment.payable_id)
    PaymentRecord.objects.filter(id=payment.id).delete()
    _apply_sum(payable)

    logger.info(
        "Payment deleted",
        extra={
            "payment_id": str(payment_id),
            "payable_id": str(payable.id),
            "status": payable.status,
        },
    )
    return payable
