# purchases/services/purchase_service.py

"""
======================================================
PATH: purchases/services/purchase_service.py
======================================================
PURCHASE MUTATIONS

Every mutation is one transaction:

create:
1) Idempotency-Key replay check (base scoped; a key whose purchase was
   deleted is re-pointed at the new one)
2) Validate supplier / base (+ base scope)
3) Resolve lines, insert header + items
4) Link to payable (aggregator)
5) Remember the key (last statement)

update:
- lock purchase, replace items, recompute total, re-classify
- same bucket   -> link amount updated in place
- other bucket  -> link moved, both payables recomputed
- immediate <-> aggregate switches drop / create the immediate payable

delete / batch delete:
- unlink (links, immediate payables), delete purchases (items cascade),
  then settle every aggregate payable that lost a link

Any payable that already carries payments and would lose its only purchase
refuses the change with SettledPurchaseLocked.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from django.db import IntegrityError, transaction

from bases.models import Base
from core.exceptions import (
    BaseMissing,
    CurrencyMismatch,
    PurchaseMissing,
    SupplierMissing,
)
from core.idempotency import find_reference, remember
from core.models import IdempotencyKey
from core.money import DEFAULT_CURRENCY, ZERO, money, normalize_currency
from payables.models import PayableLink, PayableRecord, PaymentRecord
from payables.services.aggregator import (
    link_purchase_to_payable,
    lock_bucket_range,
    recompute_payable,
    remove_immediate_payable,
    same_bucket,
    settle_after_unlink,
    unlink_purchase,
)
from payables.services.periods import classify_for_supplier
from purchases.models import PurchaseEntry, PurchaseEntryItem
from purchases.services.line_resolver import resolve_lines
from suppliers.models import Supplier

logger = logging.getLogger("purchases")


@dataclass(frozen=True)
class PurchaseResult:
    purchase: PurchaseEntry
    replayed: bool = False


# ---------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------
def _get_supplier(supplier_id) -> Supplier:
    supplier = Supplier.objects.filter(id=supplier_id).first()
    if supplier is None:
        raise SupplierMissing()
    return supplier


def _get_base(base_id) -> Base:
    base = Base.objects.filter(id=base_id).first()
    if base is None:
        raise BaseMissing()
    return base


def _load(purchase_id) -> PurchaseEntry | None:
    return (
        PurchaseEntry.objects.select_related("supplier", "base")
        .prefetch_related("items")
        .filter(id=purchase_id)
        .first()
    )


def _write_items(purchase: PurchaseEntry, lines) -> None:
    PurchaseEntryItem.objects.bulk_create(
        [
            PurchaseEntryItem(
                purchase_entry=purchase,
                product=line.product,
                product_name=line.product_name,
                unit=line.unit,
                quantity=line.quantity,
                unit_price=line.unit_price,
                amount=line.amount,
                quantity_base=line.quantity_base,
            )
            for line in lines
        ]
    )


def _header_total(data: dict, lines) -> Decimal:
    total = money(data.get("total_amount"))
    if total <= ZERO:
        total = money(sum((line.amount for line in lines), ZERO))
    return total


def _lock_ranges(pairs) -> None:
    # stable order so two writers never wait on each other crosswise
    for supplier_id, base_id in sorted({(str(s), str(b)) for s, b in pairs}):
        lock_bucket_range(supplier_id=supplier_id, base_id=base_id)


def _replay(ref_id, claims=None) -> PurchaseResult | None:
    existing = _load(ref_id)
    if existing is None:
        return None
    if claims is not None:
        claims.require_base(existing.base_id)
    return PurchaseResult(purchase=existing, replayed=True)


# ---------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------
def create_purchase(*, data: dict, user=None, claims=None, idempotency_key: str = "") -> PurchaseResult:
    ref = find_reference(resource=IdempotencyKey.RESOURCE_PURCHASE, key=idempotency_key)
    if ref:
        replay = _replay(ref, claims)
        if replay is not None:
            return replay

    try:
        with transaction.atomic():
            supplier = _get_supplier(data.get("supplier_id"))
            base = _get_base(data.get("base_id"))
            if claims is not None:
                claims.require_base(base.id)

            purchase_date = data["purchase_date"]
            lines = resolve_lines(data.get("items") or [], supplier=supplier, purchase_date=purchase_date)

            purchase = PurchaseEntry.objects.create(
                supplier=supplier,
                base=base,
                order_number=data.get("order_number") or "",
                purchase_date=purchase_date,
                total_amount=_header_total(data, lines),
                currency=normalize_currency(
                    data.get("currency"), fallback=base.currency or DEFAULT_CURRENCY
                ),
                receiver=data.get("receiver") or "",
                notes=data.get("notes") or "",
                created_by=user if getattr(user, "pk", None) else None,
                creator_name=getattr(user, "username", "") or "",
            )
            _write_items(purchase, lines)

            payable = link_purchase_to_payable(purchase=purchase, supplier=supplier, user=purchase.created_by)

            remember(
                resource=IdempotencyKey.RESOURCE_PURCHASE,
                key=idempotency_key,
                ref_id=purchase.id,
                replace=bool(ref),
            )
    except IntegrityError:
        if not idempotency_key:
            raise
        ref = find_reference(resource=IdempotencyKey.RESOURCE_PURCHASE, key=idempotency_key)
        replay = _replay(ref, claims) if ref else None
        if replay is None:
            raise
        logger.info(
            "Concurrent purchase replay resolved",
            extra={"key": idempotency_key, "purchase_id": str(replay.purchase.id)},
        )
        return replay

    logger.info(
        "Purchase created",
        extra={
            "purchase_id": str(purchase.id),
            "supplier_id": str(supplier.id),
            "base_id": str(base.id),
            "total": str(purchase.total_amount),
            "payable_id": str(payable.id),
        },
    )
    return PurchaseResult(purchase=_load(purchase.id))


# ---------------------------------------------------------------------
# Update
# ---------------------------------------------------------------------
def _relink_immediate(*, purchase, payable: PayableRecord, bucket) -> None:
    """Immediate stays immediate: refresh the pinned payable in place."""
    if payable.currency != purchase.currency and PaymentRecord.objects.filter(payable_id=payable.id).exists():
        raise CurrencyMismatch("Payable already has payments in another currency")

    payable.supplier_id = purchase.supplier_id
    payable.base_id = purchase.base_id
    payable.currency = purchase.currency
    payable.due_date = bucket.due_date
    payable.settlement_type = bucket.settlement_type
    payable.save(update_fields=["supplier", "base", "currency", "due_date", "settlement_type", "updated_at"])
    recompute_payable(payable)


@transaction.atomic
def update_purchase(*, purchase_id, data: dict, user=None, claims=None) -> PurchaseEntry:
    purchase = PurchaseEntry.objects.select_for_update().filter(id=purchase_id).first()
    if purchase is None:
        raise PurchaseMissing()

    if claims is not None:
        claims.require_base(purchase.base_id)

    supplier = _get_supplier(data.get("supplier_id") or purchase.supplier_id)
    base = _get_base(data.get("base_id") or purchase.base_id)
    if claims is not None:
        claims.require_base(base.id)

    _lock_ranges([(purchase.supplier_id, purchase.base_id), (supplier.id, base.id)])

    old_link = PayableLink.objects.filter(purchase_entry_id=purchase.id).select_related("payable").first()
    old_immediate = PayableRecord.objects.select_for_update().filter(purchase_entry_id=purchase.id).first()

    purchase_date = data.get("purchase_date") or purchase.purchase_date
    lines = resolve_lines(data.get("items") or [], supplier=supplier, purchase_date=purchase_date)

    purchase.supplier = supplier
    purchase.base = base
    purchase.purchase_date = purchase_date
    purchase.order_number = data.get("order_number", purchase.order_number) or ""
    purchase.receiver = data.get("receiver", purchase.receiver) or ""
    purchase.notes = data.get("notes", purchase.notes) or ""
    purchase.currency = normalize_currency(
        data.get("currency"), fallback=base.currency or DEFAULT_CURRENCY
    )
    purchase.total_amount = _header_total(data, lines)
    purchase.save()

    PurchaseEntryItem.objects.filter(purchase_entry=purchase).delete()
    _write_items(purchase, lines)

    bucket = classify_for_supplier(purchase_date=purchase.purchase_date, supplier=supplier)

    if old_immediate is not None:
        if bucket.is_immediate:
            _relink_immediate(purchase=purchase, payable=old_immediate, bucket=bucket)
        else:
            remove_immediate_payable(purchase=purchase)
            link_purchase_to_payable(purchase=purchase, supplier=supplier, bucket=bucket, user=user)

    elif old_link is not None:
        old_payable = PayableRecord.objects.select_for_update().get(id=old_link.payable_id)
        if same_bucket(old_payable, purchase=purchase, bucket=bucket):
            old_link.amount = money(purchase.total_amount)
            old_link.currency = purchase.currency
            old_link.save(update_fields=["amount", "currency"])
            recompute_payable(old_payable)
        else:
            old_link.delete()
            settle_after_unlink(old_payable)
            link_purchase_to_payable(purchase=purchase, supplier=supplier, bucket=bucket, user=user)

    else:
        link_purchase_to_payable(purchase=purchase, supplier=supplier, bucket=bucket, user=user)

    logger.info(
        "Purchase updated",
        extra={
            "purchase_id": str(purchase.id),
            "total": str(purchase.total_amount),
            "period": bucket.period_month or bucket.period_half or bucket.bucket_type,
        },
    )
    return _load(purchase.id)


# ---------------------------------------------------------------------
# Delete
# ---------------------------------------------------------------------
@transaction.atomic
def batch_delete_purchases(*, purchase_ids, claims=None) -> int:
    ids = list(dict.fromkeys(str(i) for i in purchase_ids or []))
    if not ids:
        return 0

    purchases = list(PurchaseEntry.objects.select_for_update().filter(id__in=ids).order_by("id"))
    if not purchases:
        return 0

    if claims is not None:
        for p in purchases:
            claims.require_base(p.base_id)

    _lock_ranges([(p.supplier_id, p.base_id) for p in purchases])

    affected: dict = {}
    for p in purchases:
        for payable in unlink_purchase(purchase=p):
            affected[payable.id] = payable

    deleted_ids = [p.id for p in purchases]
    PurchaseEntry.objects.filter(id__in=deleted_ids).delete()

    for payable in affected.values():
        settle_after_unlink(payable)

    logger.info(
        "Purchases deleted",
        extra={"count": len(deleted_ids), "payables_touched": len(affected)},
    )
    return len(deleted_ids)


def delete_purchase(*, purchase_id, claims=None) -> None:
    if not PurchaseEntry.objects.filter(id=purchase_id).exists():
        raise PurchaseMissing()
    batch_delete_purchases(purchase_ids=[purchase_id], claims=claims)
