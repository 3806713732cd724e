# analytics/services/reports.py

"""
ANALYTICS READS

Both reports take an inclusive [start_date, end_date] range and a base
scope (None = every base).

- The range spans whole months (1st of a month .. last day of a month)
  -> read the monthly rollup tables
- Otherwise -> aggregate purchases / payments / expenses directly

Stored amounts keep their own currency; totals are converted to CNY here
using ExchangeRate (CNY = 1). Nothing is written back.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date
from decimal import Decimal

from django.db.models import Count, Sum

from analytics.models import BaseExpenseMonth, ExchangeRate, SupplierMonthlySpend
from analytics.services.rollups import month_bounds, months_between
from bases.models import Base
from core.exceptions import BadRequest
from core.money import DEFAULT_CURRENCY, ZERO, money
from expenses.models import BaseExpense
from payables.models import PaymentRecord
from purchases.models import PurchaseEntry
from suppliers.models import Supplier

logger = logging.getLogger("analytics")

SOURCE_ROLLUP = "rollup"
SOURCE_LIVE = "live"


# ---------------------------------------------------------------------
# FX
# ---------------------------------------------------------------------
def rate_table() -> dict[str, Decimal]:
    rates = {r.currency: Decimal(r.rate_to_cny) for r in ExchangeRate.objects.all()}
    rates[DEFAULT_CURRENCY] = Decimal("1")
    return rates


def to_cny(amount, currency: str, rates: dict[str, Decimal]) -> Decimal:
    rate = rates.get((currency or DEFAULT_CURRENCY).upper())
    if rate is None:
        logger.warning("No exchange rate; amount counted 1:1", extra={"currency": currency})
        rate = Decimal("1")
    return money(Decimal(amount or ZERO) * rate)


# ---------------------------------------------------------------------
# Range helpers
# ---------------------------------------------------------------------
def covers_whole_months(start: date, end: date) -> bool:
    if start > end or start.day != 1:
        return False
    _, last = month_bounds(end.strftime("%Y-%m"))
    return end == last


def _check_range(start: date | None, end: date | None) -> tuple[date, date]:
    if start is None or end is None:
        raise BadRequest("start_date and end_date are required")
    if start > end:
        raise BadRequest("start_date must not be after end_date")
    return start, end


def _months(start: date, end: date) -> list[str]:
    return months_between(start.strftime("%Y-%m"), end.strftime("%Y-%m"))


def _scoped(qs, base_ids, field_name: str = "base_id"):
    if base_ids is None:
        return qs
    return qs.filter(**{f"{field_name}__in": base_ids})


# ---------------------------------------------------------------------
# Supplier spend
# ---------------------------------------------------------------------
def _supplier_rows_rollup(start, end, base_ids):
    qs = _scoped(SupplierMonthlySpend.objects.filter(month__in=_months(start, end)), base_ids)
    return (
        qs.order_by()
        .values("supplier_id", "currency")
        .annotate(
            total=Sum("total_purchase"),
            n=Sum("purchase_count"),
            paid=Sum("total_paid"),
        )
    )


def _supplier_rows_live(start, end, base_ids):
    purchases = (
        _scoped(PurchaseEntry.objects.filter(purchase_date__gte=start, purchase_date__lte=end), base_ids)
        .order_by()
        .values("supplier_id", "base_id", "currency")
        .annotate(total=Sum("total_amount"), n=Count("id"))
    )
    rows = {}
    for r in purchases:
        key = (r["supplier_id"], r["base_id"], r["currency"])
        rows[key] = {
            "supplier_id": r["supplier_id"],
            "currency": r["currency"],
            "total": r["total"] or ZERO,
            "n": r["n"],
            "paid": ZERO,
        }

    payments = (
        _scoped(
            PaymentRecord.objects.filter(
                created_at__date__gte=start,
                created_at__date__lte=end,
                payable__supplier__isnull=False,
            ),
            base_ids,
            "payable__base_id",
        )
        .order_by()
        .values("payable__supplier_id", "payable__base_id", "currency")
        .annotate(paid=Sum("payment_amount"))
    )
    for p in payments:
        row = rows.get((p["payable__supplier_id"], p["payable__base_id"], p["currency"]))
        if row is not None:
            row["paid"] = p["paid"] or ZERO

    return rows.values()


def supplier_spend(*, start: date | None, end: date | None, base_ids=None) -> dict:
    start, end = _check_range(start, end)
    use_rollup = covers_whole_months(start, end)
    rows = _supplier_rows_rollup(start, end, base_ids) if use_rollup else _supplier_rows_live(start, end, base_ids)

    rates = rate_table()
    per_supplier = defaultdict(lambda: {"total": ZERO, "paid": ZERO, "count": 0})
    for r in rows:
        agg = per_supplier[r["supplier_id"]]
        agg["total"] += to_cny(r["total"], r["currency"], rates)
        agg["paid"] += to_cny(r["paid"], r["currency"], rates)
        agg["count"] += int(r["n"] or 0)

    names = dict(Supplier.objects.filter(id__in=list(per_supplier)).values_list("id", "name"))

    records = []
    for supplier_id, agg in per_supplier.items():
        records.append(
            {
                "supplier_id": str(supplier_id),
                "supplier_name": names.get(supplier_id, "-"),
                "purchase_count": agg["count"],
                "total_purchase_cny": str(money(agg["total"])),
                "total_paid_cny": str(money(agg["paid"])),
                "remaining_cny": str(max(ZERO, money(agg["total"] - agg["paid"]))),
            }
        )
    records.sort(key=lambda x: Decimal(x["total_purchase_cny"]), reverse=True)

    total = sum((Decimal(r["total_purchase_cny"]) for r in records), ZERO)
    return {
        "start_date": start.isoformat(),
        "end_date": end.isoformat(),
        "source": SOURCE_ROLLUP if use_rollup else SOURCE_LIVE,
        "currency": DEFAULT_CURRENCY,
        "total_purchase_cny": str(money(total)),
        "records": records,
    }


# ---------------------------------------------------------------------
# Base expense
# ---------------------------------------------------------------------
def base_expense(*, start: date | None, end: date | None, base_ids=None) -> dict:
    start, end = _check_range(start, end)
    use_rollup = covers_whole_months(start, end)

    if use_rollup:
        rows = (
            _scoped(BaseExpenseMonth.objects.filter(month__in=_months(start, end)), base_ids)
            .order_by()
            .values("base_id", "currency")
            .annotate(total=Sum("total_amount"))
        )
    else:
        rows = (
            _scoped(BaseExpense.objects.filter(date__gte=start, date__lte=end), base_ids)
            .order_by()
            .values("base_id", "currency")
            .annotate(total=Sum("amount"))
        )

    rates = rate_table()
    per_base = defaultdict(lambda: ZERO)
    for r in rows:
        per_base[r["base_id"]] += to_cny(r["total"], r["currency"], rates)

    names = dict(Base.objects.filter(id__in=list(per_base)).values_list("id", "name"))
    records = sorted(
        (
            {"base_id": str(base_id), "base_name": names.get(base_id, "-"), "total_cny": str(money(total))}
            for base_id, total in per_base.items()
        ),
        key=lambda x: Decimal(x["total_cny"]),
        reverse=True,
    )

    total = sum(per_base.values(), ZERO)
    return {
        "start_date": start.isoformat(),
        "end_date": end.isoformat(),
        "source": SOURCE_ROLLUP if use_rollup else SOURCE_LIVE,
        "currency": DEFAULT_CURRENCY,
        "total_cny": str(money(total)),
        "records": records,
    }
