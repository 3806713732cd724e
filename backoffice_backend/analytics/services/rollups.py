# analytics/services/rollups.py

"""
======================================================
PATH: analytics/services/rollups.py
======================================================
MONTHLY ROLLUP REFRESHER

recompute_monthly("YYYY-MM"), in one transaction:
1) mv_supplier_monthly_spend
   - delete the month's rows
   - group purchases of the month by (supplier, base, currency)
       -> total_purchase, purchase_count
   - overlay payments created in the month, grouped by the payable's
     (supplier, base, currency), onto the rows that exist
   - remaining = max(0, total_purchase - total_paid)
2) mv_base_expense_month
   - delete the month's rows
   - group expenses of the month by (base, currency)

The write paths never wait on this; readers treat the tables as a cache.
"""

from __future__ import annotations

import calendar
import logging
from datetime import date

from django.db import transaction
from django.db.models import Count, Sum
from django.utils import timezone

from analytics.models import BaseExpenseMonth, SupplierMonthlySpend
from core.api.params import MONTH_RE
from core.exceptions import BadRequest
from core.money import ZERO, money
from expenses.models import BaseExpense
from payables.models import PaymentRecord
from purchases.models import PurchaseEntry

logger = logging.getLogger("rollups")


def current_month() -> str:
    return timezone.localdate().strftime("%Y-%m")


def month_bounds(month: str) -> tuple[date, date]:
    """First and last day of a YYYY-MM month (inclusive)."""
    if not month or not MONTH_RE.match(month):
        raise BadRequest("month must be YYYY-MM")
    year, mon = int(month[:4]), int(month[5:7])
    return date(year, mon, 1), date(year, mon, calendar.monthrange(year, mon)[1])


def months_between(start: str, end: str) -> list[str]:
    """Inclusive list of months; reversed bounds are swapped."""
    s, _ = month_bounds(start)
    e, _ = month_bounds(end)
    if s > e:
        s, e = e, s

    out = []
    year, mon = s.year, s.month
    while (year, mon) <= (e.year, e.month):
        out.append(f"{year:04d}-{mon:02d}")
        year, mon = (year + 1, 1) if mon == 12 else (year, mon + 1)
    return out


def _supplier_rows(month: str, first: date, last: date, generated_at) -> list[SupplierMonthlySpend]:
    purchases = (
        PurchaseEntry.objects.filter(purchase_date__gte=first, purchase_date__lte=last)
        .order_by()
        .values("supplier_id", "base_id", "currency")
        .annotate(total=Sum("total_amount"), n=Count("id"))
    )

    rows = {}
    for r in purchases:
        key = (r["supplier_id"], r["base_id"], r["currency"])
        rows[key] = SupplierMonthlySpend(
            supplier_id=r["supplier_id"],
            base_id=r["base_id"],
            month=month,
            currency=r["currency"],
            total_purchase=money(r["total"] or ZERO),
            purchase_count=r["n"],
            generated_at=generated_at,
        )

    payments = (
        PaymentRecord.objects.filter(
            created_at__date__gte=first,
            created_at__date__lte=last,
            payable__supplier__isnull=False,
        )
        .order_by()
        .values("payable__supplier_id", "payable__base_id", "currency")
        .annotate(paid=Sum("payment_amount"))
    )
    for p in payments:
        row = rows.get((p["payable__supplier_id"], p["payable__base_id"], p["currency"]))
        if row is not None:
            row.total_paid = money(p["paid"] or ZERO)

    for row in rows.values():
        row.remaining = max(ZERO, money(row.total_purchase - row.total_paid))

    return list(rows.values())


def _expense_rows(month: str, first: date, last: date, generated_at) -> list[BaseExpenseMonth]:
    expenses = (
        BaseExpense.objects.filter(date__gte=first, date__lte=last)
        .order_by()
        .values("base_id", "currency")
        .annotate(total=Sum("amount"))
    )
    return [
        BaseExpenseMonth(
            base_id=r["base_id"],
            month=month,
            currency=r["currency"],
            total_amount=money(r["total"] or ZERO),
            generated_at=generated_at,
        )
        for r in expenses
    ]


@transaction.atomic
def recompute_monthly(month: str | None = None) -> dict:
    month = month or current_month()
    first, last = month_bounds(month)
    generated_at = timezone.now()

    supplier_rows = _supplier_rows(month, first, last, generated_at)
    expense_rows = _expense_rows(month, first, last, generated_at)

    SupplierMonthlySpend.objects.filter(month=month).delete()
    SupplierMonthlySpend.objects.bulk_create(supplier_rows)

    BaseExpenseMonth.objects.filter(month=month).delete()
    BaseExpenseMonth.objects.bulk_create(expense_rows)

    logger.info(
        "Monthly rollups refreshed",
        extra={
            "month": month,
            "supplier_rows": len(supplier_rows),
            "expense_rows": len(expense_rows),
        },
    )
    return {"month": month, "supplier_rows": len(supplier_rows), "expense_rows": len(expense_rows)}


def recompute_range(start: str | None = None, end: str | None = None) -> list[str]:
    start = start or current_month()
    end = end or start
    months = months_between(start, end)
    for m in months:
        recompute_monthly(m)
    return months
