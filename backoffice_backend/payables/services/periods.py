# payables/services/periods.py

"""
SETTLEMENT PERIOD CLASSIFIER

Maps (purchase_date, supplier policy) to the payable bucket a purchase
belongs to:

- immediate: no bucket; due = purchase_date + 30 days (00:00 local)
- monthly:   period_month "YYYY-MM"; due on settlement_day of the next month
             (clamped to that month's last day) at 23:59:59 local
- flexible:  period_half "YYYY-H1" / "YYYY-H2"; no due date

Anything else (missing, "", unknown) is treated as flexible.
Pure: no database access.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from django.utils import timezone

from suppliers.models import Supplier

IMMEDIATE_DUE_DAYS = 30

BUCKET_IMMEDIATE = "immediate"
BUCKET_AGGREGATE = "aggregate"


@dataclass(frozen=True)
class PeriodBucket:
    settlement_type: str
    period_month: str
    period_half: str
    due_date: datetime | None
    bucket_type: str

    @property
    def is_immediate(self) -> bool:
        return self.bucket_type == BUCKET_IMMEDIATE

    @property
    def key(self) -> tuple[str, str, str]:
        return (self.settlement_type, self.period_month, self.period_half)


def normalize_settlement_type(value) -> str:
    t = (value or "").strip().lower()
    if t in (Supplier.SETTLEMENT_IMMEDIATE, Supplier.SETTLEMENT_MONTHLY):
        return t
    return Supplier.SETTLEMENT_FLEXIBLE


def _local(d: date, t: time) -> datetime:
    return timezone.make_aware(datetime.combine(d, t), timezone.get_default_timezone())


def _next_month(d: date) -> tuple[int, int]:
    if d.month == 12:
        return d.year + 1, 1
    return d.year, d.month + 1


def monthly_due_date(d: date, settlement_day) -> datetime:
    year, month = _next_month(d)
    last_day = calendar.monthrange(year, month)[1]

    day = int(settlement_day or 0)
    if day <= 0 or day > last_day:
        day = last_day

    return _local(date(year, month, day), time(23, 59, 59))


def half_label(d: date) -> str:
    return f"{d.year:04d}-{'H1' if d.month <= 6 else 'H2'}"


def classify_period(*, purchase_date: date, settlement_type=None, settlement_day=None) -> PeriodBucket:
    t = normalize_settlement_type(settlement_type)

    if t == Supplier.SETTLEMENT_IMMEDIATE:
        return PeriodBucket(
            settlement_type=t,
            period_month="",
            period_half="",
            due_date=_local(purchase_date + timedelta(days=IMMEDIATE_DUE_DAYS), time(0, 0)),
            bucket_type=BUCKET_IMMEDIATE,
        )

    if t == Supplier.SETTLEMENT_MONTHLY:
        return PeriodBucket(
            settlement_type=t,
            period_month=purchase_date.strftime("%Y-%m"),
            period_half="",
            due_date=monthly_due_date(purchase_date, settlement_day),
            bucket_type=BUCKET_AGGREGATE,
        )

    return PeriodBucket(
        settlement_type=t,
        period_month="",
        period_half=half_label(purchase_date),
        due_date=None,
        bucket_type=BUCKET_AGGREGATE,
    )


def classify_for_supplier(*, purchase_date: date, supplier) -> PeriodBucket:
    return classify_period(
        purchase_date=purchase_date,
        settlement_type=getattr(supplier, "settlement_type", None),
        settlement_day=getattr(supplier, "settlement_day", None),
    )
