# payables/services/reports.py

from __future__ import annotations

from django.db.models import Count, Sum
from django.utils import timezone

from core.money import ZERO, money
from payables.models import PayableRecord


def open_payables(qs=None):
    qs = qs if qs is not None else PayableRecord.objects.all()
    return qs.exclude(status=PayableRecord.STATUS_PAID)


def overdue_payables(qs=None, *, as_of=None):
    """Open payables whose due date has passed (no due date = never overdue)."""
    as_of = as_of or timezone.now()
    return (
        open_payables(qs)
        .filter(due_date__isnull=False, due_date__lt=as_of)
        .order_by("due_date", "created_at")
    )


def payable_summary(qs=None) -> dict:
    """
    Totals per currency plus status counts.

    Amounts are never mixed across currencies.
    """
    qs = qs if qs is not None else PayableRecord.objects.all()

    per_currency = (
        qs.order_by()
        .values("currency")
        .annotate(
            count=Count("id"),
            total=Sum("total_amount"),
            paid=Sum("paid_amount"),
            remaining=Sum("remaining_amount"),
        )
        .order_by("currency")
    )

    by_currency = [
        {
            "currency": row["currency"],
            "count": row["count"],
            "total_amount": str(money(row["total"] or ZERO)),
            "paid_amount": str(money(row["paid"] or ZERO)),
            "remaining_amount": str(money(row["remaining"] or ZERO)),
        }
        for row in per_currency
    ]

    status_counts = {s: 0 for s, _ in PayableRecord.STATUSES}
    for row in qs.order_by().values("status").annotate(n=Count("id")):
        status_counts[row["status"]] = row["n"]

    return {
        "count": sum(status_counts.values()),
        "status_counts": status_counts,
        "overdue_count": overdue_payables(qs).count(),
        "by_currency": by_currency,
    }
