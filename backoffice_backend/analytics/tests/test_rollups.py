# analytics/tests/test_rollups.py

from __future__ import annotations

from datetime import date
from decimal import Decimal

from django.test import SimpleTestCase, TestCase
from django.utils import timezone

from analytics.models import BaseExpenseMonth, ExchangeRate, SupplierMonthlySpend
from analytics.services.reports import (
    SOURCE_LIVE,
    SOURCE_ROLLUP,
    base_expense,
    covers_whole_months,
    rate_table,
    supplier_spend,
    to_cny,
)
from analytics.services.rollups import current_month, month_bounds, months_between, recompute_monthly
from core.exceptions import BadRequest
from core.tests.factories import make_base, make_purchase, make_supplier
from expenses.models import ExpenseCategory
from expenses.services import create_expense
from payables.models import PayableRecord
from payables.services.payment_service import create_payment


class MonthHelperTests(SimpleTestCase):
    def test_month_bounds(self):
        self.assertEqual(month_bounds("2024-02"), (date(2024, 2, 1), date(2024, 2, 29)))
        self.assertEqual(month_bounds("2025-12"), (date(2025, 12, 1), date(2025, 12, 31)))

    def test_month_bounds_rejects_bad_input(self):
        for value in ("", "2025-13", "2025/01", "25-01"):
            with self.assertRaises(BadRequest):
                month_bounds(value)

    def test_months_between_is_inclusive_and_swaps(self):
        self.assertEqual(months_between("2024-11", "2025-02"), ["2024-11", "2024-12", "2025-01", "2025-02"])
        self.assertEqual(months_between("2025-03", "2025-01"), ["2025-01", "2025-02", "2025-03"])
        self.assertEqual(months_between("2025-05", "2025-05"), ["2025-05"])

    def test_covers_whole_months(self):
        self.assertTrue(covers_whole_months(date(2025, 1, 1), date(2025, 2, 28)))
        self.assertTrue(covers_whole_months(date(2024, 2, 1), date(2024, 2, 29)))
        self.assertFalse(covers_whole_months(date(2025, 1, 1), date(2025, 1, 30)))
        self.assertFalse(covers_whole_months(date(2025, 1, 2), date(2025, 1, 31)))
        self.assertFalse(covers_whole_months(date(2025, 2, 1), date(2025, 1, 31)))


class RecomputeMonthlyTests(TestCase):
    """
    GUARANTEES:
    - one supplier row per (supplier, base, currency) with purchases in the month
    - payments created in the month overlay total_paid; remaining never goes negative
    - rerunning a month replaces its rows
    """

    def setUp(self):
        self.base = make_base(name="Vientiane", code="VTE")
        self.supplier = make_supplier(settlement_type="immediate")
        self.category = ExpenseCategory.objects.create(name="Rent")

    def test_current_month_rows_with_payment_overlay(self):
        today = timezone.localdate()
        purchase = make_purchase(supplier=self.supplier, base=self.base, purchase_date=today, total=100)
        payable = PayableRecord.objects.get(purchase_entry=purchase)
        create_payment(payable_id=payable.id, amount=Decimal("40"))
        create_expense(base_id=self.base.id, category_id=self.category.id, amount="25", date=today)

        result = recompute_monthly()

        self.assertEqual(result, {"month": current_month(), "supplier_rows": 1, "expense_rows": 1})
        row = SupplierMonthlySpend.objects.get()
        self.assertEqual(row.total_purchase, Decimal("100.00"))
        self.assertEqual(row.purchase_count, 1)
        self.assertEqual(row.total_paid, Decimal("40.00"))
        self.assertEqual(row.remaining, Decimal("60.00"))
        self.assertEqual(row.currency, "CNY")
        self.assertEqual(BaseExpenseMonth.objects.get().total_amount, Decimal("25.00"))

    def test_rows_split_by_base_and_replaced_on_rerun(self):
        other = make_base(name="Pakse", code="PKZ", currency="THB")
        make_purchase(supplier=self.supplier, base=self.base, purchase_date=date(2025, 1, 5), total=100)
        make_purchase(supplier=self.supplier, base=self.base, purchase_date=date(2025, 1, 20), total=50)
        make_purchase(supplier=self.supplier, base=other, purchase_date=date(2025, 1, 7), total=1000)
        make_purchase(supplier=self.supplier, base=self.base, purchase_date=date(2025, 2, 1), total=999)

        recompute_monthly("2025-01")
        recompute_monthly("2025-01")

        rows = {r.base_id: r for r in SupplierMonthlySpend.objects.filter(month="2025-01")}
        self.assertEqual(len(rows), 2)
        self.assertEqual(rows[self.base.id].total_purchase, Decimal("150.00"))
        self.assertEqual(rows[self.base.id].purchase_count, 2)
        self.assertEqual(rows[other.id].currency, "THB")
        self.assertEqual(rows[other.id].total_paid, Decimal("0.00"))

    def test_other_months_are_untouched(self):
        make_purchase(supplier=self.supplier, base=self.base, purchase_date=date(2025, 1, 5), total=100)
        recompute_monthly("2025-01")

        result = recompute_monthly("2025-03")

        self.assertEqual(result["supplier_rows"], 0)
        self.assertEqual(SupplierMonthlySpend.objects.filter(month="2025-01").count(), 1)


class ReportTests(TestCase):
    """
    GUARANTEES:
    - whole-month ranges read the rollups, partial ranges read the base tables
    - totals are converted to CNY with ExchangeRate
    - a base scope limits the rows
    """

    def setUp(self):
        self.vte = make_base(name="Vientiane", code="VTE")
        self.bkk = make_base(name="Bangkok", code="BKK", currency="THB")
        self.supplier = make_supplier(name="Lao Brewery", settlement_type="immediate")
        self.category = ExpenseCategory.objects.create(name="Rent")
        ExchangeRate.objects.create(currency="THB", rate_to_cny=Decimal("0.2"))

        make_purchase(supplier=self.supplier, base=self.vte, purchase_date=date(2025, 1, 15), total=100)
        make_purchase(supplier=self.supplier, base=self.bkk, purchase_date=date(2025, 1, 15), total=1000)
        create_expense(base_id=self.vte.id, category_id=self.category.id, amount="30", date=date(2025, 1, 10))
        create_expense(base_id=self.bkk.id, category_id=self.category.id, amount="500", date=date(2025, 1, 10))

    def test_rate_table_and_conversion(self):
        rates = rate_table()
        self.assertEqual(rates["CNY"], Decimal("1"))
        self.assertEqual(to_cny(Decimal("1000"), "THB", rates), Decimal("200.00"))
        self.assertEqual(to_cny(Decimal("7"), "LAK", rates), Decimal("7.00"))

    def test_whole_month_reads_rollup(self):
        before = supplier_spend(start=date(2025, 1, 1), end=date(2025, 1, 31))
        self.assertEqual(before["source"], SOURCE_ROLLUP)
        self.assertEqual(before["records"], [])

        recompute_monthly("2025-01")
        data = supplier_spend(start=date(2025, 1, 1), end=date(2025, 1, 31))

        self.assertEqual(data["currency"], "CNY")
        self.assertEqual(data["total_purchase_cny"], "300.00")
        record = data["records"][0]
        self.assertEqual(record["supplier_name"], "Lao Brewery")
        self.assertEqual(record["purchase_count"], 2)
        self.assertEqual(record["remaining_cny"], "300.00")

    def test_partial_range_reads_live_tables(self):
        data = supplier_spend(start=date(2025, 1, 1), end=date(2025, 1, 20))

        self.assertEqual(data["source"], SOURCE_LIVE)
        self.assertEqual(data["total_purchase_cny"], "300.00")

    def test_base_scope(self):
        data = supplier_spend(start=date(2025, 1, 10), end=date(2025, 1, 20), base_ids={self.vte.id})
        self.assertEqual(data["total_purchase_cny"], "100.00")

    def test_base_expense_live_and_rollup(self):
        live = base_expense(start=date(2025, 1, 5), end=date(2025, 1, 15))
        self.assertEqual(live["source"], SOURCE_LIVE)
        self.assertEqual(live["total_cny"], "130.00")
        self.assertEqual([r["base_name"] for r in live["records"]], ["Bangkok", "Vientiane"])

        recompute_monthly("2025-01")
        rolled = base_expense(start=date(2025, 1, 1), end=date(2025, 1, 31), base_ids={self.bkk.id})
        self.assertEqual(rolled["source"], SOURCE_ROLLUP)
        self.assertEqual(rolled["total_cny"], "100.00")

    def test_range_is_required(self):
        with self.assertRaises(BadRequest):
            supplier_spend(start=None, end=date(2025, 1, 31))
        with self.assertRaises(BadRequest):
            base_expense(start=date(2025, 2, 1), end=date(2025, 1, 31))
