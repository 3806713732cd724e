# payables/tests/test_payments.py

from __future__ import annotations

from datetime import date
from decimal import Decimal
from unittest import mock

from django.test import TestCase

from core.exceptions import (
    IdempotencyConflict,
    InvalidAmount,
    InvalidStatus,
    Overpayment,
    PayableMissing,
    PaymentMissing,
)
from core.idempotency import find_reference
from core.models import IdempotencyKey
from core.tests.factories import make_base, make_purchase, make_supplier
from payables.models import PayableRecord, PaymentRecord
from payables.services.payment_service import create_payment, delete_payment
from payables.services.status_service import set_payable_status


class PaymentApplicatorTests(TestCase):
    """
    GUARANTEES:
    - paid_amount is always the sum of the payment rows
    - the final state does not depend on payment order
    - overpayment and non-positive amounts are rejected without side effects
    """

    def setUp(self):
        self.base = make_base()
        self.supplier = make_supplier(settlement_type="immediate")

    def _payable(self, total=1000, day=1) -> PayableRecord:
        purchase = make_purchase(
            supplier=self.supplier, base=self.base, purchase_date=date(2025, 3, day), total=total
        )
        return PayableRecord.objects.get(purchase_entry=purchase)

    def _state(self, payable):
        payable.refresh_from_db()
        return (payable.paid_amount, payable.remaining_amount, payable.status)

    def test_payment_order_does_not_matter(self):
        first = self._payable(day=1)
        second = self._payable(day=2)

        create_payment(payable_id=first.id, amount=Decimal("300"), payment_date=date(2025, 5, 1))
        create_payment(payable_id=first.id, amount=Decimal("700"), payment_date=date(2025, 4, 1))

        create_payment(payable_id=second.id, amount=Decimal("700"), payment_date=date(2025, 4, 1))
        create_payment(payable_id=second.id, amount=Decimal("300"), payment_date=date(2025, 5, 1))

        expected = (Decimal("1000.00"), Decimal("0.00"), PayableRecord.STATUS_PAID)
        self.assertEqual(self._state(first), expected)
        self.assertEqual(self._state(second), expected)

    def test_deleting_payment_resums(self):
        payable = self._payable()
        small = create_payment(payable_id=payable.id, amount=Decimal("300")).payment
        create_payment(payable_id=payable.id, amount=Decimal("700"))

        delete_payment(payment_id=small.id)

        self.assertEqual(
            self._state(payable),
            (Decimal("700.00"), Decimal("300.00"), PayableRecord.STATUS_PARTIAL),
        )

    def test_overpayment_rejected_and_state_unchanged(self):
        payable = self._payable(total=100)

        with self.assertRaises(Overpayment):
            create_payment(payable_id=payable.id, amount=Decimal("150"))

        self.assertFalse(PaymentRecord.objects.exists())
        self.assertEqual(
            self._state(payable),
            (Decimal("0.00"), Decimal("100.00"), PayableRecord.STATUS_PENDING),
        )

    def test_payment_within_epsilon_of_remaining_is_accepted(self):
        payable = self._payable(total=100)

        create_payment(payable_id=payable.id, amount=Decimal("100.01"))

        paid, remaining, status = self._state(payable)
        self.assertEqual(paid, Decimal("100.01"))
        self.assertEqual(remaining, Decimal("0.00"))
        self.assertEqual(status, PayableRecord.STATUS_PAID)

    def test_non_positive_amount_rejected(self):
        payable = self._payable()
        for amount in (Decimal("0"), Decimal("-5")):
            with self.assertRaises(InvalidAmount):
                create_payment(payable_id=payable.id, amount=amount)

    def test_payment_takes_payable_currency(self):
        payable = self._payable()
        payment = create_payment(payable_id=payable.id, amount=Decimal("10")).payment
        self.assertEqual(payment.currency, payable.currency)

    def test_missing_payable_and_payment(self):
        with self.assertRaises(PayableMissing):
            create_payment(payable_id="00000000-0000-0000-0000-000000000000", amount=Decimal("1"))
        with self.assertRaises(PaymentMissing):
            delete_payment(payment_id="00000000-0000-0000-0000-000000000000")


class PaymentIdempotencyTests(TestCase):
    def setUp(self):
        base = make_base()
        supplier = make_supplier(settlement_type="immediate")
        self.purchase = make_purchase(
            supplier=supplier, base=base, purchase_date=date(2025, 3, 1), total=1000, idempotency_key="purchase-K"
        )
        self.payable = PayableRecord.objects.get(purchase_entry=self.purchase)

    def test_same_key_returns_same_payment(self):
        first = create_payment(payable_id=self.payable.id, amount=Decimal("500"), idempotency_key="K")
        second = create_payment(payable_id=self.payable.id, amount=Decimal("500"), idempotency_key="K")

        self.assertFalse(first.replayed)
        self.assertTrue(second.replayed)
        self.assertEqual(first.payment.id, second.payment.id)
        self.assertEqual(PaymentRecord.objects.count(), 1)

        self.payable.refresh_from_db()
        self.assertEqual(self.payable.paid_amount, Decimal("500.00"))

    def test_key_used_for_purchase_cannot_create_payment(self):
        with self.assertRaises(IdempotencyConflict):
            create_payment(payable_id=self.payable.id, amount=Decimal("1"), idempotency_key="purchase-K")
        self.assertFalse(PaymentRecord.objects.exists())

    def test_failed_payment_does_not_burn_key(self):
        with self.assertRaises(Overpayment):
            create_payment(payable_id=self.payable.id, amount=Decimal("5000"), idempotency_key="K2")

        result = create_payment(payable_id=self.payable.id, amount=Decimal("50"), idempotency_key="K2")
        self.assertFalse(result.replayed)
        self.assertEqual(PaymentRecord.objects.count(), 1)


class PayableStatusOverrideTests(TestCase):
    def setUp(self):
        base = make_base()
        supplier = make_supplier(settlement_type="monthly", settlement_day=5)
        make_purchase(supplier=supplier, base=base, purchase_date=date(2025, 3, 1), total=800)
        self.payable = PayableRecord.objects.get()

    def test_mark_paid_inserts_settlement_payment(self):
        create_payment(payable_id=self.payable.id, amount=Decimal("300"))

        payable = set_payable_status(payable_id=self.payable.id, status="paid")

        self.assertEqual(payable.status, PayableRecord.STATUS_PAID)
        self.assertEqual(payable.paid_amount, Decimal("800.00"))
        self.assertEqual(payable.remaining_amount, Decimal("0.00"))
        settlement = PaymentRecord.objects.get(payment_method=PaymentRecord.METHOD_SETTLEMENT)
        self.assertEqual(settlement.payment_amount, Decimal("500.00"))

    def test_mark_paid_twice_is_idempotent(self):
        set_payable_status(payable_id=self.payable.id, status="paid")
        set_payable_status(payable_id=self.payable.id, status="PAID")
        self.assertEqual(PaymentRecord.objects.count(), 1)

    def test_mark_pending_removes_payments(self):
        create_payment(payable_id=self.payable.id, amount=Decimal("300"))

        payable = set_payable_status(payable_id=self.payable.id, status="pending")

        self.assertEqual(payable.status, PayableRecord.STATUS_PENDING)
        self.assertEqual(payable.paid_amount, Decimal("0.00"))
        self.assertEqual(payable.remaining_amount, Decimal("800.00"))
        self.assertFalse(PaymentRecord.objects.exists())

    def test_other_statuses_rejected(self):
        for value in ("partial", "void", ""):
            with self.assertRaises(InvalidStatus):
                set_payable_status(payable_id=self.payable.id, status=value)


class PaymentKeyRecoveryTests(TestCase):
    """
    GUARANTEES:
    - a twin that misses the early lookup still returns the winner's payment
    - a key whose payment was deleted creates a new payment and follows it
    """

    def setUp(self):
        base = make_base()
        supplier = make_supplier(settlement_type="immediate")
        purchase = make_purchase(supplier=supplier, base=base, purchase_date=date(2025, 3, 1), total=1000)
        self.payable = PayableRecord.objects.get(purchase_entry=purchase)

    def _lookup_missing_first(self, misses):
        calls = []

        def lookup(**kwargs):
            calls.append(kwargs)
            if len(calls) <= misses:
                return None
            return find_reference(**kwargs)

        return lookup

    def test_twin_resolved_by_lookup_under_lock(self):
        winner = create_payment(payable_id=self.payable.id, amount=Decimal("500"), idempotency_key="K")

        with mock.patch(
            "payables.services.payment_service.find_reference",
            side_effect=self._lookup_missing_first(1),
        ):
            twin = create_payment(payable_id=self.payable.id, amount=Decimal("500"), idempotency_key="K")

        self.assertTrue(twin.replayed)
        self.assertEqual(twin.payment.id, winner.payment.id)
        self.assertEqual(PaymentRecord.objects.count(), 1)

    def test_twin_resolved_after_key_insert_fails(self):
        winner = create_payment(payable_id=self.payable.id, amount=Decimal("500"), idempotency_key="K")

        with mock.patch(
            "payables.services.payment_service.find_reference",
            side_effect=self._lookup_missing_first(2),
        ):
            twin = create_payment(payable_id=self.payable.id, amount=Decimal("500"), idempotency_key="K")

        self.assertTrue(twin.replayed)
        self.assertEqual(twin.payment.id, winner.payment.id)
        self.assertEqual(PaymentRecord.objects.count(), 1)
        self.payable.refresh_from_db()
        self.assertEqual(self.payable.paid_amount, Decimal("500.00"))

    def test_key_of_deleted_payment_creates_new_payment(self):
        first = create_payment(payable_id=self.payable.id, amount=Decimal("200"), idempotency_key="K")
        delete_payment(payment_id=first.payment.id)

        retry = create_payment(payable_id=self.payable.id, amount=Decimal("200"), idempotency_key="K")
        again = create_payment(payable_id=self.payable.id, amount=Decimal("200"), idempotency_key="K")

        self.assertFalse(retry.replayed)
        self.assertNotEqual(retry.payment.id, first.payment.id)
        self.assertTrue(again.replayed)
        self.assertEqual(again.payment.id, retry.payment.id)
        self.assertEqual(IdempotencyKey.objects.get(key="K").ref_id, str(retry.payment.id))
        self.payable.refresh_from_db()
        self.assertEqual(self.payable.paid_amount, Decimal("200.00"))
