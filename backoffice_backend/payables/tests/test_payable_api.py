# payables/tests/test_payable_api.py

from __future__ import annotations

from datetime import date
from decimal import Decimal

from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from core.models import IdempotencyKey
from core.tests.factories import make_admin, make_agent, make_base, make_purchase, make_supplier
from payables.models import PayableRecord, PaymentRecord


class PayableApiTests(TestCase):
    """
    GUARANTEES:
    - anonymous callers get 401 with the shared error body
    - base_agent sees and pays only payables of their bases
    - overpayment is a 400 with reason "overpayment" and changes nothing
    - status overrides and payment deletes are admin only
    """

    def setUp(self):
        self.client = APIClient()
        self.base = make_base(name="Vientiane", code="VTE")
        self.other_base = make_base(name="Pakse", code="PKZ")
        self.supplier = make_supplier(settlement_type="immediate")
        self.admin = make_admin()
        self.agent = make_agent(bases=[self.base])

        own = make_purchase(supplier=self.supplier, base=self.base, purchase_date=date(2025, 1, 15), total=100)
        foreign = make_purchase(supplier=self.supplier, base=self.other_base, purchase_date=date(2025, 1, 15), total=100)
        self.payable = PayableRecord.objects.get(purchase_entry=own)
        self.foreign_payable = PayableRecord.objects.get(purchase_entry=foreign)

    def test_anonymous_is_unauthorised(self):
        response = self.client.get("/api/payable/list")

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data["error"], "unauthorised")
        self.assertIn("reason", response.data)
        self.assertIn("detail", response.data)

    def test_agent_list_is_scoped(self):
        self.client.force_authenticate(user=self.agent)

        response = self.client.get("/api/payable/list")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["total"], 1)
        self.assertEqual(response.data["records"][0]["id"], str(self.payable.id))

    def test_admin_list_filters(self):
        self.client.force_authenticate(user=self.admin)

        response = self.client.get("/api/payable/list", {"base": "Pakse", "status": "pending"})

        self.assertEqual(response.data["total"], 1)
        self.assertEqual(response.data["records"][0]["base_name"], "Pakse")

    def test_detail_embeds_purchase_and_payments(self):
        PaymentRecord.objects.create(payable=self.payable, payment_amount=Decimal("10"), currency="CNY")
        self.client.force_authenticate(user=self.agent)

        response = self.client.get("/api/payable/detail", {"id": str(self.payable.id)})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["purchase"]["id"], str(self.payable.purchase_entry_id))
        self.assertEqual(len(response.data["payments"]), 1)
        self.assertEqual(response.data["links"], [])

    def test_agent_cannot_read_foreign_detail(self):
        self.client.force_authenticate(user=self.agent)

        response = self.client.get("/api/payable/detail", {"id": str(self.foreign_payable.id)})

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["reason"], "payable-missing")

    def test_overpayment_is_rejected(self):
        self.client.force_authenticate(user=self.agent)

        response = self.client.post(
            "/api/payment/create",
            {"payable_id": str(self.payable.id), "amount": "150.00"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "bad-request")
        self.assertEqual(response.data["reason"], "overpayment")
        self.payable.refresh_from_db()
        self.assertEqual(self.payable.paid_amount, Decimal("0.00"))
        self.assertFalse(PaymentRecord.objects.exists())

    def test_agent_cannot_pay_foreign_payable(self):
        self.client.force_authenticate(user=self.agent)

        response = self.client.post(
            "/api/payment/create",
            {"payable_id": str(self.foreign_payable.id), "amount": "10.00"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data["reason"], "base-scope")

    def test_payment_create_replay(self):
        self.client.force_authenticate(user=self.agent)
        body = {"payable_id": str(self.payable.id), "amount": "60.00", "payment_date": "2025-02-01"}

        first = self.client.post("/api/payment/create", body, format="json", HTTP_IDEMPOTENCY_KEY="pay-1")
        second = self.client.post("/api/payment/create", body, format="json", HTTP_IDEMPOTENCY_KEY="pay-1")

        self.assertEqual(first.status_code, status.HTTP_201_CREATED)
        self.assertEqual(second.status_code, status.HTTP_201_CREATED)
        self.assertEqual(first.data["payment"]["id"], second.data["payment"]["id"])
        self.assertEqual(second.data["payable"]["status"], PayableRecord.STATUS_PARTIAL)
        self.assertEqual(PaymentRecord.objects.count(), 1)

    def test_payment_key_reused_after_delete(self):
        body = {"payable_id": str(self.payable.id), "amount": "60.00", "payment_date": "2025-02-01"}
        self.client.force_authenticate(user=self.agent)
        first = self.client.post("/api/payment/create", body, format="json", HTTP_IDEMPOTENCY_KEY="pay-stale")

        self.client.force_authenticate(user=self.admin)
        deleted = self.client.delete(f"/api/payment/delete?id={first.data['payment']['id']}")

        self.client.force_authenticate(user=self.agent)
        retry = self.client.post("/api/payment/create", body, format="json", HTTP_IDEMPOTENCY_KEY="pay-stale")

        self.assertEqual(first.status_code, status.HTTP_201_CREATED)
        self.assertEqual(deleted.status_code, status.HTTP_200_OK)
        self.assertEqual(retry.status_code, status.HTTP_201_CREATED)
        self.assertNotEqual(retry.data["payment"]["id"], first.data["payment"]["id"])
        self.assertEqual(IdempotencyKey.objects.get(key="pay-stale").ref_id, retry.data["payment"]["id"])
        self.assertEqual(PaymentRecord.objects.count(), 1)

    def test_replay_of_foreign_payment_is_forbidden(self):
        self.client.force_authenticate(user=self.admin)
        self.client.post(
            "/api/payment/create",
            {"payable_id": str(self.foreign_payable.id), "amount": "10.00"},
            format="json",
            HTTP_IDEMPOTENCY_KEY="pay-foreign",
        )

        self.client.force_authenticate(user=self.agent)
        response = self.client.post(
            "/api/payment/create",
            {"payable_id": str(self.payable.id), "amount": "10.00"},
            format="json",
            HTTP_IDEMPOTENCY_KEY="pay-foreign",
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data["reason"], "base-scope")
        self.assertEqual(PaymentRecord.objects.count(), 1)

    def test_update_status_is_admin_only(self):
        self.client.force_authenticate(user=self.agent)
        response = self.client.post(
            f"/api/payable/update-status?id={self.payable.id}", {"status": "paid"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(user=self.admin)
        response = self.client.post(
            f"/api/payable/update-status?id={self.payable.id}", {"status": "paid"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["status"], PayableRecord.STATUS_PAID)
        self.assertEqual(response.data["remaining_amount"], "0.00")

        response = self.client.post(
            f"/api/payable/update-status?id={self.payable.id}", {"status": "partial"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["reason"], "invalid-status")

    def test_payment_delete_is_admin_only(self):
        payment = PaymentRecord.objects.create(payable=self.payable, payment_amount=Decimal("10"), currency="CNY")

        self.client.force_authenticate(user=self.agent)
        response = self.client.delete(f"/api/payment/delete?id={payment.id}")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(user=self.admin)
        response = self.client.delete(f"/api/payment/delete?id={payment.id}")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(PaymentRecord.objects.exists())

    def test_summary_counts_scoped_payables(self):
        self.client.force_authenticate(user=self.agent)

        response = self.client.get("/api/payable/summary")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["count"], 1)
        self.assertEqual(response.data["overdue_count"], 1)
        self.assertEqual(response.data["by_currency"][0]["remaining_amount"], "100.00")

    def test_overdue_excludes_paid(self):
        PaymentRecord.objects.create(payable=self.payable, payment_amount=Decimal("100"), currency="CNY")
        self.payable.paid_amount = Decimal("100")
        self.payable.remaining_amount = Decimal("0")
        self.payable.status = PayableRecord.STATUS_PAID
        self.payable.save()
        self.client.force_authenticate(user=self.admin)

        response = self.client.get("/api/payable/overdue")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([r["id"] for r in response.data["records"]], [str(self.foreign_payable.id)])

    def test_missing_id_is_bad_request(self):
        self.client.force_authenticate(user=self.admin)

        response = self.client.get("/api/payable/detail")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "bad-request")
