# core/tests/test_core.py

from __future__ import annotations

from datetime import date
from decimal import Decimal

from django.test import SimpleTestCase, TestCase
from rest_framework import status
from rest_framework.test import APIClient

from core.api.params import parse_date, parse_month, parse_uuid
from core.exceptions import BadRequest, IdempotencyConflict
from core.idempotency import find_reference, remember
from core.money import money, normalize_currency, quantity
from core.tests.factories import make_admin


class MoneyTests(SimpleTestCase):
    def test_money_rounds_half_up(self):
        self.assertEqual(money("1.005"), Decimal("1.01"))
        self.assertEqual(money(None), Decimal("0.00"))
        self.assertEqual(quantity("2.00005"), Decimal("2.0001"))

    def test_money_rejects_garbage(self):
        with self.assertRaises(ValueError):
            money("abc")

    def test_normalize_currency(self):
        self.assertEqual(normalize_currency(" thb "), "THB")
        self.assertEqual(normalize_currency("", fallback="LAK"), "LAK")


class ParamTests(SimpleTestCase):
    def test_parse_date(self):
        self.assertEqual(parse_date("2025-03-01"), date(2025, 3, 1))
        self.assertIsNone(parse_date(""))
        with self.assertRaises(BadRequest):
            parse_date("2025-02-30")

    def test_parse_month(self):
        self.assertEqual(parse_month(" 2025-03 "), "2025-03")
        self.assertIsNone(parse_month(None))
        with self.assertRaises(BadRequest):
            parse_month("2025-3")

    def test_parse_uuid(self):
        with self.assertRaises(BadRequest):
            parse_uuid("nope")


class IdempotencyKeyTests(TestCase):
    def test_remember_and_find(self):
        self.assertIsNone(find_reference(resource="purchase", key="k1"))
        remember(resource="purchase", key="k1", ref_id="abc")

        self.assertEqual(find_reference(resource="purchase", key="k1"), "abc")
        with self.assertRaises(IdempotencyConflict):
            find_reference(resource="payment", key="k1")

    def test_blank_key_is_ignored(self):
        remember(resource="purchase", key="  ", ref_id="abc")
        self.assertIsNone(find_reference(resource="purchase", key=""))


class ErrorShapeTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.client.force_authenticate(user=make_admin())

    def test_validation_error_shape(self):
        response = self.client.post("/api/base/create", {}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "bad-request")
        self.assertIn("name", response.data["detail"])

    def test_method_not_allowed_shape(self):
        response = self.client.get("/api/base/create")

        self.assertEqual(response.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)
        self.assertEqual(response.data["error"], "method-not-allowed")
        self.assertEqual(set(response.data), {"error", "reason", "detail"})
