# analytics/tests/test_analytics_api.py

from __future__ import annotations

from datetime import date
from decimal import Decimal
from io import StringIO

from django.core.management import call_command
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from analytics.models import ExchangeRate, SupplierMonthlySpend
from core.tests.factories import make_admin, make_agent, make_base, make_purchase, make_supplier


class RefreshApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.base = make_base()
        self.admin = make_admin()
        self.agent = make_agent(bases=[self.base])
        make_purchase(supplier=make_supplier(), base=self.base, purchase_date=date(2025, 1, 15), total=100)

    def test_refresh_is_admin_only(self):
        self.client.force_authenticate(user=self.agent)
        response = self.client.post("/api/admin/refresh-monthly?month=2025-01")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(user=self.admin)
        response = self.client.post("/api/admin/refresh-monthly?month=2025-01")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["month"], "2025-01")
        self.assertEqual(response.data["supplier_rows"], 1)
        self.assertTrue(SupplierMonthlySpend.objects.filter(month="2025-01").exists())

    def test_refresh_bad_month(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post("/api/admin/refresh-monthly?month=2025-1")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "bad-request")

    def test_refresh_range(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post("/api/admin/refresh-monthly-range?start=2025-02&end=2024-12")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["months"], ["2024-12", "2025-01", "2025-02"])
        self.assertEqual(response.data["count"], 3)

    def test_refresh_command(self):
        call_command("refresh_rollups", month="2025-01", stdout=StringIO())
        self.assertEqual(SupplierMonthlySpend.objects.filter(month="2025-01").count(), 1)


class ReportApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.base = make_base(name="Vientiane", code="VTE")
        self.other = make_base(name="Pakse", code="PKZ")
        self.agent = make_agent(bases=[self.base])
        supplier = make_supplier()
        make_purchase(supplier=supplier, base=self.base, purchase_date=date(2025, 1, 15), total=100)
        make_purchase(supplier=supplier, base=self.other, purchase_date=date(2025, 1, 15), total=40)

    def test_agent_sees_own_bases_only(self):
        self.client.force_authenticate(user=self.agent)

        response = self.client.get(
            "/api/analytics/supplier-spend", {"start_date": "2025-01-10", "end_date": "2025-01-20"}
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["source"], "live")
        self.assertEqual(response.data["total_purchase_cny"], "100.00")

    def test_dates_are_required(self):
        self.client.force_authenticate(user=self.agent)

        response = self.client.get("/api/analytics/base-expense", {"start_date": "2025-01-01"})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "bad-request")

    def test_malformed_date(self):
        self.client.force_authenticate(user=self.agent)

        response = self.client.get(
            "/api/analytics/supplier-spend", {"start_date": "01/01/2025", "end_date": "2025-01-31"}
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class RateApiTests(TestCase):
    def test_seeded_rates_are_listed(self):
        call_command("seed_exchange_rates", stdout=StringIO())
        client = APIClient()
        client.force_authenticate(user=make_admin())

        response = client.get("/api/rate/list")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["total"], 2)
        self.assertEqual([r["currency"] for r in response.data["records"]], ["LAK", "THB"])
        self.assertEqual(ExchangeRate.objects.get(currency="THB").rate_to_cny, Decimal("0.223714"))


class HealthTests(TestCase):
    def test_health_needs_no_auth(self):
        response = APIClient().get("/api/health")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {"status": "ok", "db": "ok"})

