# suppliers/tests/test_suppliers.py

from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from core.tests.factories import make_admin, make_agent, make_supplier
from suppliers.models import Supplier


class SupplierApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.admin = make_admin()

    def test_create_and_duplicate(self):
        self.client.force_authenticate(user=self.admin)
        body = {"name": "Mekong Foods", "settlement_type": "monthly", "settlement_day": 25}

        response = self.client.post("/api/supplier/create", body, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["settlement_day"], 25)

        response = self.client.post("/api/supplier/create", body, format="json")
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_settlement_day_range(self):
        self.client.force_authenticate(user=self.admin)

        response = self.client.post(
            "/api/supplier/create", {"name": "Bad Day", "settlement_day": 32}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(Supplier.objects.exists())

    def test_partial_update(self):
        supplier = make_supplier(name="Lao Brewery")
        self.client.force_authenticate(user=self.admin)

        response = self.client.put(
            f"/api/supplier/update?id={supplier.id}",
            {"settlement_type": "immediate", "phone": "+856 21 000"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        supplier.refresh_from_db()
        self.assertEqual(supplier.settlement_type, "immediate")
        self.assertEqual(supplier.phone, "+856 21 000")
        self.assertEqual(supplier.name, "Lao Brewery")

    def test_update_missing_supplier(self):
        self.client.force_authenticate(user=self.admin)

        response = self.client.put(
            "/api/supplier/update?id=00000000-0000-0000-0000-000000000000", {"phone": "1"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["reason"], "supplier-missing")

    def test_agent_reads_but_cannot_write(self):
        make_supplier()
        self.client.force_authenticate(user=make_agent())

        self.assertEqual(self.client.get("/api/supplier/list").data["total"], 1)
        response = self.client.post("/api/supplier/create", {"name": "X"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
