# bases/tests/test_bases.py

from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from bases.models import Base
from bases.services import create_base, ensure_bases
from core.exceptions import DuplicateName
from core.tests.factories import make_admin, make_agent


class BaseServiceTests(TestCase):
    def test_code_is_generated(self):
        base = create_base(name="Luang Prabang")
        self.assertTrue(base.code)
        self.assertEqual(base.currency, "CNY")

    def test_duplicate_name(self):
        create_base(name="Vientiane", code="VTE")
        with self.assertRaises(DuplicateName):
            create_base(name="Vientiane")

    def test_ensure_bases_is_get_or_create(self):
        first = ensure_bases(["Vientiane", " ", "Pakse"])
        second = ensure_bases(["Pakse"])

        self.assertEqual([b.name for b in first], ["Vientiane", "Pakse"])
        self.assertEqual(second[0].id, first[1].id)
        self.assertEqual(Base.objects.count(), 2)


class BaseApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.vte = create_base(name="Vientiane", code="VTE")
        create_base(name="Pakse", code="PKZ")

    def test_agent_lists_own_bases(self):
        self.client.force_authenticate(user=make_agent(bases=[self.vte]))

        response = self.client.get("/api/base/list")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([b["name"] for b in response.data["records"]], ["Vientiane"])

    def test_create_is_admin_only(self):
        body = {"name": "Savannakhet", "code": "SVK", "currency": "LAK"}

        self.client.force_authenticate(user=make_agent())
        self.assertEqual(self.client.post("/api/base/create", body, format="json").status_code, 403)

        self.client.force_authenticate(user=make_admin())
        response = self.client.post("/api/base/create", body, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["currency"], "LAK")

        response = self.client.post("/api/base/create", body, format="json")
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["reason"], "duplicate-name")
