# expenses/tests/test_expenses.py

from __future__ import annotations

from decimal import Decimal

from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from core.exceptions import CategoryMissing, InvalidAmount
from core.tests.factories import make_admin, make_agent, make_base
from expenses.models import BaseExpense, ExpenseCategory
from expenses.services import create_expense


class ExpenseServiceTests(TestCase):
    def setUp(self):
        self.base = make_base(name="Bangkok", code="BKK", currency="THB")
        self.category = ExpenseCategory.objects.create(name="Rent")

    def test_currency_defaults_to_base(self):
        expense = create_expense(
            base_id=self.base.id, category_id=self.category.id, amount="1500", date="2025-01-05"
        )
        self.assertEqual(expense.currency, "THB")
        self.assertEqual(expense.amount, Decimal("1500.00"))

    def test_rejects_bad_input(self):
        with self.assertRaises(InvalidAmount):
            create_expense(base_id=self.base.id, category_id=self.category.id, amount="0", date="2025-01-05")
        with self.assertRaises(CategoryMissing):
            create_expense(
                base_id=self.base.id,
                category_id="00000000-0000-0000-0000-000000000000",
                amount="10",
                date="2025-01-05",
            )
        self.assertFalse(BaseExpense.objects.exists())


class ExpenseApiTests(TestCase):
    """
    GUARANTEES:
    - base_agent records and lists expenses of their own bases only
    - categories are admin-maintained; duplicates are a 409
    """

    def setUp(self):
        self.client = APIClient()
        self.base = make_base(name="Vientiane", code="VTE")
        self.other = make_base(name="Pakse", code="PKZ")
        self.admin = make_admin()
        self.agent = make_agent(bases=[self.base])
        self.category = ExpenseCategory.objects.create(name="Utilities")

    def _body(self, base):
        return {
            "base_id": str(base.id),
            "category_id": str(self.category.id),
            "date": "2025-01-10",
            "amount": "120.50",
            "detail": "Electricity",
        }

    def test_agent_creates_expense_for_own_base(self):
        self.client.force_authenticate(user=self.agent)

        response = self.client.post("/api/expense/create", self._body(self.base), format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["base_name"], "Vientiane")
        self.assertEqual(response.data["category_name"], "Utilities")
        self.assertEqual(response.data["creator_name"], "agent")

    def test_agent_cannot_write_foreign_base(self):
        self.client.force_authenticate(user=self.agent)

        response = self.client.post("/api/expense/create", self._body(self.other), format="json")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data["reason"], "base-scope")

    def test_list_is_scoped_and_filtered(self):
        create_expense(base_id=self.base.id, category_id=self.category.id, amount="10", date="2025-01-05")
        create_expense(base_id=self.base.id, category_id=self.category.id, amount="20", date="2025-02-05")
        create_expense(base_id=self.other.id, category_id=self.category.id, amount="30", date="2025-01-05")
        self.client.force_authenticate(user=self.agent)

        response = self.client.get("/api/expense/list")
        self.assertEqual(response.data["total"], 2)

        response = self.client.get("/api/expense/list", {"start_date": "2025-02-01"})
        self.assertEqual(response.data["total"], 1)
        self.assertEqual(response.data["records"][0]["amount"], "20.00")

    def test_categories(self):
        self.client.force_authenticate(user=self.agent)
        response = self.client.get("/api/expense/categories")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([c["name"] for c in response.data["records"]], ["Utilities"])

        response = self.client.post("/api/expense/categories", {"name": "Fuel"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(user=self.admin)
        response = self.client.post("/api/expense/categories", {"name": "Fuel"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

        response = self.client.post("/api/expense/categories", {"name": "Fuel"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["reason"], "duplicate-name")
