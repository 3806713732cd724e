# products/tests/test_catalog.py

from __future__ import annotations

from datetime import date
from decimal import Decimal

from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from core.exceptions import BadRequest, ProductMissing
from core.tests.factories import make_admin, make_agent, make_supplier
from products.models import Product, ProductPurchaseParam, ProductUnitSpec, SupplierProductPrice
from products.services.catalog import record_supplier_price, upsert_purchase_param, upsert_unit_spec


class CatalogServiceTests(TestCase):
    def setUp(self):
        self.supplier = make_supplier()
        self.product = Product.objects.create(name="Beer Lao 640ml", unit="bottle", base_unit="bottle")

    def test_unit_spec_upsert_updates_in_place(self):
        upsert_unit_spec(product_id=self.product.id, unit="box", factor_to_base="12")
        spec = upsert_unit_spec(product_id=self.product.id, unit="box", factor_to_base="24", is_default=True)

        self.assertEqual(ProductUnitSpec.objects.count(), 1)
        self.assertEqual(spec.factor_to_base, Decimal("24"))
        self.assertTrue(spec.is_default)

    def test_single_default_unit(self):
        upsert_unit_spec(product_id=self.product.id, unit="box", factor_to_base="24", is_default=True)
        upsert_unit_spec(product_id=self.product.id, unit="crate", factor_to_base="12", is_default=True)

        defaults = ProductUnitSpec.objects.filter(product=self.product, is_default=True)
        self.assertEqual([s.unit for s in defaults], ["crate"])

    def test_unit_spec_validation(self):
        with self.assertRaises(BadRequest):
            upsert_unit_spec(product_id=self.product.id, unit="box", factor_to_base="0")
        with self.assertRaises(BadRequest):
            upsert_unit_spec(product_id=self.product.id, unit="  ", factor_to_base="1")
        with self.assertRaises(ProductMissing):
            upsert_unit_spec(product_id="00000000-0000-0000-0000-000000000000", unit="box", factor_to_base="1")

    def test_purchase_param_is_one_per_product(self):
        upsert_purchase_param(product_id=self.product.id, unit="box", factor_to_base="24", purchase_price="200")
        param = upsert_purchase_param(product_id=self.product.id, unit="crate", factor_to_base="12", purchase_price="95.5")

        self.assertEqual(ProductPurchaseParam.objects.count(), 1)
        self.assertEqual(param.unit, "crate")
        self.assertEqual(param.purchase_price, Decimal("95.50"))

    def test_supplier_price_keyed_on_effective_date(self):
        record_supplier_price(
            supplier_id=self.supplier.id, product_id=self.product.id, price="8", effective_from=date(2025, 1, 1)
        )
        row = record_supplier_price(
            supplier_id=self.supplier.id,
            product_id=self.product.id,
            price="8.5",
            effective_from=date(2025, 1, 1),
            currency="thb",
        )

        self.assertEqual(SupplierProductPrice.objects.count(), 1)
        self.assertEqual(row.price, Decimal("8.50"))
        self.assertEqual(row.currency, "THB")

        with self.assertRaises(BadRequest):
            record_supplier_price(
                supplier_id=self.supplier.id, product_id=self.product.id, price="0", effective_from=date(2025, 2, 1)
            )


class CatalogApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.admin = make_admin()
        self.agent = make_agent()
        self.product = Product.objects.create(name="Beer Lao 640ml", unit="bottle", base_unit="bottle")

    def test_list_is_open_to_operators(self):
        Product.objects.create(name="Soda water")
        self.client.force_authenticate(user=self.agent)

        response = self.client.get("/api/product/list", {"name": "beer"})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["total"], 1)
        self.assertEqual(response.data["records"][0]["name"], "Beer Lao 640ml")

    def test_unit_spec_upsert_is_admin_only(self):
        body = {"product_id": str(self.product.id), "unit": "box", "factor_to_base": "24"}

        self.client.force_authenticate(user=self.agent)
        response = self.client.post("/api/product/unit-specs/upsert", body, format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(user=self.admin)
        response = self.client.post("/api/product/unit-specs/upsert", body, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        response = self.client.get("/api/product/unit-specs", {"product_id": str(self.product.id)})
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]["unit"], "box")

    def test_purchase_param_missing_is_404(self):
        self.client.force_authenticate(user=self.agent)

        response = self.client.get("/api/product/purchase-param", {"product_id": str(self.product.id)})

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["error"], "not-found")

    def test_product_id_is_required(self):
        self.client.force_authenticate(user=self.agent)

        response = self.client.get("/api/product/unit-specs")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["detail"], "product_id is required")
