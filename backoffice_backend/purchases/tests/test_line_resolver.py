# purchases/tests/test_line_resolver.py

from __future__ import annotations

from datetime import date
from decimal import Decimal

from django.test import TestCase, override_settings

from core.exceptions import InvalidLineItem, InvalidSupplierProduct, ProductMissing
from core.tests.factories import make_supplier
from products.models import (
    Product,
    ProductPurchaseParam,
    ProductUnitSpec,
    SupplierProductPrice,
)
from purchases.services.line_resolver import resolve_line, resolve_lines, resolve_unit_price


class LineResolverTests(TestCase):
    """
    GUARANTEES:
    - lines resolve to a product, a base-unit factor and a positive price
    - the price chain is supplier price -> purchase param -> product price
    - strict mode keeps products with their own supplier
    """

    def setUp(self):
        self.supplier = make_supplier(name="Lao Brewery")
        self.product = Product.objects.create(
            name="Beer Lao 640ml",
            unit="bottle",
            base_unit="bottle",
            unit_price=Decimal("9.00"),
            supplier=self.supplier,
        )

    # --------------------------------------------------
    # Identity
    # --------------------------------------------------
    def test_unknown_name_creates_product_for_supplier(self):
        line = resolve_line(
            {"product_name": "Ice cubes", "unit": "bag", "quantity": "3", "unit_price": "2.50"},
            supplier=self.supplier,
            purchase_date=date(2025, 3, 1),
        )

        product = Product.objects.get(name="Ice cubes")
        self.assertEqual(line.product, product)
        self.assertEqual(product.supplier, self.supplier)
        self.assertEqual(line.amount, Decimal("7.50"))

    def test_unknown_product_id(self):
        with self.assertRaises(ProductMissing):
            resolve_line(
                {"product_id": "00000000-0000-0000-0000-000000000000", "quantity": "1", "unit_price": "1"},
                supplier=self.supplier,
                purchase_date=None,
            )

    @override_settings(STRICT_PRODUCT_SUPPLIER=True)
    def test_strict_mode_rejects_foreign_product(self):
        other = make_supplier(name="Mekong Foods")
        with self.assertRaises(InvalidSupplierProduct):
            resolve_line(
                {"product_id": self.product.id, "quantity": "1", "unit_price": "10"},
                supplier=other,
                purchase_date=None,
            )

    @override_settings(STRICT_PRODUCT_SUPPLIER=True)
    def test_strict_mode_rejects_unknown_name(self):
        with self.assertRaises(InvalidLineItem):
            resolve_line(
                {"product_name": "Unlisted", "quantity": "1", "unit_price": "10"},
                supplier=self.supplier,
                purchase_date=None,
            )
        self.assertFalse(Product.objects.filter(name="Unlisted").exists())

    # --------------------------------------------------
    # Units
    # --------------------------------------------------
    def test_unit_spec_factor(self):
        ProductUnitSpec.objects.create(product=self.product, unit="box", factor_to_base=Decimal("24"))

        line = resolve_line(
            {"product_id": self.product.id, "unit": "box", "quantity": "2", "unit_price": "200"},
            supplier=self.supplier,
            purchase_date=None,
        )

        self.assertEqual(line.factor_to_base, Decimal("24"))
        self.assertEqual(line.quantity_base, Decimal("48.0000"))
        self.assertEqual(line.amount, Decimal("400.00"))

    def test_purchase_param_unit_adopted_when_line_has_none(self):
        ProductPurchaseParam.objects.create(
            product=self.product, unit="crate", factor_to_base=Decimal("12"), purchase_price=Decimal("100")
        )

        line = resolve_line(
            {"product_id": self.product.id, "quantity": "1"},
            supplier=self.supplier,
            purchase_date=None,
        )

        self.assertEqual(line.unit, "crate")
        self.assertEqual(line.quantity_base, Decimal("12.0000"))
        self.assertEqual(line.unit_price, Decimal("100.00"))

    def test_unknown_unit_factor_is_one(self):
        line = resolve_line(
            {"product_id": self.product.id, "unit": "pallet", "quantity": "5", "unit_price": "1"},
            supplier=self.supplier,
            purchase_date=None,
        )
        self.assertEqual(line.quantity_base, Decimal("5.0000"))

    # --------------------------------------------------
    # Prices
    # --------------------------------------------------
    def test_price_chain(self):
        # product price only
        self.assertEqual(
            resolve_unit_price(product=self.product, supplier=self.supplier, purchase_date=date(2025, 3, 1)),
            Decimal("9.00"),
        )

        ProductPurchaseParam.objects.create(
            product=self.product, unit="bottle", factor_to_base=Decimal("1"), purchase_price=Decimal("9.50")
        )
        self.assertEqual(
            resolve_unit_price(product=self.product, supplier=self.supplier, purchase_date=date(2025, 3, 1)),
            Decimal("9.50"),
        )

        SupplierProductPrice.objects.create(
            supplier=self.supplier, product=self.product, price=Decimal("8.00"), effective_from=date(2025, 1, 1)
        )
        SupplierProductPrice.objects.create(
            supplier=self.supplier, product=self.product, price=Decimal("8.80"), effective_from=date(2025, 6, 1)
        )
        self.assertEqual(
            resolve_unit_price(product=self.product, supplier=self.supplier, purchase_date=date(2025, 3, 1)),
            Decimal("8.00"),
        )
        self.assertEqual(
            resolve_unit_price(product=self.product, supplier=self.supplier, purchase_date=date(2025, 7, 1)),
            Decimal("8.80"),
        )

    def test_line_without_any_price_is_rejected(self):
        bare = Product.objects.create(name="Napkins")
        with self.assertRaises(InvalidLineItem):
            resolve_line(
                {"product_id": bare.id, "quantity": "1"},
                supplier=self.supplier,
                purchase_date=None,
            )

    def test_non_positive_quantity_is_rejected(self):
        with self.assertRaises(InvalidLineItem):
            resolve_line(
                {"product_id": self.product.id, "quantity": "0", "unit_price": "1"},
                supplier=self.supplier,
                purchase_date=None,
            )

    def test_empty_lines_rejected(self):
        with self.assertRaises(InvalidLineItem):
            resolve_lines([], supplier=self.supplier, purchase_date=None)
