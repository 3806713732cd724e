# products/services/catalog.py

"""
PRODUCT CATALOG SERVICES

Maintains the inputs of the purchase line resolver:
- unit specs (per product, per unit)
- purchase param (one per product)
- supplier price history

All writes are upserts keyed on the natural unique constraint.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from django.db import transaction

from core.exceptions import BadRequest, ProductMissing, SupplierMissing
from core.money import money, normalize_currency
from products.models import (
    Product,
    ProductPurchaseParam,
    ProductUnitSpec,
    SupplierProductPrice,
)
from suppliers.models import Supplier

logger = logging.getLogger("products")


def _get_product(product_id) -> Product:
    try:
        return Product.objects.get(id=product_id)
    except Product.DoesNotExist as exc:
        raise ProductMissing() from exc


def _factor(value) -> Decimal:
    try:
        f = Decimal(str(value))
    except (ArithmeticError, ValueError, TypeError) as exc:
        raise BadRequest("factor_to_base must be a number") from exc
    if f <= 0:
        raise BadRequest("factor_to_base must be > 0")
    return f


@transaction.atomic
def upsert_unit_spec(*, product_id, unit: str, factor_to_base, kind: str = "", is_default: bool = False) -> ProductUnitSpec:
    product = _get_product(product_id)
    unit = (unit or "").strip()
    if not unit:
        raise BadRequest("unit is required")

    spec, created = ProductUnitSpec.objects.select_for_update().get_or_create(
        product=product,
        unit=unit,
        defaults={
            "factor_to_base": _factor(factor_to_base),
            "kind": kind or ProductUnitSpec.KIND_BOTH,
            "is_default": bool(is_default),
        },
    )
    if not created:
        spec.factor_to_base = _factor(factor_to_base)
        spec.kind = kind or spec.kind
        spec.is_default = bool(is_default)
        spec.save()

    if spec.is_default:
        # one default unit per product
        ProductUnitSpec.objects.filter(product=product, is_default=True).exclude(id=spec.id).update(
            is_default=False
        )

    logger.info(
        "Unit spec upserted",
        extra={"product_id": str(product.id), "unit": unit, "created": created},
    )
    return spec


@transaction.atomic
def upsert_purchase_param(*, product_id, unit: str, factor_to_base, purchase_price=None) -> ProductPurchaseParam:
    product = _get_product(product_id)
    unit = (unit or "").strip()
    if not unit:
        raise BadRequest("unit is required")

    price = money(purchase_price)
    if price < 0:
        raise BadRequest("purchase_price cannot be negative")

    param, created = ProductPurchaseParam.objects.select_for_update().get_or_create(
        product=product,
        defaults={"unit": unit, "factor_to_base": _factor(factor_to_base), "purchase_price": price},
    )
    if not created:
        param.unit = unit
        param.factor_to_base = _factor(factor_to_base)
        param.purchase_price = price
        param.save()

    return param


@transaction.atomic
def record_supplier_price(*, supplier_id, product_id, price, effective_from, currency: str = "") -> SupplierProductPrice:
    try:
        supplier = Supplier.objects.get(id=supplier_id)
    except Supplier.DoesNotExist as exc:
        raise SupplierMissing() from exc
    product = _get_product(product_id)

    amount = money(price)
    if amount <= 0:
        raise BadRequest("price must be > 0")

    row, _ = SupplierProductPrice.objects.update_or_create(
        supplier=supplier,
        product=product,
        effective_from=effective_from,
        defaults={"price": amount, "currency": normalize_currency(currency)},
    )
    return row
