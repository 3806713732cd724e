# purchases/services/line_resolver.py

"""
======================================================
PATH: purchases/services/line_resolver.py
======================================================
PURCHASE LINE RESOLVER

Per line:
1) Product identity
   - product_id given  -> must exist (ProductMissing)
   - name only         -> existing product by name, else create it
   - strict mode       -> unknown name rejected; product.supplier must be
                          the purchase supplier
2) Unit factor to base unit
   purchase param (same unit, or empty unit adopts the param unit)
   -> unit spec (product, unit) -> 1
3) Unit price (only when the line carries none)
   supplier price effective on purchase_date -> param purchase_price
   -> product.unit_price
4) amount = quantity x unit_price when the line carries none

quantity <= 0 or a final unit_price <= 0 is InvalidLineItem.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation

from django.conf import settings
from django.db import IntegrityError, transaction

from core.exceptions import InvalidLineItem, InvalidSupplierProduct, ProductMissing
from core.money import ZERO, money, quantity as to_quantity
from products.models import (
    Product,
    ProductPurchaseParam,
    ProductUnitSpec,
    SupplierProductPrice,
)

ONE = Decimal("1")


@dataclass(frozen=True)
class ResolvedLine:
    product: Product
    product_name: str
    unit: str
    quantity: Decimal
    unit_price: Decimal
    amount: Decimal
    quantity_base: Decimal
    factor_to_base: Decimal


def strict_mode() -> bool:
    return bool(getattr(settings, "STRICT_PRODUCT_SUPPLIER", False))


def _decimal(value, *, field: str, index: int) -> Decimal:
    if value in (None, ""):
        return ZERO
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError) as exc:
        raise InvalidLineItem(f"items[{index}].{field} is not a number") from exc


# ---------------------------------------------------------------------
# Identity
# ---------------------------------------------------------------------
def resolve_product(*, product_id=None, product_name: str = "", unit: str = "", supplier, index: int = 0) -> Product:
    strict = strict_mode()

    if product_id:
        product = Product.objects.filter(id=product_id).first()
        if product is None:
            raise ProductMissing(f"items[{index}]: product {product_id} not found")
    else:
        name = (product_name or "").strip()
        if not name:
            raise InvalidLineItem(f"items[{index}]: product_id or product_name is required")

        product = Product.objects.filter(name=name).first()
        if product is None:
            if strict:
                raise InvalidLineItem(f"items[{index}]: unknown product '{name}'")
            try:
                with transaction.atomic():
                    product = Product.objects.create(
                        name=name,
                        unit=unit,
                        base_unit=unit,
                        supplier=supplier,
                        status=Product.STATUS_ACTIVE,
                    )
            except IntegrityError:
                product = Product.objects.get(name=name)

    if strict and str(product.supplier_id or "") != str(supplier.id):
        raise InvalidSupplierProduct(
            f"items[{index}]: product '{product.name}' is not supplied by '{supplier.name}'"
        )

    return product


# ---------------------------------------------------------------------
# Units / prices
# ---------------------------------------------------------------------
def resolve_unit_factor(*, product: Product, unit: str) -> tuple[str, Decimal]:
    """Returns (effective unit, factor_to_base)."""
    unit = (unit or "").strip()

    param = ProductPurchaseParam.objects.filter(product=product).first()
    if param is not None:
        if not unit:
            return param.unit, Decimal(param.factor_to_base)
        if param.unit == unit:
            return unit, Decimal(param.factor_to_base)

    if unit:
        spec = ProductUnitSpec.objects.filter(product=product, unit=unit).first()
        if spec is not None:
            return unit, Decimal(spec.factor_to_base)

    return unit, ONE


def resolve_unit_price(*, product: Product, supplier, purchase_date: date | None) -> Decimal:
    """Price chain used when a line carries no price. ZERO when nothing is known."""
    prices = SupplierProductPrice.objects.filter(supplier=supplier, product=product)
    if purchase_date is not None:
        prices = prices.filter(effective_from__lte=purchase_date)
    row = prices.order_by("-effective_from", "-created_at").first()
    if row is not None and row.price > ZERO:
        return money(row.price)

    param = ProductPurchaseParam.objects.filter(product=product).first()
    if param is not None and param.purchase_price and param.purchase_price > ZERO:
        return money(param.purchase_price)

    if product.unit_price and product.unit_price > ZERO:
        return money(product.unit_price)

    return ZERO


# ---------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------
def resolve_line(line: dict, *, supplier, purchase_date: date | None, index: int = 0) -> ResolvedLine:
    product = resolve_product(
        product_id=line.get("product_id"),
        product_name=line.get("product_name") or "",
        unit=(line.get("unit") or "").strip(),
        supplier=supplier,
        index=index,
    )

    qty = to_quantity(_decimal(line.get("quantity"), field="quantity", index=index))
    if qty <= ZERO:
        raise InvalidLineItem(f"items[{index}]: quantity must be > 0")

    unit, factor = resolve_unit_factor(product=product, unit=line.get("unit") or "")

    unit_price = money(_decimal(line.get("unit_price"), field="unit_price", index=index))
    if unit_price <= ZERO:
        unit_price = resolve_unit_price(product=product, supplier=supplier, purchase_date=purchase_date)
    if unit_price <= ZERO:
        raise InvalidLineItem(f"items[{index}]: no unit price for '{product.name}'")

    amount = money(_decimal(line.get("amount"), field="amount", index=index))
    if amount <= ZERO:
        amount = money(qty * unit_price)

    return ResolvedLine(
        product=product,
        product_name=product.name,
        unit=unit,
        quantity=qty,
        unit_price=unit_price,
        amount=amount,
        quantity_base=to_quantity(qty * factor),
        factor_to_base=factor,
    )


def resolve_lines(lines, *, supplier, purchase_date: date | None) -> list[ResolvedLine]:
    if not lines:
        raise InvalidLineItem("At least one item is required")
    return [
        resolve_line(line, supplier=supplier, purchase_date=purchase_date, index=i)
        for i, line in enumerate(lines)
    ]
