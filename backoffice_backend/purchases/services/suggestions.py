# purchases/services/suggestions.py

"""
Read-only helpers for the purchase entry form.

suggest_price():
    supplier price / purchase param / product price chain (same as the
    line resolver), then the last purchased unit price for the
    (supplier, product_name) pair.

product_suggestions():
    products previously bought from a supplier with their average and
    last unit price.
"""

from __future__ import annotations

from django.db.models import Avg, Count, Max

from core.money import ZERO, money
from products.models import Product
from purchases.models import PurchaseEntryItem
from purchases.services.line_resolver import resolve_unit_price

SOURCE_CATALOG = "catalog"
SOURCE_HISTORY = "history"


def _last_purchased_price(*, supplier, product_name: str):
    row = (
        PurchaseEntryItem.objects.filter(
            purchase_entry__supplier=supplier,
            product_name=product_name,
            unit_price__gt=ZERO,
        )
        .order_by("-purchase_entry__purchase_date", "-created_at")
        .values_list("unit_price", flat=True)
        .first()
    )
    return money(row) if row is not None else None


def suggest_price(*, supplier, product_id=None, product_name: str = "", purchase_date=None) -> dict:
    product = None
    if product_id:
        product = Product.objects.filter(id=product_id).first()
    elif product_name:
        product = Product.objects.filter(name=product_name.strip()).first()

    if product is not None:
        price = resolve_unit_price(product=product, supplier=supplier, purchase_date=purchase_date)
        if price > ZERO:
            return {"found": True, "price": str(price), "source": SOURCE_CATALOG}

    name = (product_name or getattr(product, "name", "") or "").strip()
    if name:
        price = _last_purchased_price(supplier=supplier, product_name=name)
        if price is not None:
            return {"found": True, "price": str(price), "source": SOURCE_HISTORY}

    return {"found": False, "price": str(ZERO), "source": ""}


def product_suggestions(*, supplier, q: str = "", limit: int = 20) -> list[dict]:
    qs = PurchaseEntryItem.objects.filter(purchase_entry__supplier=supplier)
    q = (q or "").strip()
    if q:
        qs = qs.filter(product_name__icontains=q)

    rows = (
        qs.values("product_name")
        .annotate(
            avg_price=Avg("unit_price"),
            times=Count("id"),
            last_date=Max("purchase_entry__purchase_date"),
        )
        .order_by("-last_date", "product_name")[: max(1, int(limit))]
    )

    out = []
    for row in rows:
        last = _last_purchased_price(supplier=supplier, product_name=row["product_name"])
        out.append(
            {
                "product_name": row["product_name"],
                "avg_price": str(money(row["avg_price"] or ZERO)),
                "last_price": str(last) if last is not None else None,
                "count": row["times"],
                "last_date": row["last_date"].isoformat() if row["last_date"] else None,
            }
        )
    return out
