# core/tests/factories.py

"""
Small builders shared by the app test suites.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from django.contrib.auth import get_user_model

from bases.models import Base
from permissions.roles import ROLE_ADMIN, ROLE_BASE_AGENT
from purchases.services.purchase_service import create_purchase
from suppliers.models import Supplier

User = get_user_model()


def make_base(name: str = "Vientiane", code: str = "", currency: str = "CNY") -> Base:
    return Base.objects.create(name=name, code=code or name.upper()[:10], currency=currency)


def make_supplier(name: str = "Lao Brewery", settlement_type: str = "flexible", settlement_day=None) -> Supplier:
    return Supplier.objects.create(
        name=name,
        settlement_type=settlement_type,
        settlement_day=settlement_day,
    )


def make_admin(username: str = "admin") -> User:
    return User.objects.create_user(username=username, password="pass12345", role=ROLE_ADMIN)


def make_agent(username: str = "agent", bases=()) -> User:
    user = User.objects.create_user(username=username, password="pass12345", role=ROLE_BASE_AGENT)
    if bases:
        user.bases.add(*bases)
    return user


def purchase_data(*, supplier, base, purchase_date: date, total, currency: str = "", product_name: str = "Beer Lao 640ml") -> dict:
    total = Decimal(str(total))
    return {
        "supplier_id": supplier.id,
        "base_id": base.id,
        "purchase_date": purchase_date,
        "currency": currency,
        "items": [
            {
                "product_name": product_name,
                "unit": "box",
                "quantity": Decimal("1"),
                "unit_price": total,
            }
        ],
    }


def make_purchase(*, supplier, base, purchase_date: date, total, currency: str = "", idempotency_key: str = ""):
    result = create_purchase(
        data=purchase_data(
            supplier=supplier,
            base=base,
            purchase_date=purchase_date,
            total=total,
            currency=currency,
        ),
        idempotency_key=idempotency_key,
    )
    return result.purchase
