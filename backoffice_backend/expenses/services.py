# expenses/services.py

from __future__ import annotations

import logging

from django.db import IntegrityError, transaction

from bases.models import Base
from core.exceptions import BadRequest, BaseMissing, CategoryMissing, DuplicateName, InvalidAmount
from core.money import DEFAULT_CURRENCY, ZERO, money, normalize_currency
from expenses.models import BaseExpense, ExpenseCategory

logger = logging.getLogger("expenses")


def create_category(*, name: str) -> ExpenseCategory:
    name = (name or "").strip()
    if not name:
        raise BadRequest("name is required")
    if ExpenseCategory.objects.filter(name=name).exists():
        raise DuplicateName(f"Category '{name}' already exists")
    try:
        with transaction.atomic():
            return ExpenseCategory.objects.create(name=name)
    except IntegrityError as exc:
        raise DuplicateName(f"Category '{name}' already exists") from exc


@transaction.atomic
def create_expense(*, base_id, category_id, amount, date, currency: str = "", detail: str = "", user=None, claims=None) -> BaseExpense:
    base = Base.objects.filter(id=base_id).first()
    if base is None:
        raise BaseMissing()
    if claims is not None:
        claims.require_base(base.id)

    category = ExpenseCategory.objects.filter(id=category_id).first()
    if category is None:
        raise CategoryMissing()

    amount = money(amount)
    if amount <= ZERO:
        raise InvalidAmount()

    expense = BaseExpense.objects.create(
        base=base,
        category=category,
        date=date,
        amount=amount,
        currency=normalize_currency(currency, fallback=base.currency or DEFAULT_CURRENCY),
        detail=detail or "",
        created_by=user if getattr(user, "pk", None) else None,
        creator_name=getattr(user, "username", "") or "",
    )

    logger.info(
        "Base expense recorded",
        extra={"expense_id": str(expense.id), "base_id": str(base.id), "amount": str(amount)},
    )
    return expense
