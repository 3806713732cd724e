# suppliers/services.py

from __future__ import annotations

import logging

from django.db import IntegrityError, transaction

from core.exceptions import DuplicateName, SupplierMissing
from suppliers.models import Supplier

logger = logging.getLogger("suppliers")

EDITABLE_FIELDS = (
    "name",
    "contact_person",
    "phone",
    "email",
    "address",
    "settlement_type",
    "settlement_day",
    "is_active",
)


def create_supplier(**data) -> Supplier:
    name = (data.get("name") or "").strip()
    if Supplier.objects.filter(name=name).exists():
        raise DuplicateName(f"Supplier '{name}' already exists")

    try:
        with transaction.atomic():
            supplier = Supplier.objects.create(
                **{k: v for k, v in data.items() if k in EDITABLE_FIELDS}
            )
    except IntegrityError as exc:
        raise DuplicateName(f"Supplier '{name}' already exists") from exc

    logger.info(
        "Supplier created",
        extra={"supplier_id": str(supplier.id), "settlement_type": supplier.settlement_type},
    )
    return supplier


@transaction.atomic
def update_supplier(*, supplier_id, **data) -> Supplier:
    """
    Partial update. A settlement policy change applies to purchases recorded
    (or updated) afterwards; existing payables keep their bucket.
    """
    try:
        supplier = Supplier.objects.select_for_update().get(id=supplier_id)
    except Supplier.DoesNotExist as exc:
        raise SupplierMissing() from exc

    name = data.get("name")
    if name is not None:
        name = name.strip()
        if Supplier.objects.filter(name=name).exclude(id=supplier.id).exists():
            raise DuplicateName(f"Supplier '{name}' already exists")

    for field in EDITABLE_FIELDS:
        if field in data:
            setattr(supplier, field, data[field])

    supplier.save()
    return supplier
