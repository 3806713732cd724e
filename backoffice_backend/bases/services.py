# bases/services.py

from __future__ import annotations

import logging
import re

from django.db import IntegrityError, transaction
from django.utils import timezone

from bases.models import Base
from core.exceptions import BadRequest, DuplicateName

logger = logging.getLogger("bases")

_CODE_SEPARATORS = re.compile(r"[\s\-_]+")
_CODE_DROP = re.compile(r"[^A-Z0-9_]")


def generate_base_code(name: str) -> str:
    """
    Derive a code from a base name: upper-case alphanumerics, separators
    collapsed to "_". A clashing code gets a HHMMSS suffix.
    """
    code = _CODE_SEPARATORS.sub("_", (name or "").strip().upper())
    code = _CODE_DROP.sub("", code).strip("_") or "BASE"

    if Base.objects.filter(code=code).exists():
        code = f"{code}_{timezone.localtime().strftime('%H%M%S')}"
    return code


def create_base(*, name: str, code: str = "", currency: str = "", location: str = "", description: str = "") -> Base:
    name = (name or "").strip()
    if not name:
        raise BadRequest("name is required")

    if Base.objects.filter(name=name).exists():
        raise DuplicateName(f"Base '{name}' already exists")

    code = (code or "").strip().upper() or generate_base_code(name)
    if Base.objects.filter(code=code).exists():
        raise DuplicateName(f"Base code '{code}' already exists")

    try:
        with transaction.atomic():
            base = Base.objects.create(
                name=name,
                code=code,
                currency=currency or "",
                location=location or "",
                description=description or "",
            )
    except IntegrityError as exc:
        raise DuplicateName("Base name or code already exists") from exc

    logger.info("Base created", extra={"base_id": str(base.id), "code": base.code})
    return base


def ensure_bases(names) -> list[Base]:
    """Get-or-create bases by name (used by the dev seed)."""
    out = []
    for raw in names or []:
        name = (raw or "").strip()
        if not name:
            continue
        base = Base.objects.filter(name=name).first()
        if base is None:
            base = create_base(name=name)
        out.append(base)
    return out
