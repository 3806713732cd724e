# core/idempotency.py

"""
IDEMPOTENCY HELPERS

Usage inside a create service:

    ref = find_reference(resource=..., key=key)     # fast replay, before any work
    with transaction.atomic():
        obj = ...create...
        remember(resource=..., key=key, ref_id=obj.id)   # LAST statement

A concurrent twin blocks on the unique index of IdempotencyKey.key and fails
with IntegrityError once the winner commits; the caller rolls back and
re-reads the winner's reference.

A key whose record was deleted later is "stale": the retry creates a new
record and remember(..., replace=True) re-points the key at it.
"""

from __future__ import annotations

import logging

from core.exceptions import IdempotencyConflict
from core.models import IdempotencyKey

logger = logging.getLogger("idempotency")

HEADER = "HTTP_IDEMPOTENCY_KEY"


def key_from_request(request) -> str:
    return (request.META.get(HEADER) or "").strip()[:128]


def find_reference(*, resource: str, key: str) -> str | None:
    key = (key or "").strip()
    if not key:
        return None

    row = IdempotencyKey.objects.filter(key=key).first()
    if row is None:
        return None

    if row.resource != resource:
        logger.warning(
            "Idempotency key reused across resources",
            extra={"key": key, "stored_resource": row.resource, "resource": resource},
        )
        raise IdempotencyConflict()

    return row.ref_id


def remember(*, resource: str, key: str, ref_id, replace: bool = False) -> None:
    """
    Store key -> ref_id. With replace=True an existing row for the key (one
    whose record has since been deleted) is re-pointed at the new record.
    """
    key = (key or "").strip()
    if not key:
        return

    if replace:
        updated = IdempotencyKey.objects.filter(key=key, resource=resource).update(ref_id=str(ref_id))
        if updated:
            logger.info("Stale idempotency key re-pointed", extra={"key": key, "resource": resource})
            return

    IdempotencyKey.objects.create(key=key, resource=resource, ref_id=str(ref_id))
