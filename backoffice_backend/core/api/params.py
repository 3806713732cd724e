# core/api/params.py

"""
Query-string parsing shared by the API views.

All helpers raise BadRequest (400) on malformed input.
"""

from __future__ import annotations

import re
import uuid
from datetime import date, datetime

from core.exceptions import BadRequest

MONTH_RE = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


def parse_uuid(value, *, field: str = "id") -> uuid.UUID:
    try:
        return uuid.UUID(str(value).strip())
    except (TypeError, ValueError, AttributeError) as exc:
        raise BadRequest(f"{field} must be a valid id") from exc


def require_id(request, *, field: str = "id") -> uuid.UUID:
    raw = (request.query_params.get(field) or "").strip()
    if not raw:
        raise BadRequest(f"{field} is required")
    return parse_uuid(raw, field=field)


def parse_date(value, *, field: str = "date") -> date | None:
    raw = (value or "").strip() if isinstance(value, str) else value
    if not raw:
        return None
    if isinstance(raw, date):
        return raw
    try:
        return datetime.strptime(raw, "%Y-%m-%d").date()
    except ValueError as exc:
        raise BadRequest(f"{field} must be YYYY-MM-DD") from exc


def parse_month(value, *, field: str = "month") -> str | None:
    raw = (value or "").strip()
    if not raw:
        return None
    if not MONTH_RE.match(raw):
        raise BadRequest(f"{field} must be YYYY-MM")
    return raw
