# core/api/errors.py

"""
ERROR RESPONSES

Every error body has the same shape:

    {"error": "<taxonomy code>", "reason": "<reason>", "detail": <text or field errors>}

- error_response(exc): used by views that catch ServiceError explicitly
- exception_handler:   REST_FRAMEWORK["EXCEPTION_HANDLER"], covers framework
                       errors (validation, auth, permission, 404) and any
                       ServiceError that escapes a view
"""

from __future__ import annotations

import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from core.exceptions import ServiceError

logger = logging.getLogger("api")

STATUS_CODES = {
    400: "bad-request",
    401: "unauthorised",
    403: "forbidden",
    404: "not-found",
    405: "method-not-allowed",
    409: "conflict",
    429: "throttled",
}


def error_response(exc: ServiceError) -> Response:
    if exc.status_code >= 500:
        logger.error("Service error", extra={"reason": exc.reason, "detail": exc.detail})
    return Response(exc.as_dict(), status=exc.status_code)


def exception_handler(exc, context):
    if isinstance(exc, ServiceError):
        return error_response(exc)

    if isinstance(exc, DjangoValidationError):
        detail = exc.message_dict if hasattr(exc, "error_dict") else exc.messages
        return Response(
            {"error": "bad-request", "reason": "validation", "detail": detail},
            status=status.HTTP_400_BAD_REQUEST,
        )

    response = drf_exception_handler(exc, context)
    if response is None:
        return None

    code = STATUS_CODES.get(response.status_code, "internal")
    data = response.data
    if isinstance(data, dict) and set(data.keys()) == {"detail"}:
        detail = data["detail"]
    else:
        detail = data

    reason = getattr(getattr(exc, "detail", None), "code", None) or code
    response.data = {"error": code, "reason": str(reason), "detail": detail}
    return response
