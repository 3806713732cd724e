# core/exceptions.py

"""
BACK-OFFICE SERVICE ERRORS

Centralized domain errors for every service layer.

Each error carries:
- code:   client-facing taxonomy bucket (bad-request, forbidden, ...)
- reason: stable machine-readable reason (overpayment, currency-mismatch, ...)
- status_code: HTTP status used when a view converts it

Views never build these by hand; they catch ServiceError and hand it to
core.api.errors.error_response().
"""

from __future__ import annotations


class ServiceError(Exception):
    """Base exception for all service failures."""

    code = "internal"
    reason = "internal"
    status_code = 500
    default_detail = "Internal error"

    def __init__(self, detail: str | None = None, *, reason: str | None = None):
        self.detail = detail or self.default_detail
        if reason:
            self.reason = reason
        super().__init__(self.detail)

    def as_dict(self) -> dict:
        return {"error": self.code, "reason": self.reason, "detail": self.detail}


# =========================================================
# TAXONOMY BUCKETS
# =========================================================
class BadRequest(ServiceError):
    code = "bad-request"
    reason = "bad-request"
    status_code = 400
    default_detail = "Bad request"


class Forbidden(ServiceError):
    code = "forbidden"
    reason = "forbidden"
    status_code = 403
    default_detail = "Forbidden"


class NotFound(ServiceError):
    code = "not-found"
    reason = "not-found"
    status_code = 404
    default_detail = "Not found"


class Conflict(ServiceError):
    code = "conflict"
    reason = "conflict"
    status_code = 409
    default_detail = "Conflict"


# =========================================================
# BAD REQUEST
# =========================================================
class InvalidLineItem(BadRequest):
    reason = "invalid-line-item"
    default_detail = "Invalid purchase line item"


class InvalidAmount(BadRequest):
    reason = "invalid-amount"
    default_detail = "Amount must be > 0"


class Overpayment(BadRequest):
    reason = "overpayment"
    default_detail = "Payment exceeds the remaining amount"


class InvalidSupplierProduct(BadRequest):
    reason = "invalid-supplier-product"
    default_detail = "Product does not belong to this supplier"


class InvalidStatus(BadRequest):
    reason = "invalid-status"
    default_detail = "Status must be 'paid' or 'pending'"


# =========================================================
# FORBIDDEN
# =========================================================
class BaseScopeViolation(Forbidden):
    reason = "base-scope"
    default_detail = "Base is outside of your scope"


class SettledPurchaseLocked(Forbidden):
    reason = "settled-purchase-locked"
    default_detail = "Purchase is linked to a payable that already has payments"


# =========================================================
# NOT FOUND
# =========================================================
class BaseMissing(NotFound):
    reason = "base-missing"
    default_detail = "Base not found"


class SupplierMissing(NotFound):
    reason = "supplier-missing"
    default_detail = "Supplier not found"


class ProductMissing(NotFound):
    reason = "product-missing"
    default_detail = "Product not found"


class PayableMissing(NotFound):
    reason = "payable-missing"
    default_detail = "Payable not found"


class PurchaseMissing(NotFound):
    reason = "purchase-missing"
    default_detail = "Purchase not found"


class PaymentMissing(NotFound):
    reason = "payment-missing"
    default_detail = "Payment not found"


class CategoryMissing(NotFound):
    reason = "category-missing"
    default_detail = "Expense category not found"


# =========================================================
# CONFLICT
# =========================================================
class CurrencyMismatch(Conflict):
    reason = "currency-mismatch"
    default_detail = "Purchase currency does not match the payable currency"


class DuplicateName(Conflict):
    reason = "duplicate-name"
    default_detail = "Name already exists"


class IdempotencyConflict(Conflict):
    reason = "idempotency-key-reused"
    default_detail = "Idempotency-Key was already used for a different resource"
