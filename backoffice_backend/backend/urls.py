# backend/urls.py
"""
PROJECT URLS

All API routes live under /api/ and are slash-less (/api/payable/list).

- /api/login, /api/me, /api/dev/seed-admin    users
- /api/base|supplier|product/...              master data
- /api/purchase/...                           purchases (payables kept in step)
- /api/payable/..., /api/payment/...          payables + payments
- /api/expense/...                            base expenses
- /api/admin/..., /api/analytics/...          rollups + reports
- /api/rate/list                              exchange rates
- /api/health                                 public DB check
- /api/schema/, /api/docs/                    OpenAPI / Swagger

The Django admin path is configurable via ADMIN_PATH.
"""

from __future__ import annotations

from django.conf import settings
from django.contrib import admin
from django.urls import include, path
from django.views.generic import RedirectView
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

from analytics.urls import admin_urlpatterns, analytics_urlpatterns, rate_urlpatterns
from core.api.health import health_check
from payables.api.urls import payable_urlpatterns, payment_urlpatterns

# ------------------ ADMIN PATH ------------------
# Keep the trailing slash.
ADMIN_PATH = getattr(settings, "ADMIN_PATH", "django-admin/")
if not ADMIN_PATH.endswith("/"):
    ADMIN_PATH = f"{ADMIN_PATH}/"


# ------------------ API ROUTES (ALL UNDER /api/) ------------------
api_urlpatterns = [
    path("health", health_check, name="health-check"),
    # OpenAPI / Swagger
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    path("docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),
    # Auth & users
    path("", include("users.urls")),
    # Master data
    path("base/", include("bases.urls")),
    path("supplier/", include("suppliers.urls")),
    path("product/", include("products.urls")),
    # Purchases -> payables -> payments
    path("purchase/", include("purchases.api.urls")),
    path("payable/", include(payable_urlpatterns)),
    path("payment/", include(payment_urlpatterns)),
    # Expenses + analytics
    path("expense/", include("expenses.urls")),
    path("admin/", include(admin_urlpatterns)),
    path("analytics/", include(analytics_urlpatterns)),
    path("rate/", include(rate_urlpatterns)),
]

urlpatterns = [
    path(ADMIN_PATH, admin.site.urls),
    path("", RedirectView.as_view(url="/api/docs/", permanent=False), name="root"),
    path("api/", include(api_urlpatterns)),
]
