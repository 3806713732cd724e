"""
PATH: users/authentication.py

AUTH BYPASS (DEV ONLY)

When settings.AUTH_BYPASS is on, every request is authenticated as an admin
operator and no bearer token is required. The operator row is created on
first use with an unusable password.

prod.py refuses to start with AUTH_BYPASS enabled.
"""

from __future__ import annotations

import logging

from django.conf import settings
from django.contrib.auth import get_user_model
from rest_framework.authentication import BaseAuthentication

from permissions.roles import ROLE_ADMIN

logger = logging.getLogger("auth")

BYPASS_USERNAME = "bypass-admin"


class AuthBypassAuthentication(BaseAuthentication):
    def authenticate(self, request):
        if not getattr(settings, "AUTH_BYPASS", False):
            return None

        User = get_user_model()
        user = User.objects.filter(role=ROLE_ADMIN, is_active=True).order_by("created_at").first()
        if user is None:
            user, _ = User.objects.get_or_create(
                username=BYPASS_USERNAME,
                defaults={"role": ROLE_ADMIN, "is_active": True},
            )
            logger.warning("AUTH_BYPASS created admin operator", extra={"user_id": str(user.pk)})

        return (user, None)

    def authenticate_header(self, request):
        # first authenticator decides 401 vs 403 for anonymous requests
        return 'Bearer realm="api"'
