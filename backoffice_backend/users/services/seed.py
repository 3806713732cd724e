# users/services/seed.py

"""
OPERATOR SEEDING

Upsert an operator and map it onto bases (bases are created when missing).
Shared by:
- POST /api/dev/seed-admin   (only when DEV_SEED_ENABLED)
- manage.py seed_admin
"""

from __future__ import annotations

import logging

from django.contrib.auth import get_user_model
from django.db import transaction

from bases.services import ensure_bases
from core.exceptions import BadRequest
from permissions.roles import ROLE_ADMIN, STAFF_ROLES

logger = logging.getLogger("auth")

DEFAULT_USERNAME = "admin"
DEFAULT_PASSWORD = "admin123"


@transaction.atomic
def seed_operator(*, username: str = "", password: str = "", role: str = "", base_names=None):
    username = (username or "").strip() or DEFAULT_USERNAME
    password = password or DEFAULT_PASSWORD
    role = (role or "").strip() or ROLE_ADMIN

    if role not in STAFF_ROLES:
        raise BadRequest(f"Unknown role '{role}'")

    User = get_user_model()
    user = User.objects.filter(username=username).first()
    created = user is None

    if created:
        user = User.objects.create_user(
            username=username,
            password=password,
            role=role,
            is_staff=(role == ROLE_ADMIN),
        )
    else:
        user.role = role
        user.is_active = True
        user.set_password(password)
        user.save()

    bases = ensure_bases(base_names or [])
    if bases:
        user.bases.add(*bases)

    logger.info(
        "Operator seeded",
        extra={"user_id": str(user.pk), "role": role, "created": created, "bases": [b.name for b in bases]},
    )
    return user, [b.name for b in bases]
