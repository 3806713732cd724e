"""
PATH: users/models/user.py

CUSTOM USER MODEL

Back-office operators log in with a username (no email required).

- role: admin | base_agent
- bases: the sites a base_agent is scoped to (admins ignore it)

The login token carries role + base names, so a role/base change takes
effect on the next login.
"""

from __future__ import annotations

import uuid

from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.core.exceptions import ValidationError
from django.db import models

from permissions.roles import ROLE_ADMIN, ROLE_BASE_AGENT


# ---------------- USER MANAGER ----------------
class UserManager(BaseUserManager):
    def create_user(self, username=None, password=None, **extra_fields):
        username = (username or "").strip()
        if not username:
            raise ValueError("username is required")

        extra_fields.setdefault("is_active", True)
        extra_fields.setdefault("role", ROLE_BASE_AGENT)

        user = self.model(username=username, **extra_fields)

        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()

        user.full_clean(exclude=["password"])
        user.save(using=self._db)
        return user

    def create_superuser(self, username=None, password=None, **extra_fields):
        if not password:
            raise ValueError("Superuser must have a password")

        extra_fields.setdefault("role", ROLE_ADMIN)
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True")

        return self.create_user(username=username, password=password, **extra_fields)


# ---------------- USER MODEL ----------------
class User(AbstractBaseUser, PermissionsMixin):
    ROLE_CHOICES = [
        (ROLE_ADMIN, "Admin"),
        (ROLE_BASE_AGENT, "Base agent"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    username = models.CharField(max_length=150, unique=True)
    display_name = models.CharField(max_length=150, blank=True, default="")

    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_BASE_AGENT)

    bases = models.ManyToManyField(
        "bases.Base",
        blank=True,
        related_name="agents",
    )

    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    USERNAME_FIELD = "username"
    REQUIRED_FIELDS = []

    class Meta:
        ordering = ["username"]

    def clean(self):
        self.username = (self.username or "").strip()
        if not self.username:
            raise ValidationError({"username": "username is required"})

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    def base_names(self) -> list[str]:
        return sorted(self.bases.values_list("name", flat=True))

    def __str__(self):
        return f"{self.username} ({self.role})"
