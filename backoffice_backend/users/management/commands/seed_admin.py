"""
PATH: users/management/commands/seed_admin.py

Bootstrap an operator account (idempotent).

- Reads AUTO_ADMIN_USERNAME + AUTO_ADMIN_PASSWORD from env unless passed as options.
- Creates the user if missing; resets role + password if it exists.
- --base may be repeated to map the operator onto bases (created when missing).
- Does NOT print the password.
"""

from __future__ import annotations

import os

from django.core.management.base import BaseCommand, CommandError

from core.exceptions import ServiceError
from users.services.seed import seed_operator


class Command(BaseCommand):
    help = "Create/update an operator from options or env vars (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument("--username", default="")
        parser.add_argument("--password", default="")
        parser.add_argument("--role", default="admin")
        parser.add_argument("--base", action="append", dest="bases", default=[])

    def handle(self, *args, **options):
        username = (options["username"] or os.environ.get("AUTO_ADMIN_USERNAME") or "").strip()
        password = (options["password"] or os.environ.get("AUTO_ADMIN_PASSWORD") or "").strip()

        if not username or not password:
            self.stdout.write(
                self.style.WARNING("No username/password given (AUTO_ADMIN_* unset). Skipping.")
            )
            return

        try:
            user, bases = seed_operator(
                username=username,
                password=password,
                role=options["role"],
                base_names=options["bases"],
            )
        except ServiceError as exc:
            raise CommandError(str(exc)) from exc

        suffix = f" bases={','.join(bases)}" if bases else ""
        self.stdout.write(self.style.SUCCESS(f"Operator ensured: {user.username} ({user.role}){suffix}"))
