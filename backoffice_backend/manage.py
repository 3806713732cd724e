"""
PATH: manage.py

Django management entrypoint.

- If DJANGO_SETTINGS_MODULE is unset OR points at the settings *package*
  ("backend.settings"), force a concrete module:
    manage.py test  -> backend.settings.test
    anything else   -> backend.settings.dev
- `manage.py runserver` with no address binds 0.0.0.0:$PORT (default 8080).

Production must set DJANGO_SETTINGS_MODULE=backend.settings.prod explicitly.
"""

from __future__ import annotations

import os
import sys


def _ensure_settings_module(argv: list[str]) -> None:
    current = (os.environ.get("DJANGO_SETTINGS_MODULE") or "").strip()

    if not current or current == "backend.settings":
        is_test = len(argv) > 1 and argv[1] == "test"
        os.environ["DJANGO_SETTINGS_MODULE"] = "backend.settings.test" if is_test else "backend.settings.dev"


def _runserver_address(argv: list[str]) -> list[str]:
    if len(argv) < 2 or argv[1] != "runserver":
        return argv

    has_address = any(not a.startswith("-") for a in argv[2:])
    if has_address:
        return argv

    port = (os.environ.get("PORT") or "8080").strip()
    return [*argv[:2], f"0.0.0.0:{port}", *argv[2:]]


def main() -> None:
    _ensure_settings_module(sys.argv)

    try:
        from django.core.management import execute_from_command_line
    except ImportError as exc:
        raise ImportError(
            "Couldn't import Django. Are you sure it's installed and "
            "available on your PYTHONPATH environment variable? Did you "
            "forget to activate a virtual environment?"
        ) from exc

    execute_from_command_line(_runserver_address(sys.argv))


if __name__ == "__main__":
    main()
