# analytics/management/commands/refresh_rollups.py

"""
Recompute the monthly rollup tables.

    manage.py refresh_rollups                          current month, once
    manage.py refresh_rollups --month 2025-03
    manage.py refresh_rollups --start 2025-01 --end 2025-06
    manage.py refresh_rollups --loop [--interval 600]  current month, forever

In --loop mode a failed pass is logged and retried on the next tick.
"""

from __future__ import annotations

import logging
import time

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from django.db import DatabaseError

from analytics.services.rollups import recompute_monthly, recompute_range
from core.exceptions import ServiceError

logger = logging.getLogger("rollups")


class Command(BaseCommand):
    help = "Refresh mv_supplier_monthly_spend / mv_base_expense_month."

    def add_arguments(self, parser):
        parser.add_argument("--month", help="Single month YYYY-MM (default: current month)")
        parser.add_argument("--start", help="Range start YYYY-MM")
        parser.add_argument("--end", help="Range end YYYY-MM (default: --start)")
        parser.add_argument("--loop", action="store_true", help="Refresh the current month periodically")
        parser.add_argument(
            "--interval",
            type=int,
            default=None,
            help="Seconds between passes in --loop mode (default: MV_REFRESH_INTERVAL)",
        )

    def handle(self, *args, **options):
        if options["loop"]:
            self._loop(options["interval"] or settings.MV_REFRESH_INTERVAL)
            return

        try:
            if options["start"] or options["end"]:
                months = recompute_range(options["start"], options["end"])
            else:
                months = [recompute_monthly(options["month"])["month"]]
        except ServiceError as exc:
            raise CommandError(str(exc)) from exc

        self.stdout.write(self.style.SUCCESS(f"Rollups refreshed: {', '.join(months)}"))

    def _loop(self, interval: int):
        interval = max(1, int(interval))
        self.stdout.write(f"Refreshing current month every {interval}s (Ctrl+C to stop)")

        while True:
            try:
                recompute_monthly()
            except (ServiceError, DatabaseError):
                logger.exception("Rollup refresh failed")
            time.sleep(interval)
