# analytics/management/commands/seed_exchange_rates.py

from __future__ import annotations

from decimal import Decimal

from django.core.management.base import BaseCommand

from analytics.models import ExchangeRate

RATE_QUANT = Decimal("0.000001")

# units of the currency per 1 CNY
DEFAULT_RATES = {
    "LAK": Decimal("3000"),
    "THB": Decimal("4.47"),
}


class Command(BaseCommand):
    help = "Create the default LAK / THB -> CNY exchange rates (existing rows are kept unless --force)."

    def add_arguments(self, parser):
        parser.add_argument("--force", action="store_true", help="Overwrite existing rates")

    def handle(self, *args, **options):
        for currency, per_cny in DEFAULT_RATES.items():
            rate = (Decimal("1") / per_cny).quantize(RATE_QUANT)

            if options["force"]:
                ExchangeRate.objects.update_or_create(currency=currency, defaults={"rate_to_cny": rate})
                verb = "set"
            else:
                _, created = ExchangeRate.objects.get_or_create(currency=currency, defaults={"rate_to_cny": rate})
                verb = "created" if created else "kept"

            self.stdout.write(f"{currency}: {verb} ({rate})")

        self.stdout.write(self.style.SUCCESS("Exchange rates ready."))
