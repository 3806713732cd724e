from __future__ import annotations

import uuid
from decimal import Decimal

import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("bases", "0001_initial"),
        ("suppliers", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="ExchangeRate",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("currency", models.CharField(max_length=3, unique=True)),
                ("rate_to_cny", models.DecimalField(decimal_places=6, max_digits=18)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["currency"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("rate_to_cny__gt", Decimal("0"))),
                        name="exchange_rate_gt_zero",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="SupplierMonthlySpend",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("month", models.CharField(max_length=7)),
                ("currency", models.CharField(default="CNY", max_length=3)),
                (
                    "total_purchase",
                    models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=15),
                ),
                ("purchase_count", models.PositiveIntegerField(default=0)),
                (
                    "total_paid",
                    models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=15),
                ),
                (
                    "remaining",
                    models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=15),
                ),
                ("generated_at", models.DateTimeField(default=django.utils.timezone.now)),
                (
                    "base",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="supplier_monthly_spend",
                        to="bases.base",
                    ),
                ),
                (
                    "supplier",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="monthly_spend",
                        to="suppliers.supplier",
                    ),
                ),
            ],
            options={
                "db_table": "mv_supplier_monthly_spend",
                "ordering": ["month", "supplier_id"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("supplier", "base", "month", "currency"),
                        name="uniq_mv_supplier_month",
                    )
                ],
                "indexes": [models.Index(fields=["month"], name="mv_sms_month_idx")],
            },
        ),
        migrations.CreateModel(
            name="BaseExpenseMonth",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("month", models.CharField(max_length=7)),
                ("currency", models.CharField(default="CNY", max_length=3)),
                (
                    "total_amount",
                    models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=15),
                ),
                ("generated_at", models.DateTimeField(default=django.utils.timezone.now)),
                (
                    "base",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="expense_months",
                        to="bases.base",
                    ),
                ),
            ],
            options={
                "db_table": "mv_base_expense_month",
                "ordering": ["month", "base_id"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("base", "month", "currency"),
                        name="uniq_mv_base_expense_month",
                    )
                ],
                "indexes": [models.Index(fields=["month"], name="mv_bem_month_idx")],
            },
        ),
    ]
