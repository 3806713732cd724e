from __future__ import annotations

import uuid
from decimal import Decimal

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("bases", "0001_initial"),
        ("purchases", "0001_initial"),
        ("suppliers", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="PayableRecord",
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
                ("settlement_type", models.CharField(default="flexible", max_length=20)),
                ("period_month", models.CharField(blank=True, default="", max_length=7)),
                ("period_half", models.CharField(blank=True, default="", max_length=8)),
                (
                    "total_amount",
                    models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=15),
                ),
                (
                    "paid_amount",
                    models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=15),
                ),
                (
                    "remaining_amount",
                    models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=15),
                ),
                ("currency", models.CharField(default="CNY", max_length=3)),
                (
                    "status",
                    models.CharField(
                        choices=[("pending", "Pending"), ("partial", "Partial"), ("paid", "Paid")],
                        default="pending",
                        max_length=10,
                    ),
                ),
                ("due_date", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "base",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="payables",
                        to="bases.base",
                    ),
                ),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="payables_created",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "purchase_entry",
                    models.OneToOneField(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="immediate_payable",
                        to="purchases.purchaseentry",
                    ),
                ),
                (
                    "supplier",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="payables",
                        to="suppliers.supplier",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("total_amount__gte", Decimal("0.00"))),
                        name="payable_total_nonnegative",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("paid_amount__gte", Decimal("0.00"))),
                        name="payable_paid_nonnegative",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("remaining_amount__gte", Decimal("0.00"))),
                        name="payable_remaining_nonnegative",
                    ),
                ],
                "indexes": [
                    models.Index(
                        fields=["supplier", "base", "status"],
                        name="payable_sup_base_status_idx",
                    ),
                    models.Index(
                        fields=["supplier", "base", "settlement_type", "period_month", "period_half"],
                        name="payable_bucket_idx",
                    ),
                    models.Index(fields=["due_date"], name="payable_due_date_idx"),
                    models.Index(fields=["created_at"], name="payable_created_at_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="PayableLink",
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
                ("amount", models.DecimalField(decimal_places=2, max_digits=15)),
                ("currency", models.CharField(default="CNY", max_length=3)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "payable",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="links",
                        to="payables.payablerecord",
                    ),
                ),
                (
                    "purchase_entry",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="payable_links",
                        to="purchases.purchaseentry",
                    ),
                ),
            ],
            options={
                "ordering": ["created_at"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("payable", "purchase_entry"), name="uniq_payable_link_pair"
                    ),
                    models.UniqueConstraint(
                        fields=("purchase_entry",), name="uniq_payable_link_purchase"
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="PaymentRecord",
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
                ("payment_amount", models.DecimalField(decimal_places=2, max_digits=15)),
                ("currency", models.CharField(default="CNY", max_length=3)),
                ("payment_date", models.DateField(default=django.utils.timezone.localdate)),
                ("payment_method", models.CharField(default="bank_transfer", max_length=32)),
                ("reference_number", models.CharField(blank=True, default="", max_length=100)),
                ("notes", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="payments_created",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "payable",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="payments",
                        to="payables.payablerecord",
                    ),
                ),
            ],
            options={
                "ordering": ["-payment_date", "-created_at"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("payment_amount__gt", Decimal("0.00"))),
                        name="payment_amount_gt_zero",
                    )
                ],
                "indexes": [
                    models.Index(
                        fields=["payable", "payment_date"], name="payment_payable_date_idx"
                    ),
                    models.Index(fields=["created_at"], name="payment_created_at_idx"),
                    models.Index(fields=["payment_method"], name="payment_method_idx"),
                ],
            },
        ),
    ]
