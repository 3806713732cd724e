from __future__ import annotations

import uuid
from decimal import Decimal

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("suppliers", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Product",
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
                ("name", models.CharField(max_length=191, unique=True)),
                ("unit", models.CharField(blank=True, default="", max_length=32)),
                ("base_unit", models.CharField(blank=True, default="", max_length=32)),
                (
                    "unit_price",
                    models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=15),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[("active", "Active"), ("inactive", "Inactive")],
                        default="active",
                        max_length=20,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "supplier",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="products",
                        to="suppliers.supplier",
                    ),
                ),
            ],
            options={
                "ordering": ["name"],
                "indexes": [
                    models.Index(
                        fields=["supplier", "name"], name="product_supplier_name_idx"
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="ProductUnitSpec",
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
                ("unit", models.CharField(max_length=32)),
                ("factor_to_base", models.DecimalField(decimal_places=6, max_digits=18)),
                (
                    "kind",
                    models.CharField(
                        choices=[("purchase", "Purchase"), ("usage", "Usage"), ("both", "Both")],
                        default="both",
                        max_length=16,
                    ),
                ),
                ("is_default", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "product",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="unit_specs",
                        to="products.product",
                    ),
                ),
            ],
            options={
                "ordering": ["product", "unit"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("product", "unit"), name="uniq_product_unit_spec"
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("factor_to_base__gt", Decimal("0"))),
                        name="unit_spec_factor_gt_zero",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="ProductPurchaseParam",
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
                ("unit", models.CharField(max_length=32)),
                ("factor_to_base", models.DecimalField(decimal_places=6, max_digits=18)),
                (
                    "purchase_price",
                    models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=15),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "product",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="purchase_param",
                        to="products.product",
                    ),
                ),
            ],
            options={
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("factor_to_base__gt", Decimal("0"))),
                        name="purchase_param_factor_gt_zero",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("purchase_price__gte", Decimal("0.00"))),
                        name="purchase_param_price_nonnegative",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="SupplierProductPrice",
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
                ("price", models.DecimalField(decimal_places=2, max_digits=15)),
                ("currency", models.CharField(default="CNY", max_length=3)),
                ("effective_from", models.DateField()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "product",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="supplier_prices",
                        to="products.product",
                    ),
                ),
                (
                    "supplier",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="product_prices",
                        to="suppliers.supplier",
                    ),
                ),
            ],
            options={
                "ordering": ["-effective_from", "-created_at"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("supplier", "product", "effective_from"),
                        name="uniq_supplier_product_price_from",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("price__gt", Decimal("0.00"))),
                        name="supplier_price_gt_zero",
                    ),
                ],
            },
        ),
    ]
