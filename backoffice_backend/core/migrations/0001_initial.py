from __future__ import annotations

import uuid

from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="IdempotencyKey",
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
                ("key", models.CharField(max_length=128, unique=True)),
                (
                    "resource",
                    models.CharField(
                        choices=[("purchase", "Purchase"), ("payment", "Payment")],
                        max_length=32,
                    ),
                ),
                ("ref_id", models.CharField(max_length=64)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["resource", "key"], name="idem_resource_key_idx"
                    )
                ],
            },
        ),
    ]
