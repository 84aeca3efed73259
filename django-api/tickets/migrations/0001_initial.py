import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("events", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Purchase",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("buyer_name", models.CharField(max_length=120)),
                ("buyer_phone", models.CharField(max_length=20)),
                ("buyer_email", models.EmailField(blank=True, max_length=254)),
                ("total_amount", models.DecimalField(decimal_places=2, max_digits=10)),
                ("platform_fee", models.DecimalField(decimal_places=2, max_digits=10)),
                ("host_fee", models.DecimalField(decimal_places=2, max_digits=10)),
                ("net_amount", models.DecimalField(decimal_places=2, max_digits=10)),
                (
                    "status",
                    models.CharField(
                        choices=[("PENDING", "Pending"), ("SUCCESS", "Success"), ("FAILED", "Failed")],
                        default="PENDING",
                        max_length=10,
                    ),
                ),
                ("redeemed", models.BooleanField(default=False)),
                ("redeemed_at", models.DateTimeField(blank=True, null=True)),
                ("reference", models.CharField(max_length=64, unique=True)),
                ("admission_token", models.TextField(unique=True)),
                ("receipt_number", models.CharField(blank=True, max_length=64)),
                ("paid_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="purchases",
                        to="events.event",
                    ),
                ),
                (
                    "tier",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="purchases",
                        to="events.tickettier",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["event", "redeemed"], name="purchase_event_redeemed_idx"),
                    models.Index(fields=["buyer_phone"], name="purchase_buyer_phone_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("redeemed", False), ("status", "SUCCESS"), _connector="OR"),
                        name="purchase_redeemed_requires_success",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="SettlementRecord",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("reference", models.CharField(max_length=64, unique=True)),
                ("checkout_id", models.CharField(blank=True, db_index=True, max_length=128)),
                ("amount", models.DecimalField(decimal_places=2, max_digits=10)),
                (
                    "status",
                    models.CharField(
                        choices=[("PENDING", "Pending"), ("SUCCESS", "Success"), ("FAILED", "Failed")],
                        default="PENDING",
                        max_length=10,
                    ),
                ),
                ("payment_method", models.CharField(default="MPESA", max_length=10)),
                ("receipt_number", models.CharField(blank=True, max_length=64)),
                ("phone_number", models.CharField(blank=True, max_length=20)),
                ("paid_at", models.DateTimeField(blank=True, null=True)),
                ("raw_payload", models.JSONField(blank=True, null=True)),
                ("needs_reconciliation", models.BooleanField(default=False)),
                ("reconciliation_note", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="settlements",
                        to="events.event",
                    ),
                ),
                (
                    "purchase",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="settlement",
                        to="tickets.purchase",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["needs_reconciliation"], name="settlement_reconcile_idx"),
                ],
            },
        ),
    ]
