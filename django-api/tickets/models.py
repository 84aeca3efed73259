"""Django ORM models (persistence layer).

Domain logic lives in domain/models.py.
"""

import uuid

from django.db import models

from events.models import Event, TicketTier

PAYMENT_STATUS_CHOICES = [
    ("PENDING", "Pending"),
    ("SUCCESS", "Success"),
    ("FAILED", "Failed"),
]


class Purchase(models.Model):
    """Persistence model for tickets."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(Event, on_delete=models.PROTECT, related_name="purchases")
    tier = models.ForeignKey(TicketTier, on_delete=models.PROTECT, related_name="purchases")
    buyer_name = models.CharField(max_length=120)
    buyer_phone = models.CharField(max_length=20)
    buyer_email = models.EmailField(blank=True)
    total_amount = models.DecimalField(max_digits=10, decimal_places=2)
    platform_fee = models.DecimalField(max_digits=10, decimal_places=2)
    host_fee = models.DecimalField(max_digits=10, decimal_places=2)
    net_amount = models.DecimalField(max_digits=10, decimal_places=2)
    status = models.CharField(max_length=10, choices=PAYMENT_STATUS_CHOICES, default="PENDING")
    redeemed = models.BooleanField(default=False)
    redeemed_at = models.DateTimeField(null=True, blank=True)
    reference = models.CharField(max_length=64, unique=True)
    admission_token = models.TextField(unique=True)
    receipt_number = models.CharField(max_length=64, blank=True)
    paid_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["event", "redeemed"], name="purchase_event_redeemed_idx"),
            models.Index(fields=["buyer_phone"], name="purchase_buyer_phone_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(redeemed=False) | models.Q(status="SUCCESS"),
                name="purchase_redeemed_requires_success",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.buyer_name} - {self.reference}"


class SettlementRecord(models.Model):
    """Persistence model for a purchase's payment attempt."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    purchase = models.OneToOneField(Purchase, on_delete=models.CASCADE, related_name="settlement")
    event = models.ForeignKey(Event, on_delete=models.PROTECT, related_name="settlements")
    reference = models.CharField(max_length=64, unique=True)
    checkout_id = models.CharField(max_length=128, blank=True, db_index=True)
    amount = models.DecimalField(max_digits=10, decimal_places=2)
    status = models.CharField(max_length=10, choices=PAYMENT_STATUS_CHOICES, default="PENDING")
    payment_method = models.CharField(max_length=10, default="MPESA")
    receipt_number = models.CharField(max_length=64, blank=True)
    phone_number = models.CharField(max_length=20, blank=True)
    paid_at = models.DateTimeField(null=True, blank=True)
    raw_payload = models.JSONField(null=True, blank=True)
    needs_reconciliation = models.BooleanField(default=False)
    reconciliation_note = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["needs_reconciliation"], name="settlement_reconcile_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.reference} ({self.status})"
