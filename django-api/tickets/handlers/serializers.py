"""Serializers for ticket requests and responses."""

from rest_framework import serializers


class PurchaseRequestSerializer(serializers.Serializer):
    """Validates the body of POST /api/tickets/purchase."""

    event_id = serializers.CharField()
    tier_id = serializers.CharField()
    buyer_name = serializers.CharField(max_length=120)
    buyer_phone = serializers.RegexField(r"^\+?\d{9,15}$", max_length=20)
    buyer_email = serializers.EmailField(required=False, allow_blank=True, default="")
    payer_phone = serializers.RegexField(r"^\+?\d{9,15}$", max_length=20, required=False)


class ScanRequestSerializer(serializers.Serializer):
    token = serializers.CharField(trim_whitespace=True)
    event_id = serializers.CharField(required=False, allow_blank=True, default="")


class PurchaseSerializer(serializers.Serializer):
    """Serializer for Purchase domain model."""

    id = serializers.CharField()
    event_id = serializers.CharField()
    tier_id = serializers.CharField()
    buyer_name = serializers.CharField()
    buyer_phone = serializers.CharField()
    total_amount = serializers.CharField()
    status = serializers.CharField(source="status.value")
    reference = serializers.CharField()
    redeemed = serializers.BooleanField()
    redeemed_at = serializers.DateTimeField(allow_null=True)
    receipt_number = serializers.CharField()
    admission_token = serializers.CharField()
    created_at = serializers.DateTimeField()


class PurchaseReceiptSerializer(serializers.Serializer):
    purchase_id = serializers.CharField(source="purchase.id")
    reference = serializers.CharField()
    checkout_id = serializers.CharField()
    total_amount = serializers.CharField(source="purchase.total_amount")
    status = serializers.CharField(source="purchase.status.value")


class SettlementSerializer(serializers.Serializer):
    """Serializer for SettlementRecord domain model."""

    reference = serializers.CharField()
    purchase_id = serializers.CharField()
    amount = serializers.CharField()
    status = serializers.CharField(source="status.value")
    receipt_number = serializers.CharField()
    paid_at = serializers.DateTimeField(allow_null=True)


class AdmissionReceiptSerializer(serializers.Serializer):
    purchase_id = serializers.CharField()
    event_id = serializers.CharField()
    event_name = serializers.CharField()
    buyer_name = serializers.CharField()
    tier_name = serializers.CharField()
    redeemed_at = serializers.DateTimeField(allow_null=True)


class HostPurchaseSerializer(PurchaseSerializer):
    admission_token = None
    buyer_email = serializers.CharField()
    net_amount = serializers.CharField()
    paid_at = serializers.DateTimeField(allow_null=True)


class PaymentHistorySerializer(SettlementSerializer):
    event_id = serializers.CharField()
    phone_number = serializers.CharField()
    payment_method = serializers.CharField()
    needs_reconciliation = serializers.BooleanField()
    created_at = serializers.DateTimeField()


class RecentScanSerializer(serializers.Serializer):
    purchase_id = serializers.CharField()
    buyer_name = serializers.CharField()
    tier_name = serializers.CharField()
    redeemed_at = serializers.DateTimeField()


class ScanStatsSerializer(serializers.Serializer):
    event_id = serializers.CharField()
    total_tickets = serializers.IntegerField()
    used_tickets = serializers.IntegerField()
    unused_tickets = serializers.IntegerField()
    usage_rate = serializers.DecimalField(max_digits=5, decimal_places=2)
    tier_stats = serializers.SerializerMethodField()
    recent_scans = RecentScanSerializer(many=True)

    def get_tier_stats(self, stats) -> dict:
        return {tier.name: {"total": tier.total, "used": tier.used} for tier in stats.tiers}
