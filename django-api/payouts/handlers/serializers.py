"""Serializers for balance and withdrawal requests and responses."""

from rest_framework import serializers


class WithdrawalRequestSerializer(serializers.Serializer):
    """Validates the body of POST /api/withdrawals."""

    amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    event_id = serializers.CharField(required=False, allow_blank=True, default="")
    account_number = serializers.CharField(required=False, allow_blank=True, default="", max_length=50)
    bank_name = serializers.CharField(required=False, allow_blank=True, default="", max_length=100)
    mpesa_number = serializers.CharField(required=False, allow_blank=True, default="", max_length=20)


class ProcessWithdrawalSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=["COMPLETED", "FAILED"])
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class WithdrawalSerializer(serializers.Serializer):
    """Serializer for Withdrawal domain model."""

    id = serializers.CharField()
    host_id = serializers.IntegerField()
    event_id = serializers.CharField(allow_null=True)
    amount = serializers.CharField()
    status = serializers.CharField(source="status.value")
    account_number = serializers.CharField(source="payout_details.account_number")
    bank_name = serializers.CharField(source="payout_details.bank_name")
    mpesa_number = serializers.CharField(source="payout_details.mpesa_number")
    notes = serializers.CharField()
    processed_at = serializers.DateTimeField(allow_null=True)
    created_at = serializers.DateTimeField()


class WithdrawalStatsSerializer(serializers.Serializer):
    total_withdrawn = serializers.DecimalField(max_digits=12, decimal_places=2)
    pending = serializers.DecimalField(max_digits=12, decimal_places=2)
    failed = serializers.DecimalField(max_digits=12, decimal_places=2)
    total_requests = serializers.IntegerField()
