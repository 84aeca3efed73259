"""Serializers for transforming domain models to API responses."""

from rest_framework import serializers


class EventSerializer(serializers.Serializer):
    """Serializer for Event domain model."""

    id = serializers.CharField()
    name = serializers.CharField()
    description = serializers.CharField()
    location = serializers.CharField()
    starts_at = serializers.DateTimeField()
    ends_at = serializers.DateTimeField()
    total_tickets_sold = serializers.IntegerField()


class TicketTierSerializer(serializers.Serializer):
    """Serializer for TicketTier domain model."""

    id = serializers.CharField()
    event_id = serializers.CharField()
    name = serializers.CharField()
    price = serializers.CharField()
    quantity = serializers.IntegerField(source="quantity.value")
    sold = serializers.IntegerField()
    remaining = serializers.IntegerField()
    is_available = serializers.BooleanField()


class TierDraftSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    quantity = serializers.IntegerField(min_value=1)


class EventCreateSerializer(serializers.Serializer):
    """Validates the body of POST /api/events."""

    name = serializers.CharField(max_length=255)
    description = serializers.CharField(allow_blank=True, default="")
    location = serializers.CharField(max_length=255)
    starts_at = serializers.DateTimeField()
    ends_at = serializers.DateTimeField()
    tiers = TierDraftSerializer(many=True, allow_empty=False)


class EventUpdateSerializer(serializers.Serializer):
    """Validates the body of PUT /api/events/{event_id}; every field is optional."""

    name = serializers.CharField(max_length=255, required=False)
    description = serializers.CharField(allow_blank=True, required=False)
    location = serializers.CharField(max_length=255, required=False)
    starts_at = serializers.DateTimeField(required=False)
    ends_at = serializers.DateTimeField(required=False)
    is_active = serializers.BooleanField(required=False)


class HostEventSerializer(EventSerializer):
    """Event as seen by its host, including sales counters."""

    is_active = serializers.BooleanField()
    total_revenue = serializers.CharField()


class TierSalesSerializer(serializers.Serializer):
    tier_id = serializers.CharField()
    name = serializers.CharField()
    price = serializers.CharField()
    quantity = serializers.IntegerField()
    sold = serializers.IntegerField()
    revenue = serializers.CharField()


class EventStatsSerializer(serializers.Serializer):
    event_id = serializers.CharField()
    tickets_sold = serializers.IntegerField()
    revenue = serializers.CharField()
    host_fees = serializers.CharField()
    net_revenue = serializers.CharField()
    tiers = TierSalesSerializer(many=True)
