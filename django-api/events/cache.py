"""Cache keys for the event catalog."""

from django.core.cache import cache

EVENT_LIST_KEY = "events:list"


def event_detail_key(event_id) -> str:
    return f"events:{event_id}"


def event_tiers_key(event_id) -> str:
    return f"events:{event_id}:tiers"


def invalidate_event(event_id) -> None:
    """Drop every cached view that includes the event or its tiers."""
    cache.delete_many([EVENT_LIST_KEY, event_detail_key(event_id), event_tiers_key(event_id)])
