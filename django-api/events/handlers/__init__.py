from events.handlers.views import (
    EventDetailView,
    EventListView,
    EventStatsView,
    HostEventListView,
    TierListView,
)

__all__ = ["EventListView", "EventDetailView", "TierListView", "HostEventListView", "EventStatsView"]
