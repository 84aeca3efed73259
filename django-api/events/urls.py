from django.urls import path

from events.handlers import (
    EventDetailView,
    EventListView,
    EventStatsView,
    HostEventListView,
    TierListView,
)

urlpatterns = [
    path("events", EventListView.as_view(), name="event-list"),
    path("events/host", HostEventListView.as_view(), name="host-event-list"),
    path("events/<str:event_id>", EventDetailView.as_view(), name="event-detail"),
    path("events/<str:event_id>/tiers", TierListView.as_view(), name="tier-list"),
    path("events/<str:event_id>/stats", EventStatsView.as_view(), name="event-stats"),
]
