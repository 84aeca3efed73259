"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses
- Never contain business logic
- Never expose internal error details
"""

from django.conf import settings
from django.core.cache import cache
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from events.cache import EVENT_LIST_KEY, event_detail_key, event_tiers_key
from events.domain import Capacity, Money, TierDraft
from events.domain.errors import DomainError
from events.handlers.responses import error_response, validation_error
from events.handlers.serializers import (
    EventCreateSerializer,
    EventSerializer,
    EventStatsSerializer,
    EventUpdateSerializer,
    HostEventSerializer,
    TicketTierSerializer,
)
from events.services.event_service import EventService
from events.stores.django_store import DjangoEventStore


def event_service() -> EventService:
    return EventService(DjangoEventStore(), host_fee=Money.of(settings.TICKET_HOST_FEE))


class ReadOnlyPublicMixin:
    """Anyone may read; writes require a logged-in host."""

    def get_permissions(self):
        if self.request.method == "GET":
            return [AllowAny()]
        return [IsAuthenticated()]


class EventListView(ReadOnlyPublicMixin, APIView):
    """Handler for GET/POST /api/events"""

    def get(self, request: Request) -> Response:
        data = cache.get(EVENT_LIST_KEY)
        if data is None:
            data = EventSerializer(event_service().list_events(), many=True).data
            cache.set(EVENT_LIST_KEY, data, settings.EVENT_CACHE_TTL)
        return Response({"results": data})

    def post(self, request: Request) -> Response:
        serializer = EventCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error(serializer.errors)
        data = serializer.validated_data
        try:
            event, tiers = event_service().create_event(
                request.user.pk,
                data["name"],
                data["description"],
                data["location"],
                data["starts_at"],
                data["ends_at"],
                [
                    TierDraft(t["name"], Money.of(t["price"]), Capacity(t["quantity"]))
                    for t in data["tiers"]
                ],
            )
        except DomainError as e:
            return error_response(e)
        body = HostEventSerializer(event).data
        body["tiers"] = TicketTierSerializer(tiers, many=True).data
        return Response(body, status=status.HTTP_201_CREATED)


class HostEventListView(APIView):
    """Handler for GET /api/events/host: the caller's own events."""

    permission_classes = [IsAuthenticated]

    def get(self, request: Request) -> Response:
        events = event_service().list_host_events(request.user.pk)
        return Response({"results": HostEventSerializer(events, many=True).data})


class EventDetailView(ReadOnlyPublicMixin, APIView):
    """Handler for GET/PUT /api/events/{event_id}"""

    def get(self, request: Request, event_id: str) -> Response:
        key = event_detail_key(event_id)
        data = cache.get(key)
        if data is None:
            try:
                event = event_service().get_event(event_id)
            except DomainError as e:
                return error_response(e)
            data = EventSerializer(event).data
            cache.set(key, data, settings.EVENT_CACHE_TTL)
        return Response(data)

    def put(self, request: Request, event_id: str) -> Response:
        serializer = EventUpdateSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error(serializer.errors)
        try:
            event = event_service().update_event(
                request.user.pk, event_id, serializer.validated_data
            )
        except DomainError as e:
            return error_response(e)
        return Response(HostEventSerializer(event).data)


class TierListView(APIView):
    """Handler for GET /api/events/{event_id}/tiers"""

    permission_classes = [AllowAny]

    def get(self, request: Request, event_id: str) -> Response:
        key = event_tiers_key(event_id)
        data = cache.get(key)
        if data is None:
            try:
                tiers = event_service().get_tiers_for_event(event_id)
            except DomainError as e:
                return error_response(e)
            data = TicketTierSerializer(tiers, many=True).data
            cache.set(key, data, settings.EVENT_CACHE_TTL)
        return Response({"results": data})


class EventStatsView(APIView):
    """Handler for GET /api/events/{event_id}/stats (host only)"""

    permission_classes = [IsAuthenticated]

    def get(self, request: Request, event_id: str) -> Response:
        try:
            stats = event_service().event_stats(request.user.pk, event_id)
        except DomainError as e:
            return error_response(e)
        return Response(EventStatsSerializer(stats).data)
