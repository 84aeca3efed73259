"""Event service - catalog business logic lives here.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors
"""

import logging
from dataclasses import replace
from datetime import datetime
from decimal import Decimal
from typing import Callable
from uuid import uuid4

from django.utils import timezone

from events.domain import (
    Event,
    EventId,
    EventStats,
    Money,
    TicketTier,
    TierDraft,
    TierId,
    TierSales,
)
from events.domain.errors import (
    EventNotFoundError,
    InvalidEventError,
    InvalidIdError,
    NotEventHostError,
)
from events.stores.interfaces import EventStore

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("name", "description", "location", "starts_at", "ends_at", "is_active")


def parse_event_id(event_id: str) -> EventId:
    try:
        return EventId.from_string(event_id)
    except ValueError:
        raise InvalidIdError("event ID") from None


def check_schedule(starts_at: datetime, ends_at: datetime) -> None:
    if ends_at < starts_at:
        raise InvalidEventError("An event cannot end before it starts")


class EventService:
    """Service for event catalog operations."""

    def __init__(
        self,
        store: EventStore,
        host_fee: Money = Money.of("0"),
        clock: Callable[[], datetime] = timezone.now,
    ) -> None:
        self._store = store
        self._host_fee = host_fee
        self._clock = clock

    def list_events(self) -> list[Event]:
        """Return all active events."""
        return self._store.list_events()

    def get_event(self, event_id: str) -> Event:
        """Return an event by ID.

        Raises:
            InvalidIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
        """
        event = self._store.get_event(parse_event_id(event_id))
        if event is None:
            raise EventNotFoundError(event_id)
        return event

    def get_tiers_for_event(self, event_id: str) -> list[TicketTier]:
        """Return ticket tiers for an event.

        Raises:
            InvalidIdError: If the event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
        """
        parsed = parse_event_id(event_id)
        if not self._store.event_exists(parsed):
            raise EventNotFoundError(event_id)
        return self._store.get_tiers_for_event(parsed)

    def get_hosted_event(self, host_id: int, event_id: str) -> Event:
        """Return an event owned by host_id.

        Raises:
            InvalidIdError, EventNotFoundError: As for get_event.
            NotEventHostError: If another user hosts the event.
        """
        event = self.get_event(event_id)
        if event.host_id != host_id:
            raise NotEventHostError()
        return event

    def list_host_events(self, host_id: int) -> list[Event]:
        return self._store.list_host_events(host_id)

    def create_event(
        self,
        host_id: int,
        name: str,
        description: str,
        location: str,
        starts_at: datetime,
        ends_at: datetime,
        tiers: list[TierDraft],
    ) -> tuple[Event, list[TicketTier]]:
        """Create an active event with its tiers.

        Raises:
            InvalidEventError: If the schedule is inverted or no tier is given.
        """
        check_schedule(starts_at, ends_at)
        if not tiers:
            raise InvalidEventError("An event needs at least one ticket tier")

        now = self._clock()
        event = Event(
            id=EventId(uuid4()),
            host_id=host_id,
            name=name,
            description=description,
            location=location,
            starts_at=starts_at,
            ends_at=ends_at,
            is_active=True,
            total_tickets_sold=0,
            total_revenue=Money.of("0"),
            created_at=now,
        )
        try:
            created = [
                TicketTier(
                    id=TierId(uuid4()),
                    event_id=event.id,
                    name=draft.name,
                    price=draft.price,
                    quantity=draft.quantity,
                    sold=0,
                    created_at=now,
                )
                for draft in tiers
            ]
        except ValueError as e:
            raise InvalidEventError(str(e)) from None
        self._store.create_event(event, created)
        logger.info("Event %s created by host %s with %d tiers", event.id, host_id, len(created))
        return event, created

    def update_event(self, host_id: int, event_id: str, changes: dict) -> Event:
        """Apply changes to the editable fields of a hosted event.

        Tiers and sales counters are not editable here; unknown keys are ignored.

        Raises:
            InvalidIdError, EventNotFoundError, NotEventHostError: As for get_hosted_event.
            InvalidEventError: If the new schedule is inverted.
        """
        event = self.get_hosted_event(host_id, event_id)
        updated = replace(event, **{k: v for k, v in changes.items() if k in EDITABLE_FIELDS})
        check_schedule(updated.starts_at, updated.ends_at)
        self._store.update_event(updated)
        logger.info("Event %s updated by host %s", event.id, host_id)
        return self._store.get_event(event.id) or updated

    def event_stats(self, host_id: int, event_id: str) -> EventStats:
        """Sales summary of a hosted event.

        Raises:
            InvalidIdError, EventNotFoundError, NotEventHostError: As for get_hosted_event.
        """
        event = self.get_hosted_event(host_id, event_id)
        tiers = self._store.get_tiers_for_event(event.id)
        host_fees = self._host_fee.amount * event.total_tickets_sold
        net = max(event.total_revenue.amount - host_fees, Decimal("0"))
        return EventStats(
            event_id=event.id,
            tickets_sold=event.total_tickets_sold,
            revenue=event.total_revenue,
            host_fees=Money.of(host_fees),
            net_revenue=Money.of(net),
            tiers=tuple(
                TierSales(
                    tier_id=tier.id,
                    name=tier.name,
                    price=tier.price,
                    quantity=tier.quantity.value,
                    sold=tier.sold,
                )
                for tier in tiers
            ),
        )
