"""In-process EventStore.

Each tier counter is guarded by its own lock, so a conditional increment is
indivisible without any global lock.
"""

import threading
from collections import defaultdict
from dataclasses import replace
from decimal import Decimal

from events.domain import Event, EventId, Money, TicketTier, TierId
from events.stores.interfaces import EventStore


class KeyedLocks:
    """Lazily created lock per key."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict = defaultdict(threading.Lock)

    def __call__(self, key) -> threading.Lock:
        with self._guard:
            return self._locks[key]


class InMemoryEventStore(EventStore):
    def __init__(self) -> None:
        self._events: dict[EventId, Event] = {}
        self._tiers: dict[TierId, TicketTier] = {}
        self._lock_for = KeyedLocks()

    def snapshot(self) -> tuple:
        return dict(self._events), dict(self._tiers)

    def restore(self, state: tuple) -> None:
        self._events, self._tiers = dict(state[0]), dict(state[1])

    def add_event(self, event: Event) -> None:
        self._events[event.id] = event

    def add_tier(self, tier: TicketTier) -> None:
        self._tiers[tier.id] = tier

    def list_events(self) -> list[Event]:
        events = [e for e in self._events.values() if e.is_active]
        return sorted(events, key=lambda e: e.created_at, reverse=True)

    def list_host_events(self, host_id: int) -> list[Event]:
        events = [e for e in self._events.values() if e.host_id == host_id]
        return sorted(events, key=lambda e: e.created_at, reverse=True)

    def create_event(self, event: Event, tiers: list[TicketTier]) -> None:
        self._events[event.id] = event
        for tier in tiers:
            self._tiers[tier.id] = tier

    def update_event(self, event: Event) -> None:
        with self._lock_for(event.id):
            current = self._events[event.id]
            self._events[event.id] = replace(
                event,
                total_tickets_sold=current.total_tickets_sold,
                total_revenue=current.total_revenue,
            )

    def get_event(self, event_id: EventId) -> Event | None:
        return self._events.get(event_id)

    def event_exists(self, event_id: EventId) -> bool:
        return event_id in self._events

    def get_tiers_for_event(self, event_id: EventId) -> list[TicketTier]:
        tiers = [t for t in self._tiers.values() if t.event_id == event_id]
        return sorted(tiers, key=lambda t: (t.price.amount, t.created_at))

    def get_tier(self, tier_id: TierId) -> TicketTier | None:
        return self._tiers.get(tier_id)

    def reserve_slot(self, tier_id: TierId) -> int | None:
        with self._lock_for(tier_id):
            tier = self._tiers.get(tier_id)
            if tier is None or not tier.is_available:
                return None
            self._tiers[tier_id] = replace(tier, sold=tier.sold + 1)
            return tier.sold + 1

    def release_slot(self, tier_id: TierId) -> int | None:
        with self._lock_for(tier_id):
            tier = self._tiers.get(tier_id)
            if tier is None or tier.sold == 0:
                return None
            self._tiers[tier_id] = replace(tier, sold=tier.sold - 1)
            return tier.sold - 1

    def record_sale(self, event_id: EventId, revenue: Decimal) -> None:
        with self._lock_for(event_id):
            event = self._events.get(event_id)
            if event is None:
                return
            self._events[event_id] = replace(
                event,
                total_tickets_sold=event.total_tickets_sold + 1,
                total_revenue=Money.of(event.total_revenue.amount + revenue),
            )
