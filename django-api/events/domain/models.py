"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in events/models.py (persistence layer).
"""

from dataclasses import dataclass
from datetime import datetime

from events.domain.value_objects import Capacity, EventId, Money, TierId


@dataclass(frozen=True)
class Event:
    """Domain representation of an Event."""

    id: EventId
    host_id: int
    name: str
    description: str
    location: str
    starts_at: datetime
    ends_at: datetime
    is_active: bool
    total_tickets_sold: int
    total_revenue: Money
    created_at: datetime


@dataclass(frozen=True)
class TicketTier:
    """Domain representation of a TicketTier.

    `sold` never exceeds `quantity`; it only grows when a paid settlement
    commits a slot.
    """

    id: TierId
    event_id: EventId
    name: str
    price: Money
    quantity: Capacity
    sold: int
    created_at: datetime

    def __post_init__(self) -> None:
        if self.quantity.value < 1:
            raise ValueError("Tier quantity must be at least 1")
        if not 0 <= self.sold <= self.quantity.value:
            raise ValueError("Tier sold count out of range")

    @property
    def remaining(self) -> int:
        return self.quantity.value - self.sold

    @property
    def is_available(self) -> bool:
        return self.sold < self.quantity.value


@dataclass(frozen=True)
class TierDraft:
    """A tier as submitted by a host, before it has an id."""

    name: str
    price: Money
    quantity: Capacity


@dataclass(frozen=True)
class TierSales:
    tier_id: TierId
    name: str
    price: Money
    quantity: int
    sold: int

    @property
    def revenue(self) -> Money:
        return Money.of(self.price.amount * self.sold)


@dataclass(frozen=True)
class EventStats:
    """Sales summary of one event for its host.

    `tickets_sold` and `revenue` come from the settlement counters; `tiers`
    reflects the committed inventory of each tier.
    """

    event_id: EventId
    tickets_sold: int
    revenue: Money
    host_fees: Money
    net_revenue: Money
    tiers: tuple[TierSales, ...]
