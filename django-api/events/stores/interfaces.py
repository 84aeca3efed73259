"""Store interfaces (repository pattern).

Stores must be swappable and return domain models. Counter mutations are
single conditional updates: they either apply in full or report that the
guarding condition did not hold, never read-then-write.
"""

from abc import ABC, abstractmethod
from decimal import Decimal

from events.domain import Event, EventId, TicketTier, TierId


class EventStore(ABC):
    """Interface for event and ticket-tier persistence operations."""

    @abstractmethod
    def list_events(self) -> list[Event]:
        """Return active events ordered by created_at descending."""
        ...

    @abstractmethod
    def list_host_events(self, host_id: int) -> list[Event]:
        """Return every event of a host, active or not, newest first."""
        ...

    @abstractmethod
    def create_event(self, event: Event, tiers: list[TicketTier]) -> None:
        """Persist an event together with its tiers, all or nothing."""
        ...

    @abstractmethod
    def update_event(self, event: Event) -> None:
        """Overwrite the editable fields of an existing event.

        Sales counters are left untouched.
        """
        ...

    @abstractmethod
    def get_event(self, event_id: EventId) -> Event | None:
        """Return an event by ID, or None if not found."""
        ...

    @abstractmethod
    def event_exists(self, event_id: EventId) -> bool:
        """Check if an event exists."""
        ...

    @abstractmethod
    def get_tiers_for_event(self, event_id: EventId) -> list[TicketTier]:
        """Return all tiers for an event, cheapest first."""
        ...

    @abstractmethod
    def get_tier(self, tier_id: TierId) -> TicketTier | None:
        """Return a tier by ID, or None if not found."""
        ...

    @abstractmethod
    def reserve_slot(self, tier_id: TierId) -> int | None:
        """Increment sold if sold < quantity.

        Returns the new sold count, or None when the tier is missing or full.
        """
        ...

    @abstractmethod
    def release_slot(self, tier_id: TierId) -> int | None:
        """Decrement sold if sold > 0. Returns the new count or None."""
        ...

    @abstractmethod
    def record_sale(self, event_id: EventId, revenue: Decimal) -> None:
        """Add one ticket and revenue to the event's sales counters."""
        ...
