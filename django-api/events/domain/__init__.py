from events.domain.models import Event, EventStats, TicketTier, TierDraft, TierSales
from events.domain.value_objects import Capacity, EventId, Money, TierId

__all__ = [
    "Event",
    "EventStats",
    "TicketTier",
    "TierDraft",
    "TierSales",
    "EventId",
    "TierId",
    "Money",
    "Capacity",
]
