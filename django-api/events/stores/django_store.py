"""Django ORM implementation of the EventStore."""

from decimal import Decimal

from django.db import transaction
from django.db.models import F

from events import models as orm
from events.domain import Capacity, Event, EventId, Money, TicketTier, TierId
from events.stores.interfaces import EventStore


def to_event(row: orm.Event) -> Event:
    return Event(
        id=EventId(row.id),
        host_id=row.host_id,
        name=row.name,
        description=row.description,
        location=row.location,
        starts_at=row.starts_at,
        ends_at=row.ends_at,
        is_active=row.is_active,
        total_tickets_sold=row.total_tickets_sold,
        total_revenue=Money.of(row.total_revenue),
        created_at=row.created_at,
    )


def to_tier(row: orm.TicketTier) -> TicketTier:
    return TicketTier(
        id=TierId(row.id),
        event_id=EventId(row.event_id),
        name=row.name,
        price=Money.of(row.price),
        quantity=Capacity(row.quantity),
        sold=row.sold,
        created_at=row.created_at,
    )


class DjangoEventStore(EventStore):
    """Database-backed event store using Django ORM."""

    def list_events(self) -> list[Event]:
        return [to_event(row) for row in orm.Event.objects.filter(is_active=True)]

    def list_host_events(self, host_id: int) -> list[Event]:
        rows = orm.Event.objects.filter(host_id=host_id).order_by("-created_at")
        return [to_event(row) for row in rows]

    def create_event(self, event: Event, tiers: list[TicketTier]) -> None:
        with transaction.atomic():
            orm.Event.objects.create(
                id=event.id.value,
                host_id=event.host_id,
                name=event.name,
                description=event.description,
                location=event.location,
                starts_at=event.starts_at,
                ends_at=event.ends_at,
                is_active=event.is_active,
            )
            for tier in tiers:
                orm.TicketTier.objects.create(
                    id=tier.id.value,
                    event_id=event.id.value,
                    name=tier.name,
                    price=tier.price.amount,
                    quantity=tier.quantity.value,
                )

    def update_event(self, event: Event) -> None:
        row = orm.Event.objects.get(id=event.id.value)
        row.name = event.name
        row.description = event.description
        row.location = event.location
        row.starts_at = event.starts_at
        row.ends_at = event.ends_at
        row.is_active = event.is_active
        row.save(
            update_fields=[
                "name",
                "description",
                "location",
                "starts_at",
                "ends_at",
                "is_active",
                "updated_at",
            ]
        )

    def get_event(self, event_id: EventId) -> Event | None:
        row = orm.Event.objects.filter(id=event_id.value).first()
        return to_event(row) if row else None

    def event_exists(self, event_id: EventId) -> bool:
        return orm.Event.objects.filter(id=event_id.value).exists()

    def get_tiers_for_event(self, event_id: EventId) -> list[TicketTier]:
        return [to_tier(row) for row in orm.TicketTier.objects.filter(event_id=event_id.value)]

    def get_tier(self, tier_id: TierId) -> TicketTier | None:
        row = orm.TicketTier.objects.filter(id=tier_id.value).first()
        return to_tier(row) if row else None

    def reserve_slot(self, tier_id: TierId) -> int | None:
        updated = orm.TicketTier.objects.filter(
            id=tier_id.value, sold__lt=F("quantity")
        ).update(sold=F("sold") + 1)
        if not updated:
            return None
        return orm.TicketTier.objects.values_list("sold", flat=True).get(id=tier_id.value)

    def release_slot(self, tier_id: TierId) -> int | None:
        updated = orm.TicketTier.objects.filter(id=tier_id.value, sold__gt=0).update(
            sold=F("sold") - 1
        )
        if not updated:
            return None
        return orm.TicketTier.objects.values_list("sold", flat=True).get(id=tier_id.value)

    def record_sale(self, event_id: EventId, revenue: Decimal) -> None:
        orm.Event.objects.filter(id=event_id.value).update(
            total_tickets_sold=F("total_tickets_sold") + 1,
            total_revenue=F("total_revenue") + revenue,
        )
