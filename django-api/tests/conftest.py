"""Pytest configuration and shared fixtures."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from uuid import uuid4

import pytest
from rest_framework.test import APIClient

from events.domain import Capacity, Event, EventId, Money, TicketTier, TierId
from events.stores.memory_store import InMemoryEventStore
from payouts.services.balance_service import BalanceLedger
from payouts.services.withdrawal_service import WithdrawalService
from payouts.stores.memory_store import InMemoryPayoutStore
from tickets.domain.policies import FeeSchedule
from tickets.services.admission_tokens import AdmissionTokenService
from tickets.services.confirmation_service import ConfirmationService
from tickets.services.purchase_service import PurchaseService
from tickets.services.settlement_service import OversellPolicy, SettlementReconciler
from tickets.stores.memory_store import InMemoryPurchaseStore
from tikiti.unit_of_work import InMemoryUnitOfWork

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
SECRET = "test-admission-secret"
HOST_ID = 7


class Clock:
    """Settable clock injected into services."""

    def __init__(self, now: datetime = NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class RecordingNotifier:
    def __init__(self, fail: bool = False) -> None:
        self.sent = []
        self.fail = fail

    def send(self, destination, template_data, attachment=None):
        if self.fail:
            raise ConnectionError("smtp down")
        self.sent.append((destination, template_data, attachment))


def make_event(
    host_id: int = HOST_ID,
    starts_at: datetime = NOW + timedelta(days=7),
    duration: timedelta = timedelta(hours=6),
    is_active: bool = True,
) -> Event:
    return Event(
        id=EventId(uuid4()),
        host_id=host_id,
        name="Nairobi Jazz Night",
        description="Live music",
        location="Carnivore Grounds",
        starts_at=starts_at,
        ends_at=starts_at + duration,
        is_active=is_active,
        total_tickets_sold=0,
        total_revenue=Money.of("0"),
        created_at=NOW,
    )


def make_tier(event: Event, quantity: int = 10, price: str = "1000", sold: int = 0) -> TicketTier:
    return TicketTier(
        id=TierId(uuid4()),
        event_id=event.id,
        name="Regular",
        price=Money.of(price),
        quantity=Capacity(quantity),
        sold=sold,
        created_at=NOW,
    )


@dataclass
class Engine:
    """In-memory wiring of every service, sharing one set of stores."""

    clock: Clock
    events: InMemoryEventStore
    purchases: InMemoryPurchaseStore
    payouts: InMemoryPayoutStore
    tokens: AdmissionTokenService
    balances: BalanceLedger
    purchase_service: PurchaseService
    withdrawals: WithdrawalService
    notifier: RecordingNotifier
    uow: InMemoryUnitOfWork

    def reconciler(
        self, policy: OversellPolicy = OversellPolicy.HONOR, notifier=None, **kwargs
    ) -> SettlementReconciler:
        confirmations = ConfirmationService(self.events, self.purchases, notifier or self.notifier)
        kwargs.setdefault("confirmations", confirmations.send)
        return SettlementReconciler(
            self.events,
            self.purchases,
            self.balances,
            self.uow,
            oversell_policy=policy,
            **kwargs,
        )

    def add_event(self, **kwargs) -> tuple[Event, TicketTier]:
        quantity = kwargs.pop("quantity", 10)
        price = kwargs.pop("price", "1000")
        event = make_event(**kwargs)
        tier = make_tier(event, quantity=quantity, price=price)
        self.events.add_event(event)
        self.events.add_tier(tier)
        return event, tier

    def buy(self, event: Event, tier: TicketTier, email: str = "buyer@example.com"):
        return self.purchase_service.create(
            str(event.id), str(tier.id), "Wanjiku", "254712345678", buyer_email=email
        )


@pytest.fixture
def clock() -> Clock:
    return Clock()


@pytest.fixture
def engine(clock: Clock) -> Engine:
    events = InMemoryEventStore()
    purchases = InMemoryPurchaseStore()
    payouts = InMemoryPayoutStore()
    uow = InMemoryUnitOfWork(events, purchases, payouts)
    tokens = AdmissionTokenService(SECRET, clock=clock)
    balances = BalanceLedger(payouts)
    fees = FeeSchedule(platform_fee=Money.of("20"), host_fee=Money.of("15"))
    return Engine(
        clock=clock,
        events=events,
        purchases=purchases,
        payouts=payouts,
        tokens=tokens,
        balances=balances,
        purchase_service=PurchaseService(events, purchases, tokens, uow, fees, clock=clock),
        withdrawals=WithdrawalService(payouts, events, balances, uow, clock=clock),
        notifier=RecordingNotifier(),
        uow=uow,
    )


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture(autouse=True)
def celery_eager(settings):
    """Run Celery tasks in-process instead of publishing them to a broker."""
    settings.CELERY_TASK_ALWAYS_EAGER = True


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def host(django_user_model):
    return django_user_model.objects.create_user(username="host", password="pw")


@pytest.fixture
def staff(django_user_model):
    return django_user_model.objects.create_user(username="staff", password="pw", is_staff=True)


@pytest.fixture
def event_row(host):
    from events.models import Event as EventRow

    return EventRow.objects.create(
        host=host,
        name="Nairobi Jazz Night",
        description="Live music",
        location="Carnivore Grounds",
        starts_at=NOW + timedelta(days=7),
        ends_at=NOW + timedelta(days=7, hours=6),
    )


@pytest.fixture
def tier_row(event_row):
    from events.models import TicketTier as TierRow

    return TierRow.objects.create(event=event_row, name="Regular", price=Decimal("1000"), quantity=2)
