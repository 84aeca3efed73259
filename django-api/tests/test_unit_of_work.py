"""Tests for the in-memory unit of work.

Run with: pytest tests/test_unit_of_work.py -v
"""

from decimal import Decimal

import pytest
from conftest import HOST_ID, make_event, make_tier

from events.stores.memory_store import InMemoryEventStore
from payouts.stores.memory_store import InMemoryPayoutStore
from tikiti.unit_of_work import InMemoryUnitOfWork


@pytest.fixture
def stores():
    return InMemoryEventStore(), InMemoryPayoutStore()


class TestInMemoryUnitOfWork:
    """All-or-nothing units over the in-memory stores."""

    def test_error_restores_every_store(self, stores):
        """Writes made before the error are undone in each registered store."""
        events, payouts = stores
        event = make_event()
        tier = make_tier(event, quantity=2)
        events.add_event(event)
        events.add_tier(tier)
        uow = InMemoryUnitOfWork(events, payouts)

        with pytest.raises(RuntimeError):
            with uow.atomic():
                events.reserve_slot(tier.id)
                payouts.credit(HOST_ID, Decimal("985"))
                raise RuntimeError("boom")

        assert events.get_tier(tier.id).sold == 0
        assert payouts.get_balance(HOST_ID) == Decimal("0")

    def test_clean_exit_keeps_writes(self, stores):
        """A unit that completes keeps what it wrote."""
        events, payouts = stores
        uow = InMemoryUnitOfWork(events, payouts)
        with uow.atomic():
            payouts.credit(HOST_ID, Decimal("985"))
        assert payouts.get_balance(HOST_ID) == Decimal("985")

    def test_nested_unit_rolls_back_with_the_outer_one(self, stores):
        """An inner unit is part of the outermost one."""
        events, payouts = stores
        uow = InMemoryUnitOfWork(events, payouts)
        with pytest.raises(ValueError):
            with uow.atomic():
                with uow.atomic():
                    payouts.credit(HOST_ID, Decimal("10"))
                raise ValueError("outer failure")
        assert payouts.get_balance(HOST_ID) == Decimal("0")

    def test_commit_callbacks_run_after_exit(self, stores):
        """Callbacks wait for the outermost unit and are dropped on rollback."""
        uow = InMemoryUnitOfWork(*stores)
        ran = []
        with uow.atomic():
            uow.on_commit(lambda: ran.append("committed"))
            assert ran == []
        assert ran == ["committed"]

        with pytest.raises(RuntimeError):
            with uow.atomic():
                uow.on_commit(lambda: ran.append("rolled back"))
                raise RuntimeError("boom")
        assert ran == ["committed"]

    def test_callback_outside_a_unit_runs_immediately(self, stores):
        """on_commit with no open unit runs at once."""
        ran = []
        InMemoryUnitOfWork(*stores).on_commit(lambda: ran.append(1))
        assert ran == [1]
