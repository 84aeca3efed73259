"""Unit tests for domain primitives and pure policies.

These test invariants that must hold at construction time.
Run with: pytest tests/test_domain.py -v
"""

from datetime import timedelta
from decimal import Decimal
from uuid import uuid4

import pytest
from conftest import NOW, make_event, make_tier

from events.domain import Capacity, EventId, Money, TierId
from payouts.domain.errors import WithdrawalNotYetAvailableError
from payouts.domain.policies import check_withdrawal_window
from tickets.domain import PaymentStatus, Purchase, SettlementAck, SettlementOutcome
from tickets.domain.errors import EventEndedError, NotYetActiveError
from tickets.domain.policies import FeeSchedule, activation_starts_at, check_admission_window


class TestMoney:
    """Tests for Money value object."""

    def test_money_accepts_zero(self):
        """Money can be created with zero."""
        assert Money(Decimal("0")).amount == Decimal("0")

    def test_money_rejects_negative_amount(self):
        """Money raises ValueError for negative amount."""
        with pytest.raises(ValueError):
            Money(Decimal("-0.01"))

    def test_money_of_quantizes_to_cents(self):
        """Money.of accepts strings and ints and keeps two decimal places."""
        assert Money.of("12.5").amount == Decimal("12.50")
        assert Money.of(3) == Money.of("3.00")

    def test_money_str_format(self):
        """Money string representation is formatted to 2 decimal places."""
        assert str(Money(Decimal("1020"))) == "1020.00"


class TestIdentifiers:
    """Tests for EventId and TierId."""

    def test_from_string_round_trips(self):
        """from_string parses the canonical UUID form."""
        raw = uuid4()
        assert str(EventId.from_string(str(raw))) == str(raw)

    def test_from_string_rejects_garbage(self):
        """A malformed id raises ValueError."""
        with pytest.raises(ValueError):
            TierId.from_string("not-a-uuid")


class TestTicketTier:
    """Tests for TicketTier invariants."""

    def test_capacity_rejects_negative_value(self):
        """Capacity raises ValueError for negative value."""
        with pytest.raises(ValueError):
            Capacity(-1)

    def test_tier_requires_at_least_one_slot(self):
        """A tier with zero quantity is rejected."""
        with pytest.raises(ValueError):
            make_tier(make_event(), quantity=0)

    def test_tier_sold_cannot_exceed_quantity(self):
        """sold > quantity is rejected at construction."""
        with pytest.raises(ValueError):
            make_tier(make_event(), quantity=2, sold=3)

    def test_remaining_and_availability(self):
        """A full tier reports nothing remaining."""
        tier = make_tier(make_event(), quantity=2, sold=2)
        assert tier.remaining == 0
        assert tier.is_available is False


class TestPurchase:
    """Tests for the Purchase invariant."""

    def test_unpaid_purchase_cannot_be_redeemed(self):
        """redeemed=True requires status SUCCESS."""
        event = make_event()
        tier = make_tier(event)
        with pytest.raises(ValueError):
            Purchase(
                id=uuid4(),
                event_id=event.id,
                tier_id=tier.id,
                buyer_name="Wanjiku",
                buyer_phone="254712345678",
                total_amount=Money.of("1020"),
                platform_fee=Money.of("20"),
                host_fee=Money.of("15"),
                net_amount=Money.of("985"),
                status=PaymentStatus.PENDING,
                reference="TKT1",
                admission_token="token",
                created_at=NOW,
                redeemed=True,
            )


class TestFeeSchedule:
    """Tests for ticket pricing."""

    def test_quote_adds_platform_fee_and_deducts_host_fee(self):
        """Buyer pays price + 20, host nets price - 15."""
        quote = FeeSchedule(Money.of("20"), Money.of("15")).quote(Money.of("1000"))
        assert quote.total == Money.of("1020")
        assert quote.net == Money.of("985")

    def test_net_never_negative(self):
        """A price below the host fee nets zero."""
        quote = FeeSchedule(Money.of("20"), Money.of("15")).quote(Money.of("10"))
        assert quote.net == Money.of("0")
        assert quote.total == Money.of("30")

    def test_free_ticket_still_pays_platform_fee(self):
        """A zero-priced tier costs the platform fee only."""
        quote = FeeSchedule(Money.of("20"), Money.of("15")).quote(Money.of("0"))
        assert quote.total == Money.of("20")


class TestAdmissionWindow:
    """Tests for the 4 hour activation window."""

    def test_five_hours_before_start_is_not_active(self):
        """Five hours early raises NotYetActive with active_from = start - 4h."""
        starts_at = NOW + timedelta(hours=5)
        with pytest.raises(NotYetActiveError) as exc:
            check_admission_window(NOW, starts_at, starts_at + timedelta(hours=3))
        assert exc.value.active_from == starts_at - timedelta(hours=4)
        assert exc.value.details() == {"active_from": (starts_at - timedelta(hours=4)).isoformat()}

    def test_window_opens_exactly_four_hours_before(self):
        """The boundary instant is inside the window."""
        starts_at = NOW + timedelta(hours=4)
        assert activation_starts_at(starts_at) == NOW
        check_admission_window(NOW, starts_at, starts_at + timedelta(hours=3))

    def test_after_end_raises_event_ended(self):
        """Scanning after ends_at raises EventEnded."""
        with pytest.raises(EventEndedError):
            check_admission_window(NOW, NOW - timedelta(hours=5), NOW - timedelta(seconds=1))


class TestWithdrawalWindow:
    """Tests for the 24 hour hold after an event."""

    def test_inside_hold_raises_with_available_at(self):
        """Twelve hours after the end, withdrawals open 12 hours later."""
        ends_at = NOW - timedelta(hours=12)
        with pytest.raises(WithdrawalNotYetAvailableError) as exc:
            check_withdrawal_window(NOW, ends_at)
        assert exc.value.available_at == NOW + timedelta(hours=12)

    def test_after_hold_passes(self):
        """Exactly 24 hours after the end is allowed."""
        check_withdrawal_window(NOW, NOW - timedelta(hours=24))


class TestSettlementAck:
    """Tests for gateway acknowledgements."""

    @pytest.mark.parametrize(
        "outcome",
        [
            SettlementOutcome.SETTLED,
            SettlementOutcome.REFUSED,
            SettlementOutcome.FAILED,
            SettlementOutcome.DUPLICATE,
            SettlementOutcome.PROCESSING_ERROR,
            SettlementOutcome.MALFORMED,
        ],
    )
    def test_known_reference_is_acknowledged(self, outcome):
        """Everything except an unknown reference answers ResultCode 0."""
        assert SettlementAck(outcome, "TKT1").as_gateway_response()["ResultCode"] == 0

    def test_unknown_reference_requests_redelivery(self):
        """An unknown reference answers ResultCode 1."""
        ack = SettlementAck(SettlementOutcome.UNKNOWN_REFERENCE, "TKT1")
        assert ack.result_code == 1
