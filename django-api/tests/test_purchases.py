"""Tests for the purchase state machine and door scans.

Run with: pytest tests/test_purchases.py -v
"""

import threading
from datetime import timedelta
from uuid import uuid4

import pytest
from conftest import NOW

from events.domain import Money
from events.domain.errors import (
    EventNotFoundError,
    InvalidIdError,
    OutOfStockError,
    TierNotFoundError,
)
from tickets.domain import GatewayCallback, PaymentStatus
from tickets.domain.errors import (
    AlreadyRedeemedError,
    EventEndedError,
    InvalidSignatureError,
    NotYetActiveError,
    PaymentIncompleteError,
    PaymentInitiationFailedError,
    PurchaseNotFoundError,
    WrongEventError,
)
from tickets.domain.policies import FeeSchedule
from tickets.gateways.interfaces import PaymentGateway, PaymentGatewayError
from tickets.services.purchase_service import PurchaseService


class FakeGateway(PaymentGateway):
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.calls = []

    def initiate(self, phone, amount, reference, description):
        self.calls.append((phone, amount, reference, description))
        if self.fail:
            raise PaymentGatewayError("gateway unavailable")
        return "ws_CO_123"


def with_gateway(engine, gateway) -> PurchaseService:
    return PurchaseService(
        engine.events,
        engine.purchases,
        engine.tokens,
        engine.uow,
        FeeSchedule(Money.of("20"), Money.of("15")),
        gateway=gateway,
        clock=engine.clock,
    )


def paid(engine, event, tier):
    receipt = engine.buy(event, tier)
    engine.reconciler().ingest(GatewayCallback(reference=receipt.reference, result_code=0))
    return receipt.purchase


class TestCreatePurchase:
    """Tests for PurchaseService.create."""

    def test_creates_pending_purchase_and_settlement(self, engine):
        """A new purchase and its settlement record start PENDING."""
        event, tier = engine.add_event(price="1000")
        receipt = engine.buy(event, tier)
        purchase = engine.purchases.get_purchase(receipt.purchase.id)
        settlement = engine.purchases.get_settlement(receipt.reference)
        assert purchase.status is PaymentStatus.PENDING
        assert settlement.status is PaymentStatus.PENDING
        assert settlement.purchase_id == purchase.id
        assert purchase.total_amount == Money.of("1020")
        assert purchase.net_amount == Money.of("985")

    def test_does_not_reserve_inventory(self, engine):
        """Creating a purchase leaves sold untouched."""
        event, tier = engine.add_event(quantity=1)
        engine.buy(event, tier)
        engine.buy(event, tier)
        assert engine.events.get_tier(tier.id).sold == 0

    def test_token_names_the_purchase(self, engine):
        """The minted admission token verifies to the new purchase."""
        event, tier = engine.add_event()
        receipt = engine.buy(event, tier)
        payload = engine.tokens.verify(receipt.purchase.admission_token)
        assert payload.purchase_id == str(receipt.purchase.id)
        assert payload.event_id == str(event.id)

    def test_references_are_unique(self, engine):
        """Every purchase gets its own gateway reference."""
        event, tier = engine.add_event()
        references = {engine.buy(event, tier).reference for _ in range(50)}
        assert len(references) == 50

    def test_unknown_event(self, engine):
        """A missing event raises EventNotFound."""
        _, tier = engine.add_event()
        with pytest.raises(EventNotFoundError):
            engine.purchase_service.create(str(uuid4()), str(tier.id), "A", "254700000000")

    def test_inactive_event(self, engine):
        """An inactive event cannot be bought."""
        event, tier = engine.add_event(is_active=False)
        with pytest.raises(EventNotFoundError):
            engine.buy(event, tier)

    def test_tier_from_another_event(self, engine):
        """A tier must belong to the requested event."""
        event, _ = engine.add_event()
        _, other_tier = engine.add_event()
        with pytest.raises(TierNotFoundError):
            engine.buy(event, other_tier)

    def test_malformed_tier_id(self, engine):
        """A non-UUID tier id raises InvalidId."""
        event, _ = engine.add_event()
        with pytest.raises(InvalidIdError):
            engine.purchase_service.create(str(event.id), "vip", "A", "254700000000")

    def test_sold_out_tier(self, engine):
        """The availability pre-check rejects a full tier."""
        event, tier = engine.add_event(quantity=1)
        engine.events.reserve_slot(tier.id)
        with pytest.raises(OutOfStockError):
            engine.buy(event, tier)

    def test_gateway_checkout_id_is_attached(self, engine):
        """The gateway's checkout id is stored on the settlement record."""
        event, tier = engine.add_event()
        gateway = FakeGateway()
        receipt = with_gateway(engine, gateway).create(
            str(event.id), str(tier.id), "A", "254700000000", payer_phone="254711111111"
        )
        assert receipt.checkout_id == "ws_CO_123"
        assert engine.purchases.get_settlement(receipt.reference).checkout_id == "ws_CO_123"
        assert gateway.calls[0][0] == "254711111111"

    def test_gateway_failure_fails_both_records(self, engine):
        """A refused initiation marks purchase and settlement FAILED."""
        event, tier = engine.add_event()
        with pytest.raises(PaymentInitiationFailedError) as exc:
            with_gateway(engine, FakeGateway(fail=True)).create(
                str(event.id), str(tier.id), "A", "254700000000"
            )
        settlement = engine.purchases.get_settlement(exc.value.reference)
        assert settlement.status is PaymentStatus.FAILED
        assert engine.purchases.get_purchase(settlement.purchase_id).status is PaymentStatus.FAILED


class TestLookups:
    """Tests for get_purchase and get_payment_status."""

    def test_get_purchase_invalid_id(self, engine):
        """A malformed id raises InvalidId."""
        with pytest.raises(InvalidIdError):
            engine.purchase_service.get_purchase("nope")

    def test_get_purchase_not_found(self, engine):
        """An unknown id raises PurchaseNotFound."""
        with pytest.raises(PurchaseNotFoundError):
            engine.purchase_service.get_purchase(str(uuid4()))

    def test_payment_status_follows_settlement(self, engine):
        """The status endpoint reads the settlement record."""
        event, tier = engine.add_event()
        receipt = engine.buy(event, tier)
        assert engine.purchase_service.get_payment_status(receipt.reference).status is PaymentStatus.PENDING
        engine.reconciler().ingest(GatewayCallback(reference=receipt.reference, result_code=0))
        assert engine.purchase_service.get_payment_status(receipt.reference).status is PaymentStatus.SUCCESS


class TestRedeem:
    """Tests for the ordered door checks and single redemption."""

    def test_unknown_purchase(self, engine):
        """NotFound comes first."""
        with pytest.raises(PurchaseNotFoundError):
            engine.purchase_service.redeem(str(uuid4()))

    def test_wrong_event_before_payment_check(self, engine):
        """An unpaid ticket presented at another event reports WrongEvent."""
        event, tier = engine.add_event()
        receipt = engine.buy(event, tier)
        with pytest.raises(WrongEventError):
            engine.purchase_service.redeem(str(receipt.purchase.id), str(uuid4()))

    def test_malformed_presented_event_is_wrong_event(self, engine):
        """A scanner event id that is not a UUID cannot match."""
        event, tier = engine.add_event(starts_at=NOW + timedelta(hours=1))
        purchase = paid(engine, event, tier)
        with pytest.raises(WrongEventError):
            engine.purchase_service.redeem(str(purchase.id), "main-gate")

    def test_unpaid_ticket(self, engine):
        """A PENDING purchase raises PaymentIncomplete."""
        event, tier = engine.add_event(starts_at=NOW + timedelta(hours=1))
        receipt = engine.buy(event, tier)
        with pytest.raises(PaymentIncompleteError):
            engine.purchase_service.redeem(str(receipt.purchase.id))

    def test_five_hours_before_start(self, engine):
        """Five hours early raises NotYetActive with active_from = start - 4h."""
        starts_at = NOW + timedelta(hours=5)
        event, tier = engine.add_event(starts_at=starts_at)
        purchase = paid(engine, event, tier)
        with pytest.raises(NotYetActiveError) as exc:
            engine.purchase_service.redeem(str(purchase.id))
        assert exc.value.active_from == starts_at - timedelta(hours=4)
        assert engine.purchases.get_purchase(purchase.id).redeemed is False

    def test_after_event_end(self, engine):
        """A scan after ends_at raises EventEnded."""
        event, tier = engine.add_event(starts_at=NOW + timedelta(hours=1))
        purchase = paid(engine, event, tier)
        engine.clock.advance(hours=8)
        with pytest.raises(EventEndedError):
            engine.purchase_service.redeem(str(purchase.id))

    def test_redeem_once_then_already_redeemed(self, engine):
        """The first redemption wins; the second reports when it happened."""
        event, tier = engine.add_event(starts_at=NOW + timedelta(hours=1))
        purchase = paid(engine, event, tier)
        receipt = engine.purchase_service.redeem(str(purchase.id), str(event.id))
        assert receipt.redeemed_at == NOW
        assert receipt.event_name == event.name
        assert receipt.tier_name == tier.name

        engine.clock.advance(minutes=10)
        with pytest.raises(AlreadyRedeemedError) as exc:
            engine.purchase_service.redeem(str(purchase.id))
        assert exc.value.redeemed_at == NOW

    def test_already_redeemed_reported_before_event_ended(self, engine):
        """A used ticket scanned after the event still says AlreadyRedeemed."""
        event, tier = engine.add_event(starts_at=NOW + timedelta(hours=1))
        purchase = paid(engine, event, tier)
        engine.purchase_service.redeem(str(purchase.id))
        engine.clock.advance(days=1)
        with pytest.raises(AlreadyRedeemedError):
            engine.purchase_service.redeem(str(purchase.id))

    def test_check_admission_does_not_consume(self, engine):
        """Validation leaves the ticket usable."""
        event, tier = engine.add_event(starts_at=NOW + timedelta(hours=1))
        purchase = paid(engine, event, tier)
        receipt = engine.purchase_service.check_admission(str(purchase.id))
        assert receipt.redeemed_at is None
        assert engine.purchases.get_purchase(purchase.id).redeemed is False
        engine.purchase_service.redeem(str(purchase.id))

    def test_concurrent_redeems_have_one_winner(self, engine):
        """Of many simultaneous scans exactly one admits."""
        event, tier = engine.add_event(starts_at=NOW + timedelta(hours=1))
        purchase = paid(engine, event, tier)
        barrier = threading.Barrier(10)
        outcomes = []

        def scan():
            barrier.wait()
            try:
                engine.purchase_service.redeem(str(purchase.id))
                outcomes.append("admitted")
            except AlreadyRedeemedError:
                outcomes.append("rejected")

        threads = [threading.Thread(target=scan) for _ in range(10)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert outcomes.count("admitted") == 1
        assert outcomes.count("rejected") == 9


class TestScan:
    """Tests for token-driven scans."""

    def test_scan_redeems_the_token_purchase(self, engine):
        """A valid token admits its ticket."""
        event, tier = engine.add_event(starts_at=NOW + timedelta(hours=1))
        purchase = paid(engine, event, tier)
        receipt = engine.purchase_service.scan(purchase.admission_token, str(event.id))
        assert receipt.purchase_id == str(purchase.id)
        assert engine.purchases.get_purchase(purchase.id).redeemed is True

    def test_validate_only_scan(self, engine):
        """commit=False runs the checks without redeeming."""
        event, tier = engine.add_event(starts_at=NOW + timedelta(hours=1))
        purchase = paid(engine, event, tier)
        engine.purchase_service.scan(purchase.admission_token, commit=False)
        assert engine.purchases.get_purchase(purchase.id).redeemed is False

    def test_tampered_token(self, engine):
        """A token with a changed character is rejected before any lookup."""
        event, tier = engine.add_event(starts_at=NOW + timedelta(hours=1))
        purchase = paid(engine, event, tier)
        token = purchase.admission_token
        forged = token[:10] + ("A" if token[10] != "A" else "B") + token[11:]
        with pytest.raises(InvalidSignatureError):
            engine.purchase_service.scan(forged)
