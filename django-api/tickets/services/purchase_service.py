"""Purchase state machine.

    PENDING -> SUCCESS | FAILED      (settlement only, see settlement_service)
    SUCCESS -> redeemed              (door scan, exactly once)

Creating a purchase never reserves inventory; the slot is committed when the
gateway confirms payment.
"""

import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable
from uuid import UUID, uuid4

from django.utils import timezone

from events.domain import TierId
from events.domain.errors import (
    EventNotFoundError,
    InvalidIdError,
    OutOfStockError,
    TierNotFoundError,
)
from events.services.event_service import EventService, parse_event_id
from events.services.inventory_service import InventoryLedger
from events.stores.interfaces import EventStore
from tickets.domain import (
    AdmissionReceipt,
    PaymentDetails,
    PaymentStatus,
    Purchase,
    PurchaseReceipt,
    RecentScan,
    ScanStats,
    SettlementRecord,
    TierScans,
)
from tickets.domain.errors import (
    AlreadyRedeemedError,
    PaymentIncompleteError,
    PaymentInitiationFailedError,
    PurchaseNotFoundError,
    WrongEventError,
)
from tickets.domain.policies import FeeSchedule, check_admission_window
from tickets.gateways.interfaces import PaymentGateway, PaymentGatewayError
from tickets.gateways.qr import qr_png_bytes
from tickets.services.admission_tokens import AdmissionTokenService
from tickets.stores.interfaces import PurchaseStore
from tikiti.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)

RECENT_SCANS_LIMIT = 20


def new_reference() -> str:
    return f"TKT{uuid4().hex[:20].upper()}"


def parse_purchase_id(purchase_id) -> UUID:
    try:
        return UUID(str(purchase_id))
    except ValueError:
        raise InvalidIdError("ticket ID") from None


def parse_tier_id(tier_id) -> TierId:
    try:
        return TierId.from_string(tier_id)
    except ValueError:
        raise InvalidIdError("tier ID") from None


class PurchaseService:
    """Service for buying and redeeming tickets."""

    def __init__(
        self,
        events: EventStore,
        purchases: PurchaseStore,
        tokens: AdmissionTokenService,
        unit_of_work: UnitOfWork,
        fees: FeeSchedule,
        gateway: PaymentGateway | None = None,
        clock: Callable[[], datetime] = timezone.now,
    ) -> None:
        self._events = events
        self._catalog = EventService(events)
        self._inventory = InventoryLedger(events)
        self._purchases = purchases
        self._tokens = tokens
        self._uow = unit_of_work
        self._fees = fees
        self._gateway = gateway
        self._clock = clock

    def create(
        self,
        event_id: str,
        tier_id: str,
        buyer_name: str,
        buyer_phone: str,
        buyer_email: str = "",
        payer_phone: str | None = None,
    ) -> PurchaseReceipt:
        """Record a PENDING purchase and start the payment.

        Raises:
            InvalidIdError: If an ID is not a valid UUID.
            EventNotFoundError: If the event is missing or inactive.
            TierNotFoundError: If the tier is missing or belongs to another event.
            OutOfStockError: If the tier is already sold out.
            PaymentInitiationFailedError: If the gateway refused the payment.
        """
        event = self._events.get_event(parse_event_id(event_id))
        if event is None or not event.is_active:
            raise EventNotFoundError(event_id)
        tier = self._events.get_tier(parse_tier_id(tier_id))
        if tier is None or tier.event_id != event.id:
            raise TierNotFoundError(tier_id)
        if not self._inventory.is_available(tier.id):
            raise OutOfStockError(tier_id)

        quote = self._fees.quote(tier.price)
        purchase_id = uuid4()
        reference = new_reference()
        now = self._clock()
        purchase = Purchase(
            id=purchase_id,
            event_id=event.id,
            tier_id=tier.id,
            buyer_name=buyer_name,
            buyer_phone=buyer_phone,
            buyer_email=buyer_email or "",
            total_amount=quote.total,
            platform_fee=quote.platform_fee,
            host_fee=quote.host_fee,
            net_amount=quote.net,
            status=PaymentStatus.PENDING,
            reference=reference,
            admission_token=self._tokens.mint(purchase_id, event.id, buyer_phone),
            created_at=now,
        )
        settlement = SettlementRecord(
            id=uuid4(),
            purchase_id=purchase_id,
            event_id=event.id,
            reference=reference,
            amount=quote.total,
            status=PaymentStatus.PENDING,
            created_at=now,
        )
        with self._uow.atomic():
            self._purchases.add(purchase, settlement)
        logger.info("Purchase %s created for tier %s (reference %s)", purchase_id, tier.id, reference)

        checkout_id = ""
        if self._gateway is not None:
            checkout_id = self._initiate(purchase, payer_phone or buyer_phone, f"{event.name} - {tier.name}")
        return PurchaseReceipt(purchase=purchase, reference=reference, checkout_id=checkout_id)

    def _initiate(self, purchase: Purchase, phone: str, description: str) -> str:
        try:
            checkout_id = self._gateway.initiate(
                phone, purchase.total_amount.amount, purchase.reference, description
            )
        except PaymentGatewayError:
            logger.exception("Payment initiation failed for reference %s", purchase.reference)
            with self._uow.atomic():
                self._purchases.complete_settlement(
                    purchase.reference, PaymentStatus.FAILED, PaymentDetails(), None
                )
                self._purchases.update_purchase_status(
                    purchase.id, PaymentStatus.FAILED, PaymentDetails()
                )
            raise PaymentInitiationFailedError(purchase.reference) from None
        self._purchases.attach_checkout_id(purchase.reference, checkout_id)
        return checkout_id

    def get_purchase(self, purchase_id: str) -> Purchase:
        """Return a purchase by ID.

        Raises:
            InvalidIdError: If the purchase_id is not a valid UUID.
            PurchaseNotFoundError: If the purchase does not exist.
        """
        purchase = self._purchases.get_purchase(parse_purchase_id(purchase_id))
        if purchase is None:
            raise PurchaseNotFoundError(str(purchase_id))
        return purchase

    def get_payment_status(self, reference: str) -> SettlementRecord:
        settlement = self._purchases.get_settlement(reference)
        if settlement is None:
            raise PurchaseNotFoundError(reference)
        return settlement

    def check_admission(
        self, purchase_id: str, presented_event_id: str | None = None
    ) -> AdmissionReceipt:
        """Run the door checks without consuming the ticket.

        Checks run in a fixed order and the first failure is raised:
        not found, wrong event, already redeemed, unpaid, not yet active,
        event ended.
        """
        purchase = self.get_purchase(purchase_id)
        if presented_event_id:
            try:
                presented = parse_event_id(presented_event_id)
            except InvalidIdError:
                raise WrongEventError() from None
            if presented != purchase.event_id:
                raise WrongEventError()
        if purchase.redeemed:
            raise AlreadyRedeemedError(purchase.redeemed_at)
        if purchase.status is not PaymentStatus.SUCCESS:
            raise PaymentIncompleteError()

        event = self._events.get_event(purchase.event_id)
        if event is None:
            raise EventNotFoundError(str(purchase.event_id))
        check_admission_window(self._clock(), event.starts_at, event.ends_at)

        tier = self._events.get_tier(purchase.tier_id)
        return AdmissionReceipt(
            purchase_id=str(purchase.id),
            event_id=str(event.id),
            event_name=event.name,
            buyer_name=purchase.buyer_name,
            tier_name=tier.name if tier else "",
        )

    def redeem(self, purchase_id: str, presented_event_id: str | None = None) -> AdmissionReceipt:
        """Consume the ticket. Of two concurrent redemptions exactly one succeeds.

        Raises:
            AlreadyRedeemedError: If the ticket was used, including by a
                concurrent scan that won the race.
        """
        receipt = self.check_admission(purchase_id, presented_event_id)
        parsed = parse_purchase_id(purchase_id)
        redeemed_at = self._clock()
        with self._uow.atomic():
            won = self._purchases.mark_redeemed(parsed, redeemed_at)
        if not won:
            current = self._purchases.get_purchase(parsed)
            if current is not None and current.redeemed:
                raise AlreadyRedeemedError(current.redeemed_at)
            raise PaymentIncompleteError()
        logger.info("Purchase %s redeemed", purchase_id)
        return replace(receipt, redeemed_at=redeemed_at)

    def scan(
        self, token: str, presented_event_id: str | None = None, commit: bool = True
    ) -> AdmissionReceipt:
        """Verify an admission token, then check or redeem the ticket it names."""
        payload = self._tokens.verify(token)
        if commit:
            return self.redeem(payload.purchase_id, presented_event_id)
        return self.check_admission(payload.purchase_id, presented_event_id)

    def ticket_qr(self, purchase_id: str) -> bytes:
        """PNG of the admission token, for a paid ticket only.

        Raises:
            InvalidIdError, PurchaseNotFoundError: As for get_purchase.
            PaymentIncompleteError: If the purchase has not been paid.
        """
        purchase = self.get_purchase(purchase_id)
        if purchase.status is not PaymentStatus.SUCCESS:
            raise PaymentIncompleteError()
        return qr_png_bytes(purchase.admission_token)

    def list_event_purchases(self, host_id: int, event_id: str) -> list[Purchase]:
        """Every purchase of a hosted event, newest first.

        Raises:
            InvalidIdError, EventNotFoundError, NotEventHostError
        """
        event = self._catalog.get_hosted_event(host_id, event_id)
        return self._purchases.list_event_purchases(event.id)

    def scan_stats(self, host_id: int, event_id: str) -> ScanStats:
        """Attendance of a hosted event: paid tickets, how many were scanned, per tier."""
        event = self._catalog.get_hosted_event(host_id, event_id)
        tier_names = {tier.id: tier.name for tier in self._events.get_tiers_for_event(event.id)}
        paid = [
            p for p in self._purchases.list_event_purchases(event.id)
            if p.status is PaymentStatus.SUCCESS
        ]

        by_tier: dict[str, list[int]] = {}
        for purchase in paid:
            counts = by_tier.setdefault(tier_names.get(purchase.tier_id, "Unknown"), [0, 0])
            counts[0] += 1
            if purchase.redeemed:
                counts[1] += 1

        redeemed = sorted(
            (p for p in paid if p.redeemed), key=lambda p: p.redeemed_at, reverse=True
        )
        return ScanStats(
            event_id=event.id,
            total_tickets=len(paid),
            used_tickets=len(redeemed),
            tiers=tuple(TierScans(name, total, used) for name, (total, used) in by_tier.items()),
            recent_scans=tuple(
                RecentScan(
                    purchase_id=p.id,
                    buyer_name=p.buyer_name,
                    tier_name=tier_names.get(p.tier_id, "Unknown"),
                    redeemed_at=p.redeemed_at,
                )
                for p in redeemed[:RECENT_SCANS_LIMIT]
            ),
        )

    def payment_history(self, host_id: int) -> list[SettlementRecord]:
        """Payment attempts across all of a host's events, newest first."""
        event_ids = [event.id for event in self._events.list_host_events(host_id)]
        if not event_ids:
            return []
        return self._purchases.list_settlements(event_ids)
