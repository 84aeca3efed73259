"""Settlement reconciler for asynchronous payment-gateway callbacks.

The gateway is the only source of payment truth and may deliver a callback
more than once, late, or concurrently with a redelivery. The settlement record
moving out of PENDING is the serialization point: whoever wins that
compare-and-set applies the side effects (inventory, purchase status, host
credit, sales counters) inside the same transaction; everyone else is a
duplicate.
"""

import logging
import time
from datetime import tzinfo
from datetime import timezone as dt_timezone
from enum import Enum
from functools import partial
from typing import Callable

from events.domain import Event, Money
from events.domain.errors import OutOfStockError
from events.services.inventory_service import InventoryLedger
from events.stores.interfaces import EventStore
from payouts.services.balance_service import BalanceLedger
from tickets.domain import (
    GatewayCallback,
    PaymentStatus,
    Purchase,
    SettlementAck,
    SettlementOutcome,
    SettlementRecord,
)
from tickets.services.callbacks import MalformedCallbackError, parse_callback
from tickets.stores.interfaces import PurchaseStore
from tikiti.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)
alert = logging.getLogger("tikiti.reconciliation")


class OversellPolicy(Enum):
    """What to do with a paid purchase whose tier sold out before settlement."""

    HONOR = "honor"
    REFUSE = "refuse"


class SettlementReconciler:
    def __init__(
        self,
        events: EventStore,
        purchases: PurchaseStore,
        balances: BalanceLedger,
        unit_of_work: UnitOfWork,
        confirmations: Callable[[str], None] | None = None,
        oversell_policy: OversellPolicy = OversellPolicy.HONOR,
        lookup_attempts: int = 1,
        lookup_delay: float = 0.0,
        sleep: Callable[[float], None] = time.sleep,
        cache_invalidator: Callable[[str], None] | None = None,
    ) -> None:
        self._events = events
        self._inventory = InventoryLedger(events)
        self._purchases = purchases
        self._balances = balances
        self._uow = unit_of_work
        self._confirm = confirmations
        self._policy = oversell_policy
        self._lookup_attempts = max(lookup_attempts, 1)
        self._lookup_delay = lookup_delay
        self._sleep = sleep
        self._invalidate_cache = cache_invalidator

    def ingest_payload(self, payload: dict, tz: tzinfo = dt_timezone.utc) -> SettlementAck:
        """Parse a raw callback body and ingest it.

        A body that cannot be read as a payment result is still acknowledged:
        it is logged for reconciliation, and the payment it names, if any, is
        flagged and left pending.
        """
        try:
            callback = parse_callback(payload, tz)
        except MalformedCallbackError as e:
            return self._reject(e)
        return self.ingest(callback, raw_payload=payload)

    def ingest(self, callback: GatewayCallback, raw_payload: dict | None = None) -> SettlementAck:
        """Apply a gateway callback at most once and return the acknowledgement.

        Any error, including one raised while looking the payment up, rolls
        back what was written and is acknowledged as PROCESSING_ERROR.
        """
        reference = callback.reference or callback.checkout_id
        try:
            settlement = self._locate(callback)
            if settlement is None:
                alert.error(
                    "Callback for unknown payment (reference=%r, checkout_id=%r)",
                    callback.reference,
                    callback.checkout_id,
                )
                return SettlementAck(SettlementOutcome.UNKNOWN_REFERENCE, reference)
            reference = settlement.reference
            if settlement.status.is_terminal:
                logger.info("Duplicate callback for %s ignored", reference)
                return SettlementAck(SettlementOutcome.DUPLICATE, reference)

            with self._uow.atomic():
                return self._apply(settlement, callback, raw_payload)
        except Exception:
            alert.exception("Callback for %s could not be processed; changes were rolled back", reference)
            return SettlementAck(
                SettlementOutcome.PROCESSING_ERROR, reference, reconciliation_needed=True
            )

    def _reject(self, error: MalformedCallbackError) -> SettlementAck:
        reference = error.reference or error.checkout_id
        alert.error(
            "Malformed payment callback (reference=%r, checkout_id=%r): %s",
            error.reference,
            error.checkout_id,
            error,
        )
        if not reference:
            return SettlementAck(SettlementOutcome.MALFORMED, "", reconciliation_needed=True)
        try:
            settlement = self._purchases.get_settlement(error.reference) if error.reference else None
            if settlement is None and error.checkout_id:
                settlement = self._purchases.get_settlement_by_checkout_id(error.checkout_id)
            if settlement is not None:
                reference = settlement.reference
                self._flag(reference, [settlement.reconciliation_note, f"Malformed callback: {error}"])
        except Exception:
            alert.exception("Could not flag %s after a malformed callback", reference)
        return SettlementAck(SettlementOutcome.MALFORMED, reference, reconciliation_needed=True)

    def _locate(self, callback: GatewayCallback) -> SettlementRecord | None:
        for attempt in range(self._lookup_attempts):
            settlement = None
            if callback.reference:
                settlement = self._purchases.get_settlement(callback.reference)
            if settlement is None and callback.checkout_id:
                settlement = self._purchases.get_settlement_by_checkout_id(callback.checkout_id)
            if settlement is not None:
                return settlement
            if attempt + 1 < self._lookup_attempts:
                self._sleep(self._lookup_delay)
        return None

    def _apply(
        self, settlement: SettlementRecord, callback: GatewayCallback, raw_payload: dict | None
    ) -> SettlementAck:
        reference = settlement.reference
        status = PaymentStatus.SUCCESS if callback.succeeded else PaymentStatus.FAILED
        if not self._purchases.complete_settlement(reference, status, callback.details, raw_payload):
            logger.info("Callback for %s lost the race to another delivery", reference)
            return SettlementAck(SettlementOutcome.DUPLICATE, reference)

        purchase = self._purchases.get_purchase(settlement.purchase_id)
        if not callback.succeeded:
            self._set_purchase_status(purchase, PaymentStatus.FAILED, callback)
            logger.info("Payment %s failed: %s", reference, callback.result_desc)
            return SettlementAck(SettlementOutcome.FAILED, reference)

        notes = []
        paid = callback.details.amount
        if paid is not None and Money.of(paid) != settlement.amount:
            notes.append(f"Paid amount {paid} differs from expected {settlement.amount}")

        try:
            self._inventory.reserve(purchase.tier_id)
            oversold = False
        except OutOfStockError:
            oversold = True

        if oversold and self._policy is OversellPolicy.REFUSE:
            self._set_purchase_status(purchase, PaymentStatus.FAILED, callback)
            notes.append("Tier sold out before payment settled; purchase refused, refund required")
            self._flag(reference, notes)
            return SettlementAck(SettlementOutcome.REFUSED, reference, reconciliation_needed=True)

        self._set_purchase_status(purchase, PaymentStatus.SUCCESS, callback)
        event = self._events.get_event(purchase.event_id)
        self._balances.credit(event.host_id, purchase.net_amount.amount)
        self._events.record_sale(
            event.id, purchase.total_amount.amount - purchase.platform_fee.amount
        )
        if oversold:
            notes.append("Tier sold out before payment settled; ticket honored over capacity")
        if notes:
            self._flag(reference, notes)

        self._uow.on_commit(partial(self._after_settlement, purchase, event))
        logger.info("Payment %s settled for purchase %s", reference, purchase.id)
        return SettlementAck(SettlementOutcome.SETTLED, reference, reconciliation_needed=bool(notes))

    def _set_purchase_status(
        self, purchase: Purchase, status: PaymentStatus, callback: GatewayCallback
    ) -> None:
        if not self._purchases.update_purchase_status(purchase.id, status, callback.details):
            raise RuntimeError(f"Purchase {purchase.id} is no longer pending")

    def _flag(self, reference: str, notes: list[str]) -> None:
        note = "; ".join(n for n in notes if n)
        self._purchases.flag_for_reconciliation(reference, note)
        alert.error("Settlement %s needs reconciliation: %s", reference, note)

    def _after_settlement(self, purchase: Purchase, event: Event) -> None:
        if self._invalidate_cache is not None:
            try:
                self._invalidate_cache(str(event.id))
            except Exception:
                logger.exception("Failed to invalidate catalog cache for event %s", event.id)
        if self._confirm is None or not purchase.buyer_email:
            return
        try:
            self._confirm(str(purchase.id))
        except Exception:
            logger.exception("Failed to queue ticket confirmation for purchase %s", purchase.id)
