"""In-process PurchaseStore with one lock per purchase."""

from dataclasses import replace
from datetime import datetime
from uuid import UUID

from events.domain import EventId
from events.stores.memory_store import KeyedLocks
from tickets.domain import PaymentDetails, PaymentStatus, Purchase, SettlementRecord
from tickets.stores.interfaces import PurchaseStore


class InMemoryPurchaseStore(PurchaseStore):
    def __init__(self) -> None:
        self._purchases: dict[UUID, Purchase] = {}
        self._settlements: dict[str, SettlementRecord] = {}
        self._lock_for = KeyedLocks()

    def snapshot(self) -> tuple:
        return dict(self._purchases), dict(self._settlements)

    def restore(self, state: tuple) -> None:
        self._purchases, self._settlements = dict(state[0]), dict(state[1])

    def add(self, purchase: Purchase, settlement: SettlementRecord) -> None:
        if settlement.reference in self._settlements:
            raise ValueError(f"Duplicate reference {settlement.reference}")
        self._purchases[purchase.id] = purchase
        self._settlements[settlement.reference] = settlement

    def get_purchase(self, purchase_id: UUID) -> Purchase | None:
        return self._purchases.get(purchase_id)

    def get_settlement(self, reference: str) -> SettlementRecord | None:
        return self._settlements.get(reference)

    def get_settlement_by_checkout_id(self, checkout_id: str) -> SettlementRecord | None:
        for settlement in self._settlements.values():
            if settlement.checkout_id and settlement.checkout_id == checkout_id:
                return settlement
        return None

    def attach_checkout_id(self, reference: str, checkout_id: str) -> None:
        with self._lock_for(reference):
            settlement = self._settlements[reference]
            self._settlements[reference] = replace(settlement, checkout_id=checkout_id)

    def complete_settlement(
        self,
        reference: str,
        status: PaymentStatus,
        details: PaymentDetails,
        raw_payload: dict | None,
    ) -> bool:
        with self._lock_for(reference):
            settlement = self._settlements.get(reference)
            if settlement is None or settlement.status is not PaymentStatus.PENDING:
                return False
            self._settlements[reference] = replace(
                settlement,
                status=status,
                receipt_number=details.receipt_number,
                phone_number=details.phone_number,
                paid_at=details.paid_at,
                raw_payload=raw_payload,
            )
            return True

    def update_purchase_status(
        self, purchase_id: UUID, status: PaymentStatus, details: PaymentDetails
    ) -> bool:
        with self._lock_for(purchase_id):
            purchase = self._purchases.get(purchase_id)
            if purchase is None or purchase.status is not PaymentStatus.PENDING:
                return False
            self._purchases[purchase_id] = replace(
                purchase,
                status=status,
                receipt_number=details.receipt_number,
                paid_at=details.paid_at,
            )
            return True

    def flag_for_reconciliation(self, reference: str, note: str) -> None:
        with self._lock_for(reference):
            settlement = self._settlements[reference]
            self._settlements[reference] = replace(
                settlement, needs_reconciliation=True, reconciliation_note=note
            )

    def mark_redeemed(self, purchase_id: UUID, redeemed_at: datetime) -> bool:
        with self._lock_for(purchase_id):
            purchase = self._purchases.get(purchase_id)
            if purchase is None or purchase.status is not PaymentStatus.SUCCESS or purchase.redeemed:
                return False
            self._purchases[purchase_id] = replace(purchase, redeemed=True, redeemed_at=redeemed_at)
            return True

    def list_event_purchases(self, event_id: EventId) -> list[Purchase]:
        found = [p for p in self._purchases.values() if p.event_id == event_id]
        return sorted(found, key=lambda p: p.created_at, reverse=True)

    def list_settlements(self, event_ids: list[EventId]) -> list[SettlementRecord]:
        wanted = set(event_ids)
        found = [s for s in self._settlements.values() if s.event_id in wanted]
        return sorted(found, key=lambda s: s.created_at, reverse=True)
