"""Store interfaces for purchases and settlement records.

Status changes are compare-and-set: they report whether this caller moved the
record, so concurrent callbacks or scans have exactly one winner.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from uuid import UUID

from events.domain import EventId
from tickets.domain import PaymentDetails, PaymentStatus, Purchase, SettlementRecord


class PurchaseStore(ABC):
    """Interface for purchase persistence operations."""

    @abstractmethod
    def add(self, purchase: Purchase, settlement: SettlementRecord) -> None:
        """Persist a new purchase together with its pending settlement record."""
        ...

    @abstractmethod
    def get_purchase(self, purchase_id: UUID) -> Purchase | None:
        ...

    @abstractmethod
    def get_settlement(self, reference: str) -> SettlementRecord | None:
        ...

    @abstractmethod
    def get_settlement_by_checkout_id(self, checkout_id: str) -> SettlementRecord | None:
        ...

    @abstractmethod
    def attach_checkout_id(self, reference: str, checkout_id: str) -> None:
        """Store the gateway's own id for the payment started with `reference`."""
        ...

    @abstractmethod
    def complete_settlement(
        self,
        reference: str,
        status: PaymentStatus,
        details: PaymentDetails,
        raw_payload: dict | None,
    ) -> bool:
        """Move a PENDING settlement record to a terminal status.

        Returns False if the record was not PENDING (or does not exist).
        """
        ...

    @abstractmethod
    def update_purchase_status(
        self, purchase_id: UUID, status: PaymentStatus, details: PaymentDetails
    ) -> bool:
        """Move a PENDING purchase to a terminal status. Returns False if not PENDING."""
        ...

    @abstractmethod
    def flag_for_reconciliation(self, reference: str, note: str) -> None:
        ...

    @abstractmethod
    def mark_redeemed(self, purchase_id: UUID, redeemed_at: datetime) -> bool:
        """Set redeemed on a SUCCESS, unredeemed purchase. Returns False otherwise."""
        ...

    @abstractmethod
    def list_event_purchases(self, event_id: EventId) -> list[Purchase]:
        """All purchases for an event, newest first."""
        ...

    @abstractmethod
    def list_settlements(self, event_ids: list[EventId]) -> list[SettlementRecord]:
        """Settlement records of the given events, newest first."""
        ...
