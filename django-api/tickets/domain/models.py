"""Domain models for purchases, settlements and admission.

Django ORM models are in tickets/models.py (persistence layer).
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID

from events.domain import EventId, Money, TierId


class PaymentStatus(Enum):
    PENDING = "PENDING"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"

    @property
    def is_terminal(self) -> bool:
        return self is not PaymentStatus.PENDING


@dataclass(frozen=True)
class PaymentDetails:
    """Fields extracted from a gateway callback; every one is optional."""

    receipt_number: str = ""
    phone_number: str = ""
    paid_at: datetime | None = None
    amount: Decimal | None = None


@dataclass(frozen=True)
class Purchase:
    """A ticket. Owned by the purchase state machine."""

    id: UUID
    event_id: EventId
    tier_id: TierId
    buyer_name: str
    buyer_phone: str
    total_amount: Money
    platform_fee: Money
    host_fee: Money
    net_amount: Money
    status: PaymentStatus
    reference: str
    admission_token: str
    created_at: datetime
    buyer_email: str = ""
    redeemed: bool = False
    redeemed_at: datetime | None = None
    receipt_number: str = ""
    paid_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.redeemed and self.status is not PaymentStatus.SUCCESS:
            raise ValueError("Only a paid purchase can be redeemed")


@dataclass(frozen=True)
class SettlementRecord:
    """Payment attempt for one purchase. Never rewritten once terminal."""

    id: UUID
    purchase_id: UUID
    event_id: EventId
    reference: str
    amount: Money
    status: PaymentStatus
    created_at: datetime
    checkout_id: str = ""
    receipt_number: str = ""
    phone_number: str = ""
    paid_at: datetime | None = None
    raw_payload: dict | None = None
    needs_reconciliation: bool = False
    reconciliation_note: str = ""
    payment_method: str = "MPESA"


@dataclass(frozen=True)
class GatewayCallback:
    """Normalized asynchronous payment result."""

    reference: str
    result_code: int
    result_desc: str = ""
    checkout_id: str = ""
    details: PaymentDetails = field(default_factory=PaymentDetails)

    @property
    def succeeded(self) -> bool:
        return self.result_code == 0


@dataclass(frozen=True)
class AdmissionPayload:
    """Fields carried inside a signed admission token."""

    purchase_id: str
    event_id: str
    buyer_phone: str
    issued_at: int
    nonce: str


@dataclass(frozen=True)
class PurchaseReceipt:
    purchase: Purchase
    reference: str
    checkout_id: str = ""


@dataclass(frozen=True)
class AdmissionReceipt:
    """Result of a door check; redeemed_at is None when nothing was consumed."""

    purchase_id: str
    event_id: str
    event_name: str
    buyer_name: str
    tier_name: str
    redeemed_at: datetime | None = None


class SettlementOutcome(Enum):
    SETTLED = "SETTLED"
    REFUSED = "REFUSED"
    FAILED = "FAILED"
    DUPLICATE = "DUPLICATE"
    UNKNOWN_REFERENCE = "UNKNOWN_REFERENCE"
    PROCESSING_ERROR = "PROCESSING_ERROR"
    MALFORMED = "MALFORMED"


@dataclass(frozen=True)
class SettlementAck:
    """Acknowledgement returned to the payment gateway.

    Only an unknown reference is answered with a non-zero result code, so the
    gateway redelivers; everything else is acknowledged.
    """

    outcome: SettlementOutcome
    reference: str
    reconciliation_needed: bool = False

    @property
    def result_code(self) -> int:
        return 1 if self.outcome is SettlementOutcome.UNKNOWN_REFERENCE else 0

    def as_gateway_response(self) -> dict:
        if self.result_code:
            return {"ResultCode": 1, "ResultDesc": "Unknown payment reference"}
        if self.outcome is SettlementOutcome.MALFORMED:
            return {"ResultCode": 0, "ResultDesc": "Callback received for reconciliation"}
        return {"ResultCode": 0, "ResultDesc": "Callback processed successfully"}


@dataclass(frozen=True)
class RecentScan:
    purchase_id: UUID
    buyer_name: str
    tier_name: str
    redeemed_at: datetime


@dataclass(frozen=True)
class TierScans:
    name: str
    total: int
    used: int


@dataclass(frozen=True)
class ScanStats:
    """Door attendance of an event, over paid tickets only."""

    event_id: EventId
    total_tickets: int
    used_tickets: int
    tiers: tuple[TierScans, ...] = ()
    recent_scans: tuple[RecentScan, ...] = ()

    @property
    def unused_tickets(self) -> int:
        return self.total_tickets - self.used_tickets

    @property
    def usage_rate(self) -> Decimal:
        """Percentage of paid tickets already scanned, to two places."""
        if not self.total_tickets:
            return Decimal("0.00")
        rate = Decimal(self.used_tickets) * 100 / self.total_tickets
        return rate.quantize(Decimal("0.01"))
