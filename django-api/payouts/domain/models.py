"""Domain models for host balances and withdrawals."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID

from events.domain import EventId, Money


class WithdrawalStatus(Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


@dataclass(frozen=True)
class PayoutDetails:
    account_number: str = ""
    bank_name: str = ""
    mpesa_number: str = ""


@dataclass(frozen=True)
class Withdrawal:
    """Funds are debited when the request is made; FAILED re-credits them."""

    id: UUID
    host_id: int
    amount: Money
    status: WithdrawalStatus
    created_at: datetime
    event_id: EventId | None = None
    payout_details: PayoutDetails = PayoutDetails()
    notes: str = ""
    processed_at: datetime | None = None


@dataclass(frozen=True)
class WithdrawalStats:
    total_withdrawn: Decimal
    pending: Decimal
    failed: Decimal
    total_requests: int
