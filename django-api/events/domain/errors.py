"""Domain error codes shared by the ticketing apps."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    INVALID_ID = "INVALID_ID"
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    TIER_NOT_FOUND = "TIER_NOT_FOUND"
    OUT_OF_STOCK = "OUT_OF_STOCK"
    PURCHASE_NOT_FOUND = "PURCHASE_NOT_FOUND"
    INVALID_SIGNATURE = "INVALID_SIGNATURE"
    WRONG_EVENT = "WRONG_EVENT"
    ALREADY_REDEEMED = "ALREADY_REDEEMED"
    PAYMENT_INCOMPLETE = "PAYMENT_INCOMPLETE"
    NOT_YET_ACTIVE = "NOT_YET_ACTIVE"
    EVENT_ENDED = "EVENT_ENDED"
    PAYMENT_INITIATION_FAILED = "PAYMENT_INITIATION_FAILED"
    INSUFFICIENT_FUNDS = "INSUFFICIENT_FUNDS"
    INVALID_AMOUNT = "INVALID_AMOUNT"
    NOT_EVENT_HOST = "NOT_EVENT_HOST"
    WITHDRAWAL_NOT_FOUND = "WITHDRAWAL_NOT_FOUND"
    WITHDRAWAL_NOT_YET_AVAILABLE = "WITHDRAWAL_NOT_YET_AVAILABLE"
    WITHDRAWAL_ALREADY_PROCESSED = "WITHDRAWAL_ALREADY_PROCESSED"
    INVALID_WITHDRAWAL_STATUS = "INVALID_WITHDRAWAL_STATUS"
    INVALID_EVENT = "INVALID_EVENT"


@dataclass(eq=False)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"

    def details(self) -> dict:
        """Extra fields exposed to API callers alongside code and message."""
        return {}


class InvalidIdError(DomainError):
    """Raised when an identifier is not a valid UUID."""

    def __init__(self, kind: str = "ID") -> None:
        super().__init__(
            code=ErrorCode.INVALID_ID,
            message=f"Invalid {kind} format",
        )


class EventNotFoundError(DomainError):
    """Raised when an event is not found."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_FOUND,
            message="Event not found",
        )
        self.event_id = event_id


class TierNotFoundError(DomainError):
    """Raised when a ticket tier is not found or belongs to another event."""

    def __init__(self, tier_id: str) -> None:
        super().__init__(
            code=ErrorCode.TIER_NOT_FOUND,
            message="Ticket tier not found",
        )
        self.tier_id = tier_id


class OutOfStockError(DomainError):
    """Raised when a tier has no remaining slots."""

    def __init__(self, tier_id: str) -> None:
        super().__init__(
            code=ErrorCode.OUT_OF_STOCK,
            message="No tickets available for this tier",
        )
        self.tier_id = tier_id


class InvalidEventError(DomainError):
    """Raised when an event or tier definition breaks a catalog rule."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.INVALID_EVENT, message=message)


class NotEventHostError(DomainError):
    """Raised when a user acts on an event they do not host."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.NOT_EVENT_HOST,
            message="Not authorized for this event",
        )
