"""Domain errors raised by the purchase state machine."""

from datetime import datetime

from events.domain.errors import DomainError, ErrorCode


class PurchaseNotFoundError(DomainError):
    def __init__(self, purchase_id: str) -> None:
        super().__init__(code=ErrorCode.PURCHASE_NOT_FOUND, message="Ticket not found")
        self.purchase_id = purchase_id


class InvalidSignatureError(DomainError):
    """Raised when an admission token is malformed or its MAC does not match."""

    def __init__(self, reason: str = "Invalid QR code signature") -> None:
        super().__init__(code=ErrorCode.INVALID_SIGNATURE, message=reason)


class WrongEventError(DomainError):
    def __init__(self) -> None:
        super().__init__(code=ErrorCode.WRONG_EVENT, message="Ticket is for a different event")


class AlreadyRedeemedError(DomainError):
    def __init__(self, redeemed_at: datetime | None) -> None:
        super().__init__(code=ErrorCode.ALREADY_REDEEMED, message="Ticket already used")
        self.redeemed_at = redeemed_at

    def details(self) -> dict:
        return {"redeemed_at": self.redeemed_at.isoformat() if self.redeemed_at else None}


class PaymentIncompleteError(DomainError):
    def __init__(self) -> None:
        super().__init__(code=ErrorCode.PAYMENT_INCOMPLETE, message="Ticket payment not completed")


class NotYetActiveError(DomainError):
    def __init__(self, active_from: datetime) -> None:
        super().__init__(
            code=ErrorCode.NOT_YET_ACTIVE,
            message="QR code not active yet. Active 4 hours before event.",
        )
        self.active_from = active_from

    def details(self) -> dict:
        return {"active_from": self.active_from.isoformat()}


class EventEndedError(DomainError):
    def __init__(self) -> None:
        super().__init__(code=ErrorCode.EVENT_ENDED, message="Event has ended")


class PaymentInitiationFailedError(DomainError):
    """Raised when the gateway refused to start a payment; the purchase is FAILED."""

    def __init__(self, reference: str) -> None:
        super().__init__(
            code=ErrorCode.PAYMENT_INITIATION_FAILED,
            message="Could not initiate payment, please try again",
        )
        self.reference = reference
