"""Domain errors for balances and withdrawals."""

from datetime import datetime

from events.domain.errors import DomainError, ErrorCode, NotEventHostError

__all__ = [
    "InsufficientFundsError",
    "InvalidAmountError",
    "InvalidWithdrawalStatusError",
    "NotEventHostError",
    "WithdrawalAlreadyProcessedError",
    "WithdrawalNotFoundError",
    "WithdrawalNotYetAvailableError",
]


class InsufficientFundsError(DomainError):
    def __init__(self) -> None:
        super().__init__(code=ErrorCode.INSUFFICIENT_FUNDS, message="Insufficient balance")


class InvalidAmountError(DomainError):
    def __init__(self) -> None:
        super().__init__(code=ErrorCode.INVALID_AMOUNT, message="Amount must be a positive value")


class WithdrawalNotFoundError(DomainError):
    def __init__(self, withdrawal_id: str) -> None:
        super().__init__(code=ErrorCode.WITHDRAWAL_NOT_FOUND, message="Withdrawal not found")
        self.withdrawal_id = withdrawal_id


class WithdrawalNotYetAvailableError(DomainError):
    def __init__(self, available_at: datetime) -> None:
        super().__init__(
            code=ErrorCode.WITHDRAWAL_NOT_YET_AVAILABLE,
            message="Withdrawals can only be requested 24 hours after the event ends",
        )
        self.available_at = available_at

    def details(self) -> dict:
        return {"available_at": self.available_at.isoformat()}


class WithdrawalAlreadyProcessedError(DomainError):
    def __init__(self, status: str) -> None:
        super().__init__(
            code=ErrorCode.WITHDRAWAL_ALREADY_PROCESSED,
            message=f"Withdrawal already {status.lower()}",
        )


class InvalidWithdrawalStatusError(DomainError):
    def __init__(self, status: str) -> None:
        super().__init__(
            code=ErrorCode.INVALID_WITHDRAWAL_STATUS,
            message=f"A withdrawal cannot be moved to {status.lower()}",
        )
