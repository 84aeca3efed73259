"""Store interface for host balances and withdrawal requests."""

from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from payouts.domain import Withdrawal, WithdrawalStatus


class PayoutStore(ABC):
    """Interface for balance and withdrawal persistence operations."""

    @abstractmethod
    def get_balance(self, host_id: int) -> Decimal:
        """Available balance of a host; zero when the host has never been credited."""
        ...

    @abstractmethod
    def credit(self, host_id: int, amount: Decimal) -> Decimal:
        """Atomically add `amount` and return the new balance."""
        ...

    @abstractmethod
    def debit(self, host_id: int, amount: Decimal) -> Decimal | None:
        """Atomically subtract `amount` if the balance covers it.

        Returns the new balance, or None when funds are insufficient.
        """
        ...

    @abstractmethod
    def add_withdrawal(self, withdrawal: Withdrawal) -> None:
        ...

    @abstractmethod
    def get_withdrawal(self, withdrawal_id: UUID) -> Withdrawal | None:
        ...

    @abstractmethod
    def list_withdrawals(
        self, host_id: int, status: WithdrawalStatus | None = None
    ) -> list[Withdrawal]:
        """Withdrawals of a host, newest first."""
        ...

    @abstractmethod
    def list_all_withdrawals(self, status: WithdrawalStatus | None = None) -> list[Withdrawal]:
        """Withdrawals of every host, newest first."""
        ...

    @abstractmethod
    def transition_withdrawal(
        self,
        withdrawal_id: UUID,
        from_status: WithdrawalStatus,
        to_status: WithdrawalStatus,
        notes: str,
        processed_at: datetime,
    ) -> bool:
        """Compare-and-set the status. Returns False if it was not `from_status`."""
        ...
