"""In-process PayoutStore with one lock per host and per withdrawal."""

from dataclasses import replace
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from events.stores.memory_store import KeyedLocks
from payouts.domain import Withdrawal, WithdrawalStatus
from payouts.stores.interfaces import PayoutStore


class InMemoryPayoutStore(PayoutStore):
    def __init__(self) -> None:
        self._balances: dict[int, Decimal] = {}
        self._withdrawals: dict[UUID, Withdrawal] = {}
        self._lock_for = KeyedLocks()

    def snapshot(self) -> tuple:
        return dict(self._balances), dict(self._withdrawals)

    def restore(self, state: tuple) -> None:
        self._balances, self._withdrawals = dict(state[0]), dict(state[1])

    def get_balance(self, host_id: int) -> Decimal:
        return self._balances.get(host_id, Decimal("0.00"))

    def credit(self, host_id: int, amount: Decimal) -> Decimal:
        with self._lock_for(("balance", host_id)):
            balance = self.get_balance(host_id) + amount
            self._balances[host_id] = balance
            return balance

    def debit(self, host_id: int, amount: Decimal) -> Decimal | None:
        with self._lock_for(("balance", host_id)):
            available = self.get_balance(host_id)
            if available < amount:
                return None
            self._balances[host_id] = available - amount
            return self._balances[host_id]

    def add_withdrawal(self, withdrawal: Withdrawal) -> None:
        self._withdrawals[withdrawal.id] = withdrawal

    def get_withdrawal(self, withdrawal_id: UUID) -> Withdrawal | None:
        return self._withdrawals.get(withdrawal_id)

    def list_withdrawals(
        self, host_id: int, status: WithdrawalStatus | None = None
    ) -> list[Withdrawal]:
        found = [
            w
            for w in self._withdrawals.values()
            if w.host_id == host_id and (status is None or w.status is status)
        ]
        return sorted(found, key=lambda w: w.created_at, reverse=True)

    def list_all_withdrawals(self, status: WithdrawalStatus | None = None) -> list[Withdrawal]:
        found = [w for w in self._withdrawals.values() if status is None or w.status is status]
        return sorted(found, key=lambda w: w.created_at, reverse=True)

    def transition_withdrawal(
        self,
        withdrawal_id: UUID,
        from_status: WithdrawalStatus,
        to_status: WithdrawalStatus,
        notes: str,
        processed_at: datetime,
    ) -> bool:
        with self._lock_for(("withdrawal", withdrawal_id)):
            withdrawal = self._withdrawals.get(withdrawal_id)
            if withdrawal is None or withdrawal.status is not from_status:
                return False
            self._withdrawals[withdrawal_id] = replace(
                withdrawal, status=to_status, notes=notes, processed_at=processed_at
            )
            return True
