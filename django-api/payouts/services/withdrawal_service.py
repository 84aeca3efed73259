"""Withdrawal workflow: request, admin processing, listing and totals."""

import logging
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Callable
from uuid import UUID, uuid4

from django.utils import timezone

from events.domain import Money
from events.domain.errors import EventNotFoundError, InvalidIdError
from events.services.event_service import parse_event_id
from events.stores.interfaces import EventStore
from payouts.domain import PayoutDetails, Withdrawal, WithdrawalStats, WithdrawalStatus
from payouts.domain.errors import (
    InvalidAmountError,
    InvalidWithdrawalStatusError,
    NotEventHostError,
    WithdrawalAlreadyProcessedError,
    WithdrawalNotFoundError,
)
from payouts.domain.policies import check_withdrawal_window
from payouts.services.balance_service import BalanceLedger
from payouts.stores.interfaces import PayoutStore
from tikiti.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


def parse_amount(value) -> Decimal:
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise InvalidAmountError() from None
    if not amount.is_finite() or amount <= 0 or amount != amount.quantize(Decimal("0.01")):
        raise InvalidAmountError()
    return amount


def parse_withdrawal_id(withdrawal_id: str) -> UUID:
    try:
        return UUID(str(withdrawal_id))
    except ValueError:
        raise InvalidIdError("withdrawal ID") from None


class WithdrawalService:
    """Service for host withdrawals."""

    def __init__(
        self,
        payouts: PayoutStore,
        events: EventStore,
        balances: BalanceLedger,
        unit_of_work: UnitOfWork,
        clock: Callable[[], datetime] = timezone.now,
    ) -> None:
        self._payouts = payouts
        self._events = events
        self._balances = balances
        self._uow = unit_of_work
        self._clock = clock

    def request_withdrawal(
        self,
        host_id: int,
        amount,
        event_id: str | None = None,
        payout_details: PayoutDetails | None = None,
    ) -> Withdrawal:
        """Debit the balance and record a PENDING withdrawal.

        Raises:
            InvalidAmountError: If amount is not a positive two-decimal value.
            InvalidIdError / EventNotFoundError: For a bad event reference.
            NotEventHostError: If the event belongs to another host.
            WithdrawalNotYetAvailableError: Inside the 24 hour hold after the event.
            InsufficientFundsError: If the balance does not cover amount.
        """
        value = parse_amount(amount)
        parsed_event = None
        if event_id:
            parsed_event = parse_event_id(event_id)
            event = self._events.get_event(parsed_event)
            if event is None:
                raise EventNotFoundError(event_id)
            if event.host_id != host_id:
                raise NotEventHostError()
            check_withdrawal_window(self._clock(), event.ends_at)

        withdrawal = Withdrawal(
            id=uuid4(),
            host_id=host_id,
            event_id=parsed_event,
            amount=Money.of(value),
            status=WithdrawalStatus.PENDING,
            payout_details=payout_details or PayoutDetails(),
            created_at=self._clock(),
        )
        with self._uow.atomic():
            self._balances.debit(host_id, value)
            self._payouts.add_withdrawal(withdrawal)
        logger.info("Withdrawal %s requested by host %s for %s", withdrawal.id, host_id, value)
        return self._payouts.get_withdrawal(withdrawal.id) or withdrawal

    def process_withdrawal(
        self, withdrawal_id: str, status: WithdrawalStatus, notes: str = ""
    ) -> Withdrawal:
        """Move a PENDING withdrawal to COMPLETED or FAILED.

        FAILED returns the amount to the host's balance in the same unit.

        Raises:
            InvalidWithdrawalStatusError: If the target status is PENDING.
            WithdrawalNotFoundError: If the withdrawal does not exist.
            WithdrawalAlreadyProcessedError: If it left PENDING already.
        """
        if status is WithdrawalStatus.PENDING:
            raise InvalidWithdrawalStatusError(status.value)
        parsed = parse_withdrawal_id(withdrawal_id)
        withdrawal = self._payouts.get_withdrawal(parsed)
        if withdrawal is None:
            raise WithdrawalNotFoundError(withdrawal_id)

        with self._uow.atomic():
            moved = self._payouts.transition_withdrawal(
                parsed, WithdrawalStatus.PENDING, status, notes, self._clock()
            )
            if not moved:
                current = self._payouts.get_withdrawal(parsed)
                raise WithdrawalAlreadyProcessedError(current.status.value)
            if status is WithdrawalStatus.FAILED:
                self._balances.credit(withdrawal.host_id, withdrawal.amount.amount)
        logger.info("Withdrawal %s marked %s", withdrawal_id, status.value)
        return self._payouts.get_withdrawal(parsed)

    def list_withdrawals(
        self, host_id: int, status: WithdrawalStatus | None = None
    ) -> list[Withdrawal]:
        return self._payouts.list_withdrawals(host_id, status)

    def list_all_withdrawals(self, status: WithdrawalStatus | None = None) -> list[Withdrawal]:
        """Every host's withdrawals, newest first; used by the processing queue."""
        return self._payouts.list_all_withdrawals(status)

    def withdrawal_stats(self, host_id: int) -> WithdrawalStats:
        totals = {status: Decimal("0.00") for status in WithdrawalStatus}
        withdrawals = self._payouts.list_withdrawals(host_id)
        for withdrawal in withdrawals:
            totals[withdrawal.status] += withdrawal.amount.amount
        return WithdrawalStats(
            total_withdrawn=totals[WithdrawalStatus.COMPLETED],
            pending=totals[WithdrawalStatus.PENDING],
            failed=totals[WithdrawalStatus.FAILED],
            total_requests=len(withdrawals),
        )
