"""Per-host balance ledger.

Credits come from settled sales, debits from withdrawal requests. Every
mutation is one conditional update in the store, so concurrent settlements
and withdrawals never lose an update and the balance never goes negative.
"""

import logging
from decimal import Decimal

from payouts.domain.errors import InsufficientFundsError, InvalidAmountError
from payouts.stores.interfaces import PayoutStore

logger = logging.getLogger(__name__)


class BalanceLedger:
    def __init__(self, store: PayoutStore) -> None:
        self._store = store

    def available(self, host_id: int) -> Decimal:
        return self._store.get_balance(host_id)

    def credit(self, host_id: int, amount: Decimal) -> Decimal:
        """Add a non-negative amount and return the new balance."""
        if amount < 0:
            raise InvalidAmountError()
        if amount == 0:
            return self._store.get_balance(host_id)
        balance = self._store.credit(host_id, amount)
        logger.info("Credited host %s with %s (balance=%s)", host_id, amount, balance)
        return balance

    def debit(self, host_id: int, amount: Decimal) -> Decimal:
        """Subtract a positive amount and return the new balance.

        Raises:
            InvalidAmountError: If amount is not positive.
            InsufficientFundsError: If the balance does not cover amount.
        """
        if amount <= 0:
            raise InvalidAmountError()
        balance = self._store.debit(host_id, amount)
        if balance is None:
            raise InsufficientFundsError()
        logger.info("Debited host %s by %s (balance=%s)", host_id, amount, balance)
        return balance
