"""Inventory ledger for ticket tiers.

A reservation is a single compare-and-increment against the store. There is
no retry: a failed reservation is terminal for that attempt.
"""

import logging

from events.domain import TierId
from events.domain.errors import OutOfStockError, TierNotFoundError
from events.stores.interfaces import EventStore

logger = logging.getLogger(__name__)


class InventoryLedger:
    def __init__(self, store: EventStore) -> None:
        self._store = store

    def is_available(self, tier_id: TierId) -> bool:
        """Non-reserving pre-check; the answer may be stale by the time it is used."""
        tier = self._store.get_tier(tier_id)
        if tier is None:
            raise TierNotFoundError(str(tier_id))
        return tier.is_available

    def reserve(self, tier_id: TierId) -> int:
        """Commit one slot and return the new sold count.

        Raises:
            TierNotFoundError: If the tier does not exist.
            OutOfStockError: If every slot is already sold.
        """
        sold = self._store.reserve_slot(tier_id)
        if sold is None:
            if self._store.get_tier(tier_id) is None:
                raise TierNotFoundError(str(tier_id))
            raise OutOfStockError(str(tier_id))
        logger.info("Reserved slot on tier %s (sold=%d)", tier_id, sold)
        return sold

    def release(self, tier_id: TierId) -> int:
        """Give back a slot committed in error. Returns the new sold count."""
        sold = self._store.release_slot(tier_id)
        if sold is None:
            if self._store.get_tier(tier_id) is None:
                raise TierNotFoundError(str(tier_id))
            raise ValueError(f"Tier {tier_id} has no sold slots to release")
        logger.warning("Released slot on tier %s (sold=%d)", tier_id, sold)
        return sold
