"""Pure business rules: admission timing and ticket pricing.

All functions take `now` explicitly so they can be tested without a clock.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta

from events.domain import Money
from tickets.domain.errors import EventEndedError, NotYetActiveError

ACTIVATION_WINDOW = timedelta(hours=4)


def activation_starts_at(starts_at: datetime) -> datetime:
    return starts_at - ACTIVATION_WINDOW


def check_admission_window(now: datetime, starts_at: datetime, ends_at: datetime) -> None:
    """Raise unless `now` falls inside [starts_at - 4h, ends_at]."""
    active_from = activation_starts_at(starts_at)
    if now < active_from:
        raise NotYetActiveError(active_from)
    if now > ends_at:
        raise EventEndedError()


@dataclass(frozen=True)
class PriceQuote:
    total: Money
    platform_fee: Money
    host_fee: Money
    net: Money


@dataclass(frozen=True)
class FeeSchedule:
    """Buyer pays price + platform fee; host receives price - host fee."""

    platform_fee: Money
    host_fee: Money

    def quote(self, price: Money) -> PriceQuote:
        net = max(price.amount - self.host_fee.amount, 0)
        return PriceQuote(
            total=Money.of(price.amount + self.platform_fee.amount),
            platform_fee=self.platform_fee,
            host_fee=self.host_fee,
            net=Money.of(net),
        )
