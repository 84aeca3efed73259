from datetime import datetime, timedelta

from payouts.domain.errors import WithdrawalNotYetAvailableError

WITHDRAWAL_HOLD = timedelta(hours=24)


def withdrawal_opens_at(ends_at: datetime) -> datetime:
    return ends_at + WITHDRAWAL_HOLD


def check_withdrawal_window(now: datetime, ends_at: datetime) -> None:
    """Event-scoped withdrawals open 24 hours after the event ends."""
    available_at = withdrawal_opens_at(ends_at)
    if now < available_at:
        raise WithdrawalNotYetAvailableError(available_at)
