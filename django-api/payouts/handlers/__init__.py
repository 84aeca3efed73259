from payouts.handlers.views import (
    AllWithdrawalsView,
    BalanceView,
    ProcessWithdrawalView,
    WithdrawalListView,
    WithdrawalStatsView,
)

__all__ = [
    "AllWithdrawalsView",
    "BalanceView",
    "WithdrawalListView",
    "WithdrawalStatsView",
    "ProcessWithdrawalView",
]
