from django.urls import path

from payouts.handlers import (
    AllWithdrawalsView,
    BalanceView,
    ProcessWithdrawalView,
    WithdrawalListView,
    WithdrawalStatsView,
)

urlpatterns = [
    path("balance", BalanceView.as_view(), name="balance"),
    path("withdrawals", WithdrawalListView.as_view(), name="withdrawal-list"),
    path("withdrawals/stats", WithdrawalStatsView.as_view(), name="withdrawal-stats"),
    path("withdrawals/all", AllWithdrawalsView.as_view(), name="withdrawal-all"),
    path(
        "withdrawals/<str:withdrawal_id>/process",
        ProcessWithdrawalView.as_view(),
        name="withdrawal-process",
    ),
]
