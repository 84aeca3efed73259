from payouts.domain.models import PayoutDetails, Withdrawal, WithdrawalStats, WithdrawalStatus

__all__ = ["PayoutDetails", "Withdrawal", "WithdrawalStats", "WithdrawalStatus"]
