"""Django ORM implementation of the PayoutStore."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from django.db.models import F

from events.domain import EventId, Money
from payouts import models as orm
from payouts.domain import PayoutDetails, Withdrawal, WithdrawalStatus
from payouts.stores.interfaces import PayoutStore


def to_withdrawal(row: orm.Withdrawal) -> Withdrawal:
    return Withdrawal(
        id=row.id,
        host_id=row.host_id,
        event_id=EventId(row.event_id) if row.event_id else None,
        amount=Money.of(row.amount),
        status=WithdrawalStatus(row.status),
        payout_details=PayoutDetails(
            account_number=row.account_number,
            bank_name=row.bank_name,
            mpesa_number=row.mpesa_number,
        ),
        notes=row.notes,
        processed_at=row.processed_at,
        created_at=row.created_at,
    )


class DjangoPayoutStore(PayoutStore):
    """Database-backed payout store using Django ORM."""

    def get_balance(self, host_id: int) -> Decimal:
        available = (
            orm.HostBalance.objects.filter(host_id=host_id)
            .values_list("available", flat=True)
            .first()
        )
        return available if available is not None else Decimal("0.00")

    def credit(self, host_id: int, amount: Decimal) -> Decimal:
        orm.HostBalance.objects.get_or_create(host_id=host_id)
        orm.HostBalance.objects.filter(host_id=host_id).update(
            available=F("available") + amount
        )
        return self.get_balance(host_id)

    def debit(self, host_id: int, amount: Decimal) -> Decimal | None:
        updated = orm.HostBalance.objects.filter(
            host_id=host_id, available__gte=amount
        ).update(available=F("available") - amount)
        if updated == 0:
            return None
        return self.get_balance(host_id)

    def add_withdrawal(self, withdrawal: Withdrawal) -> None:
        orm.Withdrawal.objects.create(
            id=withdrawal.id,
            host_id=withdrawal.host_id,
            event_id=withdrawal.event_id.value if withdrawal.event_id else None,
            amount=withdrawal.amount.amount,
            status=withdrawal.status.value,
            account_number=withdrawal.payout_details.account_number,
            bank_name=withdrawal.payout_details.bank_name,
            mpesa_number=withdrawal.payout_details.mpesa_number,
            notes=withdrawal.notes,
        )

    def get_withdrawal(self, withdrawal_id: UUID) -> Withdrawal | None:
        row = orm.Withdrawal.objects.filter(id=withdrawal_id).first()
        return to_withdrawal(row) if row else None

    def list_withdrawals(
        self, host_id: int, status: WithdrawalStatus | None = None
    ) -> list[Withdrawal]:
        rows = orm.Withdrawal.objects.filter(host_id=host_id)
        if status is not None:
            rows = rows.filter(status=status.value)
        return [to_withdrawal(row) for row in rows.order_by("-created_at")]

    def list_all_withdrawals(self, status: WithdrawalStatus | None = None) -> list[Withdrawal]:
        rows = orm.Withdrawal.objects.all()
        if status is not None:
            rows = rows.filter(status=status.value)
        return [to_withdrawal(row) for row in rows.order_by("-created_at")]

    def transition_withdrawal(
        self,
        withdrawal_id: UUID,
        from_status: WithdrawalStatus,
        to_status: WithdrawalStatus,
        notes: str,
        processed_at: datetime,
    ) -> bool:
        updated = orm.Withdrawal.objects.filter(
            id=withdrawal_id, status=from_status.value
        ).update(status=to_status.value, notes=notes, processed_at=processed_at)
        return updated == 1
