"""Django ORM implementation of the PurchaseStore."""

from datetime import datetime
from uuid import UUID

from django.utils import timezone

from events.domain import EventId, Money, TierId
from tickets import models as orm
from tickets.domain import PaymentDetails, PaymentStatus, Purchase, SettlementRecord
from tickets.stores.interfaces import PurchaseStore


def to_purchase(row: orm.Purchase) -> Purchase:
    return Purchase(
        id=row.id,
        event_id=EventId(row.event_id),
        tier_id=TierId(row.tier_id),
        buyer_name=row.buyer_name,
        buyer_phone=row.buyer_phone,
        buyer_email=row.buyer_email,
        total_amount=Money.of(row.total_amount),
        platform_fee=Money.of(row.platform_fee),
        host_fee=Money.of(row.host_fee),
        net_amount=Money.of(row.net_amount),
        status=PaymentStatus(row.status),
        redeemed=row.redeemed,
        redeemed_at=row.redeemed_at,
        reference=row.reference,
        admission_token=row.admission_token,
        receipt_number=row.receipt_number,
        paid_at=row.paid_at,
        created_at=row.created_at,
    )


def to_settlement(row: orm.SettlementRecord) -> SettlementRecord:
    return SettlementRecord(
        id=row.id,
        purchase_id=row.purchase_id,
        event_id=EventId(row.event_id),
        reference=row.reference,
        amount=Money.of(row.amount),
        status=PaymentStatus(row.status),
        checkout_id=row.checkout_id,
        receipt_number=row.receipt_number,
        phone_number=row.phone_number,
        paid_at=row.paid_at,
        raw_payload=row.raw_payload,
        needs_reconciliation=row.needs_reconciliation,
        reconciliation_note=row.reconciliation_note,
        payment_method=row.payment_method,
        created_at=row.created_at,
    )


class DjangoPurchaseStore(PurchaseStore):
    """Database-backed purchase store using Django ORM."""

    def add(self, purchase: Purchase, settlement: SettlementRecord) -> None:
        orm.Purchase.objects.create(
            id=purchase.id,
            event_id=purchase.event_id.value,
            tier_id=purchase.tier_id.value,
            buyer_name=purchase.buyer_name,
            buyer_phone=purchase.buyer_phone,
            buyer_email=purchase.buyer_email,
            total_amount=purchase.total_amount.amount,
            platform_fee=purchase.platform_fee.amount,
            host_fee=purchase.host_fee.amount,
            net_amount=purchase.net_amount.amount,
            status=purchase.status.value,
            reference=purchase.reference,
            admission_token=purchase.admission_token,
        )
        orm.SettlementRecord.objects.create(
            id=settlement.id,
            purchase_id=purchase.id,
            event_id=settlement.event_id.value,
            reference=settlement.reference,
            amount=settlement.amount.amount,
            status=settlement.status.value,
            payment_method=settlement.payment_method,
        )

    def get_purchase(self, purchase_id: UUID) -> Purchase | None:
        row = orm.Purchase.objects.filter(id=purchase_id).first()
        return to_purchase(row) if row else None

    def get_settlement(self, reference: str) -> SettlementRecord | None:
        row = orm.SettlementRecord.objects.filter(reference=reference).first()
        return to_settlement(row) if row else None

    def get_settlement_by_checkout_id(self, checkout_id: str) -> SettlementRecord | None:
        row = orm.SettlementRecord.objects.filter(checkout_id=checkout_id).first()
        return to_settlement(row) if row else None

    def attach_checkout_id(self, reference: str, checkout_id: str) -> None:
        orm.SettlementRecord.objects.filter(reference=reference).update(
            checkout_id=checkout_id, updated_at=timezone.now()
        )

    def complete_settlement(
        self,
        reference: str,
        status: PaymentStatus,
        details: PaymentDetails,
        raw_payload: dict | None,
    ) -> bool:
        updated = orm.SettlementRecord.objects.filter(
            reference=reference, status=PaymentStatus.PENDING.value
        ).update(
            status=status.value,
            receipt_number=details.receipt_number,
            phone_number=details.phone_number,
            paid_at=details.paid_at,
            raw_payload=raw_payload,
            updated_at=timezone.now(),
        )
        return updated == 1

    def update_purchase_status(
        self, purchase_id: UUID, status: PaymentStatus, details: PaymentDetails
    ) -> bool:
        updated = orm.Purchase.objects.filter(
            id=purchase_id, status=PaymentStatus.PENDING.value
        ).update(
            status=status.value,
            receipt_number=details.receipt_number,
            paid_at=details.paid_at,
        )
        return updated == 1

    def flag_for_reconciliation(self, reference: str, note: str) -> None:
        orm.SettlementRecord.objects.filter(reference=reference).update(
            needs_reconciliation=True, reconciliation_note=note, updated_at=timezone.now()
        )

    def mark_redeemed(self, purchase_id: UUID, redeemed_at: datetime) -> bool:
        updated = orm.Purchase.objects.filter(
            id=purchase_id, status=PaymentStatus.SUCCESS.value, redeemed=False
        ).update(redeemed=True, redeemed_at=redeemed_at)
        return updated == 1

    def list_event_purchases(self, event_id: EventId) -> list[Purchase]:
        rows = orm.Purchase.objects.filter(event_id=event_id.value).order_by("-created_at")
        return [to_purchase(row) for row in rows]

    def list_settlements(self, event_ids: list[EventId]) -> list[SettlementRecord]:
        rows = orm.SettlementRecord.objects.filter(
            event_id__in=[e.value for e in event_ids]
        ).order_by("-created_at")
        return [to_settlement(row) for row in rows]
