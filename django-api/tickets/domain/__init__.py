from tickets.domain.models import (
    AdmissionPayload,
    AdmissionReceipt,
    GatewayCallback,
    PaymentDetails,
    PaymentStatus,
    Purchase,
    PurchaseReceipt,
    RecentScan,
    ScanStats,
    SettlementAck,
    SettlementOutcome,
    SettlementRecord,
    TierScans,
)

__all__ = [
    "AdmissionPayload",
    "AdmissionReceipt",
    "GatewayCallback",
    "PaymentDetails",
    "PaymentStatus",
    "Purchase",
    "PurchaseReceipt",
    "RecentScan",
    "ScanStats",
    "SettlementAck",
    "SettlementOutcome",
    "SettlementRecord",
    "TierScans",
]
