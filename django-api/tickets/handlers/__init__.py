from tickets.handlers.views import (
    EventPurchaseListView,
    PaymentCallbackView,
    PaymentHistoryView,
    PaymentStatusView,
    PurchaseCreateView,
    PurchaseDetailView,
    ScanStatsView,
    ScanValidateView,
    ScanView,
    TicketQRView,
)

__all__ = [
    "PurchaseCreateView",
    "PurchaseDetailView",
    "TicketQRView",
    "EventPurchaseListView",
    "PaymentCallbackView",
    "PaymentStatusView",
    "PaymentHistoryView",
    "ScanValidateView",
    "ScanView",
    "ScanStatsView",
]
