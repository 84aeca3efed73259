from django.urls import path

from tickets.handlers import (
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

urlpatterns = [
    path("tickets/purchase", PurchaseCreateView.as_view(), name="purchase-create"),
    path("tickets/event/<str:event_id>", EventPurchaseListView.as_view(), name="event-purchases"),
    path("tickets/<str:purchase_id>", PurchaseDetailView.as_view(), name="purchase-detail"),
    path("tickets/<str:purchase_id>/qr", TicketQRView.as_view(), name="ticket-qr"),
    path("payments/callback", PaymentCallbackView.as_view(), name="payment-callback"),
    path("payments/history", PaymentHistoryView.as_view(), name="payment-history"),
    path("payments/status/<str:reference>", PaymentStatusView.as_view(), name="payment-status"),
    path("scan/validate", ScanValidateView.as_view(), name="scan-validate"),
    path("scan/stats/<str:event_id>", ScanStatsView.as_view(), name="scan-stats"),
    path("scan", ScanView.as_view(), name="scan"),
]
