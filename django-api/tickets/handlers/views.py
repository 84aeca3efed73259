"""HTTP handlers for purchases, payment callbacks and door scans."""

from zoneinfo import ZoneInfo

from django.conf import settings
from django.core.cache import cache
from django.http import HttpResponse
from django.utils.module_loading import import_string
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from events.cache import invalidate_event
from events.domain import Money
from events.domain.errors import DomainError
from events.handlers.responses import error_response, validation_error
from events.stores.django_store import DjangoEventStore
from payouts.services.balance_service import BalanceLedger
from payouts.stores.django_store import DjangoPayoutStore
from tickets import tasks
from tickets.domain.policies import FeeSchedule
from tickets.handlers.serializers import (
    AdmissionReceiptSerializer,
    HostPurchaseSerializer,
    PaymentHistorySerializer,
    PurchaseReceiptSerializer,
    PurchaseRequestSerializer,
    PurchaseSerializer,
    ScanRequestSerializer,
    ScanStatsSerializer,
    SettlementSerializer,
)
from tickets.services.admission_tokens import AdmissionTokenService
from tickets.services.purchase_service import PurchaseService
from tickets.services.settlement_service import OversellPolicy, SettlementReconciler
from tickets.stores.django_store import DjangoPurchaseStore
from tikiti.unit_of_work import DjangoUnitOfWork


def load_optional(path: str):
    return import_string(path)() if path else None


def purchase_service() -> PurchaseService:
    return PurchaseService(
        events=DjangoEventStore(),
        purchases=DjangoPurchaseStore(),
        tokens=AdmissionTokenService(
            settings.ADMISSION_TOKEN_SECRET,
            cache=cache,
            cache_ttl=settings.ADMISSION_TOKEN_CACHE_TTL,
        ),
        unit_of_work=DjangoUnitOfWork(),
        fees=FeeSchedule(
            platform_fee=Money.of(settings.TICKET_PLATFORM_FEE),
            host_fee=Money.of(settings.TICKET_HOST_FEE),
        ),
        gateway=load_optional(settings.PAYMENT_GATEWAY_CLASS),
    )


def settlement_reconciler() -> SettlementReconciler:
    return SettlementReconciler(
        events=DjangoEventStore(),
        purchases=DjangoPurchaseStore(),
        balances=BalanceLedger(DjangoPayoutStore()),
        unit_of_work=DjangoUnitOfWork(),
        confirmations=tasks.queue_ticket_confirmation,
        oversell_policy=OversellPolicy(settings.OVERSELL_POLICY.lower()),
        lookup_attempts=settings.SETTLEMENT_LOOKUP_ATTEMPTS,
        lookup_delay=settings.SETTLEMENT_LOOKUP_DELAY_SECONDS,
        cache_invalidator=invalidate_event,
    )


class PurchaseCreateView(APIView):
    """Handler for POST /api/tickets/purchase"""

    permission_classes = [AllowAny]

    def post(self, request: Request) -> Response:
        serializer = PurchaseRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error(serializer.errors)
        try:
            receipt = purchase_service().create(**serializer.validated_data)
        except DomainError as e:
            return error_response(e)
        return Response(PurchaseReceiptSerializer(receipt).data, status=status.HTTP_201_CREATED)


class PurchaseDetailView(APIView):
    """Handler for GET /api/tickets/{purchase_id}"""

    permission_classes = [AllowAny]

    def get(self, request: Request, purchase_id: str) -> Response:
        try:
            purchase = purchase_service().get_purchase(purchase_id)
        except DomainError as e:
            return error_response(e)
        return Response(PurchaseSerializer(purchase).data)


class PaymentCallbackView(APIView):
    """Handler for POST /api/payments/callback

    Always answers with the gateway's acknowledgement shape; processing
    problems are logged and left for reconciliation.
    """

    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request: Request) -> Response:
        ack = settlement_reconciler().ingest_payload(
            request.data, ZoneInfo(settings.PAYMENT_GATEWAY_TIMEZONE)
        )
        return Response(ack.as_gateway_response())


class PaymentStatusView(APIView):
    """Handler for GET /api/payments/status/{reference}"""

    permission_classes = [AllowAny]

    def get(self, request: Request, reference: str) -> Response:
        try:
            settlement = purchase_service().get_payment_status(reference)
        except DomainError as e:
            return error_response(e)
        return Response(SettlementSerializer(settlement).data)


class ScanValidateView(APIView):
    """Handler for POST /api/scan/validate: door check without admitting."""

    permission_classes = [IsAuthenticated]

    def post(self, request: Request) -> Response:
        serializer = ScanRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            receipt = purchase_service().scan(
                serializer.validated_data["token"],
                serializer.validated_data["event_id"] or None,
                commit=False,
            )
        except DomainError as e:
            return error_response(e)
        return Response({"valid": True, **AdmissionReceiptSerializer(receipt).data})


class ScanView(APIView):
    """Handler for POST /api/scan: admit the ticket holder once."""

    permission_classes = [IsAuthenticated]

    def post(self, request: Request) -> Response:
        serializer = ScanRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            receipt = purchase_service().scan(
                serializer.validated_data["token"],
                serializer.validated_data["event_id"] or None,
            )
        except DomainError as e:
            return error_response(e)
        return Response({"admitted": True, **AdmissionReceiptSerializer(receipt).data})


class TicketQRView(APIView):
    """Handler for GET /api/tickets/{purchase_id}/qr: the QR code as a PNG download."""

    permission_classes = [AllowAny]

    def get(self, request: Request, purchase_id: str):
        try:
            png = purchase_service().ticket_qr(purchase_id)
        except DomainError as e:
            return error_response(e)
        response = HttpResponse(png, content_type="image/png")
        response["Content-Disposition"] = f"attachment; filename=ticket-{purchase_id}.png"
        return response


class EventPurchaseListView(APIView):
    """Handler for GET /api/tickets/event/{event_id} (host only)"""

    permission_classes = [IsAuthenticated]

    def get(self, request: Request, event_id: str) -> Response:
        try:
            purchases = purchase_service().list_event_purchases(request.user.pk, event_id)
        except DomainError as e:
            return error_response(e)
        return Response({"results": HostPurchaseSerializer(purchases, many=True).data})


class PaymentHistoryView(APIView):
    """Handler for GET /api/payments/history: payments across the host's events."""

    permission_classes = [IsAuthenticated]

    def get(self, request: Request) -> Response:
        history = purchase_service().payment_history(request.user.pk)
        return Response({"results": PaymentHistorySerializer(history, many=True).data})


class ScanStatsView(APIView):
    """Handler for GET /api/scan/stats/{event_id} (host only)"""

    permission_classes = [IsAuthenticated]

    def get(self, request: Request, event_id: str) -> Response:
        try:
            stats = purchase_service().scan_stats(request.user.pk, event_id)
        except DomainError as e:
            return error_response(e)
        return Response(ScanStatsSerializer(stats).data)
