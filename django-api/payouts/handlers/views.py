"""HTTP handlers for host balances and withdrawals."""

from rest_framework import status
from rest_framework.permissions import IsAdminUser, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from events.domain.errors import DomainError
from events.handlers.responses import error_response, validation_error
from events.stores.django_store import DjangoEventStore
from payouts.domain import PayoutDetails, WithdrawalStatus
from payouts.handlers.serializers import (
    ProcessWithdrawalSerializer,
    WithdrawalRequestSerializer,
    WithdrawalSerializer,
    WithdrawalStatsSerializer,
)
from payouts.services.balance_service import BalanceLedger
from payouts.services.withdrawal_service import WithdrawalService
from payouts.stores.django_store import DjangoPayoutStore
from tikiti.unit_of_work import DjangoUnitOfWork


def balance_ledger() -> BalanceLedger:
    return BalanceLedger(DjangoPayoutStore())


def withdrawal_service() -> WithdrawalService:
    store = DjangoPayoutStore()
    return WithdrawalService(
        payouts=store,
        events=DjangoEventStore(),
        balances=BalanceLedger(store),
        unit_of_work=DjangoUnitOfWork(),
    )


def status_filter(request: Request) -> WithdrawalStatus | None:
    """Raises ValueError for an unknown ?status value."""
    value = request.query_params.get("status")
    return WithdrawalStatus(value.upper()) if value else None


class BalanceView(APIView):
    """Handler for GET /api/balance"""

    permission_classes = [IsAuthenticated]

    def get(self, request: Request) -> Response:
        available = balance_ledger().available(request.user.pk)
        return Response({"available": f"{available:.2f}"})


class WithdrawalListView(APIView):
    """Handler for GET/POST /api/withdrawals"""

    permission_classes = [IsAuthenticated]

    def get(self, request: Request) -> Response:
        try:
            wanted = status_filter(request)
        except ValueError:
            return validation_error({"status": ["Unknown withdrawal status"]})
        withdrawals = withdrawal_service().list_withdrawals(request.user.pk, wanted)
        return Response({"results": WithdrawalSerializer(withdrawals, many=True).data})

    def post(self, request: Request) -> Response:
        serializer = WithdrawalRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error(serializer.errors)
        data = serializer.validated_data
        try:
            withdrawal = withdrawal_service().request_withdrawal(
                request.user.pk,
                data["amount"],
                event_id=data["event_id"] or None,
                payout_details=PayoutDetails(
                    account_number=data["account_number"],
                    bank_name=data["bank_name"],
                    mpesa_number=data["mpesa_number"],
                ),
            )
        except DomainError as e:
            return error_response(e)
        return Response(WithdrawalSerializer(withdrawal).data, status=status.HTTP_201_CREATED)


class AllWithdrawalsView(APIView):
    """Handler for GET /api/withdrawals/all (staff only)"""

    permission_classes = [IsAdminUser]

    def get(self, request: Request) -> Response:
        try:
            wanted = status_filter(request)
        except ValueError:
            return validation_error({"status": ["Unknown withdrawal status"]})
        withdrawals = withdrawal_service().list_all_withdrawals(wanted)
        return Response({"results": WithdrawalSerializer(withdrawals, many=True).data})


class WithdrawalStatsView(APIView):
    """Handler for GET /api/withdrawals/stats"""

    permission_classes = [IsAuthenticated]

    def get(self, request: Request) -> Response:
        stats = withdrawal_service().withdrawal_stats(request.user.pk)
        return Response(WithdrawalStatsSerializer(stats).data)


class ProcessWithdrawalView(APIView):
    """Handler for POST /api/withdrawals/{withdrawal_id}/process (staff only)"""

    permission_classes = [IsAdminUser]

    def post(self, request: Request, withdrawal_id: str) -> Response:
        serializer = ProcessWithdrawalSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error(serializer.errors)
        try:
            withdrawal = withdrawal_service().process_withdrawal(
                withdrawal_id,
                WithdrawalStatus(serializer.validated_data["status"]),
                serializer.validated_data["notes"],
            )
        except DomainError as e:
            return error_response(e)
        return Response(WithdrawalSerializer(withdrawal).data)
