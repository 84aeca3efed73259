"""Mapping of domain errors to HTTP responses."""

from rest_framework import status
from rest_framework.response import Response

from events.domain.errors import DomainError, ErrorCode

STATUS_BY_CODE = {
    ErrorCode.INVALID_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.EVENT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.TIER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.PURCHASE_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.WITHDRAWAL_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.OUT_OF_STOCK: status.HTTP_409_CONFLICT,
    ErrorCode.ALREADY_REDEEMED: status.HTTP_409_CONFLICT,
    ErrorCode.WITHDRAWAL_ALREADY_PROCESSED: status.HTTP_409_CONFLICT,
    ErrorCode.INVALID_SIGNATURE: status.HTTP_400_BAD_REQUEST,
    ErrorCode.WRONG_EVENT: status.HTTP_400_BAD_REQUEST,
    ErrorCode.PAYMENT_INCOMPLETE: status.HTTP_400_BAD_REQUEST,
    ErrorCode.NOT_YET_ACTIVE: status.HTTP_400_BAD_REQUEST,
    ErrorCode.EVENT_ENDED: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INSUFFICIENT_FUNDS: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_AMOUNT: status.HTTP_400_BAD_REQUEST,
    ErrorCode.WITHDRAWAL_NOT_YET_AVAILABLE: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_WITHDRAWAL_STATUS: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_EVENT: status.HTTP_400_BAD_REQUEST,
    ErrorCode.NOT_EVENT_HOST: status.HTTP_403_FORBIDDEN,
    ErrorCode.PAYMENT_INITIATION_FAILED: status.HTTP_502_BAD_GATEWAY,
}


def error_response(error: DomainError) -> Response:
    """Render a domain error without exposing internal details."""
    body = {"code": error.code.value, "message": error.message, **error.details()}
    return Response(body, status=STATUS_BY_CODE.get(error.code, status.HTTP_400_BAD_REQUEST))


def validation_error(errors) -> Response:
    """Render serializer errors in the same shape as domain errors."""
    return Response(
        {"code": "VALIDATION_ERROR", "message": "Invalid request", "errors": errors},
        status=status.HTTP_400_BAD_REQUEST,
    )
