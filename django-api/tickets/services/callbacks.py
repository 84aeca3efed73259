"""Normalization of payment-gateway callback payloads.

Two shapes are accepted:

- flat: ``{"reference", "resultCode", "resultDesc", "metadataItems": [{"name", "value"}]}``
- mobile-money envelope: ``{"Body": {"stkCallback": {"CheckoutRequestID",
  "ResultCode", "ResultDesc", "CallbackMetadata": {"Item": [{"Name", "Value"}]}}}}``

Metadata is an ordered list of named fields; unknown names are ignored and
every known one is optional.
"""

import logging
from datetime import datetime, timezone, tzinfo
from decimal import Decimal, InvalidOperation

from tickets.domain import GatewayCallback, PaymentDetails

logger = logging.getLogger(__name__)

METADATA_FIELDS = {
    "mpesareceiptnumber": "receipt_number",
    "receiptnumber": "receipt_number",
    "phonenumber": "phone_number",
    "transactiondate": "paid_at",
    "amount": "amount",
}


class MalformedCallbackError(ValueError):
    """The payload cannot be turned into a payment result.

    reference and checkout_id carry whatever identifiers were readable, so the
    caller can still flag the payment they name.
    """

    def __init__(self, message: str, reference: str = "", checkout_id: str = "") -> None:
        super().__init__(message)
        self.reference = reference
        self.checkout_id = checkout_id


def parse_transaction_date(value, tz: tzinfo) -> datetime | None:
    """Parse the gateway's YYYYMMDDHHMMSS timestamp, local to `tz`."""
    text = str(value)
    if len(text) != 14 or not text.isdigit():
        return None
    try:
        return datetime.strptime(text, "%Y%m%d%H%M%S").replace(tzinfo=tz)
    except ValueError:
        return None


def parse_metadata(items, tz: tzinfo) -> PaymentDetails:
    values = {}
    for item in items if isinstance(items, list) else []:
        if not isinstance(item, dict):
            logger.warning("Skipping malformed callback metadata item: %r", item)
            continue
        name = item.get("Name", item.get("name"))
        value = item.get("Value", item.get("value"))
        target = METADATA_FIELDS.get(str(name).lower())
        if target is None or value is None:
            continue
        if target == "paid_at":
            value = parse_transaction_date(value, tz)
        elif target == "amount":
            try:
                value = Decimal(str(value))
            except InvalidOperation:
                value = None
        else:
            value = str(value)
        if value is not None:
            values[target] = value
    return PaymentDetails(**values)


def parse_callback(payload, tz: tzinfo = timezone.utc) -> GatewayCallback:
    """Raises MalformedCallbackError when no reference or result code can be found."""
    if not isinstance(payload, dict):
        raise MalformedCallbackError("Callback payload is not an object")

    body = payload.get("Body")
    envelope = body.get("stkCallback") if isinstance(body, dict) else None
    if isinstance(envelope, dict):
        reference = ""
        checkout_id = envelope.get("CheckoutRequestID") or ""
        result_code = envelope.get("ResultCode")
        result_desc = envelope.get("ResultDesc") or ""
        metadata = envelope.get("CallbackMetadata")
        items = metadata.get("Item") if isinstance(metadata, dict) else None
    else:
        reference = payload.get("reference") or ""
        checkout_id = payload.get("checkoutId") or ""
        result_code = payload.get("resultCode")
        result_desc = payload.get("resultDesc") or ""
        items = payload.get("metadataItems")

    if not reference and not checkout_id:
        raise MalformedCallbackError("Callback carries no payment reference")
    reference, checkout_id = str(reference), str(checkout_id)
    if isinstance(result_code, bool):
        raise MalformedCallbackError(
            "Callback result code is not a number", reference, checkout_id
        )
    try:
        code = int(result_code)
    except (TypeError, ValueError):
        raise MalformedCallbackError(
            "Callback result code is not a number", reference, checkout_id
        ) from None

    return GatewayCallback(
        reference=reference,
        checkout_id=checkout_id,
        result_code=code,
        result_desc=str(result_desc),
        details=parse_metadata(items, tz),
    )
