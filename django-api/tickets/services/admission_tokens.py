"""Signed admission tokens carried in ticket QR codes.

A token is URL-safe base64 of canonical JSON (sorted keys, no whitespace)
holding the payload fields plus an HMAC-SHA256 signature over the canonical
payload. Verification needs no database lookup. Only the signature check may
be cached; ticket status and redemption are never read from the cache.
"""

import base64
import binascii
import hashlib
import hmac
import json
import logging
import secrets
from dataclasses import asdict
from datetime import datetime
from typing import Callable

from django.utils import timezone

from tickets.domain import AdmissionPayload
from tickets.domain.errors import InvalidSignatureError

logger = logging.getLogger(__name__)

PAYLOAD_FIELDS = frozenset({"purchase_id", "event_id", "buyer_phone", "issued_at", "nonce"})
STRING_FIELDS = ("purchase_id", "event_id", "buyer_phone", "nonce")


def canonical_json(data: dict) -> bytes:
    return json.dumps(data, sort_keys=True, separators=(",", ":")).encode("ascii")


class AdmissionTokenService:
    def __init__(
        self,
        secret: str | bytes,
        cache=None,
        cache_ttl: int = 300,
        clock: Callable[[], datetime] = timezone.now,
    ) -> None:
        self._secret = secret.encode() if isinstance(secret, str) else secret
        self._cache = cache
        self._cache_ttl = cache_ttl
        self._clock = clock

    def mint(self, purchase_id, event_id, buyer_phone: str) -> str:
        """Return a fresh signed token; two mints for the same ticket differ by nonce."""
        payload = {
            "purchase_id": str(purchase_id),
            "event_id": str(event_id),
            "buyer_phone": buyer_phone,
            "issued_at": int(self._clock().timestamp() * 1000),
            "nonce": secrets.token_hex(16),
        }
        signed = {**payload, "signature": self._sign(payload)}
        return base64.urlsafe_b64encode(canonical_json(signed)).decode("ascii")

    def verify(self, token: str | bytes) -> AdmissionPayload:
        """Check a token's signature and return its payload.

        Raises:
            InvalidSignatureError: If the token is malformed or tampered with.
        """
        if isinstance(token, bytes):
            try:
                token = token.decode("ascii")
            except UnicodeDecodeError:
                raise InvalidSignatureError("Invalid QR code format") from None
        if not isinstance(token, str) or not token:
            raise InvalidSignatureError("Invalid QR code format")

        key = self._cache_key(token)
        cached = self._cache_get(key)
        if cached is not None:
            return AdmissionPayload(**cached)

        payload = self._decode(token)
        self._cache_set(key, asdict(payload))
        return payload

    def _sign(self, payload: dict) -> str:
        return hmac.new(self._secret, canonical_json(payload), hashlib.sha256).hexdigest()

    def _decode(self, token: str) -> AdmissionPayload:
        try:
            raw = base64.urlsafe_b64decode(token.encode("ascii"))
        except (binascii.Error, UnicodeEncodeError, ValueError):
            raise InvalidSignatureError("Invalid QR code format") from None
        if base64.urlsafe_b64encode(raw).decode("ascii") != token:
            raise InvalidSignatureError("Invalid QR code format")

        try:
            data = json.loads(raw)
        except ValueError:
            raise InvalidSignatureError("Invalid QR code format") from None
        if not isinstance(data, dict) or set(data) != PAYLOAD_FIELDS | {"signature"}:
            raise InvalidSignatureError("Invalid QR code format")
        if canonical_json(data) != raw:
            raise InvalidSignatureError("Invalid QR code format")

        signature = data.pop("signature")
        if not isinstance(signature, str):
            raise InvalidSignatureError()
        if not all(isinstance(data[name], str) for name in STRING_FIELDS):
            raise InvalidSignatureError("Invalid QR code format")
        if not isinstance(data["issued_at"], int) or isinstance(data["issued_at"], bool):
            raise InvalidSignatureError("Invalid QR code format")

        if not hmac.compare_digest(self._sign(data), signature):
            raise InvalidSignatureError()
        return AdmissionPayload(**data)

    def _cache_key(self, token: str) -> str:
        return "admission:sig:" + hashlib.sha256(token.encode("ascii", "replace")).hexdigest()

    def _cache_get(self, key: str) -> dict | None:
        if self._cache is None:
            return None
        try:
            return self._cache.get(key)
        except Exception:
            logger.warning("Admission token cache read failed", exc_info=True)
            return None

    def _cache_set(self, key: str, value: dict) -> None:
        if self._cache is None:
            return
        try:
            self._cache.set(key, value, self._cache_ttl)
        except Exception:
            logger.warning("Admission token cache write failed", exc_info=True)
