"""Ticket confirmation messages, sent once a payment has settled."""

import logging

from events.stores.interfaces import EventStore
from tickets.gateways.interfaces import Notifier
from tickets.gateways.qr import qr_png_bytes
from tickets.services.purchase_service import parse_purchase_id
from tickets.stores.interfaces import PurchaseStore

logger = logging.getLogger(__name__)


class ConfirmationService:
    def __init__(self, events: EventStore, purchases: PurchaseStore, notifier: Notifier) -> None:
        self._events = events
        self._purchases = purchases
        self._notifier = notifier

    def send(self, purchase_id: str) -> bool:
        """Email the buyer their ticket with the QR code attached.

        Best effort: returns False when nothing was sent. Buyers without an
        email address are skipped.
        """
        purchase = self._purchases.get_purchase(parse_purchase_id(purchase_id))
        if purchase is None or not purchase.buyer_email:
            return False
        event = self._events.get_event(purchase.event_id)
        tier = self._events.get_tier(purchase.tier_id)
        if event is None:
            return False
        template_data = {
            "buyer_name": purchase.buyer_name,
            "event_name": event.name,
            "event_date": event.starts_at.strftime("%A, %d %B %Y %H:%M"),
            "event_location": event.location,
            "tier_name": tier.name if tier else "",
            "amount": str(purchase.total_amount),
        }
        try:
            self._notifier.send(
                purchase.buyer_email, template_data, attachment=qr_png_bytes(purchase.admission_token)
            )
        except Exception:
            logger.exception("Failed to send ticket confirmation for purchase %s", purchase.id)
            return False
        return True
