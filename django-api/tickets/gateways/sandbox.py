import logging
import uuid
from decimal import Decimal

from tickets.gateways.interfaces import PaymentGateway

logger = logging.getLogger(__name__)


class SandboxPaymentGateway(PaymentGateway):
    """Accepts every payment request without contacting a provider."""

    def initiate(self, phone: str, amount: Decimal, reference: str, description: str) -> str:
        checkout_id = f"ws_CO_{uuid.uuid4().hex[:20]}"
        logger.info(
            "Sandbox payment requested: reference=%s amount=%s checkout_id=%s",
            reference,
            amount,
            checkout_id,
        )
        return checkout_id
