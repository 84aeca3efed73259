import logging

from django.conf import settings
from django.core.mail import EmailMessage

from tickets.gateways.interfaces import Notifier

logger = logging.getLogger(__name__)

BODY = """Hello {buyer_name},

Thank you for purchasing a ticket for {event_name}.

Event details:
- Date: {event_date}
- Location: {event_location}
- Ticket type: {tier_name}
- Amount paid: KES {amount}

Your QR code is attached. Present it at the entrance; it becomes active
4 hours before the event starts.

See you at the event!
"""


class EmailNotifier(Notifier):
    """Sends the ticket confirmation with the QR code as a PNG attachment."""

    def send(self, destination: str, template_data: dict, attachment: bytes | None = None) -> None:
        msg = EmailMessage(
            subject=f"Your Ticket for {template_data['event_name']}",
            body=BODY.format(**template_data),
            from_email=settings.DEFAULT_FROM_EMAIL,
            to=[destination],
        )
        if attachment:
            msg.attach("ticket-qr.png", attachment, "image/png")
        msg.send(fail_silently=False)
        logger.info("Ticket email sent to %s", destination)
