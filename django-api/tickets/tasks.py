"""Celery tasks for the ticket flow."""

import logging

from celery import shared_task
from django.conf import settings
from django.utils.module_loading import import_string

from events.stores.django_store import DjangoEventStore
from tickets.services.confirmation_service import ConfirmationService
from tickets.stores.django_store import DjangoPurchaseStore

logger = logging.getLogger(__name__)


@shared_task
def send_ticket_confirmation(purchase_id: str) -> bool:
    if not settings.TICKET_NOTIFIER_CLASS:
        return False
    notifier = import_string(settings.TICKET_NOTIFIER_CLASS)()
    return ConfirmationService(DjangoEventStore(), DjangoPurchaseStore(), notifier).send(purchase_id)


def queue_ticket_confirmation(purchase_id: str) -> None:
    send_ticket_confirmation.delay(purchase_id)
    logger.info("Ticket confirmation queued for purchase %s", purchase_id)
