"""Interfaces of the external collaborators used by the ticket flow."""

from abc import ABC, abstractmethod
from decimal import Decimal


class PaymentGatewayError(Exception):
    """The gateway could not start a payment."""


class PaymentGateway(ABC):
    @abstractmethod
    def initiate(self, phone: str, amount: Decimal, reference: str, description: str) -> str:
        """Ask the payer to pay `amount`; return the gateway's checkout id.

        The outcome arrives later as an asynchronous callback carrying
        `reference` (or the returned checkout id).
        """
        ...


class Notifier(ABC):
    @abstractmethod
    def send(self, destination: str, template_data: dict, attachment: bytes | None = None) -> None:
        """Deliver a ticket confirmation. May raise; callers treat it as best-effort."""
        ...
