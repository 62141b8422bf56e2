"""Order-confirmation email services.

``AbstractEmailService`` renders the confirmation message from Django
templates and hands it to ``send_email``; concrete services decide how
the message leaves the process:

- ``MockEmailService``: logs the message (development / tests).
- ``SmtpEmailService``: Django mail framework (``EMAIL_BACKEND``).
- ``CeleryEmailService``: queues the send on a Celery worker.

``get_email_service()`` picks one from the ``EMAIL_SERVICE`` setting.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Protocol

import structlog
from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.template import TemplateDoesNotExist, TemplateSyntaxError
from django.template.loader import render_to_string

if TYPE_CHECKING:
    from modules.orders.models import Order

logger = structlog.get_logger(__name__)

TEXT_TEMPLATE = "notifications/order_confirmation.txt"
HTML_TEMPLATE = "notifications/order_confirmation.html"


class EmailService(Protocol):
    """Notification contract consumed by the order workflow."""

    def send_order_confirmation_email(self, order: Order) -> None: ...

    def send_order_confirmation_html_email(self, order: Order) -> None: ...


class AbstractEmailService(ABC):
    """Builds confirmation messages; subclasses deliver them."""

    def send_order_confirmation_email(self, order: Order) -> None:
        self.send_email(self.prepare_message_from_order(order))

    def send_order_confirmation_html_email(self, order: Order) -> None:
        """Send the HTML version, falling back to plain text."""
        try:
            message = self.prepare_html_message_from_order(order)
        except (TemplateDoesNotExist, TemplateSyntaxError) as exc:
            logger.warning(
                "email.html_render_failed", order_id=str(order.id), error=str(exc)
            )
            message = self.prepare_message_from_order(order)
        self.send_email(message)

    def prepare_message_from_order(self, order: Order) -> EmailMultiAlternatives:
        return EmailMultiAlternatives(
            subject=self.subject_for(order),
            body=render_to_string(TEXT_TEMPLATE, {"order": order}),
            from_email=settings.DEFAULT_FROM_EMAIL,
            to=[order.customer.email],
        )

    def prepare_html_message_from_order(self, order: Order) -> EmailMultiAlternatives:
        message = self.prepare_message_from_order(order)
        message.attach_alternative(
            render_to_string(HTML_TEMPLATE, {"order": order}), "text/html"
        )
        return message

    @staticmethod
    def subject_for(order: Order) -> str:
        return f"Order confirmed! Code: {order.id}"

    @abstractmethod
    def send_email(self, message: EmailMultiAlternatives) -> None:
        """Deliver *message*."""


class MockEmailService(AbstractEmailService):
    def send_email(self, message: EmailMultiAlternatives) -> None:
        logger.info(
            "email.simulated",
            to=message.to,
            subject=message.subject,
            body=message.body,
        )


class SmtpEmailService(AbstractEmailService):
    def send_email(self, message: EmailMultiAlternatives) -> None:
        sent = message.send()
        logger.info("email.sent", to=message.to, subject=message.subject, sent=sent)


class CeleryEmailService:
    """Queues the confirmation; the worker renders and sends it via SMTP.

    The worker always sends the HTML message with its plain-text body, so
    both entry points queue the same task.
    """

    def send_order_confirmation_html_email(self, order: Order) -> None:
        from modules.notifications.tasks import send_order_confirmation

        send_order_confirmation.delay(str(order.id))
        logger.info("email.queued", order_id=str(order.id))

    send_order_confirmation_email = send_order_confirmation_html_email


_SERVICES = {
    "mock": MockEmailService,
    "smtp": SmtpEmailService,
    "celery": CeleryEmailService,
}


def get_email_service() -> EmailService:
    """Instantiate the service named by ``settings.EMAIL_SERVICE``."""
    name = getattr(settings, "EMAIL_SERVICE", "mock")
    try:
        return _SERVICES[name]()
    except KeyError:
        raise ValueError(
            f"Unknown EMAIL_SERVICE '{name}'; expected one of {sorted(_SERVICES)}."
        ) from None
