"""Asynchronous notification tasks."""

import structlog
from celery import shared_task

from modules.notifications.services import SmtpEmailService
from modules.orders.repositories.django_repository import OrderDjangoRepository

logger = structlog.get_logger(__name__)


@shared_task(name="notifications.send_order_confirmation")
def send_order_confirmation(order_id: str) -> bool:
    """Render and send the confirmation of *order_id*.

    Returns ``False`` when the order no longer exists.
    """
    order = OrderDjangoRepository().get_by_id(order_id)
    if order is None:
        logger.warning("email.order_missing", order_id=order_id)
        return False
    SmtpEmailService().send_order_confirmation_html_email(order)
    return True
