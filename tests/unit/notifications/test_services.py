"""Tests for the order-confirmation email services and Celery task."""

from __future__ import annotations

from decimal import Decimal
from unittest.mock import patch
from uuid import UUID

import pytest
from django.core import mail
from django.template import TemplateDoesNotExist
from django.utils import timezone

from modules.notifications.services import (
    CeleryEmailService,
    MockEmailService,
    SmtpEmailService,
    get_email_service,
)
from modules.notifications.tasks import send_order_confirmation
from modules.orders.constants import PaymentKind
from modules.orders.models import Order, OrderItem, Payment

pytestmark = pytest.mark.unit


@pytest.fixture()
def order(customer, products):
    order = Order.objects.create(instant=timezone.now(), customer=customer)
    Payment.objects.create(order=order, kind=PaymentKind.CARD, installments=2)
    OrderItem.objects.create(
        order=order, product=products["mouse"], quantity=2, price=products["mouse"].price
    )
    return Order.objects.select_related("customer", "payment").get(pk=order.pk)


class TestMessage:
    def test_subject_and_recipient(self, order, settings):
        settings.DEFAULT_FROM_EMAIL = "loja@example.com"
        message = MockEmailService().prepare_message_from_order(order)

        assert message.subject == f"Order confirmed! Code: {order.id}"
        assert message.to == ["maria@example.com"]
        assert message.from_email == "loja@example.com"

    def test_text_body_lists_items(self, order):
        body = MockEmailService().prepare_message_from_order(order).body
        assert "Maria Silva" in body
        assert str(order.id) in body
        assert "Mouse" in body
        assert "qty: 2" in body

    def test_html_alternative_attached(self, order):
        message = MockEmailService().prepare_html_message_from_order(order)
        (content, mimetype), = message.alternatives
        assert mimetype == "text/html"
        assert "Mouse" in content


class TestMockEmailService:
    def test_does_not_send(self, order):
        MockEmailService().send_order_confirmation_email(order)
        assert mail.outbox == []


class TestSmtpEmailService:
    def test_sends_plain_text(self, order):
        SmtpEmailService().send_order_confirmation_email(order)

        assert len(mail.outbox) == 1
        assert mail.outbox[0].to == ["maria@example.com"]
        assert mail.outbox[0].alternatives == []

    def test_sends_html(self, order):
        SmtpEmailService().send_order_confirmation_html_email(order)
        assert len(mail.outbox[0].alternatives) == 1

    def test_html_failure_falls_back_to_text(self, order):
        service = SmtpEmailService()
        with patch.object(
            service,
            "prepare_html_message_from_order",
            side_effect=TemplateDoesNotExist("notifications/order_confirmation.html"),
        ):
            service.send_order_confirmation_html_email(order)

        assert len(mail.outbox) == 1
        assert mail.outbox[0].alternatives == []


class TestCeleryEmailService:
    def test_task_runs_eagerly(self, order):
        CeleryEmailService().send_order_confirmation_html_email(order)

        assert len(mail.outbox) == 1
        assert mail.outbox[0].subject == f"Order confirmed! Code: {order.id}"
        assert len(mail.outbox[0].alternatives) == 1

    def test_plain_entry_point_queues_same_task(self, order):
        with patch("modules.notifications.tasks.send_order_confirmation") as task:
            CeleryEmailService().send_order_confirmation_email(order)
        task.delay.assert_called_once_with(str(order.id))

    def test_task_missing_order(self):
        assert send_order_confirmation(str(UUID(int=404))) is False
        assert mail.outbox == []


class TestGetEmailService:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("mock", MockEmailService),
            ("smtp", SmtpEmailService),
            ("celery", CeleryEmailService),
        ],
    )
    def test_selects_by_setting(self, settings, name, expected):
        settings.EMAIL_SERVICE = name
        assert isinstance(get_email_service(), expected)

    def test_unknown_name(self, settings):
        settings.EMAIL_SERVICE = "pigeon"
        with pytest.raises(ValueError, match="Unknown EMAIL_SERVICE"):
            get_email_service()
