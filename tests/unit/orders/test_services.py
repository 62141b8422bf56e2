"""Unit tests for OrderService and BilledPaymentService.

Covers:
- insert: instant stamped, payment PENDING, billed due date filled,
  items repriced from the catalog with zero discount, persistence order,
  confirmation scheduled after commit.
- insert failures: unauthorized caller, unknown product.
- find / find_page: not found, anonymous caller, own history only.
"""

from __future__ import annotations

from datetime import UTC, date, datetime
from decimal import Decimal
from unittest.mock import MagicMock
from uuid import UUID

import pytest
from django.utils import timezone
from freezegun import freeze_time

from modules.core.exceptions import Unauthorized
from modules.core.paging import Page, PageRequest
from modules.core.security import Principal
from modules.customers.models import Customer, CustomerType
from modules.orders.constants import PaymentKind, PaymentState
from modules.orders.dtos import BilledPaymentDTO, CardPaymentDTO, OrderItemDTO, PlaceOrderDTO
from modules.orders.exceptions import OrderNotFound
from modules.orders.models import Order, Payment
from modules.orders.services import BilledPaymentService, OrderService
from modules.products.exceptions import ProductNotFound
from modules.products.models import Product

from tests.conftest import VALID_CPF

pytestmark = pytest.mark.unit

CUSTOMER_ID = UUID(int=7)
PRODUCT_A_ID = UUID(int=10)
PRODUCT_B_ID = UUID(int=11)
ORDER_ID = UUID(int=42)
FROZEN_NOW = "2024-03-10 15:30:00-03:00"


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def customer():
    return Customer(
        id=CUSTOMER_ID,
        name="Maria Silva",
        email="maria@example.com",
        document=VALID_CPF,
        customer_type=CustomerType.INDIVIDUAL,
    )


@pytest.fixture()
def catalog():
    return {
        PRODUCT_A_ID: Product(id=PRODUCT_A_ID, name="Mouse", price=Decimal("50.00")),
        PRODUCT_B_ID: Product(id=PRODUCT_B_ID, name="Toalha", price=Decimal("20.00")),
    }


@pytest.fixture()
def order_repo():
    repo = MagicMock()
    repo.save.side_effect = lambda o: o
    return repo


@pytest.fixture()
def payment_repo():
    repo = MagicMock()
    repo.save.side_effect = lambda p: p
    return repo


@pytest.fixture()
def item_repo():
    repo = MagicMock()
    repo.save_all.side_effect = lambda items: list(items)
    return repo


@pytest.fixture()
def customer_service(customer):
    svc = MagicMock()
    svc.find.return_value = customer
    return svc


@pytest.fixture()
def product_service(catalog):
    svc = MagicMock()

    def _find(id):
        if id not in catalog:
            raise ProductNotFound(f"Product {id} not found.")
        return catalog[id]

    svc.find.side_effect = _find
    return svc


@pytest.fixture()
def email_service():
    return MagicMock()


@pytest.fixture()
def service(
    order_repo, payment_repo, item_repo, customer_service, product_service, email_service
):
    return OrderService(
        order_repository=order_repo,
        payment_repository=payment_repo,
        item_repository=item_repo,
        customer_service=customer_service,
        product_service=product_service,
        billed_payment_service=BilledPaymentService(due_days=7),
        email_service=email_service,
    )


@pytest.fixture()
def caller():
    return Principal.of(CUSTOMER_ID, "CLIENT")


def _billed_order(**overrides) -> PlaceOrderDTO:
    data = {
        "id": ORDER_ID,
        "instant": datetime(2001, 1, 1, 0, 0, tzinfo=UTC),
        "customer_id": CUSTOMER_ID,
        "payment": BilledPaymentDTO(),
        "items": [
            OrderItemDTO(
                product_id=PRODUCT_A_ID,
                quantity=2,
                price=Decimal("1.00"),
                discount=Decimal("5.00"),
            ),
            OrderItemDTO(
                product_id=PRODUCT_B_ID,
                quantity=1,
                price=Decimal("1.00"),
                discount=Decimal("3.00"),
            ),
        ],
    }
    data.update(overrides)
    return PlaceOrderDTO(**data)


def _saved_items(item_repo):
    (items,), _ = item_repo.save_all.call_args
    return list(items)


# ===========================================================================
# insert
# ===========================================================================


class TestInsertBilledOrder:
    @freeze_time(FROZEN_NOW)
    def test_instant_stamped_now(self, service, caller):
        order = service.insert(_billed_order(), caller)
        assert order.instant == timezone.now()
        assert order.id != ORDER_ID

    @freeze_time(FROZEN_NOW)
    def test_payment_pending_with_due_date(self, service, payment_repo, caller):
        service.insert(_billed_order(), caller)

        (payment,), _ = payment_repo.save.call_args
        assert payment.kind == PaymentKind.BILLED
        assert payment.state == PaymentState.PENDING
        assert payment.due_date == date(2024, 3, 17)
        assert payment.paid_date is None

    @freeze_time(FROZEN_NOW)
    def test_supplied_due_date_replaced(self, service, payment_repo, caller):
        service.insert(
            _billed_order(payment=BilledPaymentDTO(due_date=date(1999, 1, 1))), caller
        )

        (payment,), _ = payment_repo.save.call_args
        assert payment.due_date == date(2024, 3, 17)

    def test_payment_linked_to_order(self, service, payment_repo, caller):
        order = service.insert(_billed_order(), caller)
        (payment,), _ = payment_repo.save.call_args
        assert payment.order is order
        assert order.payment is payment

    def test_items_repriced_from_catalog(self, service, item_repo, caller):
        order = service.insert(_billed_order(), caller)

        items = _saved_items(item_repo)
        assert [(i.product_id, i.price, i.discount, i.quantity) for i in items] == [
            (PRODUCT_A_ID, Decimal("50.00"), Decimal("0.00"), 2),
            (PRODUCT_B_ID, Decimal("20.00"), Decimal("0.00"), 1),
        ]
        assert all(i.order is order for i in items)
        assert sum(i.subtotal for i in items) == Decimal("120.00")

    def test_customer_resolved_with_caller(self, service, customer_service, customer, caller):
        order = service.insert(_billed_order(), caller)
        customer_service.find.assert_called_once_with(CUSTOMER_ID, caller)
        assert order.customer is customer

    def test_persistence_order(self, service, order_repo, payment_repo, item_repo, caller):
        calls = []
        order_repo.save.side_effect = lambda o: calls.append("order") or o
        payment_repo.save.side_effect = lambda p: calls.append("payment") or p
        item_repo.save_all.side_effect = lambda items: calls.append("items") or items

        service.insert(_billed_order(), caller)

        assert calls == ["order", "payment", "items"]

    def test_confirmation_sent_after_commit(
        self, service, email_service, caller, django_capture_on_commit_callbacks
    ):
        with django_capture_on_commit_callbacks(execute=True) as callbacks:
            order = service.insert(_billed_order(), caller)

        assert len(callbacks) == 1
        email_service.send_order_confirmation_html_email.assert_called_once_with(order)

    def test_confirmation_not_sent_before_commit(self, service, email_service, caller):
        service.insert(_billed_order(), caller)
        email_service.send_order_confirmation_html_email.assert_not_called()


class TestInsertCardOrder:
    def test_card_payment_keeps_installments(self, service, payment_repo, caller):
        service.insert(_billed_order(payment=CardPaymentDTO(installments=6)), caller)

        (payment,), _ = payment_repo.save.call_args
        assert payment.kind == PaymentKind.CARD
        assert payment.installments == 6
        assert payment.state == PaymentState.PENDING
        assert payment.due_date is None


class TestInsertFailures:
    def test_unauthorized_caller(self, service, customer_service, order_repo):
        customer_service.find.side_effect = Unauthorized("Access denied.")
        with pytest.raises(Unauthorized):
            service.insert(_billed_order(), Principal.of(UUID(int=8), "CLIENT"))
        order_repo.save.assert_not_called()

    def test_unknown_product(self, service, item_repo, email_service, caller):
        dto = _billed_order(items=[OrderItemDTO(product_id=UUID(int=99), quantity=1)])
        with pytest.raises(ProductNotFound):
            service.insert(dto, caller)
        item_repo.save_all.assert_not_called()
        email_service.send_order_confirmation_html_email.assert_not_called()


# ===========================================================================
# find / find_page
# ===========================================================================


class TestFind:
    def test_found(self, service, order_repo):
        order = Order(id=ORDER_ID)
        order_repo.get_by_id.return_value = order
        assert service.find(ORDER_ID) is order

    def test_not_found(self, service, order_repo):
        order_repo.get_by_id.return_value = None
        with pytest.raises(OrderNotFound):
            service.find(ORDER_ID)


class TestFindPage:
    def test_anonymous_never_queries(self, service, order_repo, customer_service):
        with pytest.raises(Unauthorized):
            service.find_page(PageRequest(), None)
        customer_service.find.assert_not_called()
        order_repo.find_by_customer.assert_not_called()

    def test_pages_callers_own_orders(self, service, order_repo, customer_service, customer, caller):
        request = PageRequest(order_by="instant", direction="DESC")
        page = Page(content=[], number=0, size=24, total_elements=0)
        order_repo.find_by_customer.return_value = page

        assert service.find_page(request, caller) is page
        customer_service.find.assert_called_once_with(CUSTOMER_ID, caller)
        order_repo.find_by_customer.assert_called_once_with(customer, request)

    def test_admin_sees_own_history_only(self, service, order_repo, customer_service):
        admin = Principal.of(UUID(int=1), "ADMIN", "CLIENT")
        service.find_page(PageRequest(), admin)
        customer_service.find.assert_called_once_with(UUID(int=1), admin)


# ===========================================================================
# BilledPaymentService
# ===========================================================================


class TestBilledPaymentService:
    def test_due_date_seven_days_later(self):
        payment = Payment(kind=PaymentKind.BILLED)
        instant = datetime(2024, 3, 10, 12, 0, tzinfo=UTC)

        BilledPaymentService(due_days=7).fill_billed_payment(payment, instant)

        assert payment.due_date == date(2024, 3, 17)

    def test_uses_local_calendar_day(self):
        payment = Payment(kind=PaymentKind.BILLED)
        # 01:00 UTC is still the previous day in America/Sao_Paulo
        instant = datetime(2024, 3, 10, 1, 0, tzinfo=UTC)

        BilledPaymentService(due_days=7).fill_billed_payment(payment, instant)

        assert payment.due_date == date(2024, 3, 16)

    def test_due_days_from_settings(self, settings):
        settings.BILLED_PAYMENT_DUE_DAYS = 3
        payment = Payment(kind=PaymentKind.BILLED)
        instant = datetime(2024, 3, 10, 12, 0, tzinfo=UTC)

        BilledPaymentService().fill_billed_payment(payment, instant)

        assert payment.due_date == date(2024, 3, 13)

    def test_overwrites_supplied_due_date(self):
        payment = Payment(kind=PaymentKind.BILLED, due_date=date(1999, 1, 1))
        instant = datetime(2024, 3, 10, 12, 0, tzinfo=UTC)

        BilledPaymentService(due_days=7).fill_billed_payment(payment, instant)

        assert payment.due_date == date(2024, 3, 17)
