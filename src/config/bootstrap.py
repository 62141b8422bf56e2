"""Composition root: wires Django repositories into the application services."""

from __future__ import annotations

from dataclasses import dataclass

from modules.customers.repositories.django_repository import (
    AddressDjangoRepository,
    CustomerDjangoRepository,
)
from modules.customers.services import CustomerService
from modules.notifications.services import EmailService, get_email_service
from modules.orders.repositories.django_repository import (
    OrderDjangoRepository,
    OrderItemDjangoRepository,
    PaymentDjangoRepository,
)
from modules.orders.services import BilledPaymentService, OrderService
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.services import ProductService


@dataclass(frozen=True)
class Services:
    customers: CustomerService
    products: ProductService
    orders: OrderService
    billed_payments: BilledPaymentService
    email: EmailService


def build_services(email_service: EmailService | None = None) -> Services:
    customers = CustomerService(
        repository=CustomerDjangoRepository(),
        address_repository=AddressDjangoRepository(),
    )
    products = ProductService(repository=ProductDjangoRepository())
    billed_payments = BilledPaymentService()
    email = email_service if email_service is not None else get_email_service()

    orders = OrderService(
        order_repository=OrderDjangoRepository(),
        payment_repository=PaymentDjangoRepository(),
        item_repository=OrderItemDjangoRepository(),
        customer_service=customers,
        product_service=products,
        billed_payment_service=billed_payments,
        email_service=email,
    )

    return Services(
        customers=customers,
        products=products,
        orders=orders,
        billed_payments=billed_payments,
        email=email,
    )
