"""Django ORM implementation of the Order, Payment and OrderItem repositories.

Order reads eager-load the aggregate: ``select_related`` for the
customer and payment (single JOIN) and ``prefetch_related`` for
items → product (one batched query).  Prevents N+1.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.db import models

from modules.core.repositories.django_repository import DjangoRepository
from modules.orders.models import Order, OrderItem, Payment
from modules.orders.repositories.interfaces import (
    IOrderItemRepository,
    IOrderRepository,
    IPaymentRepository,
)

if TYPE_CHECKING:
    from modules.core.paging import Page, PageRequest
    from modules.customers.models import Customer


class OrderDjangoRepository(DjangoRepository[Order], IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    model = Order

    def get_queryset(self) -> models.QuerySet:
        return Order.objects.select_related("customer", "payment").prefetch_related(
            "items__product"
        )

    def find_by_customer(
        self, customer: Customer, page_request: PageRequest
    ) -> Page[Order]:
        return self.find_page(page_request, filters={"customer": customer})


class PaymentDjangoRepository(DjangoRepository[Payment], IPaymentRepository):
    model = Payment


class OrderItemDjangoRepository(DjangoRepository[OrderItem], IOrderItemRepository):
    model = OrderItem

    def get_queryset(self) -> models.QuerySet:
        return OrderItem.objects.select_related("product")
