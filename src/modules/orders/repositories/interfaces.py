"""Order aggregate repository interfaces.

``IOrderRepository`` extends ``IRepository[Order]`` with the per-customer
history page.  Payments and items have their own repositories because
the placement workflow persists them in separate, sequential writes
inside one transaction.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.core.paging import Page, PageRequest
    from modules.customers.models import Customer
    from modules.orders.models import Order, OrderItem, Payment


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root."""

    @abstractmethod
    def find_by_customer(
        self, customer: Customer, page_request: PageRequest
    ) -> Page[Order]:
        """Page the orders placed by *customer*."""


class IPaymentRepository(IRepository["Payment"]):
    """Repository contract for order payments."""


class IOrderItemRepository(IRepository["OrderItem"]):
    """Repository contract for order line items."""
