"""Order repositories package."""

from modules.orders.repositories.django_repository import (
    OrderDjangoRepository,
    OrderItemDjangoRepository,
    PaymentDjangoRepository,
)
from modules.orders.repositories.interfaces import (
    IOrderItemRepository,
    IOrderRepository,
    IPaymentRepository,
)

__all__ = [
    "IOrderItemRepository",
    "IOrderRepository",
    "IPaymentRepository",
    "OrderDjangoRepository",
    "OrderItemDjangoRepository",
    "PaymentDjangoRepository",
]
