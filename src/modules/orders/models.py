"""Order, Payment and OrderItem models.

Business rules implemented:
- ``instant`` (placement timestamp) is stamped by the order workflow.
- Customer FK uses PROTECT: a customer with orders cannot be deleted.
- Exactly one Payment per Order (one-to-one back-reference).
- Payment is a tagged union on ``kind``: CARD carries ``installments``,
  BILLED carries ``due_date`` / ``paid_date``.
- OrderItem snapshots the product price at order time (``price``) and
  appears once per product in an order.
- OrderItem subtotal is ``(price - discount) * quantity``.
"""

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import BaseModel
from modules.orders.constants import KINDS_REQUIRING_DUE_DATE, PaymentKind, PaymentState


class Order(BaseModel):
    """Order aggregate root."""

    instant: models.DateTimeField = models.DateTimeField()
    customer: models.ForeignKey = models.ForeignKey(
        "customers.Customer",
        on_delete=models.PROTECT,
        related_name="orders",
    )

    class Meta:
        db_table = "orders"
        ordering = ["-instant"]
        indexes = [
            models.Index(fields=["customer", "-instant"], name="orders_customer_instant_idx"),
        ]

    @property
    def total(self) -> Decimal:
        """Sum of item subtotals."""
        return sum((item.subtotal for item in self.items.all()), Decimal("0.00"))

    def __str__(self) -> str:
        return f"Order {self.id} ({self.instant:%Y-%m-%d %H:%M})"


class Payment(BaseModel):
    """Payment of an order; ``kind`` selects the variant fields in use."""

    order: models.OneToOneField = models.OneToOneField(
        Order,
        on_delete=models.CASCADE,
        related_name="payment",
    )
    kind: models.CharField = models.CharField(max_length=10, choices=PaymentKind.choices)
    state: models.CharField = models.CharField(
        max_length=10,
        choices=PaymentState.choices,
        default=PaymentState.PENDING,
    )
    # CARD
    installments: models.PositiveSmallIntegerField = models.PositiveSmallIntegerField(
        null=True, blank=True
    )
    # BILLED
    due_date: models.DateField = models.DateField(null=True, blank=True)
    paid_date: models.DateField = models.DateField(null=True, blank=True)

    class Meta:
        db_table = "payments"

    @property
    def requires_due_date(self) -> bool:
        """``True`` for variants whose due date is filled at placement."""
        return self.kind in KINDS_REQUIRING_DUE_DATE

    def clean(self) -> None:
        super().clean()
        if self.kind == PaymentKind.CARD:
            if self.due_date or self.paid_date:
                raise ValidationError("Card payments carry no due or paid date.")
        elif self.kind == PaymentKind.BILLED:
            if self.installments:
                raise ValidationError("Billed payments carry no installments.")
        else:
            raise ValidationError({"kind": "Invalid payment kind."})

    def __str__(self) -> str:
        return f"{self.kind} [{self.state}]"


class OrderItem(BaseModel):
    """Line item linking an Order to a Product.

    ``price`` is a **snapshot** of the product price at the time of
    purchase; it never changes if the catalog price is updated later.
    """

    order: models.ForeignKey = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name="items",
    )
    product: models.ForeignKey = models.ForeignKey(
        "products.Product",
        on_delete=models.PROTECT,
        related_name="order_items",
    )
    quantity: models.PositiveIntegerField = models.PositiveIntegerField(
        default=1,
        validators=[MinValueValidator(1)],
    )
    price: models.DecimalField = models.DecimalField(max_digits=10, decimal_places=2)
    discount: models.DecimalField = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
    )

    class Meta:
        db_table = "order_items"
        ordering = ["created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["order", "product"],
                name="order_items_unique_product",
            ),
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="order_items_quantity_positive",
            ),
        ]

    @property
    def subtotal(self) -> Decimal:
        return (Decimal(self.price) - Decimal(self.discount)) * self.quantity

    def __str__(self) -> str:
        return f"{self.product} x{self.quantity} ({self.subtotal})"
