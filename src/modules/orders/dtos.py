"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
DTOs are immutable (``frozen=True``).

- ``CardPaymentDTO`` / ``BilledPaymentDTO``: payment variants, a
  discriminated union on ``kind``.
- ``OrderItemDTO``: one requested line item.
- ``PlaceOrderDTO``: input for order placement.
- ``OrderOutputDTO``: output with payment and items.

Placement input may carry an order id, an instant, item prices and item
discounts; the service ignores all of them.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Annotated, Any, Dict, List, Literal, Optional, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

if TYPE_CHECKING:
    from modules.orders.models import Order, OrderItem, Payment


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CardPaymentDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["CARD"] = "CARD"
    installments: int = Field(default=1, ge=1)

    def variant_fields(self) -> Dict[str, Any]:
        return {"installments": self.installments}


class BilledPaymentDTO(BaseModel):
    """Billing slip (boleto).  ``due_date`` is recomputed on placement."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["BILLED"] = "BILLED"
    due_date: Optional[date] = None
    paid_date: Optional[date] = None

    def variant_fields(self) -> Dict[str, Any]:
        return {"due_date": self.due_date, "paid_date": self.paid_date}


PaymentDTO = Annotated[
    Union[CardPaymentDTO, BilledPaymentDTO],
    Field(discriminator="kind"),
]


class OrderItemDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    product_id: UUID
    quantity: int = 1
    price: Optional[Decimal] = None
    discount: Optional[Decimal] = None

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Quantity must be at least 1.")
        return v


class PlaceOrderDTO(BaseModel):
    """Immutable DTO for order placement requests.

    Validates:
    - ``items`` must contain at least one item.
    - A product appears at most once.
    """

    model_config = ConfigDict(frozen=True)

    id: Optional[UUID] = None
    instant: Optional[datetime] = None
    customer_id: UUID
    payment: PaymentDTO
    items: List[OrderItemDTO]

    @field_validator("items")
    @classmethod
    def items_must_not_be_empty(cls, v: List[OrderItemDTO]) -> List[OrderItemDTO]:
        if not v:
            raise ValueError("Order must have at least one item.")
        return v

    @model_validator(mode="after")
    def no_duplicate_products(self):
        product_ids = [item.product_id for item in self.items]
        if len(product_ids) != len(set(product_ids)):
            raise ValueError("Duplicate product IDs are not allowed in the same order.")
        return self


# ---------------------------------------------------------------------------
# Output DTOs
# ---------------------------------------------------------------------------


class PaymentOutputDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: str
    state: str
    installments: Optional[int] = None
    due_date: Optional[date] = None
    paid_date: Optional[date] = None

    @classmethod
    def from_entity(cls, payment: Payment) -> PaymentOutputDTO:
        return cls(
            kind=payment.kind,
            state=payment.state,
            installments=payment.installments,
            due_date=payment.due_date,
            paid_date=payment.paid_date,
        )


class OrderItemOutputDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    product_id: UUID
    product_name: str
    quantity: int
    price: Decimal
    discount: Decimal
    subtotal: Decimal

    @classmethod
    def from_entity(cls, item: OrderItem) -> OrderItemOutputDTO:
        return cls(
            product_id=item.product_id,
            product_name=item.product.name,  # type: ignore[attr-defined]
            quantity=item.quantity,
            price=item.price,
            discount=item.discount,
            subtotal=item.subtotal,
        )


class OrderOutputDTO(BaseModel):
    """Immutable DTO for order responses."""

    model_config = ConfigDict(frozen=True)

    id: UUID
    instant: datetime
    customer_id: UUID
    payment: PaymentOutputDTO
    items: List[OrderItemOutputDTO]
    total: Decimal

    @classmethod
    def from_entity(cls, order: Order) -> OrderOutputDTO:
        """Assumes ``payment`` and ``items`` are loaded."""
        items = [OrderItemOutputDTO.from_entity(item) for item in order.items.all()]
        return cls(
            id=order.id,
            instant=order.instant,
            customer_id=order.customer_id,
            payment=PaymentOutputDTO.from_entity(order.payment),
            items=items,
            total=sum((item.subtotal for item in items), Decimal("0.00")),
        )
