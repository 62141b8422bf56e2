"""Order service layer (Use Cases).

Orchestrates order placement and retrieval.  Placement is a one-shot
pipeline inside a single ``transaction.atomic`` block: any failure
aborts the call and rolls back every write made so far.

Rules enforced:
- The placement instant is stamped here; caller-supplied ids and
  instants are ignored.
- The customer is resolved through the Customer Directory, so the same
  owner-or-admin authorization applies.
- Payments start PENDING; billed payments get a due date anchored on the
  placement instant.
- Item prices come from the product catalog and discounts are reset to
  zero, whatever the caller sent.
- The confirmation email is scheduled after commit; a delivery failure
  never rolls the order back.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from decimal import Decimal
from functools import partial
from typing import TYPE_CHECKING, Optional
from uuid import UUID

import structlog
from django.conf import settings
from django.db import transaction
from django.utils import timezone

from modules.core.security import require_authenticated
from modules.orders.constants import DEFAULT_BILLED_PAYMENT_DUE_DAYS, PaymentKind, PaymentState
from modules.orders.exceptions import OrderNotFound
from modules.orders.models import Order, OrderItem, Payment

if TYPE_CHECKING:
    from modules.core.paging import Page, PageRequest
    from modules.core.security import Principal
    from modules.customers.services import CustomerService
    from modules.notifications.services import EmailService
    from modules.orders.dtos import OrderItemDTO, PlaceOrderDTO
    from modules.orders.repositories.interfaces import (
        IOrderItemRepository,
        IOrderRepository,
        IPaymentRepository,
    )
    from modules.products.services import ProductService

logger = structlog.get_logger(__name__)


class BilledPaymentService:
    """Payment preparation for billing slips (boleto)."""

    def __init__(self, due_days: Optional[int] = None) -> None:
        if due_days is None:
            due_days = getattr(
                settings, "BILLED_PAYMENT_DUE_DAYS", DEFAULT_BILLED_PAYMENT_DUE_DAYS
            )
        self._due_days = due_days

    def fill_billed_payment(self, payment: Payment, reference_instant: datetime) -> None:
        """Set the due date *due_days* after *reference_instant*."""
        payment.due_date = timezone.localtime(reference_instant).date() + timedelta(
            days=self._due_days
        )


class OrderService:
    """Application service for Order use-cases.

    Receives repositories and collaborating services via constructor
    injection (DIP).
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        payment_repository: IPaymentRepository,
        item_repository: IOrderItemRepository,
        customer_service: CustomerService,
        product_service: ProductService,
        billed_payment_service: BilledPaymentService,
        email_service: EmailService,
    ) -> None:
        self._order_repo = order_repository
        self._payment_repo = payment_repository
        self._item_repo = item_repository
        self._customer_service = customer_service
        self._product_service = product_service
        self._billed_payment_service = billed_payment_service
        self._email_service = email_service

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def find(self, id: UUID | str) -> Order:
        """Retrieve a single order by ID.

        Raises:
            OrderNotFound: if the order does not exist.
        """
        order = self._order_repo.get_by_id(id)
        if not order:
            raise OrderNotFound(f"Order {id} not found.")
        return order

    def find_page(
        self, page_request: PageRequest, caller: Optional[Principal]
    ) -> Page[Order]:
        """Page the caller's own orders.

        There is no administrator override: an ADMIN sees its own
        history here too.

        Raises:
            Unauthorized: no caller (checked before the store is queried).
        """
        caller = require_authenticated(caller)
        customer = self._customer_service.find(caller.id, caller)
        return self._order_repo.find_by_customer(customer, page_request)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def insert(self, dto: PlaceOrderDTO, caller: Optional[Principal]) -> Order:
        """Place an order.

        Steps:
        1. Stamp the placement instant (caller id / instant ignored).
        2. Resolve the customer (owner-or-admin rule).
        3. Build the payment as PENDING, linked to the order.
        4. Fill the due date of billed payments from the instant.
        5. Persist order, then payment.
        6. Reprice items from the catalog with zero discount.
        7. Persist items as a batch.
        8. Schedule the confirmation email for after commit.

        Raises:
            Unauthorized: caller may not act for ``dto.customer_id``.
            CustomerNotFound: the customer does not exist.
            ProductNotFound: an item references an unknown product.
        """
        log = logger.bind(customer_id=str(dto.customer_id), item_count=len(dto.items))
        log.info("order.placement_started")

        order = Order(instant=timezone.now())
        order.customer = self._customer_service.find(dto.customer_id, caller)

        payment = Payment(
            kind=PaymentKind(dto.payment.kind),
            **dto.payment.variant_fields(),
        )
        payment.state = PaymentState.PENDING
        payment.order = order
        if payment.requires_due_date:
            self._billed_payment_service.fill_billed_payment(payment, order.instant)

        order = self._order_repo.save(order)
        self._payment_repo.save(payment)

        items = [self._build_item(order, item_dto) for item_dto in dto.items]
        self._item_repo.save_all(items)

        log.info(
            "order.placed",
            order_id=str(order.id),
            payment_kind=payment.kind,
            total=str(sum((i.subtotal for i in items), Decimal("0.00"))),
        )
        transaction.on_commit(
            partial(self._email_service.send_order_confirmation_html_email, order),
            robust=True,
        )
        return order

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _build_item(self, order: Order, item_dto: OrderItemDTO) -> OrderItem:
        product = self._product_service.find(item_dto.product_id)
        return OrderItem(
            order=order,
            product=product,
            quantity=item_dto.quantity,
            price=product.price,
            discount=Decimal("0.00"),
        )
