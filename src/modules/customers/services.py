"""Customer service layer (Customer Directory use cases).

Orchestrates business logic for the Customer aggregate, delegating
persistence to the injected repositories.

Rules enforced here:
- Only the customer itself or an ADMIN may read, update or delete it.
- Listing customers is restricted to ADMIN callers.
- Updates touch name and email only; tax id, phones and addresses are
  immutable through this path.
- Deleting a customer that still has orders fails with
  ``CustomerHasDependents`` instead of a raw storage error.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, List, Optional, Tuple
from uuid import UUID

import structlog
from django.contrib.auth.hashers import make_password
from django.db import IntegrityError, transaction

from modules.core.security import Profile, require_admin, require_owner_or_admin
from modules.customers.exceptions import (
    CustomerConflict,
    CustomerHasDependents,
    CustomerNotFound,
)
from modules.customers.models import Address, Customer, CustomerType

if TYPE_CHECKING:
    from modules.core.paging import Page, PageRequest
    from modules.core.security import Principal
    from modules.customers.dtos import CustomerDTO, NewCustomerDTO
    from modules.customers.repositories.interfaces import (
        IAddressRepository,
        ICustomerRepository,
    )

logger = structlog.get_logger(__name__)


class CustomerService:
    """Application service for Customer use-cases.

    Receives repositories via constructor injection (DIP).
    """

    def __init__(
        self,
        repository: ICustomerRepository,
        address_repository: IAddressRepository,
    ) -> None:
        self._repo = repository
        self._address_repo = address_repository

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def find(self, id: UUID | str, caller: Optional[Principal]) -> Customer:
        """Retrieve a customer the caller is allowed to see.

        Raises:
            Unauthorized: no caller, or caller is neither ADMIN nor *id*.
            CustomerNotFound: the customer does not exist.
        """
        logger.info("customer.find", caller=str(caller), customer_id=str(id))
        require_owner_or_admin(caller, id)

        customer = self._repo.get_by_id(id)
        if not customer:
            raise CustomerNotFound(f"Customer {id} not found.")
        return customer

    def find_all(self, caller: Optional[Principal]) -> List[Customer]:
        require_admin(caller)
        return self._repo.list()

    def find_page(
        self, page_request: PageRequest, caller: Optional[Principal]
    ) -> Page[Customer]:
        """Return one page of all customers (ADMIN only).

        Raises:
            Unauthorized: checked before the store is queried.
            InvalidPageRequest: unknown sort field.
        """
        require_admin(caller)
        return self._repo.find_page(page_request)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def insert(self, customer: Customer, addresses: Iterable[Address] = ()) -> Customer:
        """Persist a new customer, then its addresses.

        Any identity supplied by the caller is discarded; the store
        assigns a fresh one.

        Raises:
            CustomerConflict: e-mail or document already registered, or
                an address references an unknown city.
        """
        customer.discard_identity()
        pending = list(addresses)
        try:
            with transaction.atomic():
                customer = self._repo.save(customer)
                for address in pending:
                    address.discard_identity()
                    address.customer = customer
                self._address_repo.save_all(pending)
        except IntegrityError as exc:
            logger.warning("customer.create_rejected", error_type=type(exc).__name__)
            raise CustomerConflict(
                "Customer conflicts with existing records."
            ) from exc

        logger.info(
            "customer.created",
            customer_id=str(customer.id),
            address_count=len(pending),
        )
        return customer

    def register(self, dto: NewCustomerDTO) -> Customer:
        customer, addresses = self.from_new_dto(dto)
        return self.insert(customer, addresses)

    def update(
        self, id: UUID | str, dto: CustomerDTO, caller: Optional[Principal]
    ) -> Customer:
        """Copy name and email from *dto* onto the stored customer.

        Raises:
            Unauthorized / CustomerNotFound: same rules as ``find``.
            CustomerConflict: the new e-mail belongs to another customer.
        """
        customer = self.find(id, caller)
        self._update_data(customer, self.from_dto(dto))
        try:
            with transaction.atomic():
                customer = self._repo.save(customer)
        except IntegrityError as exc:
            logger.warning("customer.update_rejected", customer_id=str(id))
            raise CustomerConflict(
                "Customer conflicts with existing records."
            ) from exc
        logger.info("customer.updated", customer_id=str(customer.id))
        return customer

    def delete(self, id: UUID | str, caller: Optional[Principal]) -> None:
        """Delete a customer the caller may access.

        Raises:
            Unauthorized / CustomerNotFound: same rules as ``find``.
            CustomerHasDependents: orders still reference the customer.
        """
        self.find(id, caller)
        try:
            with transaction.atomic():
                self._repo.delete(id)
        except IntegrityError as exc:
            logger.warning("customer.delete_blocked", customer_id=str(id))
            raise CustomerHasDependents(
                "Cannot delete customer because related records exist."
            ) from exc
        logger.info("customer.deleted", customer_id=str(id))

    # ------------------------------------------------------------------
    # DTO mapping
    # ------------------------------------------------------------------

    @staticmethod
    def from_dto(dto: CustomerDTO) -> Customer:
        """Unsaved customer carrying only the updatable fields."""
        customer = Customer(name=dto.name, email=dto.email)
        if dto.id is not None:
            customer.id = dto.id
        return customer

    @staticmethod
    def from_new_dto(dto: NewCustomerDTO) -> Tuple[Customer, List[Address]]:
        """Build an unsaved customer plus its first address.

        Phones 2 and 3 are kept only when supplied.
        """
        customer = Customer(
            name=dto.name,
            email=dto.email,
            document=dto.document,
            customer_type=CustomerType(dto.customer_type.value),
            password=make_password(dto.password),
            profiles=[Profile.CLIENT.value],
        )
        for phone in dto.phones:
            customer.add_phone(phone)

        address = Address(
            street=dto.street,
            number=dto.number,
            complement=dto.complement,
            district=dto.district,
            postal_code=dto.postal_code,
            customer=customer,
            city_id=dto.city_id,
        )
        return customer, [address]

    @staticmethod
    def _update_data(target: Customer, source: Customer) -> None:
        target.name = source.name
        target.email = source.email
