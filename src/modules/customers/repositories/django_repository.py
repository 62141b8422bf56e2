"""Django ORM implementation of the Customer and Address repositories."""

from __future__ import annotations

from typing import Optional

from django.db import models

from modules.core.repositories.django_repository import DjangoRepository
from modules.customers.models import Address, Customer
from modules.customers.repositories.interfaces import (
    IAddressRepository,
    ICustomerRepository,
)


class CustomerDjangoRepository(DjangoRepository[Customer], ICustomerRepository):
    """Concrete Customer repository backed by Django ORM."""

    model = Customer

    def get_queryset(self) -> models.QuerySet:
        return Customer.objects.prefetch_related("addresses__city__state")

    def get_by_email(self, email: str) -> Optional[Customer]:
        return Customer.objects.filter(email=email).first()

    def get_by_document(self, document: str) -> Optional[Customer]:
        return Customer.objects.filter(document=document).first()


class AddressDjangoRepository(DjangoRepository[Address], IAddressRepository):
    """Concrete Address repository backed by Django ORM."""

    model = Address

    def get_queryset(self) -> models.QuerySet:
        return Address.objects.select_related("city__state")
