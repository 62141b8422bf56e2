from __future__ import annotations

from decimal import Decimal

import pytest

from modules.core.security import Principal, Profile
from modules.customers.models import Address, City, Customer, CustomerType, State
from modules.products.models import Category, Product

VALID_CPF = "39053344705"
OTHER_CPF = "52998224725"
VALID_CNPJ = "11222333000181"


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture()
def city():
    state = State.objects.create(name="Minas Gerais")
    return City.objects.create(name="Uberlândia", state=state)


@pytest.fixture()
def customer(city):
    customer = Customer.objects.create(
        name="Maria Silva",
        email="maria@example.com",
        document=VALID_CPF,
        customer_type=CustomerType.INDIVIDUAL,
        phones=["27363323"],
    )
    Address.objects.create(
        street="Rua Flores",
        number="300",
        postal_code="38220834",
        customer=customer,
        city=city,
    )
    return customer


@pytest.fixture()
def admin_customer():
    return Customer.objects.create(
        name="Ana Costa",
        email="ana@example.com",
        document=OTHER_CPF,
        customer_type=CustomerType.INDIVIDUAL,
        profiles=[Profile.ADMIN.value],
    )


@pytest.fixture()
def owner(customer):
    return Principal.for_customer(customer)


@pytest.fixture()
def admin(admin_customer):
    return Principal.for_customer(admin_customer)


@pytest.fixture()
def products():
    computing = Category.objects.create(name="Informática")
    office = Category.objects.create(name="Escritório")
    computer = Product.objects.create(name="Computador", price=Decimal("2000.00"))
    printer = Product.objects.create(name="Impressora", price=Decimal("800.00"))
    mouse = Product.objects.create(name="Mouse", price=Decimal("80.00"))
    computer.categories.set([computing])
    printer.categories.set([computing, office])
    mouse.categories.set([computing])
    return {"computer": computer, "printer": printer, "mouse": mouse}
