from __future__ import annotations

import random
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from config.bootstrap import build_services
from modules.core.security import Principal, Profile
from modules.customers.dtos import CustomerTypeEnum, NewCustomerDTO
from modules.customers.models import City, Customer, State
from modules.notifications.services import MockEmailService
from modules.orders.dtos import BilledPaymentDTO, CardPaymentDTO, OrderItemDTO, PlaceOrderDTO
from modules.products.models import Category, Product


class Command(BaseCommand):
    help = "Seed database with realistic development data."

    def handle(self, *args, **options):
        random.seed(42)
        self.stdout.write("Seeding development data...")

        # Confirmation emails are only logged while seeding
        services = build_services(email_service=MockEmailService())

        cities = self._seed_locations()
        products = self._seed_products()
        customers = self._seed_customers(services, cities)
        orders_created = self._seed_orders(services, customers, products)

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"cities={len(cities)}, "
                f"customers={len(customers)}, "
                f"products={len(products)}, "
                f"orders={orders_created}"
            )
        )

    def _seed_locations(self) -> dict[str, City]:
        self.stdout.write("Creating states and cities...")
        locations = {
            "Minas Gerais": ["Uberlândia"],
            "São Paulo": ["São Paulo", "Campinas"],
        }
        cities: dict[str, City] = {}
        for state_name, city_names in locations.items():
            state, _ = State.objects.get_or_create(name=state_name)
            for city_name in city_names:
                city, _ = City.objects.get_or_create(name=city_name, state=state)
                cities[city_name] = city
        self.stdout.write(self.style.SUCCESS("Creating states and cities... Done!"))
        return cities

    def _seed_products(self) -> list[Product]:
        self.stdout.write("Creating products...")
        catalog = [
            ("Computador", ["Informática"], Decimal("2000.00")),
            ("Impressora", ["Informática", "Escritório"], Decimal("800.00")),
            ("Mouse", ["Informática"], Decimal("80.00")),
            ("Mesa de escritório", ["Escritório"], Decimal("300.00")),
            ("Toalha", ["Cama mesa e banho"], Decimal("50.00")),
            ("Colcha", ["Cama mesa e banho"], Decimal("200.00")),
            ("TV true color", ["Eletrônicos"], Decimal("1200.00")),
            ("Roçadeira", ["Jardinagem"], Decimal("800.00")),
            ("Abajour", ["Decoração"], Decimal("100.00")),
            ("Pendente", ["Decoração"], Decimal("180.00")),
            ("Shampoo", ["Perfumaria"], Decimal("90.00")),
        ]
        products: list[Product] = []
        for name, category_names, price in catalog:
            product, created = Product.objects.get_or_create(
                name=name, defaults={"price": price}
            )
            if created:
                categories = [
                    Category.objects.get_or_create(name=category_name)[0]
                    for category_name in category_names
                ]
                product.categories.set(categories)
            products.append(product)
        self.stdout.write(self.style.SUCCESS("Creating products... Done!"))
        return products

    def _seed_customers(self, services, cities: dict[str, City]) -> list[Customer]:
        self.stdout.write("Creating customers...")
        seed_customers = [
            (
                "Maria Silva",
                "maria@example.com",
                "39053344705",
                CustomerTypeEnum.INDIVIDUAL,
                "Uberlândia",
                ["27363323", "93838393"],
                [],
            ),
            (
                "Ana Costa Admin",
                "ana@example.com",
                "52998224725",
                CustomerTypeEnum.INDIVIDUAL,
                "São Paulo",
                ["93883321"],
                [Profile.ADMIN],
            ),
            (
                "Comercial Lima Ltda",
                "contato@lima.example.com",
                "11222333000181",
                CustomerTypeEnum.BUSINESS,
                "Campinas",
                ["1932324545"],
                [],
            ),
        ]
        customers: list[Customer] = []
        for name, email, document, customer_type, city, phones, extra_profiles in seed_customers:
            existing = Customer.objects.filter(email=email).first()
            if existing is not None:
                customers.append(existing)
                continue

            dto = NewCustomerDTO(
                name=name,
                email=email,
                document=document,
                customer_type=customer_type,
                password="123",
                street="Rua Flores",
                number=str(random.randint(10, 999)),
                complement="Apto 303",
                district="Jardim",
                postal_code="38220834",
                phone1=phones[0],
                phone2=phones[1] if len(phones) > 1 else None,
                city_id=cities[city].id,
            )
            with transaction.atomic():
                customer = services.customers.register(dto)
                for profile in extra_profiles:
                    customer.add_profile(profile)
                if extra_profiles:
                    customer.save(update_fields=["profiles", "updated_at"])
            customers.append(customer)
        self.stdout.write(self.style.SUCCESS("Creating customers... Done!"))
        return customers

    def _seed_orders(self, services, customers: list[Customer], products: list[Product]) -> int:
        self.stdout.write("Creating orders...")
        if not customers or not products:
            self.stdout.write(self.style.WARNING("Skipping orders (no customers/products)."))
            return 0

        orders_created = 0
        for customer in customers:
            if customer.orders.exists():
                continue

            caller = Principal.for_customer(customer)
            for index in range(2):
                payment = (
                    CardPaymentDTO(installments=random.randint(1, 6))
                    if index % 2 == 0
                    else BilledPaymentDTO()
                )
                chosen = random.sample(products, k=random.randint(1, 3))
                dto = PlaceOrderDTO(
                    customer_id=customer.id,
                    payment=payment,
                    items=[
                        OrderItemDTO(product_id=product.id, quantity=random.randint(1, 3))
                        for product in chosen
                    ],
                )
                services.orders.insert(dto, caller)
                orders_created += 1

        self.stdout.write(self.style.SUCCESS("Creating orders... Done!"))
        return orders_created
