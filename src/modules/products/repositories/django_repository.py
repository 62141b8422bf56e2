"""Django ORM implementation of the Product repository."""

from __future__ import annotations

from typing import Sequence
from uuid import UUID

from django.db import models

from modules.core.paging import Page, PageRequest
from modules.core.repositories.django_repository import DjangoRepository
from modules.products.models import Product
from modules.products.repositories.interfaces import IProductRepository


class ProductDjangoRepository(DjangoRepository[Product], IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    model = Product

    def get_queryset(self) -> models.QuerySet:
        return Product.objects.prefetch_related("categories")

    def search(
        self,
        name: str,
        category_ids: Sequence[UUID | str],
        page_request: PageRequest,
    ) -> Page[Product]:
        """The id subquery keeps a product that matches several categories once."""
        ids = Product.objects.filter(
            name__icontains=name,
            categories__id__in=list(category_ids),
        ).values("id")
        return self.find_page(page_request, filters={"id__in": ids})
