"""Product service layer (Product Lookup).

Resolves products for order placement and pages the catalog search.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence
from uuid import UUID

import structlog

from modules.products.exceptions import ProductNotFound

if TYPE_CHECKING:
    from modules.core.paging import Page, PageRequest
    from modules.products.models import Product
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductService:
    """Application service for Product look-ups.

    Receives an ``IProductRepository`` via constructor injection (DIP).
    """

    def __init__(self, repository: IProductRepository) -> None:
        self._repo = repository

    def find(self, id: UUID | str) -> Product:
        """Retrieve a single product with its current catalog price.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")
        return product

    def search(
        self,
        name: str,
        category_ids: Sequence[UUID | str],
        page_request: PageRequest,
    ) -> Page[Product]:
        page = self._repo.search(name, category_ids, page_request)
        logger.info(
            "product.searched",
            name=name,
            category_count=len(category_ids),
            total=page.total_elements,
        )
        return page
