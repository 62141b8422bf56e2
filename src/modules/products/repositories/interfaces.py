"""Product repository interface.

Extends ``IRepository[Product]`` with the catalog search used by the
product listing.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Sequence
from uuid import UUID

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.core.paging import Page, PageRequest
    from modules.products.models import Product


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product aggregate."""

    @abstractmethod
    def search(
        self,
        name: str,
        category_ids: Sequence[UUID | str],
        page_request: PageRequest,
    ) -> Page[Product]:
        """Page products whose name contains *name* in any of the categories."""
