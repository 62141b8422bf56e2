"""Generic repository interface (Dependency Inversion Principle).

Provides ``IRepository[T]``, the base abstract class that all
domain-specific repository interfaces extend.  Service-layer code
depends on this abstraction, never on Django ORM directly.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, Iterable, List, Optional, TypeVar

from modules.core.paging import Page, PageRequest

T = TypeVar("T")


class IRepository(ABC, Generic[T]):
    """Base generic repository contract.

    Type parameter ``T`` represents the domain entity managed by the
    repository (e.g. ``Customer``, ``Order``).
    """

    @abstractmethod
    def get_by_id(self, id: Any) -> Optional[T]:
        """Retrieve an entity by its primary key, ``None`` when absent."""

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[T]:
        """List entities with optional filters."""

    @abstractmethod
    def save(self, entity: T) -> T:
        """Persist (create or update) an entity."""

    @abstractmethod
    def save_all(self, entities: Iterable[T]) -> List[T]:
        """Persist every entity of *entities* in order."""

    @abstractmethod
    def delete(self, id: Any) -> bool:
        """Remove an entity by ID.

        Lets the store's referential-integrity error escape when
        dependent rows still reference the entity.
        """

    @abstractmethod
    def find_page(
        self, page_request: PageRequest, filters: Optional[Dict[str, Any]] = None
    ) -> Page[T]:
        """Return one sorted page of entities."""
