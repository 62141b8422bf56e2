"""Generic Django ORM implementation of ``IRepository``.

Concrete repositories set ``model`` and may override ``get_queryset`` to
add ``select_related`` / ``prefetch_related`` for their aggregate.
Error handling follows the Null Object pattern for look-ups: methods
return ``None`` instead of raising, the Service Layer decides how to
translate a missing entity.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Type, TypeVar

import structlog
from django.core.exceptions import ValidationError
from django.db import models, transaction

from modules.core.exceptions import InvalidPageRequest
from modules.core.paging import Page, PageRequest
from modules.core.repositories.interfaces import IRepository

logger = structlog.get_logger(__name__)

M = TypeVar("M", bound=models.Model)


class DjangoRepository(IRepository[M]):
    """Shared CRUD + paging on top of a Django model's default manager."""

    model: Type[M]

    def get_queryset(self) -> models.QuerySet:
        return self.model._default_manager.all()

    def get_by_id(self, id: Any) -> Optional[M]:
        """Returns ``None`` for non-existent or invalid IDs (e.g. malformed UUID)."""
        try:
            return self.get_queryset().filter(pk=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[M]:
        queryset = self.get_queryset()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    def save(self, entity: M) -> M:
        is_new = entity._state.adding
        entity.save()
        logger.info(
            f"{self._label}.saved",
            id=str(entity.pk),
            is_new=is_new,
        )
        return entity

    @transaction.atomic
    def save_all(self, entities: Iterable[M]) -> List[M]:
        saved = [self.save(entity) for entity in entities]
        logger.info(f"{self._label}.saved_all", count=len(saved))
        return saved

    def delete(self, id: Any) -> bool:
        entity = self.get_by_id(id)
        if entity is None:
            return False
        entity.delete()
        logger.info(f"{self._label}.deleted", id=str(id))
        return True

    def find_page(
        self, page_request: PageRequest, filters: Optional[Dict[str, Any]] = None
    ) -> Page[M]:
        self._check_sort_field(page_request.order_by)
        queryset = self.get_queryset()
        if filters:
            queryset = queryset.filter(**filters)
        queryset = queryset.order_by(page_request.ordering, "pk")

        total = queryset.count()
        start = page_request.offset
        content = list(queryset[start : start + page_request.lines_per_page])
        return Page(
            content=content,
            number=page_request.page,
            size=page_request.lines_per_page,
            total_elements=total,
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @property
    def _label(self) -> str:
        return self.model._meta.model_name

    def _check_sort_field(self, name: str) -> None:
        concrete = {f.name for f in self.model._meta.concrete_fields}
        concrete |= {f.attname for f in self.model._meta.concrete_fields}
        if name not in concrete:
            raise InvalidPageRequest(f"Cannot sort by '{name}'.")
