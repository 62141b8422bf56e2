"""Base abstract model for the back-office domain.

Provides ``BaseModel``: UUIDv7 primary key + created_at / updated_at
timestamps.  Every aggregate (customers, catalog, orders) extends it.

Design decisions:
- UUIDv7 keys are time-ordered, so ``-created_at`` and ``-id`` sort alike.
- Identity is assigned on instantiation by ``uuid6.uuid7``; services that
  must discard a caller-supplied identity set ``pk = None`` and the field
  default generates a fresh one on save.
- ``save()`` guard ensures ``updated_at`` is included when ``update_fields``
  is specified (Django skips ``auto_now`` fields otherwise).
"""

from __future__ import annotations

import uuid6
from django.db import models


class BaseModel(models.Model):
    """Abstract base with UUIDv7 PK and timestamp bookkeeping."""

    id = models.UUIDField(
        primary_key=True,
        default=uuid6.uuid7,
        editable=False,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True

    def save(self, *args, **kwargs) -> None:
        """Ensure ``updated_at`` is refreshed even when ``update_fields`` is passed."""
        update_fields = kwargs.get("update_fields")
        if update_fields is not None and "updated_at" not in update_fields:
            kwargs["update_fields"] = list(update_fields) + ["updated_at"]
        super().save(*args, **kwargs)

    def discard_identity(self) -> None:
        """Forget the current primary key so the next save inserts a new row."""
        self.pk = None
        self._state.adding = True
