"""Service-layer error taxonomy shared by every module.

Module exceptions (``CustomerNotFound``, ``OrderNotFound``, ...) subclass
these so callers may catch either the precise or the generic condition.
Messages are user-facing: they never carry raw storage-layer detail.
"""

from __future__ import annotations


class Unauthorized(Exception):
    """The caller is absent or lacks permission for the requested identity."""


class NotFound(Exception):
    """The requested entity does not exist."""


class IntegrityConflict(Exception):
    """The store rejected a change because dependent records exist."""


class InvalidPageRequest(ValueError):
    """Paging arguments (page, size, sort field or direction) are invalid."""
