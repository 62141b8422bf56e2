"""Customer domain exceptions.

Raised by the Service Layer when business rules are violated.
Callers (transport adapters, other services) catch these and
translate them into their own error responses.
"""

from __future__ import annotations

from modules.core.exceptions import IntegrityConflict, NotFound


class CustomerNotFound(NotFound):
    """The requested customer does not exist."""


class CustomerHasDependents(IntegrityConflict):
    """The customer cannot be deleted because related records exist."""


class CustomerConflict(IntegrityConflict):
    """The store rejected the customer (e.g. e-mail or document already in use)."""
