"""Order domain exceptions.

Customer and product failures raised during order placement come from
their own modules (``CustomerNotFound``, ``ProductNotFound``) and
propagate unchanged.
"""

from __future__ import annotations

from modules.core.exceptions import NotFound


class OrderNotFound(NotFound):
    """The requested order does not exist."""
