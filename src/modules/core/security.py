"""Caller context for authorization decisions.

Services never look up an ambient "current user": every operation that
needs authorization receives a ``Principal`` (or ``None`` for an
unauthenticated caller) as an explicit argument.  How the transport layer
authenticates and builds the principal is outside this package.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Iterable, Optional
from uuid import UUID

from modules.core.exceptions import Unauthorized

if TYPE_CHECKING:
    from modules.customers.models import Customer


class Profile(StrEnum):
    """Roles a customer account may hold."""

    ADMIN = "ADMIN"
    CLIENT = "CLIENT"


@dataclass(frozen=True)
class Principal:
    """Authenticated caller: the customer id plus its granted profiles."""

    id: UUID | str
    email: str = ""
    profiles: frozenset[Profile] = field(default_factory=frozenset)

    @classmethod
    def of(cls, id: UUID | str, *profiles: str, email: str = "") -> Principal:
        return cls(id=id, email=email, profiles=frozenset(Profile(p) for p in profiles))

    @classmethod
    def for_customer(cls, customer: Customer) -> Principal:
        """Build the principal a customer authenticates as."""
        return cls.of(customer.id, *customer.profiles, email=customer.email)

    def has_role(self, profile: Profile) -> bool:
        return profile in self.profiles

    @property
    def is_admin(self) -> bool:
        return self.has_role(Profile.ADMIN)

    def owns(self, id: UUID | str) -> bool:
        """``True`` when *id* identifies the caller itself."""
        try:
            return UUID(str(self.id)) == UUID(str(id))
        except ValueError:
            return False

    def __str__(self) -> str:
        roles = ",".join(sorted(self.profiles))
        return f"{self.id} [{roles}]"


def require_authenticated(caller: Optional[Principal]) -> Principal:
    """Return *caller* or raise ``Unauthorized`` when nobody is logged in."""
    if caller is None:
        raise Unauthorized("Access denied.")
    return caller


def require_admin(caller: Optional[Principal]) -> Principal:
    """Return *caller* when it holds the ADMIN profile."""
    caller = require_authenticated(caller)
    if not caller.is_admin:
        raise Unauthorized("Access denied.")
    return caller


def require_owner_or_admin(caller: Optional[Principal], id: UUID | str) -> Principal:
    """Allow administrators, or the subject whose *id* was requested."""
    caller = require_authenticated(caller)
    if not caller.is_admin and not caller.owns(id):
        raise Unauthorized("Access denied.")
    return caller


def normalize_profiles(profiles: Iterable[str]) -> list[str]:
    """Deduplicate and validate stored profile names, CLIENT always present."""
    normalized = {Profile(p) for p in profiles} | {Profile.CLIENT}
    return sorted(str(p) for p in normalized)
