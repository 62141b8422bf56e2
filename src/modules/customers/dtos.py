"""Customer DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
DTOs are immutable (``frozen=True``).

- ``CustomerDTO``: id/name/email, the only fields the update path copies.
- ``NewCustomerDTO``: registration input (customer + first address + phones).
- ``CustomerOutputDTO``: output with masked document.
"""

from __future__ import annotations

import re
from datetime import datetime
from enum import StrEnum
from typing import TYPE_CHECKING, List, Optional, Self
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator
from validate_docbr import CNPJ, CPF

if TYPE_CHECKING:
    from modules.customers.models import Customer


# ---------------------------------------------------------------------------
# Enum (framework-agnostic, not Django TextChoices)
# ---------------------------------------------------------------------------


class CustomerTypeEnum(StrEnum):
    INDIVIDUAL = "INDIVIDUAL"
    BUSINESS = "BUSINESS"


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CustomerDTO(BaseModel):
    """Immutable DTO for customer update requests.

    Only ``name`` and ``email`` are ever copied onto the stored customer.
    """

    model_config = ConfigDict(frozen=True)

    id: Optional[UUID] = None
    name: str = Field(min_length=5, max_length=120)
    email: EmailStr


class NewCustomerDTO(BaseModel):
    """Immutable DTO for customer registration.

    Validates:
    - ``document`` is sanitised (non-digits stripped) and checked as a CPF
      for individuals or a CNPJ for businesses.
    - ``email`` is a well-formed address.
    - ``phone1`` is mandatory; ``phone2`` / ``phone3`` are optional.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=5, max_length=120)
    email: EmailStr
    document: str
    customer_type: CustomerTypeEnum
    password: str = Field(min_length=1)

    street: str = Field(min_length=1)
    number: str = Field(min_length=1)
    complement: str = ""
    district: str = ""
    postal_code: str = Field(min_length=1)

    phone1: str = Field(min_length=1)
    phone2: Optional[str] = None
    phone3: Optional[str] = None

    city_id: UUID

    @field_validator("document", mode="before")
    @classmethod
    def sanitize_document(cls, v: str) -> str:
        """Strip non-digit characters (accept formatted or raw input)."""
        if not isinstance(v, str):
            return v
        return re.sub(r"\D", "", v)

    @model_validator(mode="after")
    def validate_document(self) -> Self:
        if self.customer_type == CustomerTypeEnum.INDIVIDUAL:
            validator, label = CPF(), "CPF"
        else:
            validator, label = CNPJ(), "CNPJ"

        if not validator.validate(self.document):
            raise ValueError(f"Invalid {label} number.")
        return self

    @property
    def phones(self) -> List[str]:
        """Supplied phone numbers, in order, blanks dropped."""
        return [p for p in (self.phone1, self.phone2, self.phone3) if p]


# ---------------------------------------------------------------------------
# Output DTO
# ---------------------------------------------------------------------------


class CustomerOutputDTO(BaseModel):
    """Immutable DTO for customer responses.

    The ``document`` field is **masked** (``***1234``): the full CPF/CNPJ
    never leaves the service layer.
    """

    model_config = ConfigDict(frozen=True)

    id: UUID
    name: str
    email: str
    document: str
    customer_type: str
    phones: List[str]
    profiles: List[str]
    created_at: datetime
    updated_at: datetime

    @staticmethod
    def mask_document(raw_document: str) -> str:
        """Mask a document, showing only the last 4 digits."""
        suffix = raw_document[-4:] if raw_document else "????"
        return f"***{suffix}"

    @classmethod
    def from_entity(cls, customer: Customer) -> CustomerOutputDTO:
        return cls(
            id=customer.id,
            name=customer.name,
            email=customer.email,
            document=cls.mask_document(customer.document),
            customer_type=customer.customer_type,
            phones=sorted(customer.phones),
            profiles=sorted(customer.profiles),
            created_at=customer.created_at,
            updated_at=customer.updated_at,
        )
