"""Customer, Address and location models.

Business rules implemented:
- Email and CPF/CNPJ must be unique in the system.
- ``document`` matches ``customer_type``: individuals carry a CPF,
  businesses a CNPJ (validated with *validate-docbr*).
- ``password`` stores a Django password hash, never the raw value.
- Every customer holds the CLIENT profile; ADMIN is granted explicitly.
- Addresses are removed with their customer; cities are protected.
- Sensitive data (CPF/CNPJ) masked in ``__str__`` and logs.
"""

from __future__ import annotations

import re

import structlog
from validate_docbr import CNPJ, CPF

from django.core.exceptions import ValidationError
from django.db import models

from modules.core.models import BaseModel
from modules.core.security import Profile, normalize_profiles

logger = structlog.get_logger(__name__)


class CustomerType(models.TextChoices):
    INDIVIDUAL = "INDIVIDUAL", "Pessoa Física"
    BUSINESS = "BUSINESS", "Pessoa Jurídica"


def _default_profiles() -> list[str]:
    return [Profile.CLIENT.value]


class State(BaseModel):
    name = models.CharField(max_length=100, unique=True)

    class Meta:
        db_table = "states"
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name


class City(BaseModel):
    name = models.CharField(max_length=100)
    state = models.ForeignKey(
        State,
        on_delete=models.PROTECT,
        related_name="cities",
    )

    class Meta:
        db_table = "cities"
        ordering = ["name"]

    def __str__(self) -> str:
        return f"{self.name}/{self.state}"


class Customer(BaseModel):
    """Customer aggregate root.

    ``document`` stores only digits (sanitised on save).  ``phones`` and
    ``profiles`` are stored as JSON lists and behave as sets.
    """

    name = models.CharField(max_length=255)
    email = models.EmailField(max_length=254, unique=True)
    document = models.CharField(max_length=14, unique=True)
    customer_type = models.CharField(max_length=10, choices=CustomerType.choices)
    password = models.CharField(max_length=128, blank=True, default="")
    phones = models.JSONField(default=list, blank=True)
    profiles = models.JSONField(default=_default_profiles)

    class Meta:
        db_table = "customers"
        ordering = ["name"]
        indexes = [
            models.Index(fields=["-created_at"], name="customers_created_idx"),
        ]

    # ------------------------------------------------------------------
    # Profiles / phones
    # ------------------------------------------------------------------

    def add_profile(self, profile: Profile) -> None:
        self.profiles = normalize_profiles([*self.profiles, profile])

    def has_profile(self, profile: Profile) -> bool:
        return str(profile) in self.profiles

    def add_phone(self, phone: str) -> None:
        if phone not in self.phones:
            self.phones = [*self.phones, phone]

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    @staticmethod
    def _sanitize_document(value: str) -> str:
        """Strip all non-digit characters from a document string."""
        return re.sub(r"\D", "", value)

    def clean(self) -> None:
        super().clean()
        if self.document:
            self.document = self._sanitize_document(self.document)
        self._validate_document()

    def _validate_document(self) -> None:
        if self.customer_type == CustomerType.INDIVIDUAL:
            validator = CPF()
        elif self.customer_type == CustomerType.BUSINESS:
            validator = CNPJ()
        else:
            raise ValidationError({"customer_type": "Invalid customer type."})

        if not validator.validate(self.document):
            logger.warning(
                "customer.invalid_document",
                customer_type=self.customer_type,
                document_suffix=self.document[-4:] if self.document else "",
            )
            raise ValidationError({"document": "Invalid CPF/CNPJ number."})

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, *args, **kwargs) -> None:
        if self.document:
            self.document = self._sanitize_document(self.document)
        self.profiles = normalize_profiles(self.profiles or [])
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        suffix = self.document[-4:] if self.document else "????"
        return f"{self.name} (***{suffix})"


class Address(BaseModel):
    street = models.CharField(max_length=255)
    number = models.CharField(max_length=20)
    complement = models.CharField(max_length=255, blank=True, default="")
    district = models.CharField(max_length=100, blank=True, default="")
    postal_code = models.CharField(max_length=20)
    customer = models.ForeignKey(
        Customer,
        on_delete=models.CASCADE,
        related_name="addresses",
    )
    city = models.ForeignKey(
        City,
        on_delete=models.PROTECT,
        related_name="addresses",
    )

    class Meta:
        db_table = "addresses"
        ordering = ["created_at"]

    def __str__(self) -> str:
        return f"{self.street}, {self.number} - {self.postal_code}"
