"""Order domain constants.

Payment state and the payment-kind tag of the payment tagged union.
"""

from django.db import models


class PaymentState(models.TextChoices):
    PENDING = "PENDING", "Pendente"
    PAID = "PAID", "Quitado"


class PaymentKind(models.TextChoices):
    CARD = "CARD", "Cartão"
    BILLED = "BILLED", "Boleto"


# Kinds whose due date is computed when the order is placed.
KINDS_REQUIRING_DUE_DATE: frozenset[str] = frozenset({PaymentKind.BILLED.value})

DEFAULT_BILLED_PAYMENT_DUE_DAYS = 7
