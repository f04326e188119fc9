"""Choice enums for quotes app."""

from django.db import models


class QuotationStatus(models.TextChoices):
    DRAFT = "draft", "Borrador"
    SENT = "sent", "Enviada"
    APPROVED = "approved", "Aprobada"
    REJECTED = "rejected", "Rechazada"
    EXPIRED = "expired", "Expirada"
