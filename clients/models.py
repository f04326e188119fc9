"""Client (customer) records that quotations are addressed to."""
from django.db import models
from django.utils.translation import gettext_lazy as _

from common.models import TimeStampedModel


class Client(TimeStampedModel):
    """Customer of the carpentry shop."""

    name = models.CharField(
        max_length=255,
        verbose_name=_("name"),
        help_text=_("Full name or company name of the client."),
    )
    email = models.EmailField(
        blank=True,
        default="",
        verbose_name=_("email"),
        help_text=_("Contact email address."),
    )
    phone = models.CharField(
        max_length=50,
        blank=True,
        default="",
        verbose_name=_("phone"),
        help_text=_("Contact phone number."),
    )
    address = models.TextField(
        blank=True,
        default="",
        verbose_name=_("address"),
        help_text=_("Installation or billing address."),
    )
    rfc = models.CharField(
        max_length=13,
        blank=True,
        default="",
        verbose_name=_("RFC"),
        help_text=_("Mexican tax id (Registro Federal de Contribuyentes)."),
    )
    notes = models.TextField(
        blank=True,
        default="",
        verbose_name=_("notes"),
    )

    class Meta:
        ordering = ["name"]
        verbose_name = _("client")
        verbose_name_plural = _("clients")

    def __str__(self):
        return self.name
