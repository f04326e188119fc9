"""Shared model bases for the cotizador apps."""
from django.db import models
from django.utils.translation import gettext_lazy as _


class ActiveQuerySet(models.QuerySet):
    """Queryset for catalog records that can be switched off without deleting them."""

    def active(self):
        return self.filter(is_active=True)


class TimeStampedModel(models.Model):
    """Catalog rows, margins, clients and quotations all carry audit timestamps."""

    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name=_("created at"),
        help_text=_("When the row was first saved."),
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        verbose_name=_("updated at"),
        help_text=_("When the row was last saved; bumped when totals are locked."),
    )

    class Meta:
        abstract = True
