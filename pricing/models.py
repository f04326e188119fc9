from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _

from common.models import TimeStampedModel

from .choices import ProjectType


def _rate_field(label, help_text):
    return models.DecimalField(
        max_digits=6,
        decimal_places=4,
        default=Decimal("0"),
        validators=[MinValueValidator(Decimal("0")), MaxValueValidator(Decimal("1"))],
        verbose_name=label,
        help_text=help_text,
    )


class MarginConfig(TimeStampedModel):
    """
    Margin configuration per project type.
    All four rates are fractions (0.30 = 30%).
    sale_price = (material cost + gastos fijos + accessory cost) / (1 - sale_margin)
    """

    project_type = models.CharField(
        max_length=20,
        choices=ProjectType.choices,
        unique=True,
        verbose_name=_("project type"),
        help_text=_("Project type these margins apply to."),
    )
    material_margin = _rate_field(
        _("material margin"),
        _("Markup applied to raw-material cost (margen MP)."),
    )
    accessory_margin = _rate_field(
        _("accessory margin"),
        _("Markup applied to accessory cost."),
    )
    fixed_overhead_rate = _rate_field(
        _("fixed overhead rate"),
        _("Gastos fijos (SIF) applied to material cost and to installed accessories."),
    )
    sale_margin = _rate_field(
        _("sale margin"),
        _("Margen de venta; total cost is divided by (1 - sale margin)."),
    )

    class Meta:
        ordering = ["project_type"]
        verbose_name = _("margin configuration")
        verbose_name_plural = _("margin configurations")

    def __str__(self):
        return f"{self.get_project_type_display()} (venta {self.sale_margin})"

    def clean(self):
        super().clean()
        if self.sale_margin is not None and self.sale_margin >= 1:
            raise ValidationError({"sale_margin": _("Sale margin must be lower than 1.")})
