"""
Quotation models: Quotation (header addressed to a client) and QuotationItem
(line items). Money columns hold values rounded to cents; the calculator works
at full precision and quotes.services rounds on persist.
"""
from decimal import Decimal

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _

from catalog.models import Furniture, Product
from clients.models import Client
from common.models import TimeStampedModel
from pricing.choices import ProjectType

from .choices import QuotationStatus


def _money_field(label, help_text=""):
    return models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal("0"),
        verbose_name=label,
        help_text=help_text,
    )


class Quotation(TimeStampedModel):
    """Quotation (cotización) for a carpentry project."""

    client = models.ForeignKey(
        Client,
        on_delete=models.PROTECT,
        related_name="quotations",
        verbose_name=_("client"),
        help_text=_("Client this quotation is addressed to."),
    )
    number = models.CharField(
        max_length=30,
        unique=True,
        verbose_name=_("number"),
        help_text=_("Quotation number, e.g. COT-202610-001."),
    )
    project_code = models.CharField(
        max_length=40,
        blank=True,
        default="",
        db_index=True,
        verbose_name=_("project code"),
        help_text=_("Project code, e.g. RE-610-001."),
    )
    project_type = models.CharField(
        max_length=20,
        choices=ProjectType.choices,
        default=ProjectType.RESIDENCIAL,
        verbose_name=_("project type"),
        help_text=_("Selects the margin configuration used to price furniture."),
    )
    project_name = models.CharField(
        max_length=255,
        blank=True,
        default="",
        verbose_name=_("project name"),
    )
    title = models.CharField(
        max_length=255,
        verbose_name=_("title"),
    )
    description = models.TextField(blank=True, default="", verbose_name=_("description"))
    status = models.CharField(
        max_length=20,
        choices=QuotationStatus.choices,
        default=QuotationStatus.DRAFT,
        verbose_name=_("status"),
    )
    tax_rate = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal("16"),
        validators=[MinValueValidator(Decimal("0"))],
        verbose_name=_("tax rate"),
        help_text=_("Tax rate as a percentage (IVA)."),
    )
    subtotal = _money_field(_("subtotal"))
    taxes = _money_field(_("taxes"))
    total = _money_field(_("total"))
    anticipo = _money_field(_("advance payment"), _("Amount required to start the project."))
    liquidacion = _money_field(_("balance"), _("Amount due on delivery."))
    valid_until = models.DateField(null=True, blank=True, verbose_name=_("valid until"))
    delivery_time = models.CharField(max_length=255, blank=True, default="", verbose_name=_("delivery time"))
    payment_terms = models.CharField(max_length=255, blank=True, default="", verbose_name=_("payment terms"))
    terms = models.TextField(blank=True, default="", verbose_name=_("terms"))
    notes = models.TextField(blank=True, default="", verbose_name=_("notes"))
    pricing_locked_at = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name=_("pricing locked at"),
        help_text=_("When totals were last persisted."),
    )

    class Meta:
        ordering = ["-created_at"]
        verbose_name = _("quotation")
        verbose_name_plural = _("quotations")

    def __str__(self):
        return f"{self.number} - {self.title}"


class QuotationItem(TimeStampedModel):
    """Line item of a quotation."""

    quotation = models.ForeignKey(
        Quotation,
        on_delete=models.CASCADE,
        related_name="items",
        verbose_name=_("quotation"),
    )
    product = models.ForeignKey(
        Product,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="quotation_items",
        verbose_name=_("product"),
    )
    furniture = models.ForeignKey(
        Furniture,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="quotation_items",
        verbose_name=_("furniture"),
        help_text=_("Bill of materials this line was priced from, if any."),
    )
    area = models.CharField(
        max_length=100,
        blank=True,
        default="",
        verbose_name=_("area"),
        help_text=_("Area of the house, e.g. cocina, closet."),
    )
    description = models.CharField(max_length=500, verbose_name=_("description"))
    quantity = models.DecimalField(
        max_digits=10,
        decimal_places=3,
        default=Decimal("1"),
        verbose_name=_("quantity"),
    )
    unit_price = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal("0"),
        verbose_name=_("unit price"),
    )
    discount = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal("0"),
        validators=[MinValueValidator(Decimal("0")), MaxValueValidator(Decimal("100"))],
        verbose_name=_("discount"),
        help_text=_("Discount as a percentage of the line amount."),
    )
    subtotal = _money_field(_("subtotal"))
    notes = models.TextField(blank=True, default="", verbose_name=_("notes"))
    position = models.PositiveIntegerField(default=0, verbose_name=_("position"))
    drawers = models.PositiveIntegerField(default=0, verbose_name=_("drawers"))
    doors = models.PositiveIntegerField(default=0, verbose_name=_("doors"))
    shelves = models.PositiveIntegerField(default=0, verbose_name=_("shelves"))

    class Meta:
        ordering = ["position", "id"]
        verbose_name = _("quotation item")
        verbose_name_plural = _("quotation items")

    def __str__(self):
        return f"{self.description} x {self.quantity}"
