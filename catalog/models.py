"""
Catalog models: Product (sellable line items), Material (priced raw material),
Accessory and AccessoryInstallation (hardware catalog), Furniture (bill of
materials of one furniture piece, "insumos").
"""
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _

from common.models import ActiveQuerySet, TimeStampedModel

from .choices import AccessoryCategory, MaterialCategory, ProductCategory, Unit


def _quantity_field(label, help_text):
    return models.DecimalField(
        max_digits=10,
        decimal_places=3,
        null=True,
        blank=True,
        verbose_name=label,
        help_text=help_text,
    )


class Product(TimeStampedModel):
    """Catalog product that can be added to a quotation as a line item."""

    objects = ActiveQuerySet.as_manager()

    name = models.CharField(
        max_length=255,
        verbose_name=_("name"),
        help_text=_("Display name of the product."),
    )
    description = models.TextField(
        blank=True,
        default="",
        verbose_name=_("description"),
    )
    unit = models.CharField(
        max_length=20,
        choices=Unit.choices,
        default=Unit.PIECE,
        verbose_name=_("unit"),
        help_text=_("Unit of measure the base price refers to."),
    )
    base_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0"),
        validators=[MinValueValidator(Decimal("0"))],
        verbose_name=_("base price"),
        help_text=_("Default unit price used when the product is quoted."),
    )
    category = models.CharField(
        max_length=30,
        choices=ProductCategory.choices,
        default=ProductCategory.OTROS,
        verbose_name=_("category"),
    )
    is_active = models.BooleanField(
        default=True,
        verbose_name=_("is active"),
        help_text=_("Whether the product can be quoted."),
    )

    class Meta:
        ordering = ["category", "name"]
        verbose_name = _("product")
        verbose_name_plural = _("products")

    def __str__(self):
        return self.name


class Material(TimeStampedModel):
    """Raw material (board, edge banding, hardware) with its unit cost."""

    name = models.CharField(
        max_length=255,
        verbose_name=_("name"),
        help_text=_("Commercial name of the material."),
    )
    material_type = models.CharField(
        max_length=100,
        blank=True,
        default="",
        verbose_name=_("type"),
        help_text=_("Finish or line, e.g. melamina, MDF."),
    )
    category = models.CharField(
        max_length=30,
        choices=MaterialCategory.choices,
        default=MaterialCategory.TABLERO,
        verbose_name=_("category"),
    )
    cost = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0"))],
        verbose_name=_("cost"),
        help_text=_("Unit cost (per sheet, meter or piece)."),
    )

    class Meta:
        ordering = ["category", "name"]
        verbose_name = _("material")
        verbose_name_plural = _("materials")

    def __str__(self):
        return f"{self.name} ({self.category})"


class Accessory(TimeStampedModel):
    """Accessory priced by name (patas, mensulas, kit_tornillo, cif...)."""

    name = models.CharField(
        max_length=100,
        unique=True,
        verbose_name=_("name"),
        help_text=_("Lookup key used by furniture bills of materials."),
    )
    category = models.CharField(
        max_length=30,
        choices=AccessoryCategory.choices,
        default=AccessoryCategory.HERRAJE,
        verbose_name=_("category"),
    )
    cost = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0"))],
        verbose_name=_("cost"),
        help_text=_("Unit cost of the accessory."),
    )
    comment = models.TextField(
        blank=True,
        default="",
        verbose_name=_("comment"),
    )

    class Meta:
        ordering = ["category", "name"]
        verbose_name = _("accessory")
        verbose_name_plural = _("accessories")

    def __str__(self):
        return self.name


class AccessoryInstallation(models.Model):
    """Whether installing an accessory carries fixed overhead (gastos fijos)."""

    name = models.CharField(
        max_length=100,
        unique=True,
        verbose_name=_("name"),
        help_text=_("Accessory name, same key as Accessory.name."),
    )
    category = models.CharField(
        max_length=30,
        blank=True,
        default="",
        verbose_name=_("category"),
    )
    requires_installation = models.BooleanField(
        default=False,
        verbose_name=_("requires installation"),
        help_text=_("If set, fixed overhead is applied to this accessory."),
    )

    class Meta:
        ordering = ["name"]
        verbose_name = _("accessory installation")
        verbose_name_plural = _("accessory installations")

    def __str__(self):
        flag = "instalación" if self.requires_installation else "sin instalación"
        return f"{self.name} ({flag})"


class Furniture(TimeStampedModel):
    """
    Bill of materials for one furniture piece ("insumo").
    Material slot quantities are priced against the selected materials of a
    quotation; accessory slot quantities against the accessory catalog.
    """

    category = models.CharField(
        max_length=100,
        blank=True,
        default="",
        verbose_name=_("category"),
    )
    description = models.CharField(
        max_length=255,
        verbose_name=_("description"),
    )
    furniture = models.CharField(
        max_length=100,
        blank=True,
        default="",
        verbose_name=_("furniture"),
        help_text=_("Furniture family, e.g. alacena, gabinete, cajonera."),
    )
    furniture_type = models.CharField(
        max_length=50,
        blank=True,
        default="",
        verbose_name=_("furniture type"),
    )
    drawers = models.PositiveIntegerField(default=0, verbose_name=_("drawers"))
    doors = models.PositiveIntegerField(default=0, verbose_name=_("doors"))
    shelves = models.PositiveIntegerField(default=0, verbose_name=_("shelves"))

    # Material slots
    mat_huacal = _quantity_field(_("carcass board"), _("Structural (huacal) board sheets."))
    mat_vista = _quantity_field(_("face board"), _("Visible-face (vista) board sheets."))
    chap_huacal = _quantity_field(_("carcass edge banding"), _("Edge banding for the carcass, meters."))
    chap_vista = _quantity_field(_("face edge banding"), _("Edge banding for visible faces, meters."))
    jaladera = _quantity_field(_("handles"), _("Handles (jaladeras)."))
    corredera = _quantity_field(_("slides"), _("Drawer slides (correderas)."))
    bisagras = _quantity_field(_("hinges"), _("Hinges (bisagras)."))
    u_tl = _quantity_field(_("tip-on units"), _("Long tip-on units / extension trim."))

    # Accessory slots
    patas = _quantity_field(_("legs"), _("Legs (patas)."))
    clip_patas = _quantity_field(_("leg clips"), _("Leg clips."))
    mensulas = _quantity_field(_("brackets"), _("Shelf brackets (ménsulas)."))
    kit_tornillo = _quantity_field(_("screw kits"), _("Screw kits."))
    cif = _quantity_field(_("CIF"), _("Catch-all cost inclusion factor line."))

    class Meta:
        ordering = ["category", "description"]
        verbose_name = _("furniture")
        verbose_name_plural = _("furniture")

    def __str__(self):
        return self.description
