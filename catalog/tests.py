"""Tests for catalog app."""
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.test import TestCase

from catalog.choices import ProductCategory, Unit
from catalog.models import Accessory, AccessoryInstallation, Furniture, Material, Product


class ProductTests(TestCase):
    def test_active_queryset(self):
        Product.objects.create(name="Cubierta granito", base_price=Decimal("4500"), unit=Unit.SQUARE_METER)
        Product.objects.create(name="Instalación", base_price=Decimal("800"), is_active=False)
        self.assertEqual(list(Product.objects.active().values_list("name", flat=True)), ["Cubierta granito"])

    def test_defaults(self):
        product = Product.objects.create(name="Flete")
        self.assertEqual(product.unit, Unit.PIECE)
        self.assertEqual(product.category, ProductCategory.OTROS)
        self.assertEqual(str(product), "Flete")

    def test_negative_base_price_is_invalid(self):
        product = Product(name="Descuento", base_price=Decimal("-1"))
        with self.assertRaises(ValidationError):
            product.full_clean()


class CatalogModelStrTests(TestCase):
    def test_str(self):
        created = Material.objects.create(name="Melamina blanca 16mm", cost=Decimal("850"))
        material = Material.objects.get(pk=created.pk)
        accessory = Accessory.objects.create(name="patas", cost=Decimal("10"))
        installation = AccessoryInstallation.objects.create(name="mensulas", requires_installation=True)
        furniture = Furniture.objects.create(description="Alacena 60cm", furniture="alacena")
        self.assertEqual(str(material), "Melamina blanca 16mm (Tablero)")
        self.assertEqual(str(accessory), "patas")
        self.assertEqual(str(installation), "mensulas (instalación)")
        self.assertEqual(str(furniture), "Alacena 60cm")

    def test_furniture_slots_are_optional(self):
        furniture = Furniture.objects.create(description="Entrepaño", mat_huacal=Decimal("0.5"))
        furniture.refresh_from_db()
        self.assertEqual(furniture.mat_huacal, Decimal("0.500"))
        self.assertIsNone(furniture.patas)
