"""Tests for pricing app."""
from decimal import Decimal
from io import StringIO

from django.core.exceptions import ValidationError
from django.core.management import CommandError, call_command
from django.test import SimpleTestCase, TestCase

from catalog.models import Accessory, AccessoryInstallation, Furniture, Material
from pricing.choices import ProjectType, resolve_project_type
from pricing.furniture import SelectedMaterials, calculate_furniture_price
from pricing.lookups import (
    ACCESSORY_COSTS,
    INSTALLATIONS,
    MARGINS,
    LookupCache,
    Margins,
    PricingLookups,
    clear_cache,
    default_cache,
)
from pricing.models import MarginConfig
from pricing.serializers import MarginConfigSerializer, PriceBreakdownSerializer


class StubMaterial:
    def __init__(self, name, cost):
        self.name = name
        self.cost = Decimal(cost)


class InMemoryLookups(PricingLookups):
    """Lookups answered from dicts; counts store hits."""

    def __init__(self, margins=None, costs=None, installations=None):
        super().__init__(cache=LookupCache())
        self.margins = margins or {}
        self.costs = costs or {}
        self.installations = installations or {}
        self.calls = []

    def load_margin_config(self, label):
        self.calls.append(("margin", label))
        return self.margins.get(label)

    def load_accessory_cost(self, name):
        self.calls.append(("cost", name))
        return self.costs.get(name)

    def load_installation(self, name):
        self.calls.append(("installation", name))
        return self.installations.get(name, False)


def margins(material="0", accessory="0", overhead="0.1", sale="0.3", project_type="residencial"):
    return Margins(
        project_type=project_type,
        material_margin=Decimal(material),
        accessory_margin=Decimal(accessory),
        fixed_overhead_rate=Decimal(overhead),
        sale_margin=Decimal(sale),
    )


class ProjectTypeTests(SimpleTestCase):
    def test_codes_map_to_labels(self):
        self.assertEqual(resolve_project_type("1"), "residencial")
        self.assertEqual(resolve_project_type(2), "interno")
        self.assertEqual(resolve_project_type("3"), "desarrollo")

    def test_label_passes_through(self):
        self.assertEqual(resolve_project_type("desarrollo"), "desarrollo")

    def test_unknown(self):
        self.assertIsNone(resolve_project_type("9"))
        self.assertIsNone(resolve_project_type(None))


class FurniturePriceBuilderTests(SimpleTestCase):
    """Furniture price builder against in-memory stores."""

    def setUp(self):
        self.lookups = InMemoryLookups(margins={"residencial": margins()})

    def test_single_material_slot(self):
        """2 × 100, no margin, SIF 10%, sale margin 30%."""
        selected = SelectedMaterials(mat_huacal=StubMaterial("Melamina blanca", "100"))
        breakdown = calculate_furniture_price(
            {"mat_huacal": 2}, selected, "1", lookups=self.lookups
        )
        self.assertEqual(breakdown.raw_material_cost, Decimal("200"))
        self.assertEqual(breakdown.fixed_overhead, Decimal("20"))
        self.assertEqual(breakdown.total_cost, Decimal("220"))
        self.assertEqual(breakdown.sale_price, Decimal("314.2857143"))
        self.assertEqual(len(breakdown.materials), 1)
        self.assertEqual(breakdown.materials[0].name, "Melamina blanca")
        self.assertEqual(breakdown.accessories, [])

    def test_material_margin_applied_per_component(self):
        self.lookups.margins["residencial"] = margins(material="0.5", overhead="0", sale="0")
        selected = {
            "mat_huacal": StubMaterial("Huacal", "100"),
            "jaladera": StubMaterial("Jaladera", "20"),
        }
        breakdown = calculate_furniture_price(
            {"mat_huacal": 1, "jaladera": 3}, selected, "residencial", lookups=self.lookups
        )
        # (100 + 60) × 1.5
        self.assertEqual(breakdown.raw_material_cost, Decimal("240"))
        self.assertEqual(breakdown.sale_price, Decimal("240"))

    def test_slot_without_material_or_quantity_is_skipped(self):
        selected = SelectedMaterials(
            mat_huacal=StubMaterial("Huacal", "100"),
            corredera=StubMaterial("Corredera", "50"),
        )
        furniture = {"mat_huacal": 1, "mat_vista": 4, "corredera": 0, "bisagras": None}
        breakdown = calculate_furniture_price(furniture, selected, "1", lookups=self.lookups)
        self.assertEqual([m.slot for m in breakdown.materials], ["mat_huacal"])
        self.assertEqual(breakdown.raw_material_cost, Decimal("100"))

    def test_accessory_without_installation_has_no_overhead(self):
        self.lookups.costs["patas"] = Decimal("10")
        breakdown = calculate_furniture_price({"patas": 4}, None, "1", lookups=self.lookups)
        accessory = breakdown.accessories[0]
        self.assertFalse(accessory.requires_installation)
        self.assertEqual(accessory.total_cost, Decimal("40"))
        self.assertEqual(accessory.fixed_overhead, Decimal("0"))
        self.assertEqual(breakdown.accessory_cost, Decimal("40"))
        self.assertEqual(breakdown.fixed_overhead, Decimal("0"))

    def test_accessory_with_installation_carries_overhead(self):
        self.lookups.costs["mensulas"] = Decimal("5")
        self.lookups.installations["mensulas"] = True
        breakdown = calculate_furniture_price({"mensulas": 8}, None, "1", lookups=self.lookups)
        accessory = breakdown.accessories[0]
        self.assertTrue(accessory.requires_installation)
        self.assertEqual(accessory.total_cost, Decimal("40"))
        self.assertEqual(accessory.fixed_overhead, Decimal("4"))
        self.assertEqual(breakdown.accessory_cost, Decimal("44"))
        self.assertEqual(breakdown.accessory_overhead, Decimal("4"))
        # 44 / 0.7
        self.assertEqual(breakdown.sale_price, Decimal("62.85714286"))

    def test_accessory_margin(self):
        self.lookups.margins["residencial"] = margins(accessory="0.2", overhead="0", sale="0")
        self.lookups.costs["kit_tornillo"] = Decimal("30")
        breakdown = calculate_furniture_price({"kit_tornillo": 2}, None, "1", lookups=self.lookups)
        self.assertEqual(breakdown.accessory_cost, Decimal("72"))

    def test_missing_accessory_cost_uses_default_and_warns(self):
        with self.assertLogs("pricing.furniture", level="WARNING") as logs:
            breakdown = calculate_furniture_price({"cif": 1}, None, "1", lookups=self.lookups)
        accessory = breakdown.accessories[0]
        self.assertTrue(accessory.default_cost_used)
        self.assertEqual(accessory.unit_cost, Decimal("100"))
        self.assertIn("cif", logs.output[0])

    def test_zero_catalog_cost_falls_back_to_default(self):
        self.lookups.costs["mensulas"] = Decimal("0")
        with self.assertLogs("pricing.furniture", level="WARNING"):
            breakdown = calculate_furniture_price({"mensulas": 10}, None, "1", lookups=self.lookups)
        self.assertEqual(breakdown.accessories[0].unit_cost, Decimal("0.9"))
        self.assertEqual(breakdown.accessory_cost, Decimal("9.0"))

    def test_materials_and_accessories_combined(self):
        self.lookups.costs.update({"patas": Decimal("10"), "kit_tornillo": Decimal("30")})
        self.lookups.installations["kit_tornillo"] = True
        selected = SelectedMaterials(
            mat_huacal=StubMaterial("Huacal", "850"),
            chap_huacal=StubMaterial("Chapacinta", "4.5"),
        )
        furniture = {"mat_huacal": "1.5", "chap_huacal": 12, "patas": 4, "kit_tornillo": 1}
        breakdown = calculate_furniture_price(furniture, selected, "1", lookups=self.lookups)
        # materials: 1275 + 54 = 1329; SIF 132.9
        self.assertEqual(breakdown.raw_material_cost, Decimal("1329.0"))
        self.assertEqual(breakdown.fixed_overhead, Decimal("132.90"))
        # accessories: 40 + 30 + 3 (SIF on kit)
        self.assertEqual(breakdown.accessory_cost, Decimal("73"))
        self.assertEqual(breakdown.total_cost, Decimal("1534.90"))
        self.assertEqual(breakdown.sale_price, Decimal("2192.714286"))

    def test_unknown_project_type_cannot_be_priced(self):
        with self.assertLogs("pricing", level="ERROR"):
            breakdown = calculate_furniture_price({"patas": 1}, None, "9", lookups=self.lookups)
        self.assertIsNone(breakdown)

    def test_missing_margin_configuration_cannot_be_priced(self):
        with self.assertLogs("pricing.furniture", level="ERROR"):
            breakdown = calculate_furniture_price({"patas": 1}, None, "3", lookups=self.lookups)
        self.assertIsNone(breakdown)
        self.assertNotIn(("cost", "patas"), self.lookups.calls)

    def test_sale_margin_of_one_cannot_be_priced(self):
        self.lookups.margins["residencial"] = margins(sale="1")
        with self.assertLogs("pricing.furniture", level="ERROR"):
            breakdown = calculate_furniture_price({"patas": 1}, None, "1", lookups=self.lookups)
        self.assertIsNone(breakdown)

    def test_repeated_calculation_is_identical(self):
        self.lookups.costs["patas"] = Decimal("10")
        selected = SelectedMaterials(mat_vista=StubMaterial("Vista", "333.33"))
        furniture = {"mat_vista": 3, "patas": 4}
        first = calculate_furniture_price(furniture, selected, "1", lookups=self.lookups)
        second = calculate_furniture_price(furniture, selected, "1", lookups=self.lookups)
        self.assertEqual(first, second)
        self.assertEqual(str(first.sale_price), str(second.sale_price))

    def test_lookups_are_memoised(self):
        self.lookups.costs["patas"] = Decimal("10")
        calculate_furniture_price({"patas": 1}, None, "1", lookups=self.lookups)
        calculate_furniture_price({"patas": 2}, None, "1", lookups=self.lookups)
        self.assertEqual(self.lookups.calls.count(("margin", "residencial")), 1)
        self.assertEqual(self.lookups.calls.count(("cost", "patas")), 1)
        self.assertEqual(self.lookups.calls.count(("installation", "patas")), 1)

    def test_breakdown_serializer_rounds_to_cents(self):
        selected = SelectedMaterials(mat_huacal=StubMaterial("Huacal", "100"))
        breakdown = calculate_furniture_price({"mat_huacal": 2}, selected, "1", lookups=self.lookups)
        data = PriceBreakdownSerializer(breakdown).data
        self.assertEqual(data["sale_price"], "314.29")
        self.assertEqual(data["fixed_overhead"], "20.00")
        self.assertEqual(data["materials"][0]["slot"], "mat_huacal")


class LookupCacheTests(SimpleTestCase):
    def test_none_is_not_cached(self):
        cache = LookupCache()
        calls = []

        def loader(key):
            calls.append(key)
            return None

        self.assertIsNone(cache.get_or_load(MARGINS, "residencial", loader))
        self.assertIsNone(cache.get_or_load(MARGINS, "residencial", loader))
        self.assertEqual(len(calls), 2)
        self.assertEqual(len(cache), 0)

    def test_false_is_cached(self):
        cache = LookupCache()
        self.assertFalse(cache.get_or_load(INSTALLATIONS, "patas", lambda key: False))
        self.assertIn((INSTALLATIONS, "patas"), cache)
        self.assertFalse(cache.get_or_load(INSTALLATIONS, "patas", lambda key: True))

    def test_clear(self):
        cache = LookupCache()
        cache.get_or_load(MARGINS, "interno", lambda key: "x")
        cache.clear()
        self.assertEqual(len(cache), 0)


class PricingLookupsTests(TestCase):
    """ORM-backed stores and the process-wide cache."""

    def setUp(self):
        clear_cache()
        self.addCleanup(clear_cache)
        MarginConfig.objects.create(
            project_type=ProjectType.RESIDENCIAL,
            material_margin=Decimal("0"),
            accessory_margin=Decimal("0"),
            fixed_overhead_rate=Decimal("0.1"),
            sale_margin=Decimal("0.3"),
        )
        Accessory.objects.create(name="patas", cost=Decimal("12.50"))
        AccessoryInstallation.objects.create(name="mensulas", requires_installation=True)

    def test_margin_config_from_store(self):
        config = PricingLookups().margin_config("1")
        self.assertEqual(config.project_type, "residencial")
        self.assertEqual(config.sale_margin, Decimal("0.3"))

    def test_margin_config_cached_until_cleared(self):
        lookups = PricingLookups()
        lookups.margin_config("1")
        MarginConfig.objects.filter(project_type="residencial").update(sale_margin=Decimal("0.5"))
        with self.assertNumQueries(0):
            self.assertEqual(lookups.margin_config("1").sale_margin, Decimal("0.3"))
        clear_cache()
        self.assertEqual(lookups.margin_config("1").sale_margin, Decimal("0.5"))

    def test_missing_margin_config(self):
        self.assertIsNone(PricingLookups().margin_config("3"))
        self.assertNotIn((MARGINS, "desarrollo"), default_cache)

    def test_accessory_cost(self):
        lookups = PricingLookups()
        self.assertEqual(lookups.accessory_cost("patas"), Decimal("12.50"))

    def test_missing_accessory_cost_is_zero_and_cached(self):
        lookups = PricingLookups()
        self.assertEqual(lookups.accessory_cost("cif"), Decimal("0"))
        self.assertIn((ACCESSORY_COSTS, "cif"), default_cache)
        with self.assertNumQueries(0):
            self.assertEqual(lookups.accessory_cost("cif"), Decimal("0"))

    def test_uncatalogued_accessory_prices_at_default_without_requery(self):
        furniture = {"cif": 1}
        with self.assertLogs("pricing.furniture", level="WARNING"):
            calculate_furniture_price(furniture, None, "1")
        with self.assertNumQueries(0), self.assertLogs("pricing.furniture", level="WARNING"):
            breakdown = calculate_furniture_price(furniture, None, "1")
        self.assertEqual(breakdown.accessories[0].unit_cost, Decimal("100"))
        self.assertTrue(breakdown.accessories[0].default_cost_used)

    def test_unknown_installation_defaults_to_false_and_is_cached(self):
        lookups = PricingLookups()
        self.assertTrue(lookups.requires_installation("mensulas"))
        self.assertFalse(lookups.requires_installation("patas"))
        with self.assertNumQueries(0):
            self.assertFalse(lookups.requires_installation("patas"))

    def test_injected_cache_is_isolated(self):
        cache = LookupCache()
        PricingLookups(cache=cache).margin_config("1")
        self.assertIn((MARGINS, "residencial"), cache)
        self.assertNotIn((MARGINS, "residencial"), default_cache)

    def test_calculate_with_database_rows(self):
        huacal = Material.objects.create(name="Melamina 16mm", cost=Decimal("100"))
        furniture = Furniture.objects.create(
            description="Alacena 60cm", mat_huacal=Decimal("2"), patas=Decimal("4"), mensulas=Decimal("2")
        )
        selected = SelectedMaterials.from_ids(mat_huacal=huacal.pk, mat_vista=None)
        with self.assertLogs("pricing.furniture", level="WARNING"):
            breakdown = calculate_furniture_price(furniture, selected, ProjectType.RESIDENCIAL)
        # materials 200 + SIF 20; patas 50; mensulas default 0.9 × 2 = 1.8 + SIF 0.18
        self.assertEqual(breakdown.raw_material_cost, Decimal("200"))
        self.assertEqual(breakdown.accessory_cost, Decimal("51.98"))
        self.assertEqual(breakdown.total_cost, Decimal("271.98"))
        self.assertEqual(breakdown.sale_price, Decimal("388.5428571"))


class SelectedMaterialsTests(TestCase):
    def test_from_ids(self):
        vista = Material.objects.create(name="Nogal", cost=Decimal("1200"))
        selected = SelectedMaterials.from_ids(mat_vista=vista.pk, jaladera=999999)
        self.assertEqual(selected.mat_vista, vista)
        self.assertIsNone(selected.jaladera)
        self.assertIsNone(selected.mat_huacal)

    def test_unknown_slot(self):
        with self.assertRaises(ValueError):
            SelectedMaterials.from_ids(patas=1)


class MarginConfigTests(TestCase):
    def test_sale_margin_must_be_below_one(self):
        config = MarginConfig(project_type=ProjectType.INTERNO, sale_margin=Decimal("1"))
        with self.assertRaises(ValidationError):
            config.full_clean()

    def test_serializer_rejects_sale_margin_of_one(self):
        serializer = MarginConfigSerializer(
            data={
                "project_type": "interno",
                "material_margin": "0",
                "accessory_margin": "0",
                "fixed_overhead_rate": "0.1",
                "sale_margin": "1",
            }
        )
        self.assertFalse(serializer.is_valid())
        self.assertIn("sale_margin", serializer.errors)

    def test_serializer_accepts_valid_rates(self):
        serializer = MarginConfigSerializer(
            data={
                "project_type": "interno",
                "material_margin": "0",
                "accessory_margin": "0.05",
                "fixed_overhead_rate": "0.1",
                "sale_margin": "0.25",
            }
        )
        self.assertTrue(serializer.is_valid(), serializer.errors)


class SeedPricingDefaultsTests(TestCase):
    RATES = [
        "--material-margin", "0.05",
        "--accessory-margin", "0.1",
        "--fixed-overhead-rate", "0.2",
        "--sale-margin", "0.3",
    ]

    def test_seed_from_arguments_is_idempotent(self):
        out = StringIO()
        args = ["1", *self.RATES, "--requires-installation", "mensulas"]
        call_command("seed_pricing_defaults", *args, stdout=out)
        call_command("seed_pricing_defaults", *args, stdout=out)
        config = MarginConfig.objects.get()
        self.assertEqual(config.project_type, ProjectType.RESIDENCIAL)
        self.assertEqual(config.fixed_overhead_rate, Decimal("0.2"))
        self.assertEqual(config.sale_margin, Decimal("0.3"))
        self.assertTrue(AccessoryInstallation.objects.get(name="mensulas").requires_installation)
        self.assertIn("2 rows created", out.getvalue())
        self.assertIn("0 rows created", out.getvalue())

    def test_accessory_costs_stay_out_of_the_catalog(self):
        call_command("seed_pricing_defaults", "interno", *self.RATES, stdout=StringIO())
        self.assertFalse(Accessory.objects.exists())

    def test_sale_margin_of_one_is_rejected(self):
        rates = self.RATES[:-1] + ["1"]
        with self.assertRaises(CommandError):
            call_command("seed_pricing_defaults", "3", *rates, stdout=StringIO())
        self.assertFalse(MarginConfig.objects.exists())

    def test_unknown_project_type(self):
        with self.assertRaises(CommandError):
            call_command("seed_pricing_defaults", "9", *self.RATES, stdout=StringIO())
