"""Tests for quotes app."""
from datetime import date
from decimal import Decimal

from django.test import SimpleTestCase, TestCase, override_settings

from catalog.models import Accessory, Furniture, Material
from clients.models import Client
from pricing.choices import ProjectType
from pricing.furniture import SelectedMaterials
from pricing.lookups import LookupCache, PricingLookups
from pricing.models import MarginConfig
from quotes.calculator import (
    QuotationLineInput,
    calculate_item_subtotal,
    calculate_line,
    calculate_quotation_totals,
)
from quotes.choices import QuotationStatus
from quotes.models import Quotation, QuotationItem
from quotes.serializers import (
    QuotationCalculationSerializer,
    QuotationItemSerializer,
    QuotationSerializer,
    QuotationTotalsSerializer,
)
from quotes.services import (
    add_furniture_item,
    calculate_quotation,
    default_valid_until,
    generate_quotation_number,
    next_quotation_number,
    split_payment,
)


def line(quantity, unit_price, discount=0):
    return QuotationLineInput.from_values(quantity, unit_price, discount)


class LineItemCalculatorTests(SimpleTestCase):
    def test_item_subtotal_with_discount(self):
        self.assertEqual(calculate_item_subtotal(2, 500, 10), Decimal("900"))

    def test_item_subtotal_matches_closed_form(self):
        q, p, d = Decimal("3"), Decimal("19.99"), Decimal("15")
        expected = q * p * (1 - d / 100)
        self.assertEqual(calculate_item_subtotal(q, p, d), expected)
        self.assertEqual(calculate_item_subtotal(q, p, d), Decimal("50.9745"))

    def test_full_discount(self):
        self.assertEqual(calculate_item_subtotal(5, "120.50", 100), Decimal("0"))

    def test_float_inputs_have_no_binary_noise(self):
        self.assertEqual(calculate_item_subtotal(0.1, 3, 0), Decimal("0.3"))

    def test_end_to_end_totals(self):
        totals = calculate_quotation_totals(
            [line(1, 1000, 0), line(2, 500, 10), line(1, 250, 0)], 16
        )
        self.assertEqual([l.subtotal for l in totals.lines], [Decimal("1000"), Decimal("900"), Decimal("250")])
        self.assertEqual(totals.subtotal, Decimal("2150"))
        self.assertEqual(totals.taxes, Decimal("344"))
        self.assertEqual(totals.total, Decimal("2494"))

    def test_default_tax_rate_is_sixteen(self):
        totals = calculate_quotation_totals([line(1, 100)])
        self.assertEqual(totals.tax_rate, Decimal("16"))
        self.assertEqual(totals.taxes, Decimal("16"))

    def test_total_is_subtotal_plus_taxes(self):
        totals = calculate_quotation_totals(
            [line("1.5", "333.33", "7.5"), line(7, "12.49", 0), line(1, "0.01", 50)], "16"
        )
        self.assertEqual(totals.total, totals.subtotal + totals.taxes)

    def test_reordering_does_not_change_totals(self):
        lines = [line(1, "99.99", 5), line(3, "45.10", 0), line("2.25", "800", 12)]
        forward = calculate_quotation_totals(lines, 16)
        backward = calculate_quotation_totals(list(reversed(lines)), 16)
        self.assertEqual(forward.subtotal, backward.subtotal)
        self.assertEqual(forward.total, backward.total)
        self.assertEqual(forward.subtotal, sum((l.subtotal for l in forward.lines), Decimal("0")))

    def test_repeated_calculation_is_identical(self):
        lines = [line("2.5", "1234.56", "3.3"), line(1, "0.07", 0)]
        first = calculate_quotation_totals(lines, "16")
        second = calculate_quotation_totals(lines, "16")
        self.assertEqual(first, second)
        self.assertEqual(str(first.total), str(second.total))

    def test_precision_is_ten_significant_digits(self):
        totals = calculate_quotation_totals([line(1, "1000", 0)], "33.3333333333")
        self.assertEqual(totals.taxes, Decimal("333.3333333"))

    def test_accepts_mappings(self):
        calculated = calculate_line({"quantity": "4", "unit_price": "25", "discount": None})
        self.assertEqual(calculated.subtotal, Decimal("100"))

    def test_empty_quotation(self):
        totals = calculate_quotation_totals([], 16)
        self.assertEqual(totals.subtotal, Decimal("0"))
        self.assertEqual(totals.total, Decimal("0"))

    def test_out_of_range_input_is_not_rejected(self):
        self.assertEqual(calculate_item_subtotal(-2, 100, 0), Decimal("-200"))


class PaymentAndNumberingTests(SimpleTestCase):
    def test_split_payment_default_seventy_percent(self):
        anticipo, liquidacion = split_payment(Decimal("45000"))
        self.assertEqual(anticipo, Decimal("31500.00"))
        self.assertEqual(liquidacion, Decimal("13500.00"))

    def test_split_payment_adds_up(self):
        anticipo, liquidacion = split_payment(Decimal("2494.015"), Decimal("0.5"))
        self.assertEqual(anticipo + liquidacion, Decimal("2494.02"))
        self.assertEqual(anticipo, Decimal("1247.01"))

    def test_split_payment_above_hundred_million(self):
        anticipo, liquidacion = split_payment(Decimal("150000000.55"))
        self.assertEqual(anticipo, Decimal("105000000.40"))
        self.assertEqual(liquidacion, Decimal("45000000.15"))

    def test_generate_quotation_number(self):
        self.assertEqual(generate_quotation_number(date(2026, 3, 9), 7), "COT-202603-007")

    def test_default_valid_until(self):
        self.assertEqual(default_valid_until(date(2026, 10, 17)), date(2026, 11, 1))

    @override_settings(COTIZADOR={"VALIDITY_DAYS": 30})
    def test_valid_until_follows_settings(self):
        self.assertEqual(default_valid_until(date(2026, 1, 1)), date(2026, 1, 31))


class QuotationServiceTests(TestCase):
    def setUp(self):
        self.client_record = Client.objects.create(name="Ana Torres", email="ana@example.com")
        self.quotation = Quotation.objects.create(
            client=self.client_record,
            number="COT-202610-001",
            title="Cocina integral",
            project_type=ProjectType.RESIDENCIAL,
        )

    def _item(self, quantity, unit_price, discount=0, position=0):
        return QuotationItem.objects.create(
            quotation=self.quotation,
            description=f"Partida {position}",
            quantity=Decimal(quantity),
            unit_price=Decimal(unit_price),
            discount=Decimal(discount),
            position=position,
        )

    def test_calculate_without_lock_does_not_persist(self):
        self._item("1", "1000")
        self._item("2", "500", "10", position=1)
        totals = calculate_quotation(self.quotation)
        self.assertEqual(totals.total, Decimal("2204"))
        self.assertEqual(self.quotation.total, Decimal("2204"))
        stored = Quotation.objects.get(pk=self.quotation.pk)
        self.assertEqual(stored.total, Decimal("0"))
        self.assertIsNone(stored.pricing_locked_at)

    def test_calculate_with_lock_persists_rounded_totals(self):
        self._item("1", "1000")
        self._item("2", "500", "10", position=1)
        self._item("1", "250", position=2)
        calculate_quotation(self.quotation, lock=True)
        stored = Quotation.objects.get(pk=self.quotation.pk)
        self.assertEqual(stored.subtotal, Decimal("2150.00"))
        self.assertEqual(stored.taxes, Decimal("344.00"))
        self.assertEqual(stored.total, Decimal("2494.00"))
        self.assertEqual(stored.anticipo, Decimal("1745.80"))
        self.assertEqual(stored.liquidacion, Decimal("748.20"))
        self.assertIsNotNone(stored.pricing_locked_at)
        subtotals = list(stored.items.values_list("subtotal", flat=True))
        self.assertEqual(subtotals, [Decimal("1000.00"), Decimal("900.00"), Decimal("250.00")])

    def test_quotation_tax_rate_is_used(self):
        self.quotation.tax_rate = Decimal("8")
        self.quotation.save()
        self._item("1", "100")
        totals = calculate_quotation(self.quotation)
        self.assertEqual(totals.taxes, Decimal("8"))

    def test_next_quotation_number(self):
        self.assertEqual(next_quotation_number(date(2026, 10, 5)), "COT-202610-002")
        self.assertEqual(next_quotation_number(date(2026, 11, 5)), "COT-202611-001")

    def test_next_quotation_number_past_three_digits(self):
        for number in ["COT-202610-999", "COT-202610-1000"]:
            Quotation.objects.create(client=self.client_record, number=number, title="Closet")
        self.assertEqual(next_quotation_number(date(2026, 10, 5)), "COT-202610-1001")

    def test_lock_quotation_above_hundred_million(self):
        self._item("1", "150000000.55")
        calculate_quotation(self.quotation, lock=True)
        stored = Quotation.objects.get(pk=self.quotation.pk)
        self.assertEqual(stored.total, Decimal("174000000.70"))
        self.assertEqual(stored.anticipo, Decimal("121800000.50"))
        self.assertEqual(stored.liquidacion, Decimal("52200000.20"))
        self.assertEqual(stored.anticipo + stored.liquidacion, stored.total)

    def test_add_furniture_item(self):
        MarginConfig.objects.create(
            project_type=ProjectType.RESIDENCIAL,
            fixed_overhead_rate=Decimal("0.1"),
            sale_margin=Decimal("0.3"),
        )
        Accessory.objects.create(name="patas", cost=Decimal("10"))
        huacal = Material.objects.create(name="Melamina 16mm", cost=Decimal("100"))
        furniture = Furniture.objects.create(
            description="Gabinete 80cm", doors=2, shelves=1, mat_huacal=Decimal("2")
        )
        lookups = PricingLookups(cache=LookupCache())
        item = add_furniture_item(
            self.quotation,
            furniture,
            SelectedMaterials(mat_huacal=huacal),
            quantity=2,
            area="Cocina",
            lookups=lookups,
        )
        self.assertEqual(item.unit_price, Decimal("314.29"))
        self.assertEqual(item.description, "Gabinete 80cm")
        self.assertEqual(item.doors, 2)
        totals = calculate_quotation(self.quotation)
        self.assertEqual(totals.subtotal, Decimal("628.58"))

    def test_add_furniture_item_without_margins_adds_nothing(self):
        furniture = Furniture.objects.create(description="Cajonera", patas=Decimal("4"))
        with self.assertLogs("quotes.services", level="WARNING"):
            item = add_furniture_item(
                self.quotation, furniture, None, lookups=PricingLookups(cache=LookupCache())
            )
        self.assertIsNone(item)
        self.assertEqual(self.quotation.items.count(), 0)


class QuotationSerializerTests(TestCase):
    def test_calculation_serializer(self):
        serializer = QuotationCalculationSerializer(
            data={
                "items": [
                    {"quantity": "1", "unit_price": "1000"},
                    {"quantity": "2", "unit_price": "500", "discount": "10"},
                    {"quantity": "1", "unit_price": "250", "discount": "0"},
                ],
                "tax_rate": "16",
            }
        )
        self.assertTrue(serializer.is_valid(), serializer.errors)
        data = QuotationTotalsSerializer(serializer.calculate()).data
        self.assertEqual(data["subtotal"], "2150.00")
        self.assertEqual(data["taxes"], "344.00")
        self.assertEqual(data["total"], "2494.00")
        self.assertEqual(data["lines"][1]["subtotal"], "900.00")

    def test_calculation_serializer_uses_configured_tax_rate(self):
        serializer = QuotationCalculationSerializer(data={"items": [{"quantity": "1", "unit_price": "100"}]})
        self.assertTrue(serializer.is_valid(), serializer.errors)
        self.assertEqual(serializer.calculate().total, Decimal("116"))

    def test_rejects_non_positive_quantity(self):
        serializer = QuotationCalculationSerializer(data={"items": [{"quantity": "0", "unit_price": "10"}]})
        self.assertFalse(serializer.is_valid())
        self.assertIn("quantity", serializer.errors["items"][0])

    def test_rejects_discount_above_hundred(self):
        serializer = QuotationCalculationSerializer(
            data={"items": [{"quantity": "1", "unit_price": "10", "discount": "101"}]}
        )
        self.assertFalse(serializer.is_valid())
        self.assertIn("discount", serializer.errors["items"][0])

    def test_rejects_negative_price_and_tax_rate(self):
        serializer = QuotationCalculationSerializer(
            data={"items": [{"quantity": "1", "unit_price": "-1"}], "tax_rate": "-5"}
        )
        self.assertFalse(serializer.is_valid())
        self.assertIn("unit_price", serializer.errors["items"][0])
        self.assertIn("tax_rate", serializer.errors)

    def test_item_serializer_requires_description(self):
        serializer = QuotationItemSerializer(
            data={"description": "   ", "quantity": "1", "unit_price": "10", "discount": "0"}
        )
        self.assertFalse(serializer.is_valid())
        self.assertIn("description", serializer.errors)

    def test_quotation_serializer(self):
        client = Client.objects.create(name="Luis Pérez")
        quotation = Quotation.objects.create(client=client, number="COT-202610-010", title="Closet")
        QuotationItem.objects.create(
            quotation=quotation, description="Closet 2m", quantity=Decimal("1"), unit_price=Decimal("15000")
        )
        calculate_quotation(quotation, lock=True)
        data = QuotationSerializer(quotation).data
        self.assertEqual(data["client_name"], "Luis Pérez")
        self.assertEqual(data["status"], QuotationStatus.DRAFT)
        self.assertEqual(data["total"], "17400.00")
        self.assertEqual(len(data["items"]), 1)
