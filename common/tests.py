from decimal import Decimal

from django.test import SimpleTestCase

from common.money import format_currency, format_percent, money_context, round_money, to_decimal
from common.serializers import MoneyField


class MoneyHelpersTest(SimpleTestCase):
    def test_to_decimal(self):
        self.assertEqual(to_decimal(None), Decimal("0"))
        self.assertEqual(to_decimal(0.1), Decimal("0.1"))
        self.assertEqual(to_decimal("12.50"), Decimal("12.50"))
        self.assertEqual(to_decimal(3), Decimal("3"))

    def test_round_money_half_up(self):
        self.assertEqual(round_money("2.345"), Decimal("2.35"))
        self.assertEqual(round_money("2.344"), Decimal("2.34"))
        self.assertEqual(round_money("-2.345"), Decimal("-2.35"))

    def test_format_currency(self):
        self.assertEqual(format_currency("1234.5"), "1234.50")
        self.assertEqual(format_currency(Decimal("314.2857143")), "314.29")
        self.assertEqual(format_currency(None), "0.00")

    def test_format_percent(self):
        self.assertEqual(format_percent(16), "16.00%")
        self.assertEqual(format_percent("12.345"), "12.35%")

    def test_money_context_precision(self):
        with money_context():
            value = Decimal(1) / Decimal(3)
        self.assertEqual(value, Decimal("0.3333333333"))


class MoneyFieldTest(SimpleTestCase):
    def test_representation_rounds_half_up(self):
        self.assertEqual(MoneyField().to_representation(Decimal("0.125")), "0.13")
