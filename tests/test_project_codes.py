"""Tests for project and furniture piece codes."""
from datetime import date

from django.test import SimpleTestCase, TestCase

from clients.models import Client
from pricing.choices import ProjectType
from quotes.models import Quotation
from quotes.project_codes import (
    code_prefix,
    generate_furniture_code,
    generate_project_code,
    get_area_name,
    get_furniture_type_name,
    next_consecutive_number,
    parse_project_code,
    validate_project_code,
)

OCT_2026 = date(2026, 10, 5)


class ProjectCodeTest(SimpleTestCase):
    def test_residential_code(self):
        self.assertEqual(generate_project_code(ProjectType.RESIDENCIAL, OCT_2026, 7), "RE-610-007")

    def test_residential_code_from_numeric_project_type(self):
        self.assertEqual(generate_project_code("1", OCT_2026, 12), "RE-610-012")

    def test_residential_code_ignores_prototype(self):
        self.assertEqual(generate_project_code("residencial", OCT_2026, 1, prototype="B1"), "RE-610-001")

    def test_vertical_code_with_prototype(self):
        code = generate_project_code("vertical", date(2025, 3, 1), 2, vertical_project="wn", prototype="B1")
        self.assertEqual(code, "WN-503-002-B1")

    def test_vertical_prefix_from_development_name(self):
        self.assertEqual(code_prefix(ProjectType.DESARROLLO, OCT_2026, "Torre Mar"), "TR-610-")

    def test_vertical_requires_development_name(self):
        with self.assertRaises(ValueError):
            generate_project_code(ProjectType.DESARROLLO, OCT_2026, 1)

    def test_blank_development_name_is_rejected(self):
        with self.assertRaises(ValueError):
            generate_project_code("3", date(2026, 10, 1), 1, vertical_project="   ")

    def test_internal_projects_have_no_code(self):
        with self.assertRaises(ValueError):
            generate_project_code(ProjectType.INTERNO, OCT_2026, 1)

    def test_furniture_code(self):
        self.assertEqual(generate_furniture_code("RE-610-007", "CL", "GAB"), "RE-610-007-CL-GAB")
        self.assertEqual(generate_furniture_code("RE-610-007", "CL", "GAB", "A"), "RE-610-007-CL-GAB-A")

    def test_furniture_code_rejects_unknown_production_type(self):
        with self.assertRaises(ValueError):
            generate_furniture_code("RE-610-007", "CL", "GAB", "X")


class ParseProjectCodeTest(SimpleTestCase):
    def test_parse_residential(self):
        self.assertEqual(
            parse_project_code("RE-610-007"),
            {"type_prefix": "RE", "year": 2026, "month": 10, "consecutive": 7},
        )

    def test_parse_vertical_with_prototype(self):
        parsed = parse_project_code("WN-503-002-B1")
        self.assertEqual(parsed["year"], 2025)
        self.assertEqual(parsed["month"], 3)
        self.assertEqual(parsed["prototype"], "B1")

    def test_invalid_codes(self):
        for code in ["", "garbage", "RE-61-001", "RE-613-001", "RE-600-001", "RE-610-abc"]:
            with self.subTest(code=code):
                self.assertFalse(validate_project_code(code))

    def test_valid_code(self):
        self.assertTrue(validate_project_code("RE-610-007"))

    def test_abbreviation_names(self):
        self.assertEqual(get_area_name("CL"), "closet")
        self.assertEqual(get_furniture_type_name("AET"), "alacena esquinera tipon")
        self.assertEqual(get_furniture_type_name("ZZZ"), "ZZZ")


class NextConsecutiveNumberTest(TestCase):
    def setUp(self):
        self.client_record = Client.objects.create(name="Constructora Norte")
        for number, code in [
            ("COT-202610-001", "RE-610-001"),
            ("COT-202610-002", "RE-610-004"),
            ("COT-202609-001", "RE-609-009"),
        ]:
            Quotation.objects.create(
                client=self.client_record, number=number, title="Cocina", project_code=code
            )

    def test_next_after_highest_in_month(self):
        self.assertEqual(next_consecutive_number(ProjectType.RESIDENCIAL, OCT_2026), 5)

    def test_first_of_month(self):
        self.assertEqual(next_consecutive_number(ProjectType.RESIDENCIAL, date(2026, 11, 2)), 1)

    def test_next_after_three_digit_sequence(self):
        for number, code in [("COT-202610-003", "RE-610-999"), ("COT-202610-004", "RE-610-1000")]:
            Quotation.objects.create(
                client=self.client_record, number=number, title="Closet", project_code=code
            )
        self.assertEqual(next_consecutive_number(ProjectType.RESIDENCIAL, OCT_2026), 1001)

    def test_vertical_projects_are_counted_separately(self):
        self.assertEqual(next_consecutive_number("vertical", OCT_2026, "WN"), 1)
