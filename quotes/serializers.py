"""
Quotation serializers. Input ranges are enforced here, before values reach
the calculator: quantity > 0, unit price >= 0, discount in [0, 100],
tax rate >= 0.
"""
from decimal import Decimal

from rest_framework import serializers

from common.serializers import MoneyField

from .calculator import QuotationLineInput, calculate_quotation_totals
from .models import Quotation, QuotationItem
from .services import default_tax_rate


class QuotationLineInputSerializer(serializers.Serializer):
    quantity = serializers.DecimalField(max_digits=12, decimal_places=3)
    unit_price = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal("0"))
    discount = serializers.DecimalField(
        max_digits=5,
        decimal_places=2,
        min_value=Decimal("0"),
        max_value=Decimal("100"),
        default=Decimal("0"),
    )

    def validate_quantity(self, value):
        if value <= 0:
            raise serializers.ValidationError("La cantidad debe ser mayor a 0.")
        return value


class QuotationCalculationSerializer(serializers.Serializer):
    """Validate a list of lines plus a tax rate and compute totals."""

    items = QuotationLineInputSerializer(many=True)
    tax_rate = serializers.DecimalField(
        max_digits=5, decimal_places=2, min_value=Decimal("0"), required=False
    )

    def calculate(self):
        data = self.validated_data
        lines = [
            QuotationLineInput(item["quantity"], item["unit_price"], item["discount"])
            for item in data["items"]
        ]
        tax_rate = data.get("tax_rate")
        if tax_rate is None:
            tax_rate = default_tax_rate()
        return calculate_quotation_totals(lines, tax_rate)


class CalculatedLineSerializer(serializers.Serializer):
    quantity = serializers.DecimalField(max_digits=12, decimal_places=3)
    unit_price = MoneyField()
    discount = serializers.DecimalField(max_digits=5, decimal_places=2)
    subtotal = MoneyField()


class QuotationTotalsSerializer(serializers.Serializer):
    """Read-only representation of quotes.calculator.QuotationTotals."""

    tax_rate = serializers.DecimalField(max_digits=5, decimal_places=2)
    subtotal = MoneyField()
    taxes = MoneyField()
    total = MoneyField()
    lines = CalculatedLineSerializer(many=True)


class QuotationItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = QuotationItem
        fields = [
            "id",
            "product",
            "furniture",
            "area",
            "description",
            "quantity",
            "unit_price",
            "discount",
            "subtotal",
            "notes",
            "position",
            "drawers",
            "doors",
            "shelves",
        ]
        read_only_fields = ["subtotal"]

    def validate_description(self, value):
        value = (value or "").strip()
        if not value:
            raise serializers.ValidationError("La descripción es obligatoria.")
        return value

    def validate_quantity(self, value):
        if value is None or value <= 0:
            raise serializers.ValidationError("La cantidad debe ser mayor a 0.")
        return value

    def validate_unit_price(self, value):
        if value is None or value < 0:
            raise serializers.ValidationError("El precio unitario no puede ser negativo.")
        return value


class QuotationSerializer(serializers.ModelSerializer):
    items = QuotationItemSerializer(many=True, read_only=True)
    client_name = serializers.CharField(source="client.name", read_only=True)

    class Meta:
        model = Quotation
        fields = [
            "id",
            "client",
            "client_name",
            "number",
            "project_code",
            "project_type",
            "project_name",
            "title",
            "description",
            "status",
            "tax_rate",
            "subtotal",
            "taxes",
            "total",
            "anticipo",
            "liquidacion",
            "valid_until",
            "delivery_time",
            "payment_terms",
            "terms",
            "notes",
            "items",
        ]
        read_only_fields = ["subtotal", "taxes", "total", "anticipo", "liquidacion"]
