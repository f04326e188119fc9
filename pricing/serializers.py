"""
Margin configuration input and price breakdown output.
Breakdown amounts are rendered rounded to cents; computation keeps full precision.
"""
from decimal import Decimal

from rest_framework import serializers

from common.serializers import MoneyField

from .models import MarginConfig


class MarginConfigSerializer(serializers.ModelSerializer):
    class Meta:
        model = MarginConfig
        fields = [
            "id",
            "project_type",
            "material_margin",
            "accessory_margin",
            "fixed_overhead_rate",
            "sale_margin",
        ]

    def validate_sale_margin(self, value):
        if value is not None and value >= Decimal("1"):
            raise serializers.ValidationError("El margen de venta debe ser menor a 1.")
        return value


class MaterialCostSerializer(serializers.Serializer):
    slot = serializers.CharField()
    name = serializers.CharField()
    quantity = serializers.DecimalField(max_digits=12, decimal_places=3)
    unit_cost = MoneyField()
    total_cost = MoneyField()


class AccessoryCostSerializer(serializers.Serializer):
    name = serializers.CharField()
    quantity = serializers.DecimalField(max_digits=12, decimal_places=3)
    unit_cost = MoneyField()
    total_cost = MoneyField()
    requires_installation = serializers.BooleanField()
    fixed_overhead = MoneyField()
    default_cost_used = serializers.BooleanField()


class PriceBreakdownSerializer(serializers.Serializer):
    """Read-only representation of pricing.furniture.PriceBreakdown."""

    raw_material_cost = MoneyField()
    fixed_overhead = MoneyField()
    accessory_cost = MoneyField()
    total_cost = MoneyField()
    sale_price = MoneyField()
    materials = MaterialCostSerializer(many=True)
    accessories = AccessoryCostSerializer(many=True)
