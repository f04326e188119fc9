from decimal import ROUND_HALF_UP

from rest_framework import serializers


class MoneyField(serializers.DecimalField):
    """Decimal rendered with 2 places, half up, like every stored amount."""

    def __init__(self, **kwargs):
        kwargs.setdefault("max_digits", 14)
        kwargs.setdefault("decimal_places", 2)
        kwargs.setdefault("rounding", ROUND_HALF_UP)
        super().__init__(**kwargs)
