"""
Monetary arithmetic helpers.

All pricing arithmetic runs inside MONEY_CONTEXT: 10 significant digits,
ROUND_HALF_UP. Values persisted to DecimalFields are rounded to cents.
"""
from decimal import ROUND_HALF_UP, Context, Decimal, localcontext

MONEY_PRECISION = 10
MONEY_CONTEXT = Context(prec=MONEY_PRECISION, rounding=ROUND_HALF_UP)

CENTS = Decimal("0.01")
ZERO = Decimal("0")
ONE = Decimal("1")
HUNDRED = Decimal("100")


def money_context():
    """Context manager that switches the current thread to MONEY_CONTEXT."""
    return localcontext(MONEY_CONTEXT)


def to_decimal(value) -> Decimal:
    """
    Convert int/float/str/Decimal to Decimal without binary float noise.
    None becomes zero.
    """
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def round_money(value) -> Decimal:
    """Round to 2 decimal places, half up (for storage and display)."""
    return to_decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


def format_currency(value) -> str:
    """'1234.5' -> '1234.50'"""
    return f"{round_money(value):.2f}"


def format_percent(value) -> str:
    """'16' -> '16.00%'"""
    return f"{round_money(value):.2f}%"
