"""
Quotation line-item calculator.

line subtotal = quantity × unit_price − quantity × unit_price × discount / 100
subtotal      = Σ line subtotals
taxes         = subtotal × tax_rate / 100
total         = subtotal + taxes

Arithmetic runs in common.money.MONEY_CONTEXT (10 significant digits, half up).
Inputs are not validated here; see quotes.serializers for boundary checks.
"""
from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal

from common.money import HUNDRED, ZERO, money_context, to_decimal

DEFAULT_TAX_RATE = Decimal("16")


@dataclass(frozen=True)
class QuotationLineInput:
    quantity: Decimal
    unit_price: Decimal
    discount: Decimal = ZERO

    @classmethod
    def from_values(cls, quantity, unit_price, discount=0) -> "QuotationLineInput":
        return cls(
            quantity=to_decimal(quantity),
            unit_price=to_decimal(unit_price),
            discount=to_decimal(discount),
        )


@dataclass(frozen=True)
class CalculatedLine:
    quantity: Decimal
    unit_price: Decimal
    discount: Decimal
    subtotal: Decimal


@dataclass(frozen=True)
class QuotationTotals:
    tax_rate: Decimal
    subtotal: Decimal
    taxes: Decimal
    total: Decimal
    lines: list[CalculatedLine] = field(default_factory=list)


def calculate_item_subtotal(quantity, unit_price, discount_rate) -> Decimal:
    """Subtotal of one line after its percentage discount."""
    with money_context():
        base_amount = to_decimal(quantity) * to_decimal(unit_price)
        discount_amount = base_amount * (to_decimal(discount_rate) / HUNDRED)
        return base_amount - discount_amount


def _as_input(line) -> QuotationLineInput:
    if isinstance(line, QuotationLineInput):
        return line
    if isinstance(line, Mapping):
        return QuotationLineInput.from_values(
            line.get("quantity"), line.get("unit_price"), line.get("discount") or 0
        )
    # QuotationItem or anything shaped like it
    return QuotationLineInput.from_values(
        line.quantity, line.unit_price, getattr(line, "discount", 0) or 0
    )


def calculate_line(line) -> CalculatedLine:
    line = _as_input(line)
    return CalculatedLine(
        quantity=line.quantity,
        unit_price=line.unit_price,
        discount=line.discount,
        subtotal=calculate_item_subtotal(line.quantity, line.unit_price, line.discount),
    )


def calculate_quotation_totals(lines, tax_rate=DEFAULT_TAX_RATE) -> QuotationTotals:
    """
    Totals for an ordered collection of lines. Lines may be QuotationLineInput,
    mappings with quantity/unit_price/discount, or QuotationItem rows.
    """
    calculated = [calculate_line(line) for line in lines]
    rate = to_decimal(tax_rate)
    with money_context():
        subtotal = sum((line.subtotal for line in calculated), ZERO)
        taxes = subtotal * (rate / HUNDRED)
        total = subtotal + taxes
    return QuotationTotals(
        tax_rate=rate,
        subtotal=subtotal,
        taxes=taxes,
        total=total,
        lines=calculated,
    )
