"""
Quotation services: totals, payment split, numbering, validity and pricing of
furniture lines. Business defaults come from settings.COTIZADOR.
"""
import logging
from datetime import date, timedelta
from decimal import Decimal

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from common.money import money_context, round_money, to_decimal
from pricing.furniture import calculate_furniture_price

from .calculator import DEFAULT_TAX_RATE, QuotationTotals, calculate_quotation_totals
from .models import Quotation, QuotationItem

logger = logging.getLogger(__name__)

QUOTATION_NUMBER_PREFIX = "COT"

COTIZADOR_DEFAULTS = {
    "TAX_RATE": DEFAULT_TAX_RATE,
    "VALIDITY_DAYS": 15,
    "ADVANCE_PAYMENT_RATE": Decimal("0.70"),
    "DEFAULT_TERMS": "",
}


def cotizador_setting(key):
    """Read a key of settings.COTIZADOR, falling back to COTIZADOR_DEFAULTS."""
    config = getattr(settings, "COTIZADOR", {}) or {}
    return config.get(key, COTIZADOR_DEFAULTS.get(key))


def default_tax_rate() -> Decimal:
    return to_decimal(cotizador_setting("TAX_RATE"))


def split_payment(total, advance_rate=None) -> tuple[Decimal, Decimal]:
    """
    Split a total into (anticipo, liquidacion), both rounded to cents.
    The balance is computed from the rounded advance so both add up to the total.
    """
    rate = to_decimal(advance_rate if advance_rate is not None else cotizador_setting("ADVANCE_PAYMENT_RATE"))
    total = round_money(total)
    with money_context():
        raw_anticipo = total * rate
    # Quantize outside MONEY_CONTEXT: cents of amounts above 10 digits exceed its precision.
    anticipo = round_money(raw_anticipo)
    liquidacion = total - anticipo
    return anticipo, liquidacion


def default_valid_until(start: date | None = None) -> date:
    start = start or timezone.localdate()
    return start + timedelta(days=int(cotizador_setting("VALIDITY_DAYS")))


def generate_quotation_number(on: date, sequence: int) -> str:
    """COT-YYYYMM-NNN"""
    return f"{QUOTATION_NUMBER_PREFIX}-{on.year}{on.month:02d}-{sequence:03d}"


def next_quotation_number(on: date | None = None) -> str:
    """Next number for the month, one above the highest stored sequence."""
    on = on or timezone.localdate()
    prefix = f"{QUOTATION_NUMBER_PREFIX}-{on.year}{on.month:02d}-"
    # Sequences outgrow three digits, so compare them as integers, not strings.
    highest = 0
    for number in Quotation.objects.filter(number__startswith=prefix).values_list("number", flat=True):
        suffix = number[len(prefix):]
        if not suffix.isdigit():
            logger.warning("Unparseable quotation number %r, skipped", number)
            continue
        highest = max(highest, int(suffix))
    return generate_quotation_number(on, highest + 1)


def calculate_quotation(quotation: Quotation, lock: bool = False) -> QuotationTotals:
    """
    Calculate line subtotals and header totals for a quotation.
    - lock=False: set values on the instances only (no persist).
    - lock=True: persist rounded item subtotals, header totals and the
      advance/balance split, and stamp pricing_locked_at.
    """
    items = list(quotation.items.all())
    tax_rate = quotation.tax_rate if quotation.tax_rate is not None else default_tax_rate()
    totals = calculate_quotation_totals(items, tax_rate)

    for item, line in zip(items, totals.lines):
        item.subtotal = line.subtotal

    quotation.subtotal = totals.subtotal
    quotation.taxes = totals.taxes
    quotation.total = totals.total
    quotation.anticipo, quotation.liquidacion = split_payment(totals.total)

    if lock:
        with transaction.atomic():
            for item in items:
                item.subtotal = round_money(item.subtotal)
                item.save(update_fields=["subtotal", "updated_at"])
            quotation.subtotal = round_money(totals.subtotal)
            quotation.taxes = round_money(totals.taxes)
            quotation.total = round_money(totals.total)
            quotation.pricing_locked_at = timezone.now()
            quotation.save(
                update_fields=[
                    "subtotal",
                    "taxes",
                    "total",
                    "anticipo",
                    "liquidacion",
                    "pricing_locked_at",
                    "updated_at",
                ]
            )
        logger.info("Quotation %s locked: total %s", quotation.number, quotation.total)

    return totals


def add_furniture_item(
    quotation: Quotation,
    furniture,
    selected_materials,
    quantity=1,
    area: str = "",
    discount=0,
    lookups=None,
) -> QuotationItem | None:
    """
    Price a furniture bill of materials for the quotation's project type and
    add it as a line item. Returns None (and adds nothing) when the project
    type cannot be priced.
    """
    breakdown = calculate_furniture_price(
        furniture, selected_materials, quotation.project_type, lookups=lookups
    )
    if breakdown is None:
        logger.warning(
            "Furniture %s not added to %s: project type %s cannot be priced",
            furniture, quotation.number, quotation.project_type,
        )
        return None

    position = quotation.items.count()
    return QuotationItem.objects.create(
        quotation=quotation,
        furniture=furniture,
        area=area,
        description=furniture.description,
        quantity=to_decimal(quantity),
        unit_price=round_money(breakdown.sale_price),
        discount=to_decimal(discount),
        position=position,
        drawers=furniture.drawers,
        doors=furniture.doors,
        shelves=furniture.shelves,
    )
