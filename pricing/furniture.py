"""
Furniture price builder.

1. raw material cost = Σ quantity × material cost × (1 + material_margin)
2. accessories = Σ quantity × unit cost × (1 + accessory_margin)
   + gastos fijos on that amount when the accessory requires installation
3. gastos fijos (SIF) on raw material = raw material cost × fixed_overhead_rate
4. sale price = (raw material + SIF + accessories) / (1 - sale_margin)

Returns a PriceBreakdown, or None when the project type cannot be priced.
"""
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal

from catalog.models import Material
from common.money import ONE, ZERO, money_context, to_decimal

from .lookups import DEFAULT_ACCESSORY_COSTS, PricingLookups

logger = logging.getLogger(__name__)

MATERIAL_SLOTS = (
    "mat_huacal",
    "mat_vista",
    "chap_huacal",
    "chap_vista",
    "jaladera",
    "corredera",
    "bisagras",
    "u_tl",
)

ACCESSORY_SLOTS = (
    "patas",
    "clip_patas",
    "mensulas",
    "kit_tornillo",
    "cif",
)


@dataclass
class SelectedMaterials:
    """Material chosen for each material slot of a quotation."""

    mat_huacal: Material | None = None
    mat_vista: Material | None = None
    chap_huacal: Material | None = None
    chap_vista: Material | None = None
    jaladera: Material | None = None
    corredera: Material | None = None
    bisagras: Material | None = None
    u_tl: Material | None = None

    def for_slot(self, slot):
        return getattr(self, slot, None)

    @classmethod
    def from_ids(cls, **ids):
        """SelectedMaterials.from_ids(mat_huacal=3, jaladera=12); unknown ids stay empty."""
        unknown = set(ids) - set(MATERIAL_SLOTS)
        if unknown:
            raise ValueError(f"Unknown material slots: {', '.join(sorted(unknown))}")
        wanted = [pk for pk in ids.values() if pk]
        materials = Material.objects.in_bulk(wanted)
        return cls(**{slot: materials.get(pk) for slot, pk in ids.items() if pk})


@dataclass(frozen=True)
class MaterialCost:
    slot: str
    name: str
    quantity: Decimal
    unit_cost: Decimal
    total_cost: Decimal


@dataclass(frozen=True)
class AccessoryCost:
    name: str
    quantity: Decimal
    unit_cost: Decimal
    total_cost: Decimal
    requires_installation: bool
    fixed_overhead: Decimal
    default_cost_used: bool = False


@dataclass(frozen=True)
class PriceBreakdown:
    raw_material_cost: Decimal
    fixed_overhead: Decimal
    accessory_cost: Decimal
    total_cost: Decimal
    sale_price: Decimal
    materials: list[MaterialCost] = field(default_factory=list)
    accessories: list[AccessoryCost] = field(default_factory=list)

    @property
    def accessory_overhead(self) -> Decimal:
        return sum((a.fixed_overhead for a in self.accessories), ZERO)


def _slot_quantity(furniture, slot) -> Decimal | None:
    """Quantity for a slot from a Furniture row or a plain mapping; None if absent or <= 0."""
    if isinstance(furniture, Mapping):
        raw = furniture.get(slot)
    else:
        raw = getattr(furniture, slot, None)
    if raw is None or raw == "":
        return None
    quantity = to_decimal(raw)
    if quantity <= 0:
        return None
    return quantity


def _selected_material(selected, slot):
    if selected is None:
        return None
    if isinstance(selected, Mapping):
        return selected.get(slot)
    return selected.for_slot(slot)


def _price_materials(furniture, selected, margins) -> list[MaterialCost]:
    lines = []
    for slot in MATERIAL_SLOTS:
        quantity = _slot_quantity(furniture, slot)
        material = _selected_material(selected, slot)
        if quantity is None or material is None:
            continue
        unit_cost = to_decimal(material.cost)
        component = quantity * unit_cost
        with_margin = component * (ONE + margins.material_margin)
        lines.append(
            MaterialCost(
                slot=slot,
                name=material.name,
                quantity=quantity,
                unit_cost=unit_cost,
                total_cost=with_margin,
            )
        )
        logger.debug(
            "%s: %s x %s = %s (margen MP %s)",
            slot, quantity, unit_cost, component, margins.material_margin,
        )
    return lines


def _price_accessories(furniture, margins, lookups) -> list[AccessoryCost]:
    lines = []
    for name in ACCESSORY_SLOTS:
        quantity = _slot_quantity(furniture, name)
        if quantity is None:
            continue

        unit_cost = lookups.accessory_cost(name)
        default_used = not unit_cost
        if default_used:
            unit_cost = DEFAULT_ACCESSORY_COSTS.get(name, ZERO)
            logger.warning(
                "No catalog cost for accessory %r, using default %s", name, unit_cost
            )

        requires_installation = lookups.requires_installation(name)
        with_margin = quantity * unit_cost * (ONE + margins.accessory_margin)
        overhead = with_margin * margins.fixed_overhead_rate if requires_installation else ZERO

        lines.append(
            AccessoryCost(
                name=name,
                quantity=quantity,
                unit_cost=unit_cost,
                total_cost=with_margin,
                requires_installation=requires_installation,
                fixed_overhead=overhead,
                default_cost_used=default_used,
            )
        )
        logger.debug(
            "%s: %s x %s = %s (SIF %s)", name, quantity, unit_cost, with_margin, overhead
        )
    return lines


def calculate_furniture_price(
    furniture,
    selected_materials,
    project_type,
    lookups: PricingLookups | None = None,
) -> PriceBreakdown | None:
    """
    Price one furniture piece for a project type.
    furniture: Furniture instance or mapping of slot -> quantity.
    selected_materials: SelectedMaterials or mapping of slot -> Material.
    """
    lookups = lookups or PricingLookups()

    margins = lookups.margin_config(project_type)
    if margins is None:
        logger.error("No margin configuration found for project type %r", project_type)
        return None

    with money_context():
        factor = ONE - margins.sale_margin
        if factor <= 0:
            logger.error(
                "Sale margin %s for %s leaves no room to price", margins.sale_margin, margins.project_type
            )
            return None

        materials = _price_materials(furniture, selected_materials, margins)
        raw_material_cost = sum((m.total_cost for m in materials), ZERO)

        accessories = _price_accessories(furniture, margins, lookups)
        accessory_cost = sum((a.total_cost + a.fixed_overhead for a in accessories), ZERO)

        fixed_overhead = raw_material_cost * margins.fixed_overhead_rate
        total_cost = raw_material_cost + fixed_overhead + accessory_cost
        sale_price = total_cost / factor

    logger.info(
        "Priced %s for %s: cost %s, sale price %s",
        getattr(furniture, "description", "furniture"), margins.project_type, total_cost, sale_price,
    )
    return PriceBreakdown(
        raw_material_cost=raw_material_cost,
        fixed_overhead=fixed_overhead,
        accessory_cost=accessory_cost,
        total_cost=total_cost,
        sale_price=sale_price,
        materials=materials,
        accessories=accessories,
    )
