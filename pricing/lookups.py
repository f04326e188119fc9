"""
Store lookups used by the furniture price builder.

Three stores are consulted: margin configuration per project type, accessory
unit cost by name, and accessory installation requirement by name. Results
are memoised in a LookupCache; the cache is passed to PricingLookups, and a
process-wide instance (default_cache) is used when none is given.
"""
import logging
import threading
from dataclasses import dataclass
from decimal import Decimal

from django.db import DatabaseError

from catalog.models import Accessory, AccessoryInstallation
from common.money import ZERO, to_decimal

from .choices import resolve_project_type
from .models import MarginConfig

logger = logging.getLogger(__name__)

MARGINS = "margins"
ACCESSORY_COSTS = "accessory_costs"
INSTALLATIONS = "installations"

# Used when the accessory catalog has no (or a zero) cost for a slot.
DEFAULT_ACCESSORY_COSTS = {
    "patas": Decimal("10"),
    "clip_patas": Decimal("2"),
    "mensulas": Decimal("0.9"),
    "kit_tornillo": Decimal("30"),
    "cif": Decimal("100"),
}


@dataclass(frozen=True)
class Margins:
    """Immutable snapshot of a MarginConfig row."""

    project_type: str
    material_margin: Decimal
    accessory_margin: Decimal
    fixed_overhead_rate: Decimal
    sale_margin: Decimal

    @classmethod
    def from_model(cls, config: MarginConfig) -> "Margins":
        return cls(
            project_type=config.project_type,
            material_margin=to_decimal(config.material_margin),
            accessory_margin=to_decimal(config.accessory_margin),
            fixed_overhead_rate=to_decimal(config.fixed_overhead_rate),
            sale_margin=to_decimal(config.sale_margin),
        )


class LookupCache:
    """
    Memo of lookup results keyed by (bucket, key).
    Loaders run outside the lock: two threads may load the same key, and the
    first stored value wins. None results are never stored.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._data = {}

    def __len__(self):
        with self._lock:
            return len(self._data)

    def __contains__(self, bucket_key):
        with self._lock:
            return bucket_key in self._data

    def get_or_load(self, bucket, key, loader):
        with self._lock:
            if (bucket, key) in self._data:
                return self._data[(bucket, key)]
        value = loader(key)
        if value is None:
            return None
        with self._lock:
            return self._data.setdefault((bucket, key), value)

    def clear(self):
        with self._lock:
            self._data.clear()


default_cache = LookupCache()


def clear_cache():
    """Drop every memoised margin, accessory cost and installation lookup."""
    default_cache.clear()
    logger.info("Pricing lookup cache cleared")


class PricingLookups:
    """
    ORM-backed lookups. Subclass and override the load_* methods to price
    against another store; each returns None when the value cannot be
    resolved.
    """

    def __init__(self, cache: LookupCache | None = None):
        self.cache = cache if cache is not None else default_cache

    def margin_config(self, project_type) -> Margins | None:
        label = resolve_project_type(project_type)
        if label is None:
            logger.error("Unknown project type %r", project_type)
            return None
        return self.cache.get_or_load(MARGINS, label, self.load_margin_config)

    def accessory_cost(self, name: str) -> Decimal | None:
        """Catalog cost; zero (cached) when the catalog has no usable cost, None on store failure."""
        return self.cache.get_or_load(ACCESSORY_COSTS, name, self.load_accessory_cost)

    def requires_installation(self, name: str) -> bool:
        flag = self.cache.get_or_load(INSTALLATIONS, name, self.load_installation)
        return bool(flag)

    def load_margin_config(self, label: str) -> Margins | None:
        try:
            config = MarginConfig.objects.filter(project_type=label).first()
        except DatabaseError:
            logger.exception("Margin configuration lookup failed for %s", label)
            return None
        if config is None:
            return None
        return Margins.from_model(config)

    def load_accessory_cost(self, name: str) -> Decimal | None:
        """A missing row or a zero cost loads as ZERO so the miss is cached too."""
        try:
            cost = Accessory.objects.filter(name=name).values_list("cost", flat=True).first()
        except DatabaseError:
            logger.exception("Accessory cost lookup failed for %s", name)
            return None
        return to_decimal(cost) if cost else ZERO

    def load_installation(self, name: str) -> bool | None:
        """True/False from the store; an unknown accessory is False (and cached)."""
        try:
            flag = (
                AccessoryInstallation.objects.filter(name=name)
                .values_list("requires_installation", flat=True)
                .first()
            )
        except DatabaseError:
            logger.exception("Installation lookup failed for %s", name)
            return None
        return bool(flag)
