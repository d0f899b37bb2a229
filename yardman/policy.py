"""
Quantity policy — how a variant may be cut and sold.

Policies live in catalog metadata (variant first, then its product):

    {
        "inventory": {
            "min_increment": 0.25,
            "min_cut": 1,
            "rounding_mode": "nearest",
            "backorder_policy": "deny",
            "low_stock_threshold": 2,
            "uom": "yard"
        }
    }

Yardman only reads policies. The catalog owns and edits them.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from numbers import Number

from yardman.enums import BackorderPolicy, RoundingMode
from yardman.exceptions import QuantityError
from yardman.units import to_decimal


def _is_number(value) -> bool:
    return isinstance(value, (Number, Decimal)) and not isinstance(value, bool)


@dataclass(frozen=True)
class QuantityPolicy:
    """Per-variant quantity rules."""

    min_increment: Decimal
    min_cut: Decimal | None = None
    rounding_mode: RoundingMode = RoundingMode.NEAREST
    backorder_policy: BackorderPolicy = BackorderPolicy.DENY
    low_stock_threshold: Decimal = Decimal('0')
    uom: str | None = None

    def __post_init__(self):
        # Normalize loose inputs (floats, plain strings) on a frozen instance
        object.__setattr__(self, 'min_increment', to_decimal(self.min_increment))
        if self.min_cut is not None:
            object.__setattr__(self, 'min_cut', to_decimal(self.min_cut))
        object.__setattr__(self, 'low_stock_threshold', to_decimal(self.low_stock_threshold))
        try:
            object.__setattr__(self, 'rounding_mode', RoundingMode(self.rounding_mode))
            object.__setattr__(self, 'backorder_policy', BackorderPolicy(self.backorder_policy))
        except ValueError as e:
            raise QuantityError('INVALID_POLICY', reason=str(e)) from None

    @classmethod
    def from_metadata(cls, blob: Mapping | None) -> 'QuantityPolicy | None':
        """
        Build a policy from a catalog metadata blob.

        Missing or non-numeric min_increment falls back to 1 (whole units).
        Optional numeric fields with the wrong type are ignored.

        Returns:
            QuantityPolicy, or None when blob is empty
        """
        if not blob:
            return None

        min_increment = blob.get('min_increment')
        min_cut = blob.get('min_cut')
        threshold = blob.get('low_stock_threshold')

        return cls(
            min_increment=min_increment if _is_number(min_increment) else Decimal('1'),
            min_cut=min_cut if _is_number(min_cut) else None,
            rounding_mode=blob.get('rounding_mode') or RoundingMode.NEAREST,
            backorder_policy=blob.get('backorder_policy') or BackorderPolicy.DENY,
            low_stock_threshold=threshold if _is_number(threshold) else Decimal('0'),
            uom=blob.get('uom') or None,
        )


def resolve_policy(variant_metadata: Mapping | None, product_metadata: Mapping | None = None,
                   key: str = 'inventory') -> QuantityPolicy | None:
    """
    Resolve the effective policy: variant override, else product, else None.

    None means no policy: quantities pass through unchanged.
    """
    for metadata in (variant_metadata, product_metadata):
        blob = (metadata or {}).get(key)
        if blob:
            return QuantityPolicy.from_metadata(blob)
    return None


# Variants without a policy are counted in whole units, partial units round up
WHOLE_UNITS = QuantityPolicy(min_increment=Decimal('1'), rounding_mode=RoundingMode.UP)
