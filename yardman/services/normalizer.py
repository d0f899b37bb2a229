"""
Quantity normalization — the single gate every requested quantity passes.

Usage:
    from yardman.services.normalizer import normalize_quantity

    policy = QuantityPolicy(min_increment=Decimal('0.25'), min_cut=Decimal('1'))
    normalize_quantity(Decimal('2.3'), policy)
    # NormalizedQuantity(decimal=Decimal('2.25'), base_units=9, was_rounded=True)
"""

from dataclasses import dataclass
from decimal import Decimal

from yardman.exceptions import QuantityError
from yardman.policy import QuantityPolicy
from yardman.units import from_base_units, to_base_units, to_decimal

MIN_CUT_TOLERANCE = Decimal('1e-12')
ROUNDED_TOLERANCE = Decimal('1e-9')


@dataclass(frozen=True)
class NormalizedQuantity:
    """Quantity snapped to the policy grid."""

    decimal: Decimal
    base_units: int
    was_rounded: bool


def normalize_quantity(quantity, policy: QuantityPolicy) -> NormalizedQuantity:
    """
    Validate and round a quantity against a policy.

    Normalizing an already normalized quantity returns the same value
    with was_rounded=False.

    Raises:
        QuantityError('NEGATIVE_QUANTITY'): quantity < 0
        QuantityError('BELOW_MINIMUM_CUT'): quantity < policy.min_cut
        QuantityError('INVALID_POLICY'): bad min_increment
    """
    requested = to_decimal(quantity)
    if requested < 0:
        raise QuantityError('NEGATIVE_QUANTITY', requested=requested)

    if policy.min_cut and requested < policy.min_cut - MIN_CUT_TOLERANCE:
        raise QuantityError(
            'BELOW_MINIMUM_CUT',
            f"Quantity below min_cut ({policy.min_cut})",
            min_cut=policy.min_cut,
            requested=requested,
        )

    units = to_base_units(requested, policy.min_increment, policy.rounding_mode)
    normalized = from_base_units(units, policy.min_increment)
    return NormalizedQuantity(
        decimal=normalized,
        base_units=units,
        was_rounded=abs(normalized - requested) > ROUNDED_TOLERANCE,
    )
