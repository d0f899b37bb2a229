"""
Unit conversion — base units for fractional quantities.

Converts decimal quantities to integer base units and back. A base unit
is the smallest sellable fraction implied by a policy's min_increment,
so comparisons and sums can be done on integers.

Examples:
    - min_increment=0.25: 2.25 yd <-> 9 base units (factor 4)
    - min_increment=0.1:  1.3 m   <-> 13 base units (factor 10)
    - min_increment=1:    whole pieces, factor 1

Every function here is pure: same inputs, same outputs. Re-normalizing
an already normalized quantity relies on that.
"""

from decimal import ROUND_CEILING, ROUND_FLOOR, ROUND_HALF_UP, Decimal, InvalidOperation

from yardman.enums import RoundingMode
from yardman.exceptions import QuantityError

# Accepted error when reconstructing min_increment from 1/factor
FACTOR_TOLERANCE = Decimal('1e-10')

# Keeps exact values from being pushed to the next unit by up/down rounding
ROUNDING_TOLERANCE = Decimal('1e-10')

# Precision of the fallback factor for increments that don't divide 1 evenly
FALLBACK_SCALE = Decimal('1000000')

# Largest accepted adjusted exponent: quantities stay below 1e16
MAX_EXPONENT = 15


def to_decimal(value) -> Decimal:
    """
    Coerce a quantity to Decimal.

    Floats go through str() so 2.3 becomes Decimal('2.3'),
    not its binary expansion.

    Raises:
        QuantityError('INVALID_QUANTITY'): not a finite number, or 1e16 and above
    """
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            raise QuantityError('INVALID_QUANTITY', requested=value) from None
    if not result.is_finite() or result.adjusted() > MAX_EXPONENT:
        raise QuantityError('INVALID_QUANTITY', requested=value)
    return result


def _rounding_mode(value) -> RoundingMode:
    try:
        return RoundingMode(value or RoundingMode.NEAREST)
    except ValueError:
        raise QuantityError('INVALID_POLICY', rounding_mode=value) from None


def get_base_unit_factor(min_increment) -> int:
    """
    Number of base units in one whole unit.

    factor = round(1 / min_increment), accepted when 1/factor gives back
    min_increment. Increments that don't divide 1 evenly (e.g. 0.3) use a
    factor computed at 1e-6 precision instead.

    Raises:
        QuantityError('INVALID_POLICY'): min_increment <= 0
    """
    increment = to_decimal(min_increment)
    if increment <= 0:
        raise QuantityError('INVALID_POLICY', min_increment=increment)

    factor = int((1 / increment).to_integral_value(rounding=ROUND_HALF_UP))
    if factor >= 1 and abs(Decimal(1) / factor - increment) <= FACTOR_TOLERANCE:
        return factor

    scaled = (increment * FALLBACK_SCALE).to_integral_value(rounding=ROUND_HALF_UP)
    if scaled == 0:
        raise QuantityError('INVALID_POLICY', min_increment=increment)
    factor = int((FALLBACK_SCALE / scaled).to_integral_value(rounding=ROUND_HALF_UP))
    # Increments above 2 would round to zero; whole units is the coarsest grid
    return max(factor, 1)


def to_base_units(quantity, min_increment, rounding_mode=RoundingMode.NEAREST) -> int:
    """
    Convert a decimal quantity to integer base units.

    Args:
        quantity: Decimal-like quantity
        min_increment: Policy increment
        rounding_mode: up (ceiling), down (floor) or nearest (half up)

    Returns:
        Integer base units
    """
    mode = _rounding_mode(rounding_mode)
    raw = to_decimal(quantity) * get_base_unit_factor(min_increment)

    if mode == RoundingMode.UP:
        units = (raw - ROUNDING_TOLERANCE).to_integral_value(rounding=ROUND_CEILING)
    elif mode == RoundingMode.DOWN:
        units = (raw + ROUNDING_TOLERANCE).to_integral_value(rounding=ROUND_FLOOR)
    else:
        units = raw.to_integral_value(rounding=ROUND_HALF_UP)
    return int(units)


def from_base_units(units: int, min_increment) -> Decimal:
    """Convert integer base units back to a decimal quantity."""
    return Decimal(units) / get_base_unit_factor(min_increment)
