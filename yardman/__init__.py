"""
Django Yardman — Inventory for goods sold by the cut.

Quantity policies, available-to-sell and all-or-nothing checkout
reservations for continuous units (fabric yardage, rope, ribbon).

Usage:
    from yardman import inventory, QuantityError

    inventory.normalize(Decimal('2.3'), policy)   # 2.25 at 0.25 yd
    inventory.reserve(cart_id)
    inventory.release(cart_id)
"""


def __getattr__(name):
    """Lazy import to avoid circular imports during app loading."""
    if name == 'inventory':
        from yardman.service import Inventory
        return Inventory
    elif name == 'YardmanError':
        from yardman.exceptions import YardmanError
        return YardmanError
    elif name == 'QuantityError':
        from yardman.exceptions import QuantityError
        return QuantityError
    elif name == 'ReservationError':
        from yardman.exceptions import ReservationError
        return ReservationError
    elif name == 'CartError':
        from yardman.exceptions import CartError
        return CartError
    elif name == 'QuantityPolicy':
        from yardman.policy import QuantityPolicy
        return QuantityPolicy
    elif name == 'NormalizedQuantity':
        from yardman.services.normalizer import NormalizedQuantity
        return NormalizedQuantity
    elif name == 'RoundingMode':
        from yardman.enums import RoundingMode
        return RoundingMode
    elif name == 'BackorderPolicy':
        from yardman.enums import BackorderPolicy
        return BackorderPolicy
    elif name == 'StockStatus':
        from yardman.enums import StockStatus
        return StockStatus
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    'inventory',
    'YardmanError',
    'QuantityError',
    'ReservationError',
    'CartError',
    'QuantityPolicy',
    'NormalizedQuantity',
    'RoundingMode',
    'BackorderPolicy',
    'StockStatus',
]

__version__ = '0.1.0'
