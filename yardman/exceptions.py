"""
Exceptions for Yardman.

All errors carry a structured code for programmatic handling.
"""

from decimal import Decimal
from typing import Any


class YardmanError(Exception):
    """
    Base structured exception.

    Usage:
        try:
            inventory.normalize(Decimal('0.5'), policy)
        except QuantityError as e:
            if e.code == 'BELOW_MINIMUM_CUT':
                print(f"Minimum order is {e.data['min_cut']}")

    Attributes:
        code: Error code for programmatic handling
        message: Human-readable message
        data: Additional context data
    """

    _default_messages: dict[str, str] = {}

    def __init__(self, code: str, message: str | None = None, **data):
        self.code = code
        self.message = message or self._default_messages.get(code, code)
        self.data = data
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.code!r}, {self.message!r})"

    def as_dict(self) -> dict[str, Any]:
        """Serialize to dict (useful for APIs)."""
        return {
            'code': self.code,
            'message': self.message,
            'data': {
                k: str(v) if isinstance(v, Decimal) else v
                for k, v in self.data.items()
            }
        }


class QuantityError(YardmanError):
    """Quantity policy and normalization errors."""

    _default_messages = {
        'INVALID_POLICY': 'Invalid quantity policy',
        'INVALID_QUANTITY': 'Quantity must be a number',
        'NEGATIVE_QUANTITY': 'Quantity must be >= 0',
        'BELOW_MINIMUM_CUT': 'Quantity below minimum cut',
    }

    @property
    def requested(self) -> Decimal:
        """Shortcut for data['requested']."""
        return self.data.get('requested', Decimal('0'))


class ReservationError(YardmanError):
    """
    Checkout reservation errors.

    None of these leave a cart partially reserved, except
    metadata write failures after a successful Ledger commit,
    which are logged with the orphaned reservation ids.
    """

    _default_messages = {
        'VARIANT_LOOKUP_FAILED': 'Failed to load variant',
        'MISSING_INVENTORY_MAPPING': 'Managed variant has no inventory item',
        'ALREADY_RESERVED': 'Cart already holds reservations',
        'RESERVATION_FAILED': 'Failed to reserve inventory',
        'RESERVATION_MISMATCH': 'Reservation mismatch',
        'RELEASE_FAILED': 'Failed to release reservation',
    }


class CartError(YardmanError):
    """Cart collaborator lookups that came back empty."""

    _default_messages = {
        'CART_NOT_FOUND': 'Cart not found',
        'LINE_ITEM_NOT_FOUND': 'Line item not found',
    }
