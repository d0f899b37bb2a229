"""
Inventory Service — The single public interface for Yardman.

Usage:
    from yardman import inventory, QuantityError

    inventory.normalize(Decimal('2.3'), policy)       # 2.25 at 0.25 increments
    inventory.add_to_cart('cart_1', 'var_linen', '2.3')
    inventory.reserve('cart_1')                      # checkout start
    inventory.release('cart_1')                      # abandoned/cancelled
"""

from decimal import Decimal

from yardman.enums import BackorderPolicy, StockStatus
from yardman.policy import QuantityPolicy
from yardman.protocols.cart import LineItem
from yardman.services.availability import (
    AvailabilityQueries,
    AvailabilityReport,
    BackorderDecision,
    compute_ats_decimal,
    compute_ats_units,
    decide_backorder,
    get_stock_status,
)
from yardman.services.gate import CartQuantityGate
from yardman.services.normalizer import NormalizedQuantity, normalize_quantity
from yardman.services.reservations import ReservationOrchestrator, ReservedLine
from yardman.units import from_base_units, get_base_unit_factor, to_base_units


class Inventory:
    """
    Single interface for all inventory operations.

    Pure operations (units, normalization, ATS) need no configuration.
    Cart and checkout operations use the backends configured in
    settings.YARDMAN; see yardman.adapters.
    """

    # ══════════════════════════════════════════════════════════════
    # UNITS & NORMALIZATION
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def base_unit_factor(cls, min_increment) -> int:
        return get_base_unit_factor(min_increment)

    @classmethod
    def to_base_units(cls, quantity, min_increment, rounding_mode='nearest') -> int:
        return to_base_units(quantity, min_increment, rounding_mode)

    @classmethod
    def from_base_units(cls, units: int, min_increment) -> Decimal:
        return from_base_units(units, min_increment)

    @classmethod
    def normalize(cls, quantity, policy: QuantityPolicy) -> NormalizedQuantity:
        """See yardman.services.normalizer.normalize_quantity()."""
        return normalize_quantity(quantity, policy)

    # ══════════════════════════════════════════════════════════════
    # AVAILABILITY
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def ats_units(cls, stocked_units: int, reserved_units: int, incoming_units: int = 0,
                  include_incoming_in_ats: bool = False) -> int:
        return compute_ats_units(stocked_units, reserved_units, incoming_units,
                                 include_incoming_in_ats)

    @classmethod
    def ats(cls, min_increment, stocked_units: int, reserved_units: int,
            incoming_units: int = 0, include_incoming_in_ats: bool = False) -> Decimal:
        return compute_ats_decimal(min_increment, stocked_units, reserved_units,
                                   incoming_units, include_incoming_in_ats)

    @classmethod
    def stock_status(cls, ats_units: int, low_stock_threshold, min_increment) -> StockStatus:
        return get_stock_status(ats_units, low_stock_threshold, min_increment)

    @classmethod
    def backorder(cls, policy=BackorderPolicy.DENY, ats_units: int = 0) -> BackorderDecision:
        return decide_backorder(policy, ats_units)

    @classmethod
    def availability(cls, variant_id: str, location_id: str | None = None) -> AvailabilityReport:
        """Stock report for a variant (needs a StockReader ledger)."""
        return AvailabilityQueries().report(variant_id, location_id)

    @classmethod
    def can_sell(cls, variant_id: str, quantity, location_id: str | None = None) -> BackorderDecision:
        """Whether quantity can be sold now, backorders included."""
        return AvailabilityQueries().check(variant_id, quantity, location_id)

    @classmethod
    def health(cls, variant_ids: list[str], location_id: str | None = None,
               status=None) -> list[AvailabilityReport]:
        return AvailabilityQueries().health(variant_ids, location_id, status)

    # ══════════════════════════════════════════════════════════════
    # CART
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def add_to_cart(cls, cart_id: str, variant_id: str, quantity,
                    metadata: dict | None = None) -> LineItem:
        """
        Add a line item with its quantity normalized.

        Raises:
            ValidationError: quantity rejected by the variant's policy
        """
        return CartQuantityGate().add_line_item(cart_id, variant_id, quantity, metadata)

    @classmethod
    def update_cart_item(cls, cart_id: str, item_id: str, quantity,
                         variant_id: str | None = None) -> LineItem:
        """Update a line item's quantity, normalized like add_to_cart()."""
        return CartQuantityGate().update_line_item(cart_id, item_id, quantity, variant_id)

    # ══════════════════════════════════════════════════════════════
    # CHECKOUT RESERVATIONS
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def reserve(cls, cart_id: str, location_id: str | None = None) -> list[ReservedLine]:
        """
        Reserve the whole cart at checkout start. All or nothing.

        Checkout must not move on to payment unless this returns.
        See ReservationOrchestrator.reserve_on_checkout_start().
        """
        return ReservationOrchestrator().reserve_on_checkout_start(cart_id, location_id)

    @classmethod
    def release(cls, cart_id: str) -> list[str]:
        """Release the cart's reservations. Idempotent."""
        return ReservationOrchestrator().release_reservations(cart_id)

    @classmethod
    def reservation_state(cls, cart_id: str):
        return ReservationOrchestrator().state(cart_id)
