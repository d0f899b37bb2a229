"""
Cart quantity gate — normalizes quantities before they reach the cart.

Runs identically on add and on update, so a stored quantity is always a
value the normalizer itself would produce.

Usage:
    gate = CartQuantityGate()
    item = gate.add_line_item('cart_1', 'var_linen', Decimal('2.3'))
    item.quantity  # Decimal('2.25') for a 0.25 increment
"""

import logging
from decimal import Decimal
from typing import Any

from django.core.exceptions import ValidationError
from django.utils.translation import gettext as _

from yardman.exceptions import CartError, QuantityError
from yardman.policy import QuantityPolicy
from yardman.protocols.cart import LineItem
from yardman.services.normalizer import normalize_quantity
from yardman.units import to_decimal

logger = logging.getLogger('yardman')

# Errors the buyer can fix by changing the quantity input
USER_CORRECTABLE = ('INVALID_QUANTITY', 'NEGATIVE_QUANTITY', 'BELOW_MINIMUM_CUT')


def _user_message(error: QuantityError, policy: QuantityPolicy | None) -> str:
    if error.code == 'BELOW_MINIMUM_CUT':
        unit = f" {policy.uom}" if policy and policy.uom else ""
        return _("Minimum order is %(min_cut)s%(unit)s") % {
            'min_cut': f"{error.data['min_cut'].normalize():f}",
            'unit': unit,
        }
    if error.code == 'NEGATIVE_QUANTITY':
        return _("Quantity cannot be negative")
    return _("Enter a valid quantity")


class CartQuantityGate:
    """Quantity gate in front of the cart store."""

    def __init__(self, catalog=None, cart=None):
        if catalog is None or cart is None:
            from yardman.adapters import get_cart, get_catalog
            catalog = catalog or get_catalog()
            cart = cart or get_cart()
        self.catalog = catalog
        self.cart = cart

    def resolve_policy(self, variant_id: str) -> QuantityPolicy | None:
        """Variant policy, else product policy, else None."""
        return self.catalog.resolve_quantity_policy(variant_id)

    def normalize(self, variant_id: str, quantity) -> Decimal:
        """
        Normalized quantity for a variant.

        Without a policy the quantity passes through unchanged.

        Raises:
            QuantityError: see normalize_quantity()
        """
        policy = self.resolve_policy(variant_id)
        if policy is None:
            return to_decimal(quantity)
        return normalize_quantity(quantity, policy).decimal

    def clean_quantity(self, variant_id: str, quantity) -> Decimal:
        """
        Like normalize(), with buyer-fixable errors as ValidationError.

        INVALID_POLICY is a catalog misconfiguration and propagates.

        Raises:
            ValidationError: quantity rejected (shown on the quantity input)
        """
        policy = self.resolve_policy(variant_id)
        if policy is None:
            try:
                return to_decimal(quantity)
            except QuantityError as e:
                raise ValidationError(_user_message(e, None), code=e.code.lower()) from e

        try:
            return normalize_quantity(quantity, policy).decimal
        except QuantityError as e:
            if e.code not in USER_CORRECTABLE:
                raise
            logger.info(
                "quantity.rejected",
                extra={"variant_id": variant_id, "code": e.code, "requested": str(quantity)},
            )
            raise ValidationError(_user_message(e, policy), code=e.code.lower()) from e

    def add_line_item(self, cart_id: str, variant_id: str, quantity,
                      metadata: dict[str, Any] | None = None) -> LineItem:
        """Normalize, then add to the cart."""
        normalized = self.clean_quantity(variant_id, quantity)
        return self.cart.add_line_item(cart_id, variant_id, normalized, metadata or {})

    def update_line_item(self, cart_id: str, item_id: str, quantity,
                         variant_id: str | None = None) -> LineItem:
        """
        Normalize, then update a line item's quantity.

        When variant_id isn't given it is read from the stored line item.

        Raises:
            CartError('CART_NOT_FOUND' | 'LINE_ITEM_NOT_FOUND')
        """
        if variant_id is None:
            cart = self.cart.get_cart(cart_id)
            if cart is None:
                raise CartError('CART_NOT_FOUND', cart_id=cart_id)
            item = cart.get_item(item_id)
            if item is None:
                raise CartError('LINE_ITEM_NOT_FOUND', cart_id=cart_id, item_id=item_id)
            variant_id = item.variant_id

        if variant_id is None:
            # Custom line without a variant: nothing to resolve a policy from
            normalized = to_decimal(quantity)
        else:
            normalized = self.clean_quantity(variant_id, quantity)
        return self.cart.update_line_item(item_id, quantity=normalized)
