"""
Tests for the cart quantity gate.
"""

import logging
from decimal import Decimal

import pytest
from django.core.exceptions import ValidationError

from yardman.exceptions import CartError, QuantityError
from yardman.services.gate import CartQuantityGate


class TestAddLineItem:
    """Tests for CartQuantityGate.add_line_item()."""

    def test_quantity_normalized(self, linen, cart):
        item = CartQuantityGate().add_line_item('cart_1', 'var_linen', Decimal('2.3'))

        assert item.quantity == Decimal('2.25')

    def test_stored_quantity_is_normalized(self, linen, cart, cart_store):
        item = CartQuantityGate().add_line_item('cart_1', 'var_linen', '2.3')

        stored = cart_store.get_cart('cart_1').get_item(item.id)
        assert stored.quantity == Decimal('2.25')

    def test_metadata_passed_through(self, linen, cart):
        item = CartQuantityGate().add_line_item(
            'cart_1', 'var_linen', '2', metadata={'gift_wrap': True},
        )

        assert item.metadata == {'gift_wrap': True}

    def test_variant_override(self, canvas, cart):
        """Canvas variant: 0.5 increments, rounding up, no min cut."""
        item = CartQuantityGate().add_line_item('cart_1', 'var_canvas', '1.2')

        assert item.quantity == Decimal('1.5')

    def test_no_policy_passes_through(self, buttons, cart):
        item = CartQuantityGate().add_line_item('cart_1', 'var_buttons', '2.5')

        assert item.quantity == Decimal('2.5')

    def test_below_minimum_cut(self, linen, cart, cart_store):
        with pytest.raises(ValidationError) as exc:
            CartQuantityGate().add_line_item('cart_1', 'var_linen', '0.5')

        assert exc.value.messages == ["Minimum order is 1 yard"]
        assert exc.value.code == 'below_minimum_cut'
        assert cart_store.get_cart('cart_1').items == []

    def test_below_minimum_cut_without_uom(self, catalog, cart):
        catalog.add_variant(
            'var_ribbon', inventory_item_id='inv_ribbon',
            metadata={'inventory': {'min_increment': 0.5, 'min_cut': 1.5}},
        )

        with pytest.raises(ValidationError) as exc:
            CartQuantityGate().add_line_item('cart_1', 'var_ribbon', '1')

        assert exc.value.messages == ["Minimum order is 1.5"]

    def test_negative(self, linen, cart):
        with pytest.raises(ValidationError) as exc:
            CartQuantityGate().add_line_item('cart_1', 'var_linen', '-2')

        assert exc.value.code == 'negative_quantity'

    @pytest.mark.parametrize('variant', ['var_linen', 'var_buttons'])
    def test_not_a_number(self, linen, buttons, cart, variant):
        with pytest.raises(ValidationError) as exc:
            CartQuantityGate().add_line_item('cart_1', variant, 'two')

        assert exc.value.code == 'invalid_quantity'

    @pytest.mark.parametrize('variant', ['var_linen', 'var_buttons'])
    def test_huge_exponent(self, linen, buttons, cart, cart_store, variant):
        with pytest.raises(ValidationError) as exc:
            CartQuantityGate().add_line_item('cart_1', variant, '1e999999999')

        assert exc.value.code == 'invalid_quantity'
        assert cart_store.get_cart('cart_1').items == []

    def test_rejection_logged(self, linen, cart, caplog):
        caplog.set_level(logging.INFO, logger='yardman')

        with pytest.raises(ValidationError):
            CartQuantityGate().add_line_item('cart_1', 'var_linen', '0.5')

        record = next(r for r in caplog.records if r.getMessage() == 'quantity.rejected')
        assert record.code == 'BELOW_MINIMUM_CUT'
        assert record.variant_id == 'var_linen'

    def test_invalid_policy_propagates(self, catalog, cart):
        """A broken catalog policy is not the buyer's fault."""
        catalog.add_variant(
            'var_broken', inventory_item_id='inv_broken',
            metadata={'inventory': {'min_increment': -0.25}},
        )

        with pytest.raises(QuantityError) as exc:
            CartQuantityGate().add_line_item('cart_1', 'var_broken', '2')

        assert exc.value.code == 'INVALID_POLICY'

    def test_unknown_cart(self, linen):
        with pytest.raises(CartError) as exc:
            CartQuantityGate().add_line_item('cart_missing', 'var_linen', '2')

        assert exc.value.code == 'CART_NOT_FOUND'


class TestUpdateLineItem:
    """Tests for CartQuantityGate.update_line_item()."""

    @pytest.fixture
    def item(self, linen, cart):
        return CartQuantityGate().add_line_item('cart_1', 'var_linen', '2')

    def test_variant_read_from_line_item(self, item):
        updated = CartQuantityGate().update_line_item('cart_1', item.id, '3.1')

        assert updated.quantity == Decimal('3')

    def test_explicit_variant(self, item):
        updated = CartQuantityGate().update_line_item(
            'cart_1', item.id, '3.6', variant_id='var_linen',
        )

        assert updated.quantity == Decimal('3.5')

    def test_same_rules_as_add(self, item):
        with pytest.raises(ValidationError) as exc:
            CartQuantityGate().update_line_item('cart_1', item.id, '0.25')

        assert exc.value.code == 'below_minimum_cut'

    def test_stored_quantity_unchanged_by_update(self, item):
        """Updating to the stored quantity keeps it as is."""
        updated = CartQuantityGate().update_line_item('cart_1', item.id, item.quantity)

        assert updated.quantity == item.quantity

    def test_metadata_kept(self, linen, cart):
        gate = CartQuantityGate()
        item = gate.add_line_item('cart_1', 'var_linen', '2', metadata={'note': 'selvedge'})

        updated = gate.update_line_item('cart_1', item.id, '4')

        assert updated.metadata == {'note': 'selvedge'}

    def test_unknown_item(self, item):
        with pytest.raises(CartError) as exc:
            CartQuantityGate().update_line_item('cart_1', 'li_missing', '2')

        assert exc.value.code == 'LINE_ITEM_NOT_FOUND'

    def test_unknown_cart(self, item):
        with pytest.raises(CartError) as exc:
            CartQuantityGate().update_line_item('cart_missing', item.id, '2')

        assert exc.value.code == 'CART_NOT_FOUND'


class TestNormalize:
    """Tests for CartQuantityGate.normalize()."""

    def test_with_policy(self, linen):
        assert CartQuantityGate().normalize('var_linen', '2.3') == Decimal('2.25')

    def test_without_policy(self, buttons):
        assert CartQuantityGate().normalize('var_buttons', '7') == Decimal('7')

    def test_raises_quantity_error(self, linen):
        with pytest.raises(QuantityError) as exc:
            CartQuantityGate().normalize('var_linen', '0.5')

        assert exc.value.code == 'BELOW_MINIMUM_CUT'
