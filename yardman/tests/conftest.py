"""
Pytest fixtures for Yardman tests.
"""

from decimal import Decimal

import pytest

from yardman.adapters import get_cart, get_catalog, get_ledger, reset_backends
from yardman.policy import QuantityPolicy


@pytest.fixture(autouse=True)
def fresh_backends():
    """Every test starts with empty in-memory collaborators."""
    reset_backends()
    yield
    reset_backends()


@pytest.fixture
def catalog():
    return get_catalog()


@pytest.fixture
def ledger():
    return get_ledger()


@pytest.fixture
def cart_store():
    return get_cart()


@pytest.fixture
def fabric_policy():
    """Quarter-yard increments, one yard minimum cut."""
    return QuantityPolicy(
        min_increment=Decimal('0.25'),
        min_cut=Decimal('1'),
        uom='yard',
    )


@pytest.fixture
def linen(catalog):
    """Fabric with the policy on the product (variant inherits it)."""
    catalog.add_product('prod_linen', metadata={
        'inventory': {
            'min_increment': 0.25,
            'min_cut': 1,
            'low_stock_threshold': 1,
            'uom': 'yard',
        },
    })
    return catalog.add_variant('var_linen', product_id='prod_linen', inventory_item_id='inv_linen')


@pytest.fixture
def canvas(catalog):
    """Fabric whose variant overrides the product policy."""
    catalog.add_product('prod_canvas', metadata={
        'inventory': {'min_increment': 0.25, 'min_cut': 2},
    })
    return catalog.add_variant(
        'var_canvas',
        product_id='prod_canvas',
        inventory_item_id='inv_canvas',
        metadata={
            'inventory': {
                'min_increment': 0.5,
                'rounding_mode': 'up',
                'backorder_policy': 'allow_any',
            },
        },
    )


@pytest.fixture
def buttons(catalog):
    """Countable goods: inventory-managed, no quantity policy."""
    catalog.add_product('prod_buttons')
    return catalog.add_variant('var_buttons', product_id='prod_buttons', inventory_item_id='inv_buttons')


@pytest.fixture
def gift_card(catalog):
    """Not inventory-managed."""
    return catalog.add_variant('var_giftcard', manage_inventory=False)


@pytest.fixture
def cart(cart_store):
    return cart_store.create_cart('cart_1')


@pytest.fixture
def stocked(ledger):
    """10 yd of linen, 5 yd of canvas, 100 buttons at the main location."""
    ledger.set_stock('inv_linen', 40, 'sloc_main', incoming_units=8)
    ledger.set_stock('inv_canvas', 10, 'sloc_main')
    ledger.set_stock('inv_buttons', 100, 'sloc_main')
    return ledger
