"""
Tests for quantity policies.
"""

from decimal import Decimal

import pytest

from yardman.enums import BackorderPolicy, RoundingMode
from yardman.exceptions import QuantityError
from yardman.policy import QuantityPolicy, resolve_policy


class TestQuantityPolicy:
    """Tests for QuantityPolicy construction."""

    def test_defaults(self):
        policy = QuantityPolicy(min_increment=Decimal('0.25'))

        assert policy.min_cut is None
        assert policy.rounding_mode == RoundingMode.NEAREST
        assert policy.backorder_policy == BackorderPolicy.DENY
        assert policy.low_stock_threshold == Decimal('0')

    def test_loose_inputs_normalized(self):
        policy = QuantityPolicy(min_increment=0.25, min_cut='1.5', rounding_mode='up')

        assert policy.min_increment == Decimal('0.25')
        assert policy.min_cut == Decimal('1.5')
        assert policy.rounding_mode is RoundingMode.UP

    def test_unknown_backorder_policy(self):
        with pytest.raises(QuantityError) as exc:
            QuantityPolicy(min_increment=Decimal('1'), backorder_policy='maybe')

        assert exc.value.code == 'INVALID_POLICY'


class TestFromMetadata:
    """Tests for QuantityPolicy.from_metadata()."""

    def test_full_blob(self):
        policy = QuantityPolicy.from_metadata({
            'min_increment': 0.25,
            'min_cut': 1,
            'rounding_mode': 'down',
            'backorder_policy': 'allow_date',
            'low_stock_threshold': 2,
            'uom': 'yard',
        })

        assert policy == QuantityPolicy(
            min_increment=Decimal('0.25'),
            min_cut=Decimal('1'),
            rounding_mode=RoundingMode.DOWN,
            backorder_policy=BackorderPolicy.ALLOW_DATE,
            low_stock_threshold=Decimal('2'),
            uom='yard',
        )

    def test_missing_increment_defaults_to_whole_units(self):
        policy = QuantityPolicy.from_metadata({'min_cut': 1})

        assert policy.min_increment == Decimal('1')

    def test_non_numeric_fields_ignored(self):
        policy = QuantityPolicy.from_metadata({
            'min_increment': '0.25',
            'min_cut': 'one',
            'low_stock_threshold': None,
        })

        assert policy.min_increment == Decimal('1')
        assert policy.min_cut is None
        assert policy.low_stock_threshold == Decimal('0')

    def test_bad_rounding_mode(self):
        with pytest.raises(QuantityError) as exc:
            QuantityPolicy.from_metadata({'min_increment': 0.25, 'rounding_mode': 'ceil'})

        assert exc.value.code == 'INVALID_POLICY'

    @pytest.mark.parametrize('blob', [None, {}])
    def test_empty_blob_is_no_policy(self, blob):
        assert QuantityPolicy.from_metadata(blob) is None


class TestResolvePolicy:
    """Tests for resolve_policy(): variant, then product, then none."""

    def test_variant_overrides_product(self):
        policy = resolve_policy(
            {'inventory': {'min_increment': 0.5}},
            {'inventory': {'min_increment': 0.25}},
        )

        assert policy.min_increment == Decimal('0.5')

    def test_falls_back_to_product(self):
        policy = resolve_policy({'color': 'red'}, {'inventory': {'min_increment': 0.25}})

        assert policy.min_increment == Decimal('0.25')

    def test_no_policy(self):
        assert resolve_policy({'color': 'red'}, None) is None
        assert resolve_policy(None, None) is None

    def test_custom_key(self):
        policy = resolve_policy({'cutting': {'min_increment': 0.1}}, None, key='cutting')

        assert policy.min_increment == Decimal('0.1')
