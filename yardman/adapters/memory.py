"""
In-memory collaborators — stub adapters for development and testing.

Implements the Catalog, Ledger (with StockReader) and CartStore protocols
with plain dicts.

Usage in settings.py:
    YARDMAN = {
        "CATALOG_BACKEND": "yardman.adapters.memory.InMemoryCatalog",
        "LEDGER_BACKEND": "yardman.adapters.memory.InMemoryLedger",
        "CART_BACKEND": "yardman.adapters.memory.InMemoryCart",
    }

WARNING: Do NOT use in production. State lives in the process and is lost
on restart, and the ledger does not refuse reservations beyond stock.
"""

from __future__ import annotations

import itertools
import threading
from dataclasses import replace
from decimal import Decimal
from typing import Any

from yardman.conf import yardman_settings
from yardman.exceptions import CartError
from yardman.policy import QuantityPolicy, resolve_policy
from yardman.protocols.cart import Cart, LineItem
from yardman.protocols.catalog import VariantInfo
from yardman.protocols.ledger import Reservation, ReservationRequest, StockSnapshot
from yardman.units import to_decimal


class InMemoryCatalog:
    """Products and variants held in dicts."""

    def __init__(self):
        self._products: dict[str, dict[str, Any]] = {}
        self._variants: dict[str, VariantInfo] = {}

    def add_product(self, product_id: str, metadata: dict[str, Any] | None = None) -> None:
        self._products[product_id] = dict(metadata or {})

    def add_variant(self, variant_id: str, product_id: str | None = None,
                    manage_inventory: bool = True, inventory_item_id: str | None = None,
                    metadata: dict[str, Any] | None = None, **extra) -> VariantInfo:
        metadata = dict(metadata or {})
        variant = VariantInfo(
            id=variant_id,
            manage_inventory=manage_inventory,
            inventory_item_id=inventory_item_id or metadata.get('inventory_item_id'),
            product_id=product_id,
            metadata=metadata,
            **extra,
        )
        self._variants[variant_id] = variant
        return variant

    def resolve_variant(self, variant_id: str) -> VariantInfo | None:
        return self._variants.get(variant_id)

    def resolve_quantity_policy(self, variant_id: str) -> QuantityPolicy | None:
        variant = self._variants.get(variant_id)
        if variant is None:
            return None
        product_metadata = self._products.get(variant.product_id) if variant.product_id else None
        return resolve_policy(
            variant.metadata, product_metadata, yardman_settings.POLICY_METADATA_KEY
        )


class InMemoryLedger:
    """
    Stock levels and reservations held in dicts.

    Counters are base units per (inventory_item_id, location_id).
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        self._levels: dict[tuple[str, str | None], StockSnapshot] = {}
        self.reservations: dict[str, ReservationRequest] = {}

    def set_stock(self, inventory_item_id: str, stocked_units: int,
                  location_id: str | None = None, incoming_units: int = 0) -> None:
        key = (inventory_item_id, location_id)
        with self._lock:
            current = self._levels.get(key, StockSnapshot())
            self._levels[key] = replace(
                current, stocked_units=stocked_units, incoming_units=incoming_units
            )

    def _adjust_reserved(self, request: ReservationRequest, sign: int) -> None:
        key = (request.inventory_item_id, request.location_id)
        current = self._levels.get(key, StockSnapshot())
        reserved = current.reserved_units + sign * request.quantity
        self._levels[key] = replace(current, reserved_units=reserved)

    def create_reservations(self, requests: list[ReservationRequest]) -> list[Reservation]:
        created = []
        with self._lock:
            for request in requests:
                reservation_id = f"res_{next(self._ids)}"
                self.reservations[reservation_id] = request
                self._adjust_reserved(request, +1)
                created.append(Reservation(id=reservation_id, line_item_id=request.line_item_id))
        return created

    def delete_reservations(self, ids: list[str]) -> None:
        with self._lock:
            for reservation_id in ids:
                request = self.reservations.pop(reservation_id, None)
                if request is not None:
                    self._adjust_reserved(request, -1)

    def get_stock_snapshot(self, inventory_item_id: str,
                           location_id: str | None = None) -> StockSnapshot:
        with self._lock:
            levels = [
                level for (item, location), level in self._levels.items()
                if item == inventory_item_id and (location_id is None or location == location_id)
            ]
        return StockSnapshot(
            stocked_units=sum(level.stocked_units for level in levels),
            reserved_units=sum(level.reserved_units for level in levels),
            incoming_units=sum(level.incoming_units for level in levels),
        )


class InMemoryCart:
    """Carts and line items held in dicts."""

    def __init__(self):
        self._ids = itertools.count(1)
        self._carts: dict[str, list[str]] = {}
        self._items: dict[str, LineItem] = {}

    def create_cart(self, cart_id: str | None = None) -> Cart:
        cart_id = cart_id or f"cart_{next(self._ids)}"
        self._carts.setdefault(cart_id, [])
        return self.get_cart(cart_id)

    def get_cart(self, cart_id: str) -> Cart | None:
        item_ids = self._carts.get(cart_id)
        if item_ids is None:
            return None
        return Cart(id=cart_id, items=[self._items[item_id] for item_id in item_ids])

    def add_line_item(self, cart_id: str, variant_id: str, quantity: Decimal,
                      metadata: dict[str, Any] | None = None) -> LineItem:
        if cart_id not in self._carts:
            raise CartError('CART_NOT_FOUND', cart_id=cart_id)
        item = LineItem(
            id=f"li_{next(self._ids)}",
            variant_id=variant_id,
            quantity=to_decimal(quantity),
            metadata=dict(metadata or {}),
        )
        self._items[item.id] = item
        self._carts[cart_id].append(item.id)
        return item

    def update_line_item(self, item_id: str, quantity: Decimal | None = None,
                         metadata: dict[str, Any] | None = None) -> LineItem:
        item = self._items.get(item_id)
        if item is None:
            raise CartError('LINE_ITEM_NOT_FOUND', item_id=item_id)
        changes = {}
        if quantity is not None:
            changes['quantity'] = to_decimal(quantity)
        if metadata is not None:
            changes['metadata'] = dict(metadata)
        item = replace(item, **changes)
        self._items[item_id] = item
        return item
