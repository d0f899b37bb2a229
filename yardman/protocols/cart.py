"""
Cart Protocol — Interface for the line item store.

Yardman reads line items and writes exactly two things back:
the normalized `quantity` and `metadata["reservation_id"]`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Protocol, runtime_checkable

RESERVATION_KEY = 'reservation_id'


@dataclass(frozen=True)
class LineItem:
    """Cart line item."""

    id: str
    variant_id: str | None
    quantity: Decimal
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def reservation_id(self) -> str | None:
        return self.metadata.get(RESERVATION_KEY) or None


@dataclass(frozen=True)
class Cart:
    """Cart with its line items in stored order."""

    id: str
    items: list[LineItem] = field(default_factory=list)

    def get_item(self, item_id: str) -> LineItem | None:
        return next((item for item in self.items if item.id == item_id), None)


@runtime_checkable
class CartStore(Protocol):
    """Protocol for cart persistence."""

    def get_cart(self, cart_id: str) -> Cart | None:
        """
        Load a cart with its line items.

        Returns:
            Cart or None if not found
        """
        ...

    def add_line_item(
        self,
        cart_id: str,
        variant_id: str,
        quantity: Decimal,
        metadata: dict[str, Any] | None = None,
    ) -> LineItem:
        """Add a line item. Quantity is already normalized."""
        ...

    def update_line_item(
        self,
        item_id: str,
        quantity: Decimal | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> LineItem:
        """
        Update a line item.

        A given metadata dict replaces the stored one. Yardman always
        passes a merged copy.
        """
        ...
