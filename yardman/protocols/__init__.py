"""
Yardman Protocols.

Defines interfaces for the catalog, stock ledger and cart collaborators.
"""

from yardman.protocols.cart import (
    RESERVATION_KEY,
    Cart,
    CartStore,
    LineItem,
)
from yardman.protocols.catalog import (
    Catalog,
    VariantInfo,
)
from yardman.protocols.ledger import (
    Ledger,
    Reservation,
    ReservationRequest,
    StockReader,
    StockSnapshot,
)

__all__ = [
    "RESERVATION_KEY",
    "Cart",
    "CartStore",
    "LineItem",
    "Catalog",
    "VariantInfo",
    "Ledger",
    "Reservation",
    "ReservationRequest",
    "StockReader",
    "StockSnapshot",
]
