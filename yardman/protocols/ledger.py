"""
Ledger Protocol.

Defines the interface for Yardman to reserve and release stock in the
authoritative stock service. Yardman never keeps stock counters itself.

Both calls are batch operations: the orchestrator issues one create per
checkout and never one call per line item.
"""

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


# ══════════════════════════════════════════════════════════════
# DATA TYPES
# ══════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class ReservationRequest:
    """Reservation for one line item, in base units."""

    inventory_item_id: str
    quantity: int
    location_id: str | None = None
    line_item_id: str | None = None
    cart_id: str | None = None


@dataclass(frozen=True)
class Reservation:
    """Reservation created by the ledger."""

    id: str
    line_item_id: str | None = None


@dataclass(frozen=True)
class StockSnapshot:
    """Stock counters for one inventory item, in base units."""

    stocked_units: int = 0
    reserved_units: int = 0
    incoming_units: int = 0


# ══════════════════════════════════════════════════════════════
# PROTOCOLS
# ══════════════════════════════════════════════════════════════


@runtime_checkable
class Ledger(Protocol):
    """
    Interface for the stock ledger.

    Implementations:
        - InMemoryLedger: for development and tests
        - Your stock service client
    """

    def create_reservations(
        self,
        requests: list[ReservationRequest],
    ) -> list[Reservation]:
        """
        Create reservations in bulk.

        Should return one Reservation per request. Anything else is
        treated as a partial failure and compensated by Yardman.

        Args:
            requests: Reservation requests

        Returns:
            Created reservations
        """
        ...

    def delete_reservations(
        self,
        ids: list[str],
    ) -> None:
        """
        Delete reservations in bulk. Unknown ids are ignored.

        Args:
            ids: Reservation ids
        """
        ...


@runtime_checkable
class StockReader(Protocol):
    """
    Optional ledger capability for availability queries.

    Reservations work without it. Availability reports require it.
    """

    def get_stock_snapshot(
        self,
        inventory_item_id: str,
        location_id: str | None = None,
    ) -> StockSnapshot:
        """
        Read stock counters.

        Args:
            inventory_item_id: Inventory item
            location_id: Location (None = all locations combined)

        Returns:
            StockSnapshot in base units
        """
        ...
