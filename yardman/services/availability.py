"""
Availability — ATS, stock status and backorder decisions.

The functions at the top are pure and work in base units. AvailabilityQueries
wires them to the catalog and the ledger for per-variant reports.

    ats = stocked - reserved (+ incoming, if configured), never below zero
"""

from dataclasses import dataclass
from decimal import Decimal

from django.core.exceptions import ImproperlyConfigured

from yardman.conf import yardman_settings
from yardman.enums import BackorderPolicy, RoundingMode, StockStatus
from yardman.exceptions import ReservationError
from yardman.policy import WHOLE_UNITS
from yardman.protocols.ledger import StockReader, StockSnapshot
from yardman.services.normalizer import normalize_quantity
from yardman.units import from_base_units, to_base_units


# ══════════════════════════════════════════════════════════════
# PURE FUNCTIONS
# ══════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class BackorderDecision:
    """Whether a sale may proceed."""

    allowed: bool
    reason: str | None = None


def compute_ats_units(stocked_units: int, reserved_units: int, incoming_units: int = 0,
                      include_incoming_in_ats: bool = False) -> int:
    """Available-to-sell in base units. Never negative."""
    ats = stocked_units - reserved_units
    if include_incoming_in_ats:
        ats += incoming_units
    return max(0, ats)


def compute_ats_decimal(min_increment, stocked_units: int, reserved_units: int,
                        incoming_units: int = 0, include_incoming_in_ats: bool = False) -> Decimal:
    """Available-to-sell as a decimal quantity."""
    units = compute_ats_units(
        stocked_units, reserved_units, incoming_units, include_incoming_in_ats
    )
    return from_base_units(units, min_increment)


def get_stock_status(ats_units: int, low_stock_threshold, min_increment) -> StockStatus:
    """
    Classify stock.

    out_of_stock when nothing is available, low_stock at or below the
    threshold (a decimal, snapped with nearest rounding), else in_stock.
    """
    if ats_units <= 0:
        return StockStatus.OUT_OF_STOCK
    threshold_units = to_base_units(low_stock_threshold, min_increment, RoundingMode.NEAREST)
    if ats_units <= threshold_units:
        return StockStatus.LOW_STOCK
    return StockStatus.IN_STOCK


def decide_backorder(policy=BackorderPolicy.DENY, ats_units: int = 0) -> BackorderDecision:
    """
    Decide whether a sale may proceed at the given availability.

    Positive availability never needs a backorder, whatever the policy.
    allow_date is allowed here; the promised ship date is enforced elsewhere.
    """
    if ats_units > 0:
        return BackorderDecision(allowed=True)
    if policy in (BackorderPolicy.ALLOW_ANY, BackorderPolicy.ALLOW_DATE):
        return BackorderDecision(allowed=True)
    return BackorderDecision(allowed=False, reason="Backorders disabled")


# ══════════════════════════════════════════════════════════════
# QUERIES
# ══════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class AvailabilityReport:
    """Availability of one variant. Decimal fields use the policy's unit."""

    variant_id: str
    managed: bool
    status: StockStatus
    backorder: BackorderDecision
    inventory_item_id: str | None = None
    location_id: str | None = None
    stocked: Decimal = Decimal('0')
    reserved: Decimal = Decimal('0')
    incoming: Decimal = Decimal('0')
    ats: Decimal = Decimal('0')
    ats_units: int = 0
    low_stock_threshold: Decimal = Decimal('0')


class AvailabilityQueries:
    """
    Read-only availability lookups.

    Requires a ledger implementing StockReader. Reads are not locked:
    a report may be stale by the time a reservation is attempted.
    """

    def __init__(self, catalog=None, ledger=None):
        if catalog is None or ledger is None:
            from yardman.adapters import get_catalog, get_ledger
            catalog = catalog or get_catalog()
            ledger = ledger or get_ledger()
        self.catalog = catalog
        self.ledger = ledger

    def _reader(self) -> StockReader:
        if not isinstance(self.ledger, StockReader):
            raise ImproperlyConfigured(
                f"{type(self.ledger).__name__} does not implement get_stock_snapshot(); "
                "availability queries need a StockReader ledger."
            )
        return self.ledger

    def report(self, variant_id: str, location_id: str | None = None) -> AvailabilityReport:
        """
        Availability report for a variant.

        Raises:
            ReservationError('VARIANT_LOOKUP_FAILED'): unknown variant
            ReservationError('MISSING_INVENTORY_MAPPING'): managed, no item
        """
        variant = self.catalog.resolve_variant(variant_id)
        if variant is None:
            raise ReservationError('VARIANT_LOOKUP_FAILED', variant_id=variant_id)

        policy = self.catalog.resolve_quantity_policy(variant_id) or WHOLE_UNITS

        if variant.manage_inventory is False:
            return AvailabilityReport(
                variant_id=variant_id,
                managed=False,
                status=StockStatus.IN_STOCK,
                backorder=BackorderDecision(allowed=True),
                location_id=location_id,
                low_stock_threshold=policy.low_stock_threshold,
            )

        if not variant.inventory_item_id:
            raise ReservationError('MISSING_INVENTORY_MAPPING', variant_id=variant_id)

        snapshot: StockSnapshot = self._reader().get_stock_snapshot(
            variant.inventory_item_id, location_id
        )
        ats_units = compute_ats_units(
            snapshot.stocked_units,
            snapshot.reserved_units,
            snapshot.incoming_units,
            yardman_settings.INCLUDE_INCOMING_IN_ATS,
        )
        increment = policy.min_increment

        return AvailabilityReport(
            variant_id=variant_id,
            managed=True,
            status=get_stock_status(ats_units, policy.low_stock_threshold, increment),
            backorder=decide_backorder(policy.backorder_policy, ats_units),
            inventory_item_id=variant.inventory_item_id,
            location_id=location_id,
            stocked=from_base_units(snapshot.stocked_units, increment),
            reserved=from_base_units(snapshot.reserved_units, increment),
            incoming=from_base_units(snapshot.incoming_units, increment),
            ats=from_base_units(ats_units, increment),
            ats_units=ats_units,
            low_stock_threshold=policy.low_stock_threshold,
        )

    def check(self, variant_id: str, quantity, location_id: str | None = None) -> BackorderDecision:
        """
        Can this quantity be sold right now?

        The quantity is normalized first. If it fits within ATS the sale is
        allowed; otherwise the backorder policy decides on the shortfall.
        """
        report = self.report(variant_id, location_id)
        if not report.managed:
            return report.backorder

        policy = self.catalog.resolve_quantity_policy(variant_id) or WHOLE_UNITS
        requested_units = normalize_quantity(quantity, policy).base_units

        if requested_units <= report.ats_units:
            return BackorderDecision(allowed=True)
        return decide_backorder(policy.backorder_policy, report.ats_units - requested_units)

    def health(self, variant_ids: list[str], location_id: str | None = None,
               status: StockStatus | str | None = None) -> list[AvailabilityReport]:
        """Reports for several variants, optionally filtered by status."""
        reports = [self.report(variant_id, location_id) for variant_id in variant_ids]
        if status:
            reports = [r for r in reports if r.status == status]
        return reports
