"""
Checkout reservations — reserve a whole cart at once, release it later.

A cart's reservations are created and released as one unit:

    ┌────────────┐  reserve_on_checkout_start()  ┌──────────┐
    │ UNRESERVED │ ────────────────────────────► │ RESERVED │
    └────────────┘ ◄──────────────────────────── └──────────┘
                      release_reservations()

RESERVING and RELEASING only exist while these calls run.

Atomicity:
    One bulk create call per cart. If the ledger fails, or returns fewer
    reservations than requested, whatever was created is deleted again and
    no line item is touched. reservation_id is written to line item metadata
    only after the whole batch succeeded.

Known gap:
    A crash between the ledger commit and the metadata writes leaves live
    reservations with no recorded id. It is logged with the ids
    ("reservation.metadata.failed") for reconciliation against the ledger.
    The same window on release leaves a recorded id whose reservation is
    gone ("reservation.release.metadata.failed"); releasing again clears it.

Concurrency:
    No locking across carts. Two checkouts may both reserve against the
    same stock. Serializing that is the ledger's job.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal

from yardman.conf import yardman_settings
from yardman.enums import ReservationState
from yardman.exceptions import CartError, ReservationError
from yardman.policy import WHOLE_UNITS
from yardman.protocols.cart import RESERVATION_KEY, Cart, LineItem
from yardman.protocols.ledger import Reservation, ReservationRequest
from yardman.units import to_base_units

logger = logging.getLogger('yardman')


@dataclass(frozen=True)
class ReservedLine:
    """Reservation recorded on a line item."""

    line_item_id: str
    variant_id: str
    quantity: Decimal
    base_units: int
    location_id: str | None
    reservation_id: str


@dataclass(frozen=True)
class _Pending:
    item: LineItem
    variant_id: str
    request: ReservationRequest


class ReservationOrchestrator:
    """Reservation lifecycle for carts."""

    def __init__(self, catalog=None, ledger=None, cart=None):
        if catalog is None or ledger is None or cart is None:
            from yardman.adapters import get_cart, get_catalog, get_ledger
            catalog = catalog or get_catalog()
            ledger = ledger or get_ledger()
            cart = cart or get_cart()
        self.catalog = catalog
        self.ledger = ledger
        self.cart = cart

    # ══════════════════════════════════════════════════════════════
    # QUERIES
    # ══════════════════════════════════════════════════════════════

    def state(self, cart_id: str) -> ReservationState:
        """RESERVED if any line item carries a reservation_id."""
        cart = self.cart.get_cart(cart_id)
        if cart and any(item.reservation_id for item in cart.items):
            return ReservationState.RESERVED
        return ReservationState.UNRESERVED

    # ══════════════════════════════════════════════════════════════
    # RESERVE
    # ══════════════════════════════════════════════════════════════

    def reserve_on_checkout_start(self, cart_id: str,
                                  location_id: str | None = None) -> list[ReservedLine]:
        """
        Reserve stock for every inventory-managed line item.

        Args:
            cart_id: Cart to reserve
            location_id: Stock location (None = DEFAULT_LOCATION_ID setting)

        Returns:
            One ReservedLine per reserved item ([] if nothing to reserve)

        Raises:
            CartError('CART_NOT_FOUND')
            ReservationError('ALREADY_RESERVED'): items already hold ids
            ReservationError('VARIANT_LOOKUP_FAILED'): catalog failed, no ledger call
            ReservationError('MISSING_INVENTORY_MAPPING'): no ledger call
            ReservationError('RESERVATION_FAILED'): ledger raised
            ReservationError('RESERVATION_MISMATCH'): partial result, rolled back
        """
        cart = self.cart.get_cart(cart_id)
        if cart is None:
            raise CartError('CART_NOT_FOUND', cart_id=cart_id)
        if not cart.items:
            return []

        already = [item.id for item in cart.items if item.reservation_id]
        if already:
            raise ReservationError('ALREADY_RESERVED', cart_id=cart_id, line_item_ids=already)

        location = location_id or yardman_settings.DEFAULT_LOCATION_ID or None
        pending = self._build_requests(cart, location)
        if not pending:
            return []

        created = self._create_all(cart_id, pending)
        return self._record(cart_id, pending, created)

    def _resolve(self, variant_id: str):
        try:
            variant = self.catalog.resolve_variant(variant_id)
            policy = self.catalog.resolve_quantity_policy(variant_id)
        except Exception as e:
            raise ReservationError(
                'VARIANT_LOOKUP_FAILED',
                f"Failed to load variant {variant_id}: {e}",
                variant_id=variant_id,
            ) from e
        if variant is None:
            raise ReservationError(
                'VARIANT_LOOKUP_FAILED',
                f"Failed to load variant {variant_id}: not found",
                variant_id=variant_id,
            )
        return variant, policy

    def _build_requests(self, cart: Cart, location_id: str | None) -> list[_Pending]:
        """Resolve every line before touching the ledger."""
        pending = []

        for item in cart.items:
            if not item.variant_id:
                continue

            variant, policy = self._resolve(item.variant_id)
            if variant.manage_inventory is False:
                continue

            if not variant.inventory_item_id:
                logger.error(
                    "reservation.mapping.missing",
                    extra={"cart_id": cart.id, "variant_id": item.variant_id},
                )
                raise ReservationError(
                    'MISSING_INVENTORY_MAPPING',
                    f"Missing inventory_item_id for managed variant {item.variant_id}",
                    variant_id=item.variant_id,
                )

            # Ledger counts in base units; unpoliced goods in whole units, rounded up
            policy = policy or WHOLE_UNITS
            units = to_base_units(item.quantity, policy.min_increment, policy.rounding_mode)

            pending.append(_Pending(
                item=item,
                variant_id=item.variant_id,
                request=ReservationRequest(
                    inventory_item_id=variant.inventory_item_id,
                    quantity=units,
                    location_id=location_id,
                    line_item_id=item.id,
                    cart_id=cart.id,
                ),
            ))

        return pending

    def _create_all(self, cart_id: str, pending: list[_Pending]) -> list[Reservation]:
        """One bulk create. Partial results are deleted again."""
        requests = [p.request for p in pending]
        try:
            created = list(self.ledger.create_reservations(requests) or [])
        except Exception as e:
            logger.warning(
                "reservation.batch.failed",
                extra={"cart_id": cart_id, "requested": len(requests), "error": str(e)},
            )
            raise ReservationError(
                'RESERVATION_FAILED',
                f"Failed to reserve inventory: {e}",
                cart_id=cart_id,
            ) from e

        ordered = self._match(pending, created)
        if ordered is not None:
            return ordered

        ids = [r.id for r in created if r is not None and r.id]
        logger.warning(
            "reservation.batch.mismatch",
            extra={"cart_id": cart_id, "requested": len(requests),
                   "returned": len(created), "rollback_ids": ids},
        )
        error = ReservationError(
            'RESERVATION_MISMATCH',
            f"Reservation mismatch: requested {len(requests)}, created {len(created)}",
            cart_id=cart_id,
            requested=len(requests),
            created=len(created),
        )
        if ids:
            try:
                self.ledger.delete_reservations(ids)
            except Exception as e:
                logger.error(
                    "reservation.rollback.failed",
                    extra={"cart_id": cart_id, "reservation_ids": ids, "error": str(e)},
                )
                raise error from e
        raise error

    @staticmethod
    def _match(pending: list[_Pending], created: list[Reservation]) -> list[Reservation] | None:
        """
        Pair created reservations with requests, in request order.

        Pairs by line_item_id when the ledger echoes it, by position
        otherwise. None means the result doesn't cover the batch 1:1.
        """
        if len(created) != len(pending):
            return None
        if not all(r is not None and r.id for r in created):
            return None
        if not all(r.line_item_id for r in created):
            return created

        by_line = {r.line_item_id: r for r in created}
        if set(by_line) != {p.item.id for p in pending}:
            return None
        return [by_line[p.item.id] for p in pending]

    def _record(self, cart_id: str, pending: list[_Pending],
                created: list[Reservation]) -> list[ReservedLine]:
        """Write reservation ids to line item metadata."""
        results = []

        for index, (p, reservation) in enumerate(zip(pending, created)):
            metadata = {**p.item.metadata, RESERVATION_KEY: reservation.id}
            try:
                self.cart.update_line_item(p.item.id, metadata=metadata)
            except Exception:
                logger.error(
                    "reservation.metadata.failed",
                    extra={
                        "cart_id": cart_id,
                        "line_item_id": p.item.id,
                        "unrecorded_ids": [r.id for r in created[index:]],
                    },
                )
                raise

            results.append(ReservedLine(
                line_item_id=p.item.id,
                variant_id=p.variant_id,
                quantity=p.item.quantity,
                base_units=p.request.quantity,
                location_id=p.request.location_id,
                reservation_id=reservation.id,
            ))

        logger.info(
            "reservation.batch.created",
            extra={
                "cart_id": cart_id,
                "reservation_ids": [r.reservation_id for r in results],
            },
        )
        return results

    # ══════════════════════════════════════════════════════════════
    # RELEASE
    # ══════════════════════════════════════════════════════════════

    def release_reservations(self, cart_id: str) -> list[str]:
        """
        Release every reservation recorded on the cart.

        Idempotent: items without a reservation_id are skipped, and an
        unknown cart is a no-op. Safe as recovery after a checkout whose
        outcome is unknown.

        Returns:
            Released reservation ids

        Raises:
            ReservationError('RELEASE_FAILED'): ledger delete failed; that
                item keeps its reservation_id so the call can be retried.
                Also raised when the ledger delete succeeded but clearing
                the id failed; a retry deletes the already released id
                again, so ledgers must ignore unknown ids on delete.
        """
        cart = self.cart.get_cart(cart_id)
        if cart is None:
            return []

        released = []
        for item in cart.items:
            reservation_id = item.reservation_id
            if not reservation_id:
                continue

            try:
                self.ledger.delete_reservations([reservation_id])
            except Exception as e:
                raise ReservationError(
                    'RELEASE_FAILED',
                    f"Failed to release reservation {reservation_id}: {e}",
                    cart_id=cart_id,
                    reservation_id=reservation_id,
                    released=released,
                ) from e

            metadata = {k: v for k, v in item.metadata.items() if k != RESERVATION_KEY}
            try:
                self.cart.update_line_item(item.id, metadata=metadata)
            except Exception as e:
                logger.error(
                    "reservation.release.metadata.failed",
                    extra={"cart_id": cart_id, "line_item_id": item.id,
                           "reservation_id": reservation_id, "error": str(e)},
                )
                raise ReservationError(
                    'RELEASE_FAILED',
                    f"Released reservation {reservation_id} but could not clear it "
                    f"from line item {item.id}: {e}",
                    cart_id=cart_id,
                    reservation_id=reservation_id,
                    released=released + [reservation_id],
                ) from e
            released.append(reservation_id)

        if released:
            logger.info(
                "reservation.released",
                extra={"cart_id": cart_id, "reservation_ids": released},
            )
        return released
