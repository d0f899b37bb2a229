"""
Yardman services — modular organization of inventory operations.

    from yardman.services import (
        AvailabilityQueries, CartQuantityGate, ReservationOrchestrator,
    )
"""

from yardman.services.availability import AvailabilityQueries
from yardman.services.gate import CartQuantityGate
from yardman.services.reservations import ReservationOrchestrator

__all__ = [
    'AvailabilityQueries',
    'CartQuantityGate',
    'ReservationOrchestrator',
]
