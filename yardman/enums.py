"""
Enums for Yardman.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class RoundingMode(models.TextChoices):
    """How a requested quantity snaps to the increment grid."""
    UP = 'up', _('Round up')
    DOWN = 'down', _('Round down')
    NEAREST = 'nearest', _('Round to nearest')


class BackorderPolicy(models.TextChoices):
    """
    Whether a sale may proceed once available-to-sell is exhausted.

    ALLOW_DATE: sale allowed against a promised ship date. The date
                itself is tracked and enforced outside Yardman.
    """
    DENY = 'deny', _('Deny')
    ALLOW_DATE = 'allow_date', _('Allow with ship date')
    ALLOW_ANY = 'allow_any', _('Allow')


class StockStatus(models.TextChoices):
    """Stock status shown to buyers and staff."""
    IN_STOCK = 'in_stock', _('In stock')
    LOW_STOCK = 'low_stock', _('Low stock')
    OUT_OF_STOCK = 'out_of_stock', _('Out of stock')
    BACKORDERED = 'backordered', _('Backordered')  # reserved, never emitted yet


class ReservationState(models.TextChoices):
    """
    Cart reservation state.

    RESERVING and RELEASING only exist while an orchestration call
    is running. They are never persisted or returned by state().
    """
    UNRESERVED = 'unreserved', _('Unreserved')
    RESERVING = 'reserving', _('Reserving')
    RESERVED = 'reserved', _('Reserved')
    RELEASING = 'releasing', _('Releasing')
