"""
Management command to release a cart's checkout reservations.

Recovery action when a checkout timed out with an unknown outcome.
Release is idempotent, so it is safe on carts that hold nothing.

Usage:
    python manage.py release_reservations cart_01H...
    python manage.py release_reservations cart_1 cart_2 --dry-run
"""

from django.core.management.base import BaseCommand, CommandError

from yardman import inventory
from yardman.adapters import get_cart
from yardman.exceptions import ReservationError


class Command(BaseCommand):
    """Release cart reservations command."""

    help = 'Releases checkout reservations held by carts'

    def add_arguments(self, parser):
        parser.add_argument('cart_ids', nargs='+', metavar='CART_ID')
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Shows what would be released without releasing'
        )

    def handle(self, *args, **options):
        for cart_id in options['cart_ids']:
            if options['dry_run']:
                cart = get_cart().get_cart(cart_id)
                held = [item.reservation_id for item in (cart.items if cart else [])
                        if item.reservation_id]
                self.stdout.write(f'{cart_id}: {len(held)} reservation(s) would be released')
                continue

            try:
                released = inventory.release(cart_id)
            except ReservationError as e:
                raise CommandError(f'{cart_id}: {e.message}') from e

            self.stdout.write(
                self.style.SUCCESS(f'{cart_id}: {len(released)} reservation(s) released')
            )
