"""
Management command to print stock health for variants.

Usage:
    python manage.py inventory_health var_linen var_canvas
    python manage.py inventory_health var_linen --location sloc_main --status low_stock
"""

from django.core.management.base import BaseCommand, CommandError

from yardman import inventory
from yardman.enums import StockStatus
from yardman.exceptions import ReservationError


class Command(BaseCommand):
    """Inventory health report command."""

    help = 'Shows stocked, reserved, incoming and available-to-sell per variant'

    def add_arguments(self, parser):
        parser.add_argument('variant_ids', nargs='+', metavar='VARIANT_ID')
        parser.add_argument('--location', default=None, help='Stock location id')
        parser.add_argument(
            '--status',
            choices=StockStatus.values,
            default=None,
            help='Only show variants with this status'
        )

    def handle(self, *args, **options):
        try:
            reports = inventory.health(
                options['variant_ids'], options['location'], options['status']
            )
        except ReservationError as e:
            raise CommandError(e.message) from e

        for r in reports:
            if not r.managed:
                self.stdout.write(f'{r.variant_id}: not inventory-managed')
                continue

            line = (f'{r.variant_id}: stocked={r.stocked} reserved={r.reserved} '
                    f'incoming={r.incoming} ats={r.ats} status={r.status.value}')
            if r.status == StockStatus.IN_STOCK:
                self.stdout.write(line)
            else:
                self.stdout.write(self.style.WARNING(line))
