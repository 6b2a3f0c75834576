"""
Management command to compare product quantities with the ledger.

Usage:
    python manage.py check_stock_ledger
    python manage.py check_stock_ledger --fix
"""

from django.core.management.base import BaseCommand

from stockkeeper import stock
from stockkeeper.models import Product


class Command(BaseCommand):
    """Ledger audit command."""

    help = 'Checks that every product quantity matches its stock ledger'

    def add_arguments(self, parser):
        parser.add_argument(
            '--fix',
            action='store_true',
            help='Rewrite drifted quantities from the ledger'
        )

    def handle(self, *args, **options):
        drifted = 0
        for product_id, cached in Product.objects.values_list('pk', 'current_quantity').order_by('pk'):
            ledger = stock.verify(product_id, fix=options['fix'])
            if ledger != cached:
                drifted += 1
                self.stdout.write(
                    f'{product_id}: quantity {cached}, ledger {ledger}'
                )

        if not drifted:
            self.stdout.write(self.style.SUCCESS('All product quantities match the ledger'))
        elif options['fix']:
            self.stdout.write(self.style.SUCCESS(f'{drifted} product(s) fixed'))
        else:
            self.stdout.write(self.style.WARNING(f'{drifted} product(s) out of sync'))
