"""
Stock queries: read-only operations.

All methods are classmethod on Stock and use no locking. The dashboard
runs several independent queries; sub-counts may be skewed by movements
committed in between.
"""

from decimal import Decimal

from django.db.models import DecimalField, F, Sum
from django.db.models.functions import Coalesce
from django.utils import timezone

from stockkeeper.conf import stockkeeper_settings
from stockkeeper.exceptions import StockError
from stockkeeper.models.alert import StockAlert
from stockkeeper.models.product import Product
from stockkeeper.models.transaction import StockTransaction
from stockkeeper.validation import clean_direction, clean_positive_int


def _ledger():
    return StockTransaction.objects.select_related('product', 'performed_by').recent()


class StockQueries:
    """Read-only stock query methods."""

    @classmethod
    def list_transactions(cls, product_id=None, direction=None, limit=None):
        """
        Ledger entries, newest first.

        Args:
            product_id: Only entries of this product
            direction: 'IN' or 'OUT'
            limit: Max rows (None = DEFAULT_LIST_LIMIT, capped at MAX_LIST_LIMIT)

        Raises:
            StockError('INVALID_ARGUMENT'): Bad direction or limit
        """
        if limit is None:
            limit = stockkeeper_settings.DEFAULT_LIST_LIMIT
        limit = min(clean_positive_int(limit, 'limit'), stockkeeper_settings.MAX_LIST_LIMIT)

        qs = _ledger()
        if product_id is not None:
            qs = qs.for_product(product_id)
        if direction is not None:
            qs = qs.filter(direction=clean_direction(direction))
        return list(qs[:limit])

    @classmethod
    def get_transaction(cls, transaction_id) -> StockTransaction:
        """
        Raises:
            StockError('NOT_FOUND'): Entry does not exist
        """
        try:
            return _ledger().get(pk=transaction_id)
        except (StockTransaction.DoesNotExist, ValueError, TypeError):
            raise StockError('NOT_FOUND', transaction_id=transaction_id) from None

    @classmethod
    def product_transactions(cls, product_id):
        """Full ledger of one product, newest first."""
        return _ledger().for_product(product_id)

    @classmethod
    def list_alerts(cls, active: bool | None = None):
        """
        Alerts newest first.

        Args:
            active: True = unresolved only, False = resolved only, None = all
        """
        qs = StockAlert.objects.select_related('product')
        if active is True:
            qs = qs.unresolved()
        elif active is False:
            qs = qs.resolved()
        return qs

    @classmethod
    def dashboard(cls) -> dict:
        """
        Snapshot for the dashboard.

        Returns:
            Dict with total_products, low_stock_products,
            out_of_stock_products, total_inventory_value (Decimal),
            today_transactions and recent_transactions (list)
        """
        products = Product.objects.all()
        value = products.aggregate(
            v=Coalesce(
                Sum(F('current_quantity') * F('cost_price')),
                Decimal('0'),
                output_field=DecimalField(max_digits=20, decimal_places=2),
            )
        )['v']

        return {
            'total_products': products.count(),
            'low_stock_products': products.low_stock().count(),
            'out_of_stock_products': products.out_of_stock().count(),
            'total_inventory_value': value,
            'today_transactions': StockTransaction.objects.created_on(timezone.localdate()).count(),
            'recent_transactions': list(
                _ledger()[:stockkeeper_settings.RECENT_TRANSACTIONS_LIMIT]
            ),
        }
