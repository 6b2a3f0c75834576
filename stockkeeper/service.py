"""
Stock Service: The single public interface for all stock operations.

Usage:
    from stockkeeper import stock, StockError

    stock.record(product.pk, 'IN', 50, Decimal('2.40'), actor=user)
    stock.record(product.pk, 'OUT', 45, Decimal('3.10'), actor=user)
    stock.list_alerts(active=True)   # LOW_STOCK alert for product
    stock.resolve(alert.pk)
"""

from stockkeeper.services import StockAlerts, StockMovements, StockProducts, StockQueries


class Stock(StockQueries, StockMovements, StockAlerts, StockProducts):
    """
    Single interface for all stock operations.

    Parameter convention: (product_id, direction, quantity, price, ...)
    Follows natural language: "Record OUT of 15 at 2.50"

    IMPORTANT: All state-changing methods use atomic transactions
    with appropriate locking. See each method's docstring.
    """
