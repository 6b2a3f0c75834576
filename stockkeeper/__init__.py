"""
Stockkeeper: inventory ledger with low-stock alerts.

Usage:
    from stockkeeper import stock, StockError

    stock.record(product.pk, 'OUT', 15, Decimal('2.50'), actor=user)
    stock.dashboard()['low_stock_products']  # 1
"""


def __getattr__(name):
    """Lazy import to avoid circular imports during app loading."""
    if name == 'stock':
        from stockkeeper.service import Stock
        return Stock
    elif name == 'StockError':
        from stockkeeper.exceptions import StockError
        return StockError
    elif name == 'Product':
        from stockkeeper.models.product import Product
        return Product
    elif name == 'StockTransaction':
        from stockkeeper.models.transaction import StockTransaction
        return StockTransaction
    elif name == 'StockAlert':
        from stockkeeper.models.alert import StockAlert
        return StockAlert
    elif name == 'Direction':
        from stockkeeper.models.enums import Direction
        return Direction
    elif name == 'AlertKind':
        from stockkeeper.models.enums import AlertKind
        return AlertKind
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    'stock',
    'StockError',
    'Product',
    'StockTransaction',
    'StockAlert',
    'Direction',
    'AlertKind',
]

__version__ = '0.1.0'
