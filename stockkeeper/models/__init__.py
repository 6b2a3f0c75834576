"""
Stockkeeper Models.

Core models for stock tracking:
- Product: Current quantity cache and reorder threshold
- StockTransaction: Immutable ledger of movements
- StockAlert: Threshold breach notifications
"""

from stockkeeper.models.alert import StockAlert
from stockkeeper.models.enums import AlertKind, Direction
from stockkeeper.models.product import Product
from stockkeeper.models.transaction import StockTransaction

__all__ = [
    'Direction',
    'AlertKind',
    'Product',
    'StockTransaction',
    'StockAlert',
]
