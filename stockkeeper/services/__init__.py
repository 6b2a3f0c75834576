"""
Stock services: modular organization of stock operations.

Re-exports all public classes so callers can compose them:
    from stockkeeper.services import StockQueries, StockMovements, StockAlerts, StockProducts
"""

from stockkeeper.services.alerts import StockAlerts
from stockkeeper.services.movements import StockMovements
from stockkeeper.services.products import StockProducts
from stockkeeper.services.queries import StockQueries

__all__ = [
    'StockQueries',
    'StockMovements',
    'StockAlerts',
    'StockProducts',
]
