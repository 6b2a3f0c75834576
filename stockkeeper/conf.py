"""
Stockkeeper configuration.

Usage in settings.py:
    STOCKKEEPER = {
        "DEFAULT_LIST_LIMIT": 50,
        "MAX_LIST_LIMIT": 500,
        "RECENT_TRANSACTIONS_LIMIT": 5,
        "DEFAULT_MIN_QUANTITY": 10,
    }
"""

from dataclasses import dataclass
from typing import Any

from django.conf import settings


@dataclass
class StockkeeperSettings:
    """Stockkeeper configuration settings."""

    # Rows returned by transaction listings when no limit is given
    DEFAULT_LIST_LIMIT: int = 50

    # Upper bound for any explicit listing limit
    MAX_LIST_LIMIT: int = 500

    # Size of the "recent transactions" block of the dashboard
    RECENT_TRANSACTIONS_LIMIT: int = 5

    # Threshold for products created without min_quantity
    DEFAULT_MIN_QUANTITY: int = 10


def get_stockkeeper_settings() -> StockkeeperSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "STOCKKEEPER", {})
    return StockkeeperSettings(**{
        k: v for k, v in user_settings.items()
        if k in StockkeeperSettings.__dataclass_fields__
    })


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_stockkeeper_settings(), name)


stockkeeper_settings = _LazySettings()
