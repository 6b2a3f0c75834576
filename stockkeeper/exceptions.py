"""
Exceptions for Stockkeeper.

All errors are StockError with a structured code for programmatic handling.
"""

from decimal import Decimal
from typing import Any


class BaseError(Exception):
    """
    Error with a machine-readable code and keyword context.

    Subclasses provide `_default_messages` so callers only pass the code.
    """

    _default_messages: dict[str, str] = {}

    def __init__(self, code: str, message: str | None = None, **data: Any):
        self.code = code
        self.message = message or self._default_messages.get(code, code)
        self.data = data
        super().__init__(self.message)

    def __str__(self) -> str:
        if not self.data:
            return f"[{self.code}] {self.message}"
        context = ', '.join(f"{k}={v}" for k, v in self.data.items())
        return f"[{self.code}] {self.message} ({context})"


class StockError(BaseError):
    """
    Structured exception for stock operations.

    Usage:
        try:
            stock.record(product.pk, 'OUT', 10, Decimal('2.50'), actor=user)
        except StockError as e:
            if e.code == 'INSUFFICIENT_STOCK':
                print(f"Only {e.available} left")

    Attributes:
        code: Error code for programmatic handling
        message: Human-readable message
        data: Additional context data
    """

    _default_messages = {
        'NOT_FOUND': 'Requested record does not exist',
        'INVALID_ARGUMENT': 'Invalid argument',
        'INSUFFICIENT_STOCK': 'Insufficient stock',
        'CONFLICT_ON_COMMIT': 'Concurrent modification detected',
        'STORE_UNAVAILABLE': 'Stock store is unavailable',
        'DUPLICATE_SKU': 'SKU code already exists',
        'PRODUCT_IN_USE': 'Product has ledger entries and cannot be deleted',
    }

    @property
    def available(self) -> int:
        """Shortcut for data['available']."""
        return self.data.get('available', 0)

    @property
    def requested(self) -> int:
        """Shortcut for data['requested']."""
        return self.data.get('requested', 0)

    def as_dict(self) -> dict[str, Any]:
        """Serialize to dict (useful for APIs)."""
        return {
            'code': self.code,
            'message': self.message,
            'data': {
                k: str(v) if isinstance(v, Decimal) else v
                for k, v in self.data.items()
            }
        }
