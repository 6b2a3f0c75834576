"""
Argument checks shared by the stock services.

Each helper returns the normalized value or raises
StockError('INVALID_ARGUMENT') naming the offending field.
"""

from decimal import Decimal, InvalidOperation

from django.db import connections, router

from stockkeeper.exceptions import StockError
from stockkeeper.models.enums import Direction
from stockkeeper.models.product import Product
from stockkeeper.models.transaction import StockTransaction


def max_quantity() -> int:
    """Largest quantity the write database stores in a PositiveIntegerField."""
    alias = router.db_for_write(Product)
    return connections[alias].ops.integer_field_range('PositiveIntegerField')[1]


def _fits_digits(amount: Decimal, model, field: str) -> bool:
    column = model._meta.get_field(field)
    return amount.adjusted() < column.max_digits - column.decimal_places


def clean_direction(direction) -> Direction:
    if direction not in Direction.values:
        raise StockError(
            'INVALID_ARGUMENT',
            'Direction must be IN or OUT',
            field='direction',
            value=direction,
        )
    return Direction(direction)


def clean_positive_int(value, field: str, maximum: int | None = None) -> int:
    """Strictly positive int; bools and floats are rejected."""
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise StockError(
            'INVALID_ARGUMENT',
            f'{field} must be a positive integer',
            field=field,
            value=value,
        )
    if maximum is not None and value > maximum:
        raise StockError('INVALID_ARGUMENT', f'{field} must not exceed {maximum}', field=field, value=value)
    return value


def clean_non_negative_int(value, field: str, maximum: int | None = None) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise StockError(
            'INVALID_ARGUMENT',
            f'{field} must be a non-negative integer',
            field=field,
            value=value,
        )
    if maximum is not None and value > maximum:
        raise StockError('INVALID_ARGUMENT', f'{field} must not exceed {maximum}', field=field, value=value)
    return value


def clean_price(value, field: str = 'price_per_unit') -> Decimal:
    """
    Strictly positive money amount with at most two decimal places.

    Accepts Decimal, int or numeric strings. Floats are converted through
    their repr so Decimal('0.1') and 0.1 agree. Amounts too large for a
    12-digit price column are rejected.
    """
    if isinstance(value, bool) or value is None:
        raise StockError('INVALID_ARGUMENT', f'{field} must be a number', field=field, value=value)
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        raise StockError('INVALID_ARGUMENT', f'{field} must be a number', field=field, value=value) from None

    if not amount.is_finite() or amount <= 0:
        raise StockError('INVALID_ARGUMENT', f'{field} must be positive', field=field, value=value)
    if amount.normalize().as_tuple().exponent < -2:
        raise StockError(
            'INVALID_ARGUMENT',
            f'{field} must have at most 2 decimal places',
            field=field,
            value=value,
        )
    if not _fits_digits(amount, StockTransaction, 'price_per_unit'):
        raise StockError('INVALID_ARGUMENT', f'{field} is too large', field=field, value=value)
    return amount


def clean_total(quantity: int, price: Decimal) -> Decimal:
    """quantity * price, rejected when it overflows the total_amount column."""
    total = quantity * price
    if not _fits_digits(total, StockTransaction, 'total_amount'):
        raise StockError('INVALID_ARGUMENT', 'total_amount is too large', field='total_amount', value=total)
    return total


def clean_text(value, field: str, required: bool = True) -> str:
    if value is None:
        value = ''
    if not isinstance(value, str):
        raise StockError('INVALID_ARGUMENT', f'{field} must be a string', field=field, value=value)
    text = value.strip()
    if required and not text:
        raise StockError('INVALID_ARGUMENT', f'{field} is required', field=field)
    return text


def actor_pk(actor):
    """Primary key of the performing user (user instance or pk)."""
    pk = getattr(actor, 'pk', actor)
    if pk is None:
        raise StockError('INVALID_ARGUMENT', 'actor is required', field='actor')
    return pk
