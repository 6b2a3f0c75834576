"""
Stock movements: state-changing operations (record, adjust, verify).

Every movement runs as one atomic unit under the product's exclusive
scope (see stockkeeper.locks): ledger entry, quantity write and alert
either all commit or none do.
"""

import logging

from django.db import DataError, IntegrityError, InterfaceError, OperationalError
from django.db.models import Case, F, IntegerField, Sum, When
from django.db.models.functions import Coalesce

from stockkeeper.exceptions import StockError
from stockkeeper.locks import locked_product
from stockkeeper.models.enums import Direction
from stockkeeper.models.product import Product
from stockkeeper.models.transaction import StockTransaction
from stockkeeper.services.alerts import StockAlerts
from stockkeeper.validation import (
    actor_pk,
    clean_direction,
    clean_non_negative_int,
    clean_positive_int,
    clean_price,
    clean_text,
    clean_total,
    max_quantity,
)

logger = logging.getLogger('stockkeeper')


def _insufficient(product, quantity):
    logger.info(
        "stock.movement.rejected",
        extra={
            "product_id": product.pk,
            "available": product.current_quantity,
            "requested": quantity,
        },
    )
    return StockError(
        'INSUFFICIENT_STOCK',
        f"Insufficient stock. Available: {product.current_quantity}, Requested: {quantity}",
        product_id=product.pk,
        available=product.current_quantity,
        requested=quantity,
    )


def _ledger_total(product_id) -> int:
    return StockTransaction.objects.filter(product_id=product_id).aggregate(
        t=Coalesce(
            Sum(
                Case(
                    When(direction=Direction.IN, then=F('quantity')),
                    default=-F('quantity'),
                    output_field=IntegerField(),
                )
            ),
            0,
        )
    )['t']


class StockMovements:
    """State-changing stock movement methods."""

    @classmethod
    def record(cls, product_id, direction, quantity, price_per_unit,
               reference_number='', notes='', actor=None) -> StockTransaction:
        """
        Record a stock movement.

        Appends a ledger entry, writes the new quantity back to the product
        and raises a LOW_STOCK / OUT_OF_STOCK alert when the result is
        under the product's minimum quantity.

        Raises:
            StockError('INVALID_ARGUMENT'): Bad direction, quantity, price or actor
            StockError('NOT_FOUND'): Product does not exist
            StockError('INSUFFICIENT_STOCK'): OUT larger than current quantity
            StockError('CONFLICT_ON_COMMIT'): Integrity conflict at commit
            StockError('STORE_UNAVAILABLE'): Database unreachable

        Concurrency:
            - Runs under transaction.atomic()
            - Uses select_for_update() on Product (keyed lock on SQLite)
            - Verifies sufficiency again after lock
        """
        direction = clean_direction(direction)
        limit = max_quantity()
        quantity = clean_positive_int(quantity, 'quantity', maximum=limit)
        price = clean_price(price_per_unit)
        clean_total(quantity, price)
        reference_number = clean_text(reference_number, 'reference_number', required=False)
        notes = clean_text(notes, 'notes', required=False)
        performed_by_id = actor_pk(actor)

        try:
            # Advisory check, so obvious over-issues never wait for the lock
            product = cls._get_product(product_id)
            if direction == Direction.OUT and quantity > product.current_quantity:
                raise _insufficient(product, quantity)

            with locked_product(product.pk) as locked:
                if direction == Direction.OUT and quantity > locked.current_quantity:
                    raise _insufficient(locked, quantity)
                if direction == Direction.IN and locked.current_quantity + quantity > limit:
                    raise StockError(
                        'INVALID_ARGUMENT',
                        f'quantity would exceed {limit}',
                        field='quantity',
                        product_id=locked.pk,
                        value=quantity,
                    )

                entry = StockTransaction.objects.create(
                    product=locked,
                    direction=direction,
                    quantity=quantity,
                    price_per_unit=price,
                    reference_number=reference_number,
                    notes=notes,
                    performed_by_id=performed_by_id,
                )

                if direction == Direction.IN:
                    new_quantity = locked.current_quantity + quantity
                else:
                    new_quantity = locked.current_quantity - quantity
                locked.current_quantity = new_quantity
                locked.save(update_fields=['current_quantity', 'updated_at'])

                StockAlerts.evaluate(locked, new_quantity)

        except IntegrityError as exc:
            raise StockError('CONFLICT_ON_COMMIT', product_id=product_id) from exc
        except (DataError, OverflowError) as exc:
            raise StockError('INVALID_ARGUMENT', str(exc), product_id=product_id) from exc
        except (OperationalError, InterfaceError) as exc:
            raise StockError('STORE_UNAVAILABLE', str(exc), product_id=product_id) from exc

        logger.info(
            "stock.movement.recorded",
            extra={
                "transaction_id": entry.pk,
                "product_id": entry.product_id,
                "direction": direction.value,
                "qty": quantity,
                "new_quantity": new_quantity,
            },
        )
        return entry

    @classmethod
    def adjust(cls, product_id, new_quantity, notes, actor=None) -> StockTransaction | None:
        """
        Physical count correction.

        Books the difference between the counted and the recorded quantity
        as an IN or OUT movement at cost price. Returns None when the count
        already matches.

        Raises:
            StockError('INVALID_ARGUMENT'): If notes are empty or the count is negative
        """
        new_quantity = clean_non_negative_int(new_quantity, 'new_quantity', maximum=max_quantity())
        notes = clean_text(notes, 'notes')
        actor_pk(actor)

        with locked_product(product_id) as product:
            delta = new_quantity - product.current_quantity
            if delta == 0:
                return None

            return cls.record(
                product.pk,
                Direction.IN if delta > 0 else Direction.OUT,
                abs(delta),
                product.cost_price,
                reference_number='ADJUSTMENT',
                notes=f"Adjustment: {notes}",
                actor=actor,
            )

    @classmethod
    def verify(cls, product_id, fix: bool = False) -> int:
        """
        Recalculate quantity from the ledger.

        Use for:
        - Integrity audit
        - Correction after detected inconsistency

        Returns:
            Net ledger quantity (IN - OUT)
        """
        with locked_product(product_id) as product:
            total = _ledger_total(product.pk)

            if total != product.current_quantity:
                logger.warning(
                    "stock.ledger.drift",
                    extra={
                        "product_id": product.pk,
                        "cached": product.current_quantity,
                        "ledger": total,
                        "fixed": fix,
                    },
                )
                if fix:
                    product.current_quantity = total
                    product.save(update_fields=['current_quantity', 'updated_at'])

            return total

    @classmethod
    def _get_product(cls, product_id) -> Product:
        try:
            return Product.objects.get(pk=product_id)
        except (Product.DoesNotExist, ValueError, TypeError):
            raise StockError('NOT_FOUND', product_id=product_id) from None
