"""
Product catalogue: create, edit and remove products.

Quantity is never edited here. Opening stock is booked through the
movement engine and later changes go through stock.record() or
stock.adjust(), so the ledger always explains current_quantity.
"""

import logging

from django.db import IntegrityError, transaction
from django.db.models import ProtectedError

from stockkeeper.conf import stockkeeper_settings
from stockkeeper.exceptions import StockError
from stockkeeper.locks import locked_product
from stockkeeper.models.enums import Direction
from stockkeeper.models.product import Product
from stockkeeper.services.movements import StockMovements
from stockkeeper.validation import (
    actor_pk,
    clean_non_negative_int,
    clean_price,
    clean_text,
    max_quantity,
)

logger = logging.getLogger('stockkeeper')

REQUIRED_TEXT_FIELDS = ('name', 'sku', 'category', 'unit')
OPTIONAL_TEXT_FIELDS = ('location', 'description')
PRICE_FIELDS = ('cost_price', 'selling_price')
EDITABLE_FIELDS = REQUIRED_TEXT_FIELDS + OPTIONAL_TEXT_FIELDS + PRICE_FIELDS + ('min_quantity',)


def _clean_fields(fields: dict) -> dict:
    cleaned = {}
    for name, value in fields.items():
        if name == 'current_quantity':
            raise StockError(
                'INVALID_ARGUMENT',
                'current_quantity can only change through stock movements',
                field=name,
            )
        if name not in EDITABLE_FIELDS:
            raise StockError('INVALID_ARGUMENT', f'Unknown product field: {name}', field=name)

        if name in REQUIRED_TEXT_FIELDS:
            cleaned[name] = clean_text(value, name)
        elif name in OPTIONAL_TEXT_FIELDS:
            cleaned[name] = clean_text(value, name, required=False)
        elif name in PRICE_FIELDS:
            cleaned[name] = clean_price(value, name)
        else:
            cleaned[name] = clean_non_negative_int(value, name, maximum=max_quantity())
    return cleaned


def _check_sku(sku: str, exclude_pk=None):
    qs = Product.objects.filter(sku=sku)
    if exclude_pk is not None:
        qs = qs.exclude(pk=exclude_pk)
    if qs.exists():
        raise StockError('DUPLICATE_SKU', sku=sku)


class StockProducts:
    """Product catalogue methods."""

    @classmethod
    def create_product(cls, name, sku, category, unit, cost_price, selling_price,
                       min_quantity=None, location='', description='',
                       initial_quantity=0, actor=None) -> Product:
        """
        Create a product.

        A positive initial_quantity is recorded as an opening IN movement
        at cost price (actor required), which may raise a LOW_STOCK alert
        if it is under min_quantity.

        Raises:
            StockError('INVALID_ARGUMENT'): Missing or malformed field
            StockError('DUPLICATE_SKU'): SKU already in use
        """
        if min_quantity is None:
            min_quantity = stockkeeper_settings.DEFAULT_MIN_QUANTITY
        fields = _clean_fields({
            'name': name,
            'sku': sku,
            'category': category,
            'unit': unit,
            'cost_price': cost_price,
            'selling_price': selling_price,
            'min_quantity': min_quantity,
            'location': location,
            'description': description,
        })
        initial_quantity = clean_non_negative_int(initial_quantity, 'initial_quantity', maximum=max_quantity())
        if initial_quantity:
            actor_pk(actor)

        try:
            with transaction.atomic():
                _check_sku(fields['sku'])
                product = Product.objects.create(**fields)
                if initial_quantity:
                    StockMovements.record(
                        product.pk,
                        Direction.IN,
                        initial_quantity,
                        product.cost_price,
                        notes='Opening balance',
                        actor=actor,
                    )
                    product.refresh_from_db()
        except IntegrityError as exc:
            raise StockError('DUPLICATE_SKU', sku=fields['sku']) from exc

        logger.info(
            "stock.product.created",
            extra={"product_id": product.pk, "sku": product.sku, "qty": initial_quantity},
        )
        return product

    @classmethod
    def update_product(cls, product_id, **fields) -> Product:
        """
        Edit product attributes (everything except current_quantity).

        Runs under the product's exclusive scope so it never interleaves
        with a movement on the same product. Changing min_quantity does not
        raise or resolve alerts.

        Raises:
            StockError('NOT_FOUND'): Product does not exist
            StockError('INVALID_ARGUMENT'): Unknown, quantity or malformed field
            StockError('DUPLICATE_SKU'): SKU already used by another product
        """
        cleaned = _clean_fields(fields)

        try:
            with locked_product(product_id) as product:
                if 'sku' in cleaned:
                    _check_sku(cleaned['sku'], exclude_pk=product.pk)
                for name, value in cleaned.items():
                    setattr(product, name, value)
                product.save(update_fields=[*cleaned, 'updated_at'])
        except IntegrityError as exc:
            raise StockError('DUPLICATE_SKU', sku=cleaned.get('sku')) from exc

        logger.info(
            "stock.product.updated",
            extra={"product_id": product.pk, "fields": sorted(cleaned)},
        )
        return product

    @classmethod
    def delete_product(cls, product_id) -> None:
        """
        Delete a product and its alerts.

        Raises:
            StockError('NOT_FOUND'): Product does not exist
            StockError('PRODUCT_IN_USE'): Product has ledger entries
        """
        with locked_product(product_id) as product:
            if product.transactions.exists():
                raise StockError('PRODUCT_IN_USE', product_id=product.pk)
            try:
                product.delete()
            except ProtectedError as exc:
                raise StockError('PRODUCT_IN_USE', product_id=product_id) from exc

        logger.info("stock.product.deleted", extra={"product_id": product_id})

    @classmethod
    def get_product(cls, product_id) -> Product:
        """
        Raises:
            StockError('NOT_FOUND'): Product does not exist
        """
        try:
            return Product.objects.get(pk=product_id)
        except (Product.DoesNotExist, ValueError, TypeError):
            raise StockError('NOT_FOUND', product_id=product_id) from None

    @classmethod
    def list_products(cls, category=None, search=None):
        """List products, newest first, optionally by category or name/SKU search."""
        qs = Product.objects.all()
        if category:
            qs = qs.filter(category=category)
        if search:
            qs = qs.search(search)
        return qs
