"""
Pytest fixtures for Stockkeeper tests.
"""

from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model

from stockkeeper import stock
from stockkeeper.models import Product


User = get_user_model()


@pytest.fixture
def user(db):
    """Create a test user."""
    return User.objects.create_user(
        username='testuser',
        password='testpass123'
    )


@pytest.fixture
def make_product(db):
    """Factory for products created directly at a given quantity."""
    counter = {'n': 0}

    def _make(quantity=0, min_quantity=10, name=None, cost_price=Decimal('2.00'), **extra):
        counter['n'] += 1
        return Product.objects.create(
            name=name or f'Product {counter["n"]}',
            sku=f'SKU-{counter["n"]:04d}',
            category=extra.pop('category', 'General'),
            unit='pcs',
            cost_price=cost_price,
            selling_price=Decimal('3.50'),
            current_quantity=quantity,
            min_quantity=min_quantity,
            **extra
        )

    return _make


@pytest.fixture
def product(make_product):
    """Empty product with threshold 10."""
    return make_product(name='Notebook A5')


@pytest.fixture
def stocked_product(product, user):
    """Product with 20 units booked through the ledger (threshold 10)."""
    stock.record(product.pk, 'IN', 20, Decimal('2.00'), notes='Opening balance', actor=user)
    product.refresh_from_db()
    return product
