"""
Tests for the product catalogue operations.
"""

from decimal import Decimal

import pytest
from django.test import override_settings

from stockkeeper import stock, StockError
from stockkeeper.models import AlertKind, Product, StockAlert, StockTransaction


pytestmark = pytest.mark.django_db


def _create(**overrides):
    fields = {
        'name': 'Stapler',
        'sku': 'ST-001',
        'category': 'Office',
        'unit': 'pcs',
        'cost_price': Decimal('4.00'),
        'selling_price': Decimal('6.50'),
    }
    fields.update(overrides)
    return stock.create_product(**fields)


class TestCreateProduct:
    """Tests for stock.create_product()."""

    def test_create_without_stock(self):
        product = _create()

        assert product.pk is not None
        assert product.current_quantity == 0
        assert product.min_quantity == 10
        assert not StockTransaction.objects.exists()

    def test_default_threshold_from_settings(self):
        with override_settings(STOCKKEEPER={'DEFAULT_MIN_QUANTITY': 3}):
            product = _create()

        assert product.min_quantity == 3

    def test_initial_quantity_goes_through_ledger(self, user):
        product = _create(initial_quantity=25, actor=user)

        assert product.current_quantity == 25
        entry = StockTransaction.objects.get(product=product)
        assert entry.direction == 'IN'
        assert entry.quantity == 25
        assert entry.price_per_unit == Decimal('4.00')
        assert entry.notes == 'Opening balance'

    def test_small_initial_quantity_raises_alert(self, user):
        product = _create(initial_quantity=2, actor=user)

        assert StockAlert.objects.unresolved().get(product=product).kind == AlertKind.LOW_STOCK

    def test_initial_quantity_requires_actor(self):
        with pytest.raises(StockError) as exc:
            _create(initial_quantity=5)

        assert exc.value.code == 'INVALID_ARGUMENT'
        assert not Product.objects.exists()

    def test_duplicate_sku(self):
        _create()

        with pytest.raises(StockError) as exc:
            _create(name='Other stapler')

        assert exc.value.code == 'DUPLICATE_SKU'
        assert Product.objects.count() == 1

    @pytest.mark.parametrize('field,value', [
        ('name', ''),
        ('sku', '   '),
        ('cost_price', Decimal('0')),
        ('selling_price', 'free'),
        ('min_quantity', -1),
    ])
    def test_invalid_fields(self, field, value):
        with pytest.raises(StockError) as exc:
            _create(**{field: value})

        assert exc.value.code == 'INVALID_ARGUMENT'
        assert exc.value.data['field'] == field


class TestUpdateProduct:
    """Tests for stock.update_product()."""

    def test_update_fields(self):
        product = _create()

        updated = stock.update_product(product.pk, name='Heavy stapler', min_quantity=4)

        assert updated.name == 'Heavy stapler'
        product.refresh_from_db()
        assert product.min_quantity == 4

    def test_quantity_not_editable(self):
        product = _create()

        with pytest.raises(StockError) as exc:
            stock.update_product(product.pk, current_quantity=50)

        assert exc.value.code == 'INVALID_ARGUMENT'
        product.refresh_from_db()
        assert product.current_quantity == 0

    def test_unknown_field(self):
        product = _create()

        with pytest.raises(StockError) as exc:
            stock.update_product(product.pk, colour='red')

        assert exc.value.code == 'INVALID_ARGUMENT'

    def test_sku_clash(self):
        _create()
        other = _create(sku='ST-002')

        with pytest.raises(StockError) as exc:
            stock.update_product(other.pk, sku='ST-001')

        assert exc.value.code == 'DUPLICATE_SKU'

    def test_keeping_own_sku(self):
        product = _create()

        assert stock.update_product(product.pk, sku='ST-001').sku == 'ST-001'

    def test_update_unknown(self):
        with pytest.raises(StockError) as exc:
            stock.update_product(98765, name='Ghost')

        assert exc.value.code == 'NOT_FOUND'

    def test_raising_threshold_does_not_alert(self, stocked_product):
        stock.update_product(stocked_product.pk, min_quantity=100)

        assert not StockAlert.objects.exists()


class TestDeleteProduct:
    """Tests for stock.delete_product()."""

    def test_delete_unused(self):
        product = _create()

        stock.delete_product(product.pk)

        assert not Product.objects.exists()

    def test_delete_with_ledger_refused(self, stocked_product):
        with pytest.raises(StockError) as exc:
            stock.delete_product(stocked_product.pk)

        assert exc.value.code == 'PRODUCT_IN_USE'
        assert Product.objects.filter(pk=stocked_product.pk).exists()

    def test_delete_unknown(self):
        with pytest.raises(StockError) as exc:
            stock.delete_product(55555)

        assert exc.value.code == 'NOT_FOUND'


class TestProductQueries:
    """Tests for stock.get_product() and stock.list_products()."""

    def test_get(self):
        product = _create()

        assert stock.get_product(product.pk) == product

    def test_get_unknown(self):
        with pytest.raises(StockError) as exc:
            stock.get_product('not-a-number')

        assert exc.value.code == 'NOT_FOUND'

    def test_filter_and_search(self):
        _create(name='Stapler', sku='ST-001', category='Office')
        _create(name='Paper clips', sku='PC-100', category='Office')
        _create(name='Mug', sku='KT-010', category='Kitchen')

        assert stock.list_products(category='Office').count() == 2
        assert [p.sku for p in stock.list_products(search='stap')] == ['ST-001']
        assert [p.sku for p in stock.list_products(search='kt-')] == ['KT-010']
