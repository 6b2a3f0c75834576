"""
Concurrent movements against real, separate database connections.
"""

import threading
from decimal import Decimal

import pytest
from django.db import connection

from stockkeeper import stock, StockError
from stockkeeper.locks import KeyedLocks
from stockkeeper.models import AlertKind, StockAlert, StockTransaction


def _run_concurrently(calls):
    """Run each callable in its own thread, released together by a barrier."""
    barrier = threading.Barrier(len(calls))
    results = [None] * len(calls)

    def worker(index, call):
        try:
            barrier.wait()
            results[index] = call()
        except Exception as exc:
            results[index] = exc
        finally:
            connection.close()

    threads = [
        threading.Thread(target=worker, args=(i, call))
        for i, call in enumerate(calls)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=30)
    return results


@pytest.mark.django_db(transaction=True)
class TestConcurrentMovements:
    """Movements on one product are serialized; other products proceed."""

    def test_no_oversell(self, make_product, user):
        """Stock 10, two OUT 7: exactly one succeeds."""
        product = make_product(quantity=10, min_quantity=0)

        results = _run_concurrently([
            lambda: stock.record(product.pk, 'OUT', 7, Decimal('1.00'), actor=user),
            lambda: stock.record(product.pk, 'OUT', 7, Decimal('1.00'), actor=user),
        ])

        errors = [r for r in results if isinstance(r, Exception)]
        assert len(errors) == 1
        assert isinstance(errors[0], StockError)
        assert errors[0].code == 'INSUFFICIENT_STOCK'
        assert errors[0].requested == 7

        product.refresh_from_db()
        assert product.current_quantity == 3
        assert StockTransaction.objects.filter(product=product).count() == 1

    def test_no_lost_updates(self, make_product, user):
        """Many concurrent INs all land on the quantity."""
        product = make_product(quantity=0, min_quantity=0)

        results = _run_concurrently([
            lambda: stock.record(product.pk, 'IN', 3, Decimal('1.00'), actor=user)
            for _ in range(8)
        ])

        assert not [r for r in results if isinstance(r, Exception)]
        product.refresh_from_db()
        assert product.current_quantity == 24
        assert StockTransaction.objects.filter(product=product).count() == 8

    def test_single_alert_under_contention(self, make_product, user):
        """Concurrent drops below the threshold open one alert."""
        product = make_product(quantity=20, min_quantity=15)

        results = _run_concurrently([
            lambda: stock.record(product.pk, 'OUT', 2, Decimal('1.00'), actor=user)
            for _ in range(5)
        ])

        assert not [r for r in results if isinstance(r, Exception)]
        assert StockAlert.objects.unresolved().filter(
            product=product, kind=AlertKind.LOW_STOCK
        ).count() == 1

    def test_different_products_in_parallel(self, make_product, user):
        """Concurrent INs spread over several products all succeed."""
        products = [make_product(quantity=0, min_quantity=0) for _ in range(6)]

        results = _run_concurrently([
            (lambda pk=p.pk: stock.record(pk, 'IN', 1, Decimal('1.00'), actor=user))
            for p in products
            for _ in range(3)
        ])

        assert not [r for r in results if isinstance(r, Exception)]
        for p in products:
            p.refresh_from_db()
            assert p.current_quantity == 3
            assert StockTransaction.objects.filter(product=p).count() == 3


class TestKeyedLocks:
    """Scopes only exclude each other for the same key."""

    def test_different_keys_do_not_block(self):
        locks = KeyedLocks()
        entered = threading.Event()

        def other():
            with locks.hold('b'):
                entered.set()

        with locks.hold('a'):
            thread = threading.Thread(target=other)
            thread.start()
            assert entered.wait(timeout=5)
            thread.join()

    def test_same_key_blocks(self):
        locks = KeyedLocks()
        entered = threading.Event()

        def other():
            with locks.hold('a'):
                entered.set()

        with locks.hold('a'):
            thread = threading.Thread(target=other)
            thread.start()
            assert not entered.wait(timeout=0.2)
        thread.join(timeout=5)
        assert entered.is_set()

    def test_reentrant_and_cleaned_up(self):
        locks = KeyedLocks()

        with locks.hold('a'):
            with locks.hold('a'):
                assert len(locks) == 1

        assert len(locks) == 0
