"""
Exclusive access scope per product.

    with locked_product(product_id) as product:
        product.current_quantity += 5
        product.save(update_fields=['current_quantity', 'updated_at'])

On databases with row locks (PostgreSQL, MySQL, Oracle) the scope is the
``SELECT ... FOR UPDATE`` on the product row. SQLite silently ignores
``select_for_update()``, so there the scope is additionally an in-process
lock keyed by (database alias, product id), acquired before the database
transaction starts and released after it commits or rolls back.

Scopes for different products never wait on each other in this module.
SQLite still allows a single writer per database, so SQLite hosts must
configure the connection with::

    'OPTIONS': {'transaction_mode': 'IMMEDIATE', 'timeout': 20}

Otherwise a deferred transaction that read the product fails with
"database is locked" when it upgrades to a write, instead of waiting.
"""

import threading
from contextlib import contextmanager

from django.db import connections, router, transaction

from stockkeeper.exceptions import StockError
from stockkeeper.models.product import Product


class KeyedLocks:
    """Re-entrant locks created on demand and dropped when unused."""

    def __init__(self):
        self._guard = threading.Lock()
        self._entries = {}  # key -> [RLock, users]

    @contextmanager
    def hold(self, key):
        with self._guard:
            entry = self._entries.setdefault(key, [threading.RLock(), 0])
            entry[1] += 1
        entry[0].acquire()
        try:
            yield
        finally:
            entry[0].release()
            with self._guard:
                entry[1] -= 1
                if not entry[1]:
                    del self._entries[key]

    def __len__(self):
        with self._guard:
            return len(self._entries)


_process_locks = KeyedLocks()


@contextmanager
def _process_scope(alias, product_id):
    if connections[alias].features.has_select_for_update:
        yield
        return
    with _process_locks.hold((alias, product_id)):
        yield


@contextmanager
def locked_product(product_id):
    """
    Atomic block holding exclusive access to one product.

    Yields the product re-read under the lock.

    Raises:
        StockError('NOT_FOUND'): If the product does not exist
    """
    alias = router.db_for_write(Product)
    with _process_scope(alias, product_id), transaction.atomic(using=alias):
        try:
            product = (
                Product.objects.using(alias)
                .select_for_update()
                .get(pk=product_id)
            )
        except (Product.DoesNotExist, ValueError, TypeError):
            raise StockError('NOT_FOUND', product_id=product_id) from None
        yield product
