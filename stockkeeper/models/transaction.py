"""
StockTransaction model: Immutable ledger of stock movements.
"""

from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from stockkeeper.models.enums import Direction


class StockTransactionQuerySet(models.QuerySet):
    """QuerySet with ledger helpers."""

    def for_product(self, product_id):
        return self.filter(product_id=product_id)

    def created_on(self, day):
        """Entries created on a local calendar date."""
        return self.filter(created_at__date=day)

    def recent(self):
        return self.order_by('-created_at', '-pk')


class StockTransaction(models.Model):
    """
    Immutable record of a stock movement.

    Rules:
    - NEVER update() or delete()
    - Corrections are new entries in the opposite direction
    - total_amount is always quantity * price_per_unit

    Product.current_quantity is written in the same database transaction
    by the movement engine; the two never commit separately.
    """

    product = models.ForeignKey(
        'stockkeeper.Product',
        on_delete=models.PROTECT,
        related_name='transactions',
        verbose_name=_('Product'),
    )

    direction = models.CharField(
        max_length=3,
        choices=Direction.choices,
        verbose_name=_('Direction'),
    )
    quantity = models.PositiveIntegerField(verbose_name=_('Quantity'))
    price_per_unit = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        verbose_name=_('Price per unit'),
    )
    total_amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        editable=False,
        verbose_name=_('Total amount'),
    )

    reference_number = models.CharField(
        max_length=100,
        blank=True,
        default='',
        verbose_name=_('Reference number'),
        help_text=_('Ex: invoice or purchase order number'),
    )
    notes = models.TextField(blank=True, default='', verbose_name=_('Notes'))

    performed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='stock_transactions',
        verbose_name=_('Performed by'),
    )
    created_at = models.DateTimeField(default=timezone.now, db_index=True, verbose_name=_('Created at'))

    objects = StockTransactionQuerySet.as_manager()

    class Meta:
        verbose_name = _('Stock transaction')
        verbose_name_plural = _('Stock transactions')
        ordering = ['-created_at', '-pk']
        indexes = [
            models.Index(fields=['product', 'created_at'], name='stock_txn_product_created_idx'),
            models.Index(fields=['direction'], name='stock_txn_direction_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(quantity__gt=0),
                name='stock_transaction_quantity_positive',
            ),
            models.CheckConstraint(
                condition=Q(price_per_unit__gt=0),
                name='stock_transaction_price_positive',
            ),
        ]

    @property
    def delta(self) -> int:
        """Signed effect on product quantity."""
        return self.quantity if self.direction == Direction.IN else -self.quantity

    def save(self, *args, **kwargs):
        """Save a new entry, deriving total_amount."""
        if self.pk:
            raise ValueError(
                "Stock transactions are immutable. "
                "To correct one, record a movement in the opposite direction."
            )
        self.total_amount = self.quantity * self.price_per_unit
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        """Prevent deletion: the ledger is append-only."""
        raise ValueError(
            "Stock transactions are immutable. "
            "To reverse one, record a movement in the opposite direction."
        )

    def __str__(self) -> str:
        sign = '+' if self.direction == Direction.IN else '-'
        return f"{sign}{self.quantity} {self.product_id} @ {self.price_per_unit}"
