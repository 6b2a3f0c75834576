"""
Product model: current quantity cache and reorder threshold.
"""

from decimal import Decimal

from django.db import models
from django.db.models import F, Q
from django.utils.translation import gettext_lazy as _


class ProductQuerySet(models.QuerySet):
    """QuerySet with stock-level helpers."""

    def low_stock(self):
        """Products under their minimum quantity (out of stock included)."""
        return self.filter(current_quantity__lt=F('min_quantity'))

    def out_of_stock(self):
        return self.filter(current_quantity=0)

    def search(self, term: str):
        """Case-insensitive match on name or SKU."""
        return self.filter(Q(name__icontains=term) | Q(sku__icontains=term))


class Product(models.Model):
    """
    A stocked product.

    Performance:
    - current_quantity is a cache of the ledger, written only by the
      movement engine (see stockkeeper.services.movements)
    - Read is O(1), not O(N)
    - Use stock.verify() for audit/correction
    """

    name = models.CharField(max_length=200, verbose_name=_('Name'))
    sku = models.CharField(
        max_length=64,
        unique=True,
        verbose_name=_('SKU'),
    )
    category = models.CharField(max_length=100, db_index=True, verbose_name=_('Category'))
    unit = models.CharField(
        max_length=20,
        verbose_name=_('Unit'),
        help_text=_('Ex: "pcs", "kg", "box"'),
    )
    cost_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        verbose_name=_('Cost price'),
    )
    selling_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        verbose_name=_('Selling price'),
    )

    # Quantity cache (updated only by the movement engine)
    current_quantity = models.PositiveIntegerField(
        default=0,
        verbose_name=_('Current quantity'),
    )
    min_quantity = models.PositiveIntegerField(
        default=10,
        verbose_name=_('Minimum quantity'),
        help_text=_('Alert fires when quantity drops below this value'),
    )

    location = models.CharField(max_length=100, blank=True, default='', verbose_name=_('Location'))
    description = models.TextField(blank=True, default='', verbose_name=_('Description'))

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ProductQuerySet.as_manager()

    class Meta:
        verbose_name = _('Product')
        verbose_name_plural = _('Products')
        ordering = ['-created_at']
        constraints = [
            models.CheckConstraint(
                condition=Q(current_quantity__gte=0),
                name='product_quantity_non_negative',
            ),
            models.CheckConstraint(
                condition=Q(min_quantity__gte=0),
                name='product_min_quantity_non_negative',
            ),
        ]

    @property
    def is_low_stock(self) -> bool:
        return self.current_quantity < self.min_quantity

    @property
    def is_out_of_stock(self) -> bool:
        return self.current_quantity == 0

    @property
    def stock_value(self) -> Decimal:
        """Quantity valued at cost price."""
        return self.current_quantity * self.cost_price

    def __str__(self) -> str:
        return f"{self.name} ({self.sku})"
