"""
StockAlert model: threshold breach notification per product.

Alerts are raised by the movement engine when a movement leaves a product
below its minimum quantity, and stay open until someone resolves them:

    from stockkeeper import stock

    stock.record(product.pk, 'OUT', 15, Decimal('3.00'), actor=user)
    alert = StockAlert.objects.unresolved().get(product=product)
    stock.resolve(alert.pk)

Replenishing stock does NOT resolve open alerts.
"""

from django.db import models
from django.db.models import Q
from django.utils.translation import gettext_lazy as _

from stockkeeper.models.enums import AlertKind


class StockAlertQuerySet(models.QuerySet):
    """QuerySet with alert lifecycle filters."""

    def unresolved(self):
        return self.filter(is_resolved=False)

    def resolved(self):
        return self.filter(is_resolved=True)

    def for_product(self, product_id):
        return self.filter(product_id=product_id)


class StockAlert(models.Model):
    """
    Open or resolved threshold breach.

    At most one unresolved alert exists per (product, kind); the movement
    engine checks before inserting and the database enforces it with a
    conditional unique constraint.
    """

    product = models.ForeignKey(
        'stockkeeper.Product',
        on_delete=models.CASCADE,
        related_name='alerts',
        verbose_name=_('Product'),
    )
    kind = models.CharField(
        max_length=20,
        choices=AlertKind.choices,
        verbose_name=_('Kind'),
    )
    message = models.CharField(max_length=255, verbose_name=_('Message'))

    is_resolved = models.BooleanField(default=False, db_index=True, verbose_name=_('Resolved'))
    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_('Created at'))
    resolved_at = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name=_('Resolved at'),
    )

    objects = StockAlertQuerySet.as_manager()

    class Meta:
        verbose_name = _('Stock alert')
        verbose_name_plural = _('Stock alerts')
        ordering = ['-created_at', '-pk']
        constraints = [
            models.UniqueConstraint(
                fields=['product', 'kind'],
                condition=Q(is_resolved=False),
                name='unique_open_alert_per_product_kind',
            ),
        ]
        indexes = [
            models.Index(fields=['product', 'kind', 'is_resolved'], name='stock_alert_lookup_idx'),
        ]

    def __str__(self) -> str:
        state = 'resolved' if self.is_resolved else 'open'
        return f"{self.get_kind_display()}: {self.message} [{state}]"
