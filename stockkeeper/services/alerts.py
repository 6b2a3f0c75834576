"""
Stock alerts: raise on threshold breach, resolve on request.

Usage:
    from stockkeeper import stock

    stock.resolve(alert_id)

Alerts are only ever created by the movement engine, inside its atomic
block (see StockAlerts.evaluate). They are never resolved automatically.
"""

import logging

from django.db import transaction
from django.utils import timezone

from stockkeeper.exceptions import StockError
from stockkeeper.models.alert import StockAlert
from stockkeeper.models.enums import AlertKind
from stockkeeper.signals import alert_raised

logger = logging.getLogger('stockkeeper')


def alert_message(kind, product_name: str, quantity: int, threshold: int) -> str:
    if kind == AlertKind.OUT_OF_STOCK:
        return f"{product_name} is out of stock!"
    return f"{product_name} stock is low. Current: {quantity}, Minimum: {threshold}"


class StockAlerts:
    """Alert lifecycle methods."""

    @classmethod
    def evaluate(cls, product, new_quantity: int) -> StockAlert | None:
        """
        Raise an alert if new_quantity is under the product's threshold.

        Must run inside the movement's atomic block, with the product
        locked. Returns the created alert, or None when the quantity is at
        or above the threshold or an unresolved alert of the same kind
        already exists. Open alerts of the other kind are left alone.
        """
        if new_quantity >= product.min_quantity:
            return None

        kind = AlertKind.OUT_OF_STOCK if new_quantity == 0 else AlertKind.LOW_STOCK
        if StockAlert.objects.unresolved().filter(product=product, kind=kind).exists():
            return None

        alert = StockAlert.objects.create(
            product=product,
            kind=kind,
            message=alert_message(kind, product.name, new_quantity, product.min_quantity),
        )
        transaction.on_commit(
            lambda: alert_raised.send(sender=StockAlert, alert=alert)
        )
        logger.warning(
            "stock.alert.raised",
            extra={
                "alert_id": alert.pk,
                "product_id": product.pk,
                "kind": kind.value,
                "quantity": new_quantity,
                "min_quantity": product.min_quantity,
            },
        )
        return alert

    @classmethod
    def resolve(cls, alert_id) -> StockAlert:
        """
        Mark alert as resolved.

        Resolving an already resolved alert changes nothing and returns it
        with its original resolved_at.

        Raises:
            StockError('NOT_FOUND'): If the alert does not exist
        """
        with transaction.atomic():
            try:
                alert = StockAlert.objects.select_for_update().get(pk=alert_id)
            except (StockAlert.DoesNotExist, ValueError, TypeError):
                raise StockError('NOT_FOUND', alert_id=alert_id) from None

            if alert.is_resolved:
                return alert

            alert.is_resolved = True
            alert.resolved_at = timezone.now()
            alert.save(update_fields=['is_resolved', 'resolved_at'])
            logger.info(
                "stock.alert.resolved",
                extra={"alert_id": alert.pk, "product_id": alert.product_id},
            )
            return alert
