"""
Enums for Stockkeeper models.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class Direction(models.TextChoices):
    """
    Direction of a stock movement.

    IN:  Stock enters (purchase, return, count correction upwards).
    OUT: Stock leaves (sale, loss, count correction downwards).
    """
    IN = 'IN', _('Stock in')
    OUT = 'OUT', _('Stock out')


class AlertKind(models.TextChoices):
    """Threshold breach classification."""
    LOW_STOCK = 'LOW_STOCK', _('Low stock')          # 0 < quantity < minimum
    OUT_OF_STOCK = 'OUT_OF_STOCK', _('Out of stock')  # quantity == 0
