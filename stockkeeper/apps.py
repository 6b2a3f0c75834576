"""Django app configuration for Stockkeeper."""

from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class StockkeeperConfig(AppConfig):
    """Configuration for Stockkeeper app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "stockkeeper"
    verbose_name = _("Inventory")
