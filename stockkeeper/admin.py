"""
Stockkeeper Admin.

Provides the operator views:
- Product: list + edit (quantity read-only, changes go through stock service)
- StockTransaction: read-only audit trail
- StockAlert: read-only with "resolve" action
"""

import logging

from django.contrib import admin, messages
from django.utils.translation import gettext_lazy as _

from stockkeeper.exceptions import StockError
from stockkeeper.models import Product, StockAlert, StockTransaction
from stockkeeper.services.products import EDITABLE_FIELDS

logger = logging.getLogger(__name__)


# =========================================================================
# PRODUCT ADMIN
# =========================================================================

@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    """Product admin: editable except quantity."""

    list_display = ['sku', 'name', 'category', 'current_quantity', 'min_quantity',
                    'low_stock_display', 'cost_price', 'selling_price']
    list_filter = ['category']
    search_fields = ['sku', 'name']
    readonly_fields = ['current_quantity', 'created_at', 'updated_at']

    @admin.display(description=_('Low stock?'), boolean=True)
    def low_stock_display(self, obj):
        return obj.is_low_stock

    def save_model(self, request, obj, form, change):
        if not change:
            super().save_model(request, obj, form, change)
            return

        from stockkeeper import stock

        changed = {
            name: form.cleaned_data[name]
            for name in form.changed_data
            if name in EDITABLE_FIELDS
        }
        if not changed:
            return
        try:
            stock.update_product(obj.pk, **changed)
        except StockError as exc:
            logger.warning("save_model: failed to update product %s: %s", obj.pk, exc)
            self.message_user(request, exc.message, messages.ERROR)


# =========================================================================
# STOCK TRANSACTION ADMIN (read-only audit trail)
# =========================================================================

@admin.register(StockTransaction)
class StockTransactionAdmin(admin.ModelAdmin):
    """StockTransaction admin: read-only. Immutable ledger."""

    list_display = ['created_at', 'product', 'direction', 'quantity',
                    'price_per_unit', 'total_amount', 'reference_number', 'performed_by']
    list_filter = ['direction', 'created_at']
    search_fields = ['reference_number', 'product__sku', 'product__name']
    readonly_fields = ['product', 'direction', 'quantity', 'price_per_unit',
                       'total_amount', 'reference_number', 'notes',
                       'performed_by', 'created_at']
    list_select_related = ['product', 'performed_by']
    date_hierarchy = 'created_at'

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# =========================================================================
# STOCK ALERT ADMIN (read-only with resolve action)
# =========================================================================

@admin.register(StockAlert)
class StockAlertAdmin(admin.ModelAdmin):
    """StockAlert admin: read-only with resolve action."""

    list_display = ['created_at', 'product', 'kind', 'message', 'is_resolved', 'resolved_at']
    list_filter = ['kind', 'is_resolved']
    search_fields = ['product__sku', 'product__name', 'message']
    readonly_fields = ['product', 'kind', 'message', 'is_resolved', 'created_at', 'resolved_at']
    list_select_related = ['product']
    actions = ['resolve_alerts']

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    @admin.action(description=_('Resolve selected alerts'), permissions=['view'])
    def resolve_alerts(self, request, queryset):
        from stockkeeper import stock

        count = 0
        for alert in queryset.filter(is_resolved=False):
            try:
                stock.resolve(alert.pk)
                count += 1
            except StockError as exc:
                logger.warning("resolve_alerts: failed to resolve %s: %s", alert.pk, exc)

        self.message_user(
            request,
            _('{count} alert(s) resolved.').format(count=count),
            messages.SUCCESS,
        )
