"""
Initial migration for Stockkeeper models.
"""

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    """Create Stockkeeper models: Product, StockTransaction, StockAlert."""

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Product',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=200, verbose_name='Name')),
                ('sku', models.CharField(max_length=64, unique=True, verbose_name='SKU')),
                ('category', models.CharField(db_index=True, max_length=100, verbose_name='Category')),
                ('unit', models.CharField(help_text='Ex: "pcs", "kg", "box"', max_length=20, verbose_name='Unit')),
                ('cost_price', models.DecimalField(decimal_places=2, max_digits=12, verbose_name='Cost price')),
                ('selling_price', models.DecimalField(decimal_places=2, max_digits=12, verbose_name='Selling price')),
                ('current_quantity', models.PositiveIntegerField(default=0, verbose_name='Current quantity')),
                ('min_quantity', models.PositiveIntegerField(default=10, help_text='Alert fires when quantity drops below this value', verbose_name='Minimum quantity')),
                ('location', models.CharField(blank=True, default='', max_length=100, verbose_name='Location')),
                ('description', models.TextField(blank=True, default='', verbose_name='Description')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Product',
                'verbose_name_plural': 'Products',
                'ordering': ['-created_at'],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(current_quantity__gte=0), name='product_quantity_non_negative'),
                    models.CheckConstraint(condition=models.Q(min_quantity__gte=0), name='product_min_quantity_non_negative'),
                ],
            },
        ),
        migrations.CreateModel(
            name='StockTransaction',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('direction', models.CharField(choices=[('IN', 'Stock in'), ('OUT', 'Stock out')], max_length=3, verbose_name='Direction')),
                ('quantity', models.PositiveIntegerField(verbose_name='Quantity')),
                ('price_per_unit', models.DecimalField(decimal_places=2, max_digits=12, verbose_name='Price per unit')),
                ('total_amount', models.DecimalField(decimal_places=2, editable=False, max_digits=14, verbose_name='Total amount')),
                ('reference_number', models.CharField(blank=True, default='', help_text='Ex: invoice or purchase order number', max_length=100, verbose_name='Reference number')),
                ('notes', models.TextField(blank=True, default='', verbose_name='Notes')),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name='Created at')),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='transactions', to='stockkeeper.product', verbose_name='Product')),
                ('performed_by', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='stock_transactions', to=settings.AUTH_USER_MODEL, verbose_name='Performed by')),
            ],
            options={
                'verbose_name': 'Stock transaction',
                'verbose_name_plural': 'Stock transactions',
                'ordering': ['-created_at', '-pk'],
                'indexes': [
                    models.Index(fields=['product', 'created_at'], name='stock_txn_product_created_idx'),
                    models.Index(fields=['direction'], name='stock_txn_direction_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(quantity__gt=0), name='stock_transaction_quantity_positive'),
                    models.CheckConstraint(condition=models.Q(price_per_unit__gt=0), name='stock_transaction_price_positive'),
                ],
            },
        ),
        migrations.CreateModel(
            name='StockAlert',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('kind', models.CharField(choices=[('LOW_STOCK', 'Low stock'), ('OUT_OF_STOCK', 'Out of stock')], max_length=20, verbose_name='Kind')),
                ('message', models.CharField(max_length=255, verbose_name='Message')),
                ('is_resolved', models.BooleanField(db_index=True, default=False, verbose_name='Resolved')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created at')),
                ('resolved_at', models.DateTimeField(blank=True, null=True, verbose_name='Resolved at')),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='alerts', to='stockkeeper.product', verbose_name='Product')),
            ],
            options={
                'verbose_name': 'Stock alert',
                'verbose_name_plural': 'Stock alerts',
                'ordering': ['-created_at', '-pk'],
                'indexes': [
                    models.Index(fields=['product', 'kind', 'is_resolved'], name='stock_alert_lookup_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(is_resolved=False), fields=('product', 'kind'), name='unique_open_alert_per_product_kind'),
                ],
            },
        ),
    ]
