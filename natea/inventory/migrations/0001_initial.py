import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='InventoryItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('item_name', models.CharField(max_length=200)),
                ('name_key', models.CharField(editable=False, max_length=200, unique=True)),
                ('category', models.CharField(choices=[('Bahan Utama', 'Bahan Utama'), ('Pendukung', 'Pendukung'), ('Lain-Lain', 'Lain-Lain')], max_length=50)),
                ('size', models.CharField(choices=[('Kecil', 'Kecil'), ('Besar', 'Besar'), ('Jumbo', 'Jumbo')], max_length=50)),
                ('unit', models.CharField(choices=[('Pack', 'Pack'), ('Pcs', 'Pcs'), ('Gram', 'Gram'), ('ml', 'ml')], max_length=20)),
                ('initial_stock', models.PositiveIntegerField(default=0)),
                ('reject', models.PositiveIntegerField(default=0)),
                ('final_stock', models.PositiveIntegerField(default=0)),
                ('minimum_stock', models.PositiveIntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'inventory_items',
                'ordering': ['item_name'],
            },
        ),
        migrations.CreateModel(
            name='StockAdjustment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('item_name', models.CharField(max_length=200)),
                ('item_size', models.CharField(blank=True, max_length=50)),
                ('adjustment_type', models.CharField(choices=[('add', 'Stock In'), ('reduce', 'Stock Out')], max_length=10)),
                ('quantity', models.PositiveIntegerField()),
                ('final_stock_after', models.PositiveIntegerField(default=0)),
                ('description', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('created_by', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='stock_adjustments', to=settings.AUTH_USER_MODEL)),
                ('item', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='adjustments', to='inventory.inventoryitem')),
            ],
            options={
                'db_table': 'stock_adjustments',
                'ordering': ['-created_at', '-id'],
            },
        ),
    ]
