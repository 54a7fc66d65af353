import django.core.validators
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
            name='CashTransaction',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('transaction_type', models.CharField(choices=[('in', 'Cash In'), ('out', 'Cash Out')], max_length=3)),
                ('amount', models.PositiveBigIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                ('payment_method', models.CharField(choices=[('tunai', 'Tunai'), ('qris', 'QRIS'), ('dana', 'DANA'), ('trf', 'Transfer')], default='tunai', max_length=10)),
                ('description', models.TextField(blank=True)),
                ('transaction_date', models.DateField(db_index=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='cash_transactions', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'cash_transactions',
                'ordering': ['-transaction_date', '-created_at', '-id'],
            },
        ),
        migrations.CreateModel(
            name='ExpenseRecord',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('date', models.DateField()),
                ('month_year', models.CharField(db_index=True, max_length=7, validators=[django.core.validators.RegexValidator(message='Format bulan harus YYYY-MM', regex='^\\d{4}-(0[1-9]|1[0-2])$')])),
                ('item', models.CharField(max_length=200)),
                ('category', models.CharField(choices=[('bahan-baku', 'Bahan Baku'), ('operasional', 'Operasional'), ('lain-lain', 'Lain-lain')], max_length=20)),
                ('nominal_amount', models.PositiveBigIntegerField()),
                ('quantity', models.PositiveIntegerField()),
                ('total', models.PositiveBigIntegerField(default=0)),
                ('pic_name', models.CharField(max_length=150)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='expenses', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'expense_records',
                'ordering': ['-date', '-created_at', '-id'],
            },
        ),
    ]
