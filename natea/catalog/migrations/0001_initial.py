import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='Product',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(db_index=True, max_length=200)),
                ('category', models.CharField(choices=[('Minuman', 'Minuman'), ('Makanan', 'Makanan'), ('Snack', 'Snack'), ('Lainnya', 'Lainnya')], default='Minuman', max_length=50)),
                ('size', models.CharField(choices=[('Small', 'Small'), ('Medium', 'Medium'), ('Large', 'Large'), ('Extra Large', 'Extra Large')], max_length=50)),
                ('sale_price', models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                ('hpp', models.PositiveIntegerField(default=0, help_text='Cost of goods sold per unit (HPP)')),
                ('image', models.ImageField(blank=True, upload_to='products/')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'products',
                'ordering': ['-created_at', '-id'],
            },
        ),
    ]
