import awards.models
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='Award',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('award_name', models.CharField(max_length=200)),
                ('category', models.CharField(blank=True, max_length=200)),
                ('sector', models.CharField(blank=True, db_index=True, max_length=100)),
                ('region', models.CharField(blank=True, db_index=True, max_length=100)),
                ('year', models.PositiveIntegerField(db_index=True, default=awards.models.current_year)),
                ('description', models.TextField(blank=True)),
                ('is_active', models.BooleanField(default=True, help_text='Inactive awards are hidden from the public flows.')),
                ('entry_fee', models.DecimalField(blank=True, decimal_places=2, help_text='Optional: leave empty to charge the default entry fee.', max_digits=8, null=True)),
                ('status', models.CharField(choices=[('Draft', 'Draft'), ('Pending', 'Pending'), ('Approved', 'Approved'), ('Rejected', 'Rejected')], db_index=True, default='Draft', max_length=10)),
                ('winner', models.CharField(blank=True, help_text='Display name of the announced winner.', max_length=200)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'ordering': ['-year', 'award_name'],
            },
        ),
    ]
