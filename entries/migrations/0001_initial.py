import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('awards', '0001_initial'),
        ('organisations', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Entry',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('entry_number', models.CharField(editable=False, max_length=20, unique=True)),
                ('entry_title', models.CharField(max_length=255)),
                ('entry_description', models.TextField(blank=True)),
                ('why_should_win', models.TextField()),
                ('supporting_information', models.TextField(blank=True)),
                ('videos', models.JSONField(blank=True, default=list, help_text='Links to supporting videos.')),
                ('contact_name', models.CharField(max_length=150)),
                ('contact_email', models.EmailField(max_length=254)),
                ('contact_phone', models.CharField(blank=True, max_length=50)),
                ('contact_position', models.CharField(blank=True, max_length=150)),
                ('entry_fee', models.DecimalField(decimal_places=2, max_digits=8)),
                ('status', models.CharField(choices=[('draft', 'Draft'), ('submitted', 'Submitted'), ('under_review', 'Under Review'), ('shortlisted', 'Shortlisted'), ('winner', 'Winner'), ('rejected', 'Rejected'), ('void', 'Void')], db_index=True, default='draft', max_length=15)),
                ('payment_status', models.CharField(choices=[('pending', 'Pending'), ('paid', 'Paid'), ('failed', 'Failed'), ('refunded', 'Refunded')], db_index=True, default='pending', max_length=10)),
                ('payment_reference', models.CharField(blank=True, db_index=True, help_text='Checkout session id until paid, then the payment intent id.', max_length=255)),
                ('submission_date', models.DateTimeField(blank=True, null=True)),
                ('is_public', models.BooleanField(default=False)),
                ('allow_public_voting', models.BooleanField(default=False)),
                ('public_votes', models.PositiveIntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('award', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='entries', to='awards.award')),
                ('organisation', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='entries', to='organisations.organisation')),
            ],
            options={
                'verbose_name_plural': 'Entries',
                'ordering': ['-created_at', '-id'],
            },
        ),
        migrations.CreateModel(
            name='Invoice',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('invoice_type', models.CharField(default='entry_fee', max_length=30)),
                ('status', models.CharField(choices=[('paid', 'Paid'), ('refunded', 'Refunded')], db_index=True, default='paid', max_length=10)),
                ('total_amount', models.DecimalField(decimal_places=2, max_digits=10)),
                ('currency', models.CharField(default='GBP', max_length=3)),
                ('paid_date', models.DateTimeField(blank=True, null=True)),
                ('payment_method', models.CharField(blank=True, max_length=30)),
                ('payment_reference', models.CharField(blank=True, db_index=True, max_length=255)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('entry', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='invoices', to='entries.entry')),
                ('organisation', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='invoices', to='organisations.organisation')),
            ],
            options={
                'ordering': ['-created_at', '-id'],
            },
        ),
    ]
