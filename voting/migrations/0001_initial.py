import django.db.models.deletion
import voting.models
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('entries', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Vote',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('voter_email', models.EmailField(max_length=254)),
                ('voter_name', models.CharField(blank=True, max_length=150)),
                ('voter_ip', models.CharField(default='unknown', max_length=64)),
                ('vote_value', models.PositiveSmallIntegerField(default=1)),
                ('email_verified', models.BooleanField(default=False)),
                ('verification_token', models.CharField(default=voting.models.generate_verification_token, editable=False, max_length=64, unique=True)),
                ('verification_sent_at', models.DateTimeField(blank=True, null=True)),
                ('verified_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('entry', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='votes', to='entries.entry')),
            ],
            options={
                'ordering': ['-created_at', '-id'],
            },
        ),
        migrations.AddConstraint(
            model_name='vote',
            constraint=models.UniqueConstraint(fields=('entry', 'voter_email'), name='unique_vote_per_entry_email'),
        ),
    ]
