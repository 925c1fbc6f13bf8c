# Generated manually for the cards app

import uuid
import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Card',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=200)),
                ('email', models.EmailField(max_length=255)),
                ('phone', models.CharField(max_length=50)),
                ('website', models.URLField(blank=True, max_length=500)),
                ('company', models.CharField(blank=True, max_length=200)),
                ('position', models.CharField(blank=True, max_length=200)),
                ('address', models.TextField(blank=True)),
                ('bio', models.TextField(blank=True)),
                ('profile_image_url', models.URLField(blank=True, max_length=500)),
                ('template', models.CharField(choices=[('template1', 'Classic'), ('template2', 'Modern'), ('template3', 'Minimal'), ('template4', 'Bold'), ('template5', 'Elegant')], default='template1', max_length=20)),
                ('primary_color', models.CharField(default='#4285F4', max_length=7, validators=[django.core.validators.RegexValidator(message='Color must be a hex value like #4285F4', regex='^#[0-9A-Fa-f]{6}$')])),
                ('enable_nfc', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='cards', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'cards',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['owner', 'created_at'], name='cards_owner_created_idx')],
            },
        ),
        migrations.CreateModel(
            name='SocialLink',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('platform', models.CharField(choices=[('linkedin', 'LinkedIn'), ('twitter', 'Twitter'), ('facebook', 'Facebook'), ('instagram', 'Instagram'), ('github', 'GitHub'), ('website', 'Website')], max_length=20)),
                ('url', models.URLField(max_length=500)),
                ('card', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='social_links', to='cards.card')),
            ],
            options={
                'db_table': 'card_social_links',
                'ordering': ['platform'],
                'unique_together': {('card', 'platform')},
            },
        ),
        migrations.CreateModel(
            name='PublicExposure',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('public_id', models.CharField(editable=False, max_length=64, unique=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('card', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='exposure', to='cards.card')),
            ],
            options={
                'db_table': 'card_public_exposures',
            },
        ),
        migrations.CreateModel(
            name='ScanEvent',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('scan_type', models.CharField(choices=[('qr', 'QR code'), ('nfc', 'NFC')], max_length=10)),
                ('device_type', models.CharField(choices=[('mobile', 'Mobile'), ('tablet', 'Tablet'), ('desktop', 'Desktop')], max_length=10)),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('card', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='scan_events', to='cards.card')),
            ],
            options={
                'db_table': 'card_scan_events',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['card', 'created_at'], name='scans_card_created_idx')],
            },
        ),
    ]
