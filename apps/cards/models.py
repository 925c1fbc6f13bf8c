# ==========================================
# apps/cards/models.py
# ==========================================

from django.core.validators import RegexValidator
from django.db import models
from django.utils import timezone
import uuid


class CardTemplate(models.TextChoices):
    TEMPLATE1 = 'template1', 'Classic'
    TEMPLATE2 = 'template2', 'Modern'
    TEMPLATE3 = 'template3', 'Minimal'
    TEMPLATE4 = 'template4', 'Bold'
    TEMPLATE5 = 'template5', 'Elegant'


class SocialPlatform(models.TextChoices):
    LINKEDIN = 'linkedin', 'LinkedIn'
    TWITTER = 'twitter', 'Twitter'
    FACEBOOK = 'facebook', 'Facebook'
    INSTAGRAM = 'instagram', 'Instagram'
    GITHUB = 'github', 'GitHub'
    WEBSITE = 'website', 'Website'


class ScanType(models.TextChoices):
    QR = 'qr', 'QR code'
    NFC = 'nfc', 'NFC'


class DeviceType(models.TextChoices):
    MOBILE = 'mobile', 'Mobile'
    TABLET = 'tablet', 'Tablet'
    DESKTOP = 'desktop', 'Desktop'


hex_color_validator = RegexValidator(
    regex=r'^#[0-9A-Fa-f]{6}$',
    message='Color must be a hex value like #4285F4',
)


class Card(models.Model):
    """Digital business card owned by a single user."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='cards')

    # Contact details
    name = models.CharField(max_length=200)
    email = models.EmailField(max_length=255)
    phone = models.CharField(max_length=50)
    website = models.URLField(max_length=500, blank=True)
    company = models.CharField(max_length=200, blank=True)
    position = models.CharField(max_length=200, blank=True)
    address = models.TextField(blank=True)
    bio = models.TextField(blank=True)
    profile_image_url = models.URLField(max_length=500, blank=True)

    # Presentation
    template = models.CharField(max_length=20, choices=CardTemplate.choices, default=CardTemplate.TEMPLATE1)
    primary_color = models.CharField(max_length=7, default='#4285F4', validators=[hex_color_validator])
    enable_nfc = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'cards'
        indexes = [
            models.Index(fields=['owner', 'created_at'], name='cards_owner_created_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return self.name

    @property
    def public_id(self):
        """Identifier of the live public exposure, or None while unexposed."""
        try:
            return self.exposure.public_id
        except PublicExposure.DoesNotExist:
            return None


class SocialLink(models.Model):
    """One social profile per platform on a card."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    card = models.ForeignKey(Card, on_delete=models.CASCADE, related_name='social_links')
    platform = models.CharField(max_length=20, choices=SocialPlatform.choices)
    url = models.URLField(max_length=500)

    class Meta:
        db_table = 'card_social_links'
        unique_together = [['card', 'platform']]
        ordering = ['platform']

    def __str__(self):
        return f"{self.card.name} - {self.platform}"


class PublicExposure(models.Model):
    """
    Binding of a card to its unguessable public identifier.

    At most one exposure exists per card (one-to-one) and public ids are
    globally unique; both constraints are enforced by the database.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    card = models.OneToOneField(Card, on_delete=models.CASCADE, related_name='exposure')
    public_id = models.CharField(max_length=64, unique=True, editable=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'card_public_exposures'

    def __str__(self):
        return f"{self.public_id} -> {self.card_id}"


class ScanEvent(models.Model):
    """Immutable record of one public view of a card."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    card = models.ForeignKey(Card, on_delete=models.CASCADE, related_name='scan_events')
    scan_type = models.CharField(max_length=10, choices=ScanType.choices)
    device_type = models.CharField(max_length=10, choices=DeviceType.choices)
    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        db_table = 'card_scan_events'
        indexes = [
            models.Index(fields=['card', 'created_at'], name='scans_card_created_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.card_id} {self.scan_type}/{self.device_type} @ {self.created_at:%Y-%m-%d %H:%M}"
