from rest_framework import serializers
from .models import Card, SocialLink, ScanType
from .services.exposure import build_public_url
from .services.scan_tracking import normalize_scan_type, normalize_device_type
from .services.exceptions import InvalidScanError


class SocialLinkSerializer(serializers.ModelSerializer):
    """Serializer for a card's social profile link."""

    class Meta:
        model = SocialLink
        fields = ['platform', 'url']


class CardSerializer(serializers.ModelSerializer):
    """Owner-facing card representation."""

    social_links = SocialLinkSerializer(many=True, read_only=True)
    public_id = serializers.SerializerMethodField()
    public_url = serializers.SerializerMethodField()

    class Meta:
        model = Card
        fields = [
            'id',
            'name',
            'email',
            'phone',
            'website',
            'company',
            'position',
            'address',
            'bio',
            'profile_image_url',
            'template',
            'primary_color',
            'enable_nfc',
            'social_links',
            'public_id',
            'public_url',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_public_id(self, obj):
        return obj.public_id

    def get_public_url(self, obj):
        public_id = obj.public_id
        return build_public_url(public_id) if public_id else None


class CardWriteSerializer(serializers.ModelSerializer):
    """Serializer for creating and updating cards."""

    social_links = SocialLinkSerializer(many=True, required=False)

    class Meta:
        model = Card
        fields = [
            'name',
            'email',
            'phone',
            'website',
            'company',
            'position',
            'address',
            'bio',
            'profile_image_url',
            'template',
            'primary_color',
            'enable_nfc',
            'social_links',
        ]

    def validate_social_links(self, value):
        platforms = [link['platform'] for link in value]
        if len(platforms) != len(set(platforms)):
            raise serializers.ValidationError('Each social platform may appear only once per card')
        return value


class PublicCardSerializer(serializers.ModelSerializer):
    """
    Anonymous card representation.

    Exposes contact details and presentation only; never the owner.
    """

    social_links = SocialLinkSerializer(many=True, read_only=True)

    class Meta:
        model = Card
        fields = [
            'id',
            'name',
            'email',
            'phone',
            'website',
            'company',
            'position',
            'address',
            'bio',
            'profile_image_url',
            'template',
            'primary_color',
            'enable_nfc',
            'social_links',
        ]
        read_only_fields = fields


class ExposureSerializer(serializers.Serializer):
    """Public link of a card."""

    public_id = serializers.CharField()
    public_url = serializers.URLField()


class ScanLogSerializer(serializers.Serializer):
    """Serializer for explicit scan logging by the public viewer."""

    card_id = serializers.UUIDField()
    scan_type = serializers.CharField(
        default=ScanType.QR,
        help_text="'qr' or 'nfc' (case-insensitive)"
    )
    device_type = serializers.CharField(
        required=False,
        help_text="'mobile', 'tablet' or 'desktop'; derived from User-Agent when omitted"
    )

    def validate_scan_type(self, value):
        try:
            return normalize_scan_type(value)
        except InvalidScanError as e:
            raise serializers.ValidationError(str(e))

    def validate_device_type(self, value):
        try:
            return normalize_device_type(value)
        except InvalidScanError as e:
            raise serializers.ValidationError(str(e))


class PresignUploadSerializer(serializers.Serializer):
    """Serializer for requesting a presigned image upload."""

    filename = serializers.CharField(max_length=255)
    content_type = serializers.CharField(max_length=100)


class PresignUploadResponseSerializer(serializers.Serializer):
    upload_url = serializers.URLField()
    file_url = serializers.URLField()
    key = serializers.CharField()
    expires_in = serializers.IntegerField()


class ErrorSerializer(serializers.Serializer):
    error = serializers.CharField()
