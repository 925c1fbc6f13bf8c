# ==========================================
# apps/cards/admin.py
# ==========================================

from django.contrib import admin
from django.db.models import Count
from apps.cards.models import Card, SocialLink, PublicExposure, ScanEvent


class SocialLinkInline(admin.TabularInline):
    """Inline admin for a card's social links."""
    model = SocialLink
    extra = 0
    fields = ['platform', 'url']


@admin.register(Card)
class CardAdmin(admin.ModelAdmin):
    """Admin interface for Cards."""

    list_display = [
        'name',
        'owner',
        'company',
        'public_id',
        'scan_count',
        'created_at',
    ]
    list_filter = ['template', 'enable_nfc', 'created_at']
    search_fields = ['name', 'email', 'company', 'owner__email', 'exposure__public_id']
    readonly_fields = ['public_id', 'created_at', 'updated_at']
    inlines = [SocialLinkInline]
    date_hierarchy = 'created_at'
    ordering = ['-created_at']

    fieldsets = (
        ('Contact', {
            'fields': ('owner', 'name', 'email', 'phone', 'website', 'company', 'position', 'address', 'bio')
        }),
        ('Presentation', {
            'fields': ('profile_image_url', 'template', 'primary_color', 'enable_nfc')
        }),
        ('Sharing', {
            'fields': ('public_id',)
        }),
        ('Metadata', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def get_queryset(self, request):
        """Optimize query."""
        qs = super().get_queryset(request)
        return qs.select_related('owner', 'exposure').annotate(num_scans=Count('scan_events'))

    def scan_count(self, obj):
        """Show number of recorded scans."""
        return obj.num_scans
    scan_count.short_description = 'Scans'
    scan_count.admin_order_field = 'num_scans'


@admin.register(ScanEvent)
class ScanEventAdmin(admin.ModelAdmin):
    """Read-only view of recorded scans."""

    list_display = ['card', 'scan_type', 'device_type', 'created_at']
    list_filter = ['scan_type', 'device_type', 'created_at']
    search_fields = ['card__name', 'card__owner__email']
    date_hierarchy = 'created_at'
    ordering = ['-created_at']

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related('card')

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
