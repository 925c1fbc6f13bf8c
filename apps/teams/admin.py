# ==========================================
# apps/teams/admin.py
# ==========================================

from django.contrib import admin
from apps.teams.models import Team, TeamMembership


class TeamMembershipInline(admin.TabularInline):
    """Inline admin for team memberships."""
    model = TeamMembership
    extra = 0
    fields = ['user', 'role', 'create_cards', 'edit_cards', 'delete_cards', 'manage_team', 'joined_at']
    readonly_fields = ['joined_at']


@admin.register(Team)
class TeamAdmin(admin.ModelAdmin):
    """Admin interface for Teams."""

    list_display = ['name', 'member_count', 'created_at']
    list_filter = ['created_at']
    search_fields = ['name', 'description', 'memberships__user__email']
    readonly_fields = ['created_at', 'updated_at']
    inlines = [TeamMembershipInline]
    date_hierarchy = 'created_at'
    ordering = ['-created_at']

    def member_count(self, obj):
        """Show number of members."""
        return obj.memberships.count()
    member_count.short_description = 'Members'


@admin.register(TeamMembership)
class TeamMembershipAdmin(admin.ModelAdmin):
    """Admin interface for Team Memberships."""

    list_display = ['user', 'team', 'role', 'manage_team', 'joined_at']
    list_filter = ['role', 'manage_team', 'joined_at']
    search_fields = ['user__email', 'team__name']
    readonly_fields = ['joined_at']
    ordering = ['-joined_at']

    def get_queryset(self, request):
        """Optimize query."""
        qs = super().get_queryset(request)
        return qs.select_related('user', 'team')
