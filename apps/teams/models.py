# ==========================================
# apps/teams/models.py
# ==========================================

from django.db import models
import uuid


class TeamRole:
    ADMIN = 'admin'
    MEMBER = 'member'


class Team(models.Model):
    """Team of users sharing card management."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'teams'
        ordering = ['-created_at']

    def __str__(self):
        return self.name

    def has_member(self, user):
        return self.memberships.filter(user=user).exists()

    def can_manage(self, user):
        return self.memberships.filter(user=user, manage_team=True).exists()


class TeamMembership(models.Model):
    """User membership in a team with a role label and permission flags."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='team_memberships')
    team = models.ForeignKey(Team, on_delete=models.CASCADE, related_name='memberships')
    role = models.CharField(max_length=50, default=TeamRole.MEMBER)

    # Permissions
    create_cards = models.BooleanField(default=False)
    edit_cards = models.BooleanField(default=False)
    delete_cards = models.BooleanField(default=False)
    manage_team = models.BooleanField(default=False)

    joined_at = models.DateTimeField(auto_now_add=True)

    PERMISSION_FIELDS = ('create_cards', 'edit_cards', 'delete_cards', 'manage_team')

    class Meta:
        db_table = 'team_memberships'
        unique_together = [['team', 'user']]
        indexes = [
            models.Index(fields=['user', 'joined_at'], name='team_members_user_joined_idx'),
        ]
        ordering = ['joined_at']

    def __str__(self):
        return f"{self.user.get_display_name()} in {self.team.name} ({self.role})"

    @property
    def permissions(self):
        return {field: getattr(self, field) for field in self.PERMISSION_FIELDS}
