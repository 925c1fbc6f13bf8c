from rest_framework import serializers
from .models import Team, TeamMembership, TeamRole
from apps.accounts.serializers import UserMinimalSerializer


class PermissionsSerializer(serializers.Serializer):
    """Permission flags of a membership."""

    create_cards = serializers.BooleanField(required=False, default=False)
    edit_cards = serializers.BooleanField(required=False, default=False)
    delete_cards = serializers.BooleanField(required=False, default=False)
    manage_team = serializers.BooleanField(required=False, default=False)


class PermissionsUpdateSerializer(serializers.Serializer):
    """Permission flags to change; omitted flags stay as they are."""

    create_cards = serializers.BooleanField(required=False)
    edit_cards = serializers.BooleanField(required=False)
    delete_cards = serializers.BooleanField(required=False)
    manage_team = serializers.BooleanField(required=False)


class TeamMemberSerializer(serializers.ModelSerializer):
    """Serializer for a member as seen from the team."""

    user = UserMinimalSerializer(read_only=True)
    permissions = serializers.SerializerMethodField()

    class Meta:
        model = TeamMembership
        fields = ['id', 'user', 'role', 'permissions', 'joined_at']
        read_only_fields = fields

    def get_permissions(self, obj):
        return obj.permissions


class TeamSerializer(serializers.ModelSerializer):
    """Main serializer for teams."""

    members = TeamMemberSerializer(source='memberships', many=True, read_only=True)

    class Meta:
        model = Team
        fields = ['id', 'name', 'description', 'members', 'created_at', 'updated_at']
        read_only_fields = ['id', 'created_at', 'updated_at']


class TeamMinimalSerializer(serializers.ModelSerializer):

    class Meta:
        model = Team
        fields = ['id', 'name', 'description', 'created_at']
        read_only_fields = fields


class UserTeamSerializer(serializers.ModelSerializer):
    """Serializer for one of the caller's memberships, with its team."""

    team = TeamMinimalSerializer(read_only=True)
    permissions = serializers.SerializerMethodField()

    class Meta:
        model = TeamMembership
        fields = ['id', 'team', 'role', 'permissions', 'joined_at']
        read_only_fields = fields

    def get_permissions(self, obj):
        return obj.permissions


class TeamCreateSerializer(serializers.ModelSerializer):
    """Serializer for creating teams."""

    class Meta:
        model = Team
        fields = ['name', 'description']


class AddMemberSerializer(serializers.Serializer):
    """Serializer for adding a member by email."""

    email = serializers.EmailField()
    role = serializers.CharField(max_length=50, default=TeamRole.MEMBER)
    permissions = PermissionsSerializer(required=False)


class UpdateMemberSerializer(serializers.Serializer):
    """Serializer for changing a member's role or permissions."""

    role = serializers.CharField(max_length=50, required=False)
    permissions = PermissionsUpdateSerializer(required=False)


class ErrorSerializer(serializers.Serializer):
    error = serializers.CharField()
