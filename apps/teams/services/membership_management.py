"""
Membership management service.

Handles team membership operations with concurrency protection. Every
change to a team's members requires the caller's own membership to carry
manage_team.
"""

import logging
from typing import Optional
from uuid import UUID

from django.db import transaction, IntegrityError
from django.db.models import QuerySet

from apps.accounts.models import User
from apps.teams.models import Team, TeamMembership, TeamRole

from .exceptions import (
    TeamNotFoundError,
    UserNotFoundError,
    MembershipNotFoundError,
    AlreadyMemberError,
    NotMemberError,
    InsufficientPermissionsError,
    LastTeamManagerError,
)

logger = logging.getLogger(__name__)


def _lock_team(team_id: UUID) -> Team:
    try:
        return (
            Team.objects
            .select_for_update()
            .get(id=team_id)
        )
    except Team.DoesNotExist:
        raise TeamNotFoundError(f"Team with ID {team_id} not found")


def _require_manager(team: Team, user: User) -> None:
    if not team.can_manage(user):
        raise InsufficientPermissionsError("You don't have permission to manage this team")


def _other_managers_exist(team: Team, membership: TeamMembership) -> bool:
    return (
        team.memberships
        .filter(manage_team=True)
        .exclude(id=membership.id)
        .exists()
    )


def get_team_members(*, team_id: UUID, user: User) -> QuerySet[TeamMembership]:
    """
    Get all members of a team with optimized queries.

    Args:
        team_id: UUID of the team
        user: Caller, who must be a member

    Returns:
        QuerySet of TeamMembership instances

    Raises:
        TeamNotFoundError: If team doesn't exist
        NotMemberError: If user is not a member
    """
    try:
        team = Team.objects.get(id=team_id)
    except Team.DoesNotExist:
        raise TeamNotFoundError(f"Team with ID {team_id} not found")

    if not team.has_member(user):
        raise NotMemberError("You are not a member of this team")

    return (
        TeamMembership.objects
        .filter(team=team)
        .select_related('user')
        .order_by('joined_at')
    )


@transaction.atomic
def add_member(
    *,
    team_id: UUID,
    email: str,
    added_by: User,
    role: str = TeamRole.MEMBER,
    permissions: Optional[dict] = None
) -> TeamMembership:
    """
    Add an existing user to a team.

    Uses row-level locking on the team to serialize concurrent additions.

    Args:
        team_id: UUID of the team
        email: Email of the user to add
        added_by: Caller (must have manage_team)
        role: Role label of the new member
        permissions: Any of create_cards, edit_cards, delete_cards,
            manage_team; missing flags default to False

    Returns:
        Created TeamMembership instance

    Raises:
        TeamNotFoundError: If team doesn't exist
        InsufficientPermissionsError: If added_by lacks manage_team
        UserNotFoundError: If no user has that email
        AlreadyMemberError: If user is already a member (caught from IntegrityError)
    """
    team = _lock_team(team_id)
    _require_manager(team, added_by)

    try:
        user = User.objects.get(email__iexact=email)
    except User.DoesNotExist:
        raise UserNotFoundError("User not found")

    if team.has_member(user):
        raise AlreadyMemberError("User is already a member of this team")

    permissions = permissions or {}
    flags = {
        field: bool(permissions.get(field, False))
        for field in TeamMembership.PERMISSION_FIELDS
    }

    try:
        membership = TeamMembership.objects.create(
            team=team,
            user=user,
            role=role or TeamRole.MEMBER,
            **flags
        )
    except IntegrityError:
        # Database constraint caught duplicate membership
        raise AlreadyMemberError("User is already a member of this team")

    logger.info("User %s added to team %s by %s", user.id, team.id, added_by.id)
    return membership


@transaction.atomic
def update_member_permissions(
    *,
    team_id: UUID,
    user_id: UUID,
    updated_by: User,
    role: Optional[str] = None,
    permissions: Optional[dict] = None
) -> TeamMembership:
    """
    Change a member's role label and/or permission flags.

    Flags not present in permissions are left unchanged.

    Raises:
        TeamNotFoundError: If team doesn't exist
        InsufficientPermissionsError: If updated_by lacks manage_team
        MembershipNotFoundError: If the target user is not a member
        LastTeamManagerError: If manage_team would be revoked from the last manager
    """
    team = _lock_team(team_id)
    _require_manager(team, updated_by)

    try:
        membership = (
            TeamMembership.objects
            .select_for_update()
            .select_related('user')
            .get(team=team, user_id=user_id)
        )
    except TeamMembership.DoesNotExist:
        raise MembershipNotFoundError("User is not a member of this team")

    changes = {
        field: bool(value)
        for field, value in (permissions or {}).items()
        if field in TeamMembership.PERMISSION_FIELDS
    }

    if membership.manage_team and changes.get('manage_team') is False:
        if not _other_managers_exist(team, membership):
            raise LastTeamManagerError("A team must keep at least one member who can manage it")

    if role:
        changes['role'] = role

    if changes:
        for field, value in changes.items():
            setattr(membership, field, value)
        membership.save(update_fields=list(changes))

    return membership


@transaction.atomic
def remove_member(
    *,
    team_id: UUID,
    user_id: UUID,
    removed_by: User
) -> None:
    """
    Remove a member from a team (manage_team only).

    The last member holding manage_team cannot be removed.

    Raises:
        TeamNotFoundError: If team doesn't exist
        InsufficientPermissionsError: If removed_by lacks manage_team
        MembershipNotFoundError: If the target user is not a member
        LastTeamManagerError: If the target is the team's last manager
    """
    team = _lock_team(team_id)
    _require_manager(team, removed_by)

    try:
        membership = (
            TeamMembership.objects
            .select_for_update()
            .get(team=team, user_id=user_id)
        )
    except TeamMembership.DoesNotExist:
        raise MembershipNotFoundError("User is not a member of this team")

    if membership.manage_team and not _other_managers_exist(team, membership):
        raise LastTeamManagerError("A team must keep at least one member who can manage it")

    membership.delete()
    logger.info("User %s removed from team %s by %s", user_id, team.id, removed_by.id)
