"""
Team management service.

Handles team creation and lookup.
"""

import logging
from uuid import UUID

from django.db import transaction
from django.db.models import QuerySet

from apps.accounts.models import User
from apps.teams.models import Team, TeamMembership, TeamRole

from .exceptions import TeamNotFoundError, NotMemberError

logger = logging.getLogger(__name__)


@transaction.atomic
def create_team(
    *,
    name: str,
    creator: User,
    description: str = ''
) -> Team:
    """
    Create a new team with the creator as its admin.

    The creator's membership carries every permission, so a new team
    always has someone who can manage it.

    Args:
        name: Team name
        creator: User creating the team
        description: Optional team description

    Returns:
        Created Team instance
    """
    team = Team.objects.create(name=name, description=description)

    TeamMembership.objects.create(
        team=team,
        user=creator,
        role=TeamRole.ADMIN,
        create_cards=True,
        edit_cards=True,
        delete_cards=True,
        manage_team=True,
    )

    logger.info("Team %s created by user %s", team.id, creator.id)
    return team


def list_user_teams(*, user: User) -> QuerySet[TeamMembership]:
    """The caller's memberships together with their teams, newest team first."""
    return (
        TeamMembership.objects
        .filter(user=user)
        .select_related('team')
        .order_by('-team__created_at')
    )


def get_team(*, team_id: UUID, user: User) -> Team:
    """
    Get a team the caller belongs to.

    Raises:
        TeamNotFoundError: If team doesn't exist
        NotMemberError: If user is not a member
    """
    try:
        team = Team.objects.prefetch_related('memberships__user').get(id=team_id)
    except Team.DoesNotExist:
        raise TeamNotFoundError(f"Team with ID {team_id} not found")

    if not team.has_member(user):
        raise NotMemberError("You are not a member of this team")

    return team
