"""
Teams app services layer.

Services contain business logic and orchestrate operations across models.
All state-changing operations use transactions and concurrency protection.
"""

from .exceptions import (
    TeamsServiceError,
    TeamNotFoundError,
    UserNotFoundError,
    MembershipNotFoundError,
    AlreadyMemberError,
    NotMemberError,
    InsufficientPermissionsError,
    LastTeamManagerError,
)

from .team_management import (
    create_team,
    list_user_teams,
    get_team,
)

from .membership_management import (
    get_team_members,
    add_member,
    update_member_permissions,
    remove_member,
)


__all__ = [
    # Exceptions
    'TeamsServiceError',
    'TeamNotFoundError',
    'UserNotFoundError',
    'MembershipNotFoundError',
    'AlreadyMemberError',
    'NotMemberError',
    'InsufficientPermissionsError',
    'LastTeamManagerError',

    # Team Management
    'create_team',
    'list_user_teams',
    'get_team',

    # Membership Management
    'get_team_members',
    'add_member',
    'update_member_permissions',
    'remove_member',
]
