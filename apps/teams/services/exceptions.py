"""
Domain-specific exceptions for teams app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses.
"""


class TeamsServiceError(Exception):
    """Base exception for all teams service errors."""
    pass


class TeamNotFoundError(TeamsServiceError):
    """Raised when a team does not exist."""
    pass


class UserNotFoundError(TeamsServiceError):
    """Raised when no account matches the invited email."""
    pass


class MembershipNotFoundError(TeamsServiceError):
    """Raised when the target user is not a member of the team."""
    pass


class AlreadyMemberError(TeamsServiceError):
    """Raised when a user is added to a team they're already in."""
    pass


class NotMemberError(TeamsServiceError):
    """Raised when the caller is not a member of the team."""
    pass


class InsufficientPermissionsError(TeamsServiceError):
    """Raised when the caller's membership lacks manage_team."""
    pass


class LastTeamManagerError(TeamsServiceError):
    """Raised when a change would leave a team without any manager."""
    pass
