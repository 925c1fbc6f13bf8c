import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.teams.models import Team, TeamMembership, TeamRole


def client_for(user):
    """Return a new API client authenticated as user."""
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def team_admin(db):
    """Create and return the user who created the team."""
    return User.objects.create_user(
        email='admin@example.com',
        password='TestPass123!',
        name='Team Admin',
    )


@pytest.fixture
def member_user(db):
    """Create and return a member without manage_team."""
    return User.objects.create_user(
        email='member@example.com',
        password='TestPass123!',
        name='Team Member',
    )


@pytest.fixture
def outsider(db):
    """Create and return a user not in any team."""
    return User.objects.create_user(
        email='outsider@example.com',
        password='TestPass123!',
        name='Outsider',
    )


@pytest.fixture
def authenticated_client(team_admin):
    """Return API client authenticated as team admin."""
    return client_for(team_admin)


@pytest.fixture
def member_client(member_user):
    """Return API client authenticated as plain member."""
    return client_for(member_user)


@pytest.fixture
def outsider_client(outsider):
    """Return API client authenticated as non-member."""
    return client_for(outsider)


@pytest.fixture
def team(db, team_admin):
    """Create and return a team with its admin membership."""
    team = Team.objects.create(name='Sales', description='Sales team cards')
    TeamMembership.objects.create(
        team=team,
        user=team_admin,
        role=TeamRole.ADMIN,
        create_cards=True,
        edit_cards=True,
        delete_cards=True,
        manage_team=True,
    )
    return team


@pytest.fixture
def team_with_member(team, member_user):
    """Team with admin and a member who can only create cards."""
    TeamMembership.objects.create(
        team=team,
        user=member_user,
        role='Viewer',
        create_cards=True,
    )
    return team
