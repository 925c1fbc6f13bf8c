import pytest
from uuid import uuid4
from django.urls import reverse
from rest_framework import status
from apps.teams.models import Team, TeamMembership


# =============================================================================
# Team Tests
# =============================================================================

@pytest.mark.django_db
class TestTeamList:
    """Tests for GET /api/teams/"""

    def test_list_own_teams(self, authenticated_client, team):
        url = reverse('teams:team-list')
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 1
        assert response.data[0]['team']['name'] == 'Sales'
        assert response.data[0]['role'] == 'admin'
        assert response.data[0]['permissions']['manage_team'] is True

    def test_list_excludes_other_teams(self, outsider_client, team):
        url = reverse('teams:team-list')
        response = outsider_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data == []

    def test_list_unauthenticated(self, api_client):
        url = reverse('teams:team-list')
        response = api_client.get(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.django_db
class TestTeamCreate:
    """Tests for POST /api/teams/"""

    def test_create_team(self, authenticated_client, team_admin):
        url = reverse('teams:team-list')
        response = authenticated_client.post(url, {'name': 'Support', 'description': 'Helpdesk'}, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['name'] == 'Support'
        assert len(response.data['members']) == 1
        assert response.data['members'][0]['user']['email'] == team_admin.email
        assert response.data['members'][0]['permissions'] == {
            'create_cards': True,
            'edit_cards': True,
            'delete_cards': True,
            'manage_team': True,
        }

    def test_create_team_requires_name(self, authenticated_client):
        url = reverse('teams:team-list')
        response = authenticated_client.post(url, {'description': 'No name'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert Team.objects.count() == 0


@pytest.mark.django_db
class TestTeamRetrieve:
    """Tests for GET /api/teams/{id}/"""

    def test_retrieve_as_member(self, member_client, team_with_member):
        url = reverse('teams:team-detail', kwargs={'pk': team_with_member.id})
        response = member_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data['members']) == 2

    def test_retrieve_as_outsider(self, outsider_client, team):
        url = reverse('teams:team-detail', kwargs={'pk': team.id})
        response = outsider_client.get(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_retrieve_hyphen_only_id(self, authenticated_client):
        response = authenticated_client.get(f"/api/teams/{'-' * 36}/")

        assert response.status_code == status.HTTP_404_NOT_FOUND


# =============================================================================
# Member Tests
# =============================================================================

@pytest.mark.django_db
class TestTeamMembers:
    """Tests for GET/POST /api/teams/{id}/members/"""

    def test_list_members(self, member_client, team_with_member):
        url = reverse('teams:team-members', kwargs={'pk': team_with_member.id})
        response = member_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        emails = {m['user']['email'] for m in response.data}
        assert emails == {'admin@example.com', 'member@example.com'}

    def test_list_members_as_outsider(self, outsider_client, team):
        url = reverse('teams:team-members', kwargs={'pk': team.id})
        response = outsider_client.get(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_list_members_unknown_team(self, authenticated_client, team):
        url = reverse('teams:team-members', kwargs={'pk': uuid4()})
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_add_member(self, authenticated_client, team, outsider):
        url = reverse('teams:team-members', kwargs={'pk': team.id})
        data = {
            'email': outsider.email,
            'role': 'Editor',
            'permissions': {'create_cards': True, 'edit_cards': True},
        }
        response = authenticated_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['role'] == 'Editor'
        assert response.data['permissions'] == {
            'create_cards': True,
            'edit_cards': True,
            'delete_cards': False,
            'manage_team': False,
        }
        assert team.has_member(outsider)

    def test_add_member_without_manage_team(self, member_client, team_with_member, outsider):
        """Callers lacking manage_team get 401 and no membership is created."""
        url = reverse('teams:team-members', kwargs={'pk': team_with_member.id})
        response = member_client.post(url, {'email': outsider.email, 'role': 'Viewer'}, format='json')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert not TeamMembership.objects.filter(user=outsider).exists()

    def test_add_unknown_user(self, authenticated_client, team):
        url = reverse('teams:team-members', kwargs={'pk': team.id})
        response = authenticated_client.post(url, {'email': 'ghost@example.com'}, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_add_existing_member(self, authenticated_client, team_with_member, member_user):
        url = reverse('teams:team-members', kwargs={'pk': team_with_member.id})
        response = authenticated_client.post(url, {'email': member_user.email}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert TeamMembership.objects.filter(team=team_with_member, user=member_user).count() == 1

    def test_add_member_invalid_email(self, authenticated_client, team):
        url = reverse('teams:team-members', kwargs={'pk': team.id})
        response = authenticated_client.post(url, {'email': 'not-an-email'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.django_db
class TestTeamMemberDetail:
    """Tests for PATCH/DELETE /api/teams/{id}/members/{user_id}/"""

    def test_hyphen_only_user_id(self, authenticated_client, team):
        response = authenticated_client.delete(f"/api/teams/{team.id}/members/{'-' * 36}/")

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_update_member(self, authenticated_client, team_with_member, member_user):
        url = reverse('teams:team-member-detail', kwargs={'pk': team_with_member.id, 'user_id': member_user.id})
        data = {'role': 'Manager', 'permissions': {'manage_team': True}}
        response = authenticated_client.patch(url, data, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['role'] == 'Manager'
        assert response.data['permissions']['manage_team'] is True
        assert response.data['permissions']['create_cards'] is True

    def test_update_member_without_manage_team(self, member_client, team_with_member, team_admin):
        url = reverse('teams:team-member-detail', kwargs={'pk': team_with_member.id, 'user_id': team_admin.id})
        response = member_client.patch(url, {'permissions': {'manage_team': False}}, format='json')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_revoke_last_manager(self, authenticated_client, team, team_admin):
        url = reverse('teams:team-member-detail', kwargs={'pk': team.id, 'user_id': team_admin.id})
        response = authenticated_client.patch(url, {'permissions': {'manage_team': False}}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_remove_member(self, authenticated_client, team_with_member, member_user):
        url = reverse('teams:team-member-detail', kwargs={'pk': team_with_member.id, 'user_id': member_user.id})
        response = authenticated_client.delete(url)

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not team_with_member.has_member(member_user)

    def test_remove_unknown_member(self, authenticated_client, team, outsider):
        url = reverse('teams:team-member-detail', kwargs={'pk': team.id, 'user_id': outsider.id})
        response = authenticated_client.delete(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_remove_last_manager(self, authenticated_client, team, team_admin):
        url = reverse('teams:team-member-detail', kwargs={'pk': team.id, 'user_id': team_admin.id})
        response = authenticated_client.delete(url)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert team.has_member(team_admin)
