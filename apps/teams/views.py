from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from .serializers import (
    TeamSerializer,
    TeamCreateSerializer,
    TeamMemberSerializer,
    UserTeamSerializer,
    AddMemberSerializer,
    UpdateMemberSerializer,
    ErrorSerializer,
)

from apps.teams.services import (
    create_team,
    list_user_teams,
    get_team,
    get_team_members,
    add_member,
    update_member_permissions,
    remove_member,
    # Exceptions
    TeamNotFoundError,
    UserNotFoundError,
    MembershipNotFoundError,
    AlreadyMemberError,
    NotMemberError,
    InsufficientPermissionsError,
    LastTeamManagerError,
)

UUID_PATTERN = r'[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}'


class TeamViewSet(viewsets.ViewSet):
    """
    ViewSet for teams and their members.

    All business logic is handled by services.
    Views are thin HTTP handlers only.

    list: Get the caller's memberships with their teams
    create: Create a team (caller becomes its admin)
    retrieve: Get a team the caller belongs to
    members: List members (GET) or add a member (POST, manage_team only)
    member_detail: Change (PATCH) or remove (DELETE) a member (manage_team only)
    """

    permission_classes = [IsAuthenticated]
    lookup_value_regex = UUID_PATTERN

    @extend_schema(responses={200: UserTeamSerializer(many=True)}, tags=['teams'])
    def list(self, request):
        memberships = list_user_teams(user=request.user)
        return Response(UserTeamSerializer(memberships, many=True).data)

    @extend_schema(
        request=TeamCreateSerializer,
        responses={201: TeamSerializer, 400: ErrorSerializer},
        tags=['teams'],
    )
    def create(self, request):
        serializer = TeamCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        team = create_team(
            name=serializer.validated_data['name'],
            creator=request.user,
            description=serializer.validated_data.get('description', ''),
        )

        return Response(TeamSerializer(team).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        responses={200: TeamSerializer, 401: ErrorSerializer, 404: ErrorSerializer},
        tags=['teams'],
    )
    def retrieve(self, request, pk=None):
        try:
            team = get_team(team_id=pk, user=request.user)
        except TeamNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except NotMemberError as e:
            return Response({'error': str(e)}, status=status.HTTP_401_UNAUTHORIZED)

        return Response(TeamSerializer(team).data)

    @extend_schema(
        methods=['GET'],
        responses={200: TeamMemberSerializer(many=True), 401: ErrorSerializer, 404: ErrorSerializer},
        tags=['teams'],
    )
    @extend_schema(
        methods=['POST'],
        request=AddMemberSerializer,
        responses={
            201: TeamMemberSerializer,
            400: ErrorSerializer,
            401: ErrorSerializer,
            404: ErrorSerializer,
        },
        tags=['teams'],
    )
    @action(detail=True, methods=['get', 'post'])
    def members(self, request, pk=None):
        """List team members, or add one by email."""
        if request.method == 'GET':
            try:
                memberships = get_team_members(team_id=pk, user=request.user)
            except TeamNotFoundError as e:
                return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
            except NotMemberError as e:
                return Response({'error': str(e)}, status=status.HTTP_401_UNAUTHORIZED)

            return Response(TeamMemberSerializer(memberships, many=True).data)

        serializer = AddMemberSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            membership = add_member(
                team_id=pk,
                email=serializer.validated_data['email'],
                role=serializer.validated_data['role'],
                permissions=serializer.validated_data.get('permissions'),
                added_by=request.user,
            )
        except InsufficientPermissionsError as e:
            return Response({'error': str(e)}, status=status.HTTP_401_UNAUTHORIZED)
        except (TeamNotFoundError, UserNotFoundError) as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except AlreadyMemberError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(TeamMemberSerializer(membership).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        methods=['PATCH'],
        request=UpdateMemberSerializer,
        responses={
            200: TeamMemberSerializer,
            400: ErrorSerializer,
            401: ErrorSerializer,
            404: ErrorSerializer,
        },
        tags=['teams'],
    )
    @extend_schema(
        methods=['DELETE'],
        responses={204: None, 400: ErrorSerializer, 401: ErrorSerializer, 404: ErrorSerializer},
        tags=['teams'],
    )
    @action(
        detail=True,
        methods=['patch', 'delete'],
        url_path=rf'members/(?P<user_id>{UUID_PATTERN})',
        url_name='member-detail',
    )
    def member_detail(self, request, pk=None, user_id=None):
        """Change a member's role and permissions, or remove them."""
        try:
            if request.method == 'DELETE':
                remove_member(team_id=pk, user_id=user_id, removed_by=request.user)
                return Response(status=status.HTTP_204_NO_CONTENT)

            serializer = UpdateMemberSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)

            membership = update_member_permissions(
                team_id=pk,
                user_id=user_id,
                updated_by=request.user,
                role=serializer.validated_data.get('role'),
                permissions=serializer.validated_data.get('permissions'),
            )
        except InsufficientPermissionsError as e:
            return Response({'error': str(e)}, status=status.HTTP_401_UNAUTHORIZED)
        except (TeamNotFoundError, MembershipNotFoundError) as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except LastTeamManagerError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(TeamMemberSerializer(membership).data)
