from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'teams'

# Router for ViewSets
router = DefaultRouter()
router.register(r'', views.TeamViewSet, basename='team')

urlpatterns = [
    # Team ViewSet routes
    # GET    /api/teams/                              - List caller's teams
    # POST   /api/teams/                              - Create team
    # GET    /api/teams/{id}/                         - Get team (members only)

    # Member actions
    # GET    /api/teams/{id}/members/                 - List members
    # POST   /api/teams/{id}/members/                 - Add member (manage_team)
    # PATCH  /api/teams/{id}/members/{user_id}/       - Update member (manage_team)
    # DELETE /api/teams/{id}/members/{user_id}/       - Remove member (manage_team)

    # Include router URLs
    path('', include(router.urls)),
]
