from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'cards'

# Router for ViewSets
router = DefaultRouter()
router.register(r'cards', views.CardViewSet, basename='card')

urlpatterns = [
    # Card ViewSet routes
    # GET    /api/cards/               - List own cards
    # POST   /api/cards/               - Create card
    # GET    /api/cards/{id}/          - Get card
    # PUT    /api/cards/{id}/          - Update card
    # PATCH  /api/cards/{id}/          - Partial update
    # DELETE /api/cards/{id}/          - Delete card
    # POST   /api/cards/{id}/expose/   - Ensure public link

    # Anonymous endpoints
    path('public/<str:public_id>/', views.public_card, name='public-card'),
    path('public/<str:public_id>/vcard/', views.public_vcard, name='public-vcard'),
    path('scan-log/', views.scan_log, name='scan-log'),

    path('uploads/presign/', views.presign_upload, name='presign-upload'),

    # Include router URLs
    path('', include(router.urls)),
]
