import pytest
from datetime import timedelta
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.cards.models import Card, ScanEvent


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


# =============================================================================
# Users
# =============================================================================

@pytest.fixture
def analytics_user(db):
    """Create the main analytics test user."""
    return User.objects.create_user(
        email='analytics_user@example.com',
        password='TestPass123!',
        name='Analytics User',
    )


@pytest.fixture
def analytics_outsider(db):
    """Create a user whose cards must never show up in the main user's report."""
    return User.objects.create_user(
        email='analytics_outsider@example.com',
        password='TestPass123!',
        name='Analytics Outsider',
    )


@pytest.fixture
def analytics_user_client(api_client, analytics_user):
    """Return API client authenticated as the main analytics user."""
    refresh = RefreshToken.for_user(analytics_user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


# =============================================================================
# Cards and scans
# =============================================================================

@pytest.fixture
def make_card():
    """Factory creating a card for an owner, optionally backdated."""
    def make(owner, name, days_ago=0):
        card = Card.objects.create(owner=owner, name=name, email='card@example.com', phone='555')
        if days_ago:
            Card.objects.filter(id=card.id).update(created_at=timezone.now() - timedelta(days=days_ago))
            card.refresh_from_db()
        return card
    return make


@pytest.fixture
def make_scans():
    """Factory creating scan events for a card at a given age."""
    def make(card, count=1, scan_type='qr', device_type='mobile', days_ago=0, hours_ago=0):
        created_at = timezone.now() - timedelta(days=days_ago, hours=hours_ago)
        ScanEvent.objects.bulk_create([
            ScanEvent(card=card, scan_type=scan_type, device_type=device_type, created_at=created_at)
            for _ in range(count)
        ])
    return make
