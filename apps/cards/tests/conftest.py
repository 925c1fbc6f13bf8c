import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.cards.models import Card, SocialLink, PublicExposure, SocialPlatform


IPHONE_UA = (
    'Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) '
    'AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.0 Mobile/15E148 Safari/604.1'
)
IPAD_UA = (
    'Mozilla/5.0 (iPad; CPU OS 17_0 like Mac OS X) '
    'AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.0 Safari/604.1'
)
DESKTOP_UA = (
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64) '
    'AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36'
)


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def card_owner(db):
    """Create and return a test user who owns cards."""
    return User.objects.create_user(
        email='ada@example.com',
        password='TestPass123!',
        name='Ada Lovelace',
    )


@pytest.fixture
def other_user(db):
    """Create and return a user who owns no cards."""
    return User.objects.create_user(
        email='bob@example.com',
        password='TestPass123!',
        name='Bob',
    )


@pytest.fixture
def authenticated_client(api_client, card_owner):
    """Return API client authenticated as card owner."""
    refresh = RefreshToken.for_user(card_owner)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def other_client(other_user):
    """Return API client authenticated as another user."""
    client = APIClient()
    refresh = RefreshToken.for_user(other_user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def card(db, card_owner):
    """Create and return an unexposed card with one social link."""
    card = Card.objects.create(
        owner=card_owner,
        name='Ada Lovelace',
        email='ada@example.com',
        phone='+44 20 7946 0000',
        company='Analytical Engines Ltd',
        position='Programmer',
    )
    SocialLink.objects.create(
        card=card,
        platform=SocialPlatform.GITHUB,
        url='https://github.com/ada',
    )
    return card


@pytest.fixture
def exposed_card(card):
    """The card fixture with a known public identifier."""
    PublicExposure.objects.create(card=card, public_id='AdaPublicId00001')
    return card


@pytest.fixture
def card_payload():
    """Valid request body for creating a card."""
    return {
        'name': 'Ada Lovelace',
        'email': 'ada@example.com',
        'phone': '+44 20 7946 0000',
        'company': 'Analytical Engines Ltd',
        'template': 'template2',
        'primary_color': '#112233',
        'social_links': [
            {'platform': 'linkedin', 'url': 'https://linkedin.com/in/ada'},
            {'platform': 'github', 'url': 'https://github.com/ada'},
        ],
    }


@pytest.fixture
def exposed_card_factory(other_user):
    """Create another user's card exposed under a given identifier."""
    def make(public_id):
        other_card = Card.objects.create(owner=other_user, name='Bob', email='bob@example.com', phone='2')
        PublicExposure.objects.create(card=other_card, public_id=public_id)
        return other_card
    return make
