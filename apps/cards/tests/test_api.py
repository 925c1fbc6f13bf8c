import pytest
from unittest.mock import Mock, patch
from django.apps import apps
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from apps.cards.models import Card, PublicExposure, ScanEvent
from apps.cards.services import UploadStorage
from .conftest import IPHONE_UA, IPAD_UA, DESKTOP_UA


# =============================================================================
# Card CRUD Tests
# =============================================================================

@pytest.mark.django_db
class TestCardList:
    """Tests for GET /api/cards/"""

    def test_list_own_cards(self, authenticated_client, card, other_user):
        Card.objects.create(owner=other_user, name='Bob', email='bob@example.com', phone='2')

        url = reverse('cards:card-list')
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 1
        assert response.data[0]['id'] == str(card.id)
        assert response.data[0]['social_links'] == [
            {'platform': 'github', 'url': 'https://github.com/ada'}
        ]

    def test_list_unauthenticated(self, api_client):
        """There is no anonymous listing of cards."""
        url = reverse('cards:card-list')
        response = api_client.get(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.django_db
class TestCardCreate:
    """Tests for POST /api/cards/"""

    def test_create_card(self, authenticated_client, card_owner, card_payload):
        url = reverse('cards:card-list')
        response = authenticated_client.post(url, card_payload, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['name'] == 'Ada Lovelace'
        assert response.data['template'] == 'template2'
        assert len(response.data['social_links']) == 2
        assert response.data['public_id'] is not None
        assert response.data['public_url'].endswith(f"/vcard/{response.data['public_id']}")

        card = Card.objects.get(id=response.data['id'])
        assert card.owner == card_owner

    def test_create_card_defaults(self, authenticated_client):
        url = reverse('cards:card-list')
        data = {'name': 'Ada', 'email': 'ada@example.com', 'phone': '1'}
        response = authenticated_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['template'] == 'template1'
        assert response.data['primary_color'] == '#4285F4'
        assert response.data['enable_nfc'] is False
        assert response.data['social_links'] == []

    def test_create_card_missing_required(self, authenticated_client):
        url = reverse('cards:card-list')
        data = {'name': 'Ada', 'phone': '1'}
        response = authenticated_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'email' in response.data
        assert Card.objects.count() == 0

    def test_create_card_invalid_color(self, authenticated_client, card_payload):
        url = reverse('cards:card-list')
        card_payload['primary_color'] = 'blue'
        response = authenticated_client.post(url, card_payload, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_create_card_duplicate_platform(self, authenticated_client, card_payload):
        url = reverse('cards:card-list')
        card_payload['social_links'].append({'platform': 'github', 'url': 'https://github.com/other'})
        response = authenticated_client.post(url, card_payload, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert Card.objects.count() == 0

    def test_create_card_unauthenticated(self, api_client, card_payload):
        url = reverse('cards:card-list')
        response = api_client.post(url, card_payload, format='json')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.django_db
class TestCardDetail:
    """Tests for GET/PATCH/PUT/DELETE /api/cards/{id}/"""

    def test_retrieve_unexposed_card(self, authenticated_client, card):
        """Reading a card does not issue a public link."""
        url = reverse('cards:card-detail', kwargs={'pk': card.id})
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['public_id'] is None
        assert response.data['public_url'] is None
        assert PublicExposure.objects.count() == 0

    def test_retrieve_other_users_card(self, other_client, card):
        url = reverse('cards:card-detail', kwargs={'pk': card.id})
        response = other_client.get(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_retrieve_malformed_id(self, authenticated_client):
        response = authenticated_client.get('/api/cards/not-a-uuid/')

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_retrieve_hyphen_only_id(self, authenticated_client):
        """Only well-formed UUIDs reach the card lookup."""
        response = authenticated_client.get(f"/api/cards/{'-' * 36}/")

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_partial_update(self, authenticated_client, exposed_card):
        url = reverse('cards:card-detail', kwargs={'pk': exposed_card.id})
        response = authenticated_client.patch(url, {'position': 'Analyst'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['position'] == 'Analyst'
        assert response.data['public_id'] == 'AdaPublicId00001'
        assert len(response.data['social_links']) == 1

    def test_partial_update_replaces_links(self, authenticated_client, card):
        url = reverse('cards:card-detail', kwargs={'pk': card.id})
        data = {'social_links': [{'platform': 'twitter', 'url': 'https://twitter.com/ada'}]}
        response = authenticated_client.patch(url, data, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['social_links'] == [
            {'platform': 'twitter', 'url': 'https://twitter.com/ada'}
        ]

    def test_full_update_requires_contact_fields(self, authenticated_client, card):
        url = reverse('cards:card-detail', kwargs={'pk': card.id})
        response = authenticated_client.put(url, {'name': 'Ada'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_update_other_users_card(self, other_client, card):
        url = reverse('cards:card-detail', kwargs={'pk': card.id})
        response = other_client.patch(url, {'name': 'Hijacked'}, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND
        card.refresh_from_db()
        assert card.name == 'Ada Lovelace'

    def test_delete_card(self, authenticated_client, exposed_card):
        url = reverse('cards:card-detail', kwargs={'pk': exposed_card.id})
        response = authenticated_client.delete(url)

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not Card.objects.filter(id=exposed_card.id).exists()

        public_url = reverse('cards:public-card', kwargs={'public_id': 'AdaPublicId00001'})
        assert APIClient().get(public_url).status_code == status.HTTP_404_NOT_FOUND

    def test_delete_other_users_card(self, other_client, card):
        url = reverse('cards:card-detail', kwargs={'pk': card.id})
        response = other_client.delete(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert Card.objects.filter(id=card.id).exists()


@pytest.mark.django_db
class TestCardExpose:
    """Tests for POST /api/cards/{id}/expose/"""

    def test_expose_mints_then_reuses(self, authenticated_client, card):
        url = reverse('cards:card-expose', kwargs={'pk': card.id})

        first = authenticated_client.post(url)
        second = authenticated_client.post(url)

        assert first.status_code == status.HTTP_201_CREATED
        assert second.status_code == status.HTTP_200_OK
        assert first.data['public_id'] == second.data['public_id']
        assert PublicExposure.objects.filter(card=card).count() == 1

    def test_expose_lost_race_returns_200(self, authenticated_client, card):
        """A concurrent caller that issued the id first makes this call a reuse."""
        def concurrent_writer_wins(*args, **kwargs):
            PublicExposure.objects.create(card=card, public_id='WinnerPublicId01')
            return 'LoserPublicId001'

        url = reverse('cards:card-expose', kwargs={'pk': card.id})
        with patch(
            'apps.cards.services.exposure.generate_public_id',
            side_effect=concurrent_writer_wins
        ):
            response = authenticated_client.post(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['public_id'] == 'WinnerPublicId01'

    def test_expose_other_users_card(self, other_client, card):
        url = reverse('cards:card-expose', kwargs={'pk': card.id})
        response = other_client.post(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert PublicExposure.objects.count() == 0


# =============================================================================
# Public Endpoint Tests
# =============================================================================

@pytest.mark.django_db
class TestPublicCard:
    """Tests for GET /api/public/{public_id}/"""

    def test_public_card_hides_owner(self, api_client, exposed_card):
        url = reverse('cards:public-card', kwargs={'public_id': 'AdaPublicId00001'})
        response = api_client.get(url, HTTP_USER_AGENT=DESKTOP_UA)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['name'] == 'Ada Lovelace'
        assert response.data['phone'] == '+44 20 7946 0000'
        assert 'owner' not in response.data
        assert 'owner_id' not in response.data

    def test_public_card_records_qr_scan_by_default(self, api_client, exposed_card):
        url = reverse('cards:public-card', kwargs={'public_id': 'AdaPublicId00001'})
        api_client.get(url, HTTP_USER_AGENT=IPHONE_UA)

        event = ScanEvent.objects.get(card=exposed_card)
        assert event.scan_type == 'qr'
        assert event.device_type == 'mobile'

    def test_public_card_records_nfc_scan(self, api_client, exposed_card):
        url = reverse('cards:public-card', kwargs={'public_id': 'AdaPublicId00001'})
        api_client.get(f'{url}?via=NFC', HTTP_USER_AGENT=IPAD_UA)

        event = ScanEvent.objects.get(card=exposed_card)
        assert event.scan_type == 'nfc'
        assert event.device_type == 'tablet'

    def test_public_card_unknown_via_still_shows_card(self, api_client, exposed_card):
        """A stray via value never blocks the card; the scan counts as QR."""
        url = reverse('cards:public-card', kwargs={'public_id': 'AdaPublicId00001'})
        response = api_client.get(f'{url}?via=email')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['name'] == 'Ada Lovelace'
        event = ScanEvent.objects.get(card=exposed_card)
        assert event.scan_type == 'qr'

    def test_public_card_unknown_id(self, api_client, exposed_card):
        url = reverse('cards:public-card', kwargs={'public_id': 'NoSuchPublicId00'})
        response = api_client.get(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert ScanEvent.objects.count() == 0

    def test_public_card_ignores_bad_credentials(self, api_client, exposed_card):
        """Anonymous endpoints don't try to authenticate the caller."""
        api_client.credentials(HTTP_AUTHORIZATION='Bearer not-a-token')
        url = reverse('cards:public-card', kwargs={'public_id': 'AdaPublicId00001'})
        response = api_client.get(url)

        assert response.status_code == status.HTTP_200_OK


@pytest.mark.django_db
class TestPublicVcard:
    """Tests for GET /api/public/{public_id}/vcard/"""

    def test_download_vcard(self, api_client, exposed_card):
        url = reverse('cards:public-vcard', kwargs={'public_id': 'AdaPublicId00001'})
        response = api_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response['Content-Type'].startswith('text/vcard')
        assert response['Content-Disposition'] == 'attachment; filename="Ada_Lovelace.vcf"'
        assert b'FN:Ada Lovelace' in response.content
        # Downloads are not scans
        assert ScanEvent.objects.count() == 0

    def test_download_unknown(self, api_client, db):
        url = reverse('cards:public-vcard', kwargs={'public_id': 'NoSuchPublicId00'})
        response = api_client.get(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.django_db
class TestScanLog:
    """Tests for POST /api/scan-log/"""

    def test_log_scan(self, api_client, card):
        url = reverse('cards:scan-log')
        data = {'card_id': str(card.id), 'scan_type': 'NFC', 'device_type': 'Mobile'}
        response = api_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        event = ScanEvent.objects.get(card=card)
        assert event.scan_type == 'nfc'
        assert event.device_type == 'mobile'

    def test_log_scan_device_from_user_agent(self, api_client, card):
        url = reverse('cards:scan-log')
        data = {'card_id': str(card.id), 'scan_type': 'qr'}
        response = api_client.post(url, data, format='json', HTTP_USER_AGENT=IPAD_UA)

        assert response.status_code == status.HTTP_201_CREATED
        assert ScanEvent.objects.get(card=card).device_type == 'tablet'

    def test_log_scan_invalid_type(self, api_client, card):
        url = reverse('cards:scan-log')
        data = {'card_id': str(card.id), 'scan_type': 'carrier-pigeon', 'device_type': 'mobile'}
        response = api_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert ScanEvent.objects.count() == 0

    def test_log_scan_unknown_card(self, api_client, db):
        url = reverse('cards:scan-log')
        data = {'card_id': '00000000-0000-0000-0000-000000000000', 'scan_type': 'qr', 'device_type': 'mobile'}
        response = api_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND


# =============================================================================
# Upload Tests
# =============================================================================

@pytest.fixture
def configured_storage(monkeypatch):
    client = Mock()
    client.generate_presigned_url.return_value = 'https://cards-bucket.s3.amazonaws.com/signed'
    storage = UploadStorage(client=client, bucket='cards-bucket', expires_in=300)
    monkeypatch.setattr(apps.get_app_config('cards'), 'upload_storage', storage)
    return storage


@pytest.mark.django_db
class TestPresignUpload:
    """Tests for POST /api/uploads/presign/"""

    def test_presign(self, authenticated_client, card_owner, configured_storage):
        url = reverse('cards:presign-upload')
        data = {'filename': 'me.jpg', 'content_type': 'image/jpeg'}
        response = authenticated_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['upload_url'] == 'https://cards-bucket.s3.amazonaws.com/signed'
        assert response.data['key'].startswith(f'uploads/{card_owner.id}/')
        assert response.data['expires_in'] == 300

    def test_presign_rejects_non_image(self, authenticated_client, configured_storage):
        url = reverse('cards:presign-upload')
        data = {'filename': 'doc.pdf', 'content_type': 'application/pdf'}
        response = authenticated_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_presign_without_storage(self, authenticated_client, monkeypatch):
        monkeypatch.setattr(apps.get_app_config('cards'), 'upload_storage', None)

        url = reverse('cards:presign-upload')
        data = {'filename': 'me.jpg', 'content_type': 'image/jpeg'}
        response = authenticated_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE

    def test_presign_unauthenticated(self, api_client, configured_storage):
        url = reverse('cards:presign-upload')
        data = {'filename': 'me.jpg', 'content_type': 'image/jpeg'}
        response = api_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
