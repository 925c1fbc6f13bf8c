import logging

from django.apps import apps
from django.http import HttpResponse
from rest_framework import viewsets, status
from rest_framework.decorators import action, api_view, permission_classes, authentication_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter

from .serializers import (
    CardSerializer,
    CardWriteSerializer,
    PublicCardSerializer,
    ExposureSerializer,
    ScanLogSerializer,
    PresignUploadSerializer,
    PresignUploadResponseSerializer,
    ErrorSerializer,
)

from apps.cards.models import ScanType
from apps.cards.services.scan_tracking import normalize_scan_type
from apps.cards.services import (
    list_cards,
    get_card,
    create_card,
    update_card,
    delete_card,
    get_or_issue_public_id,
    build_public_url,
    resolve_public,
    classify_device,
    record_scan,
    build_vcard,
    vcard_filename,
    create_presigned_upload,
    # Exceptions
    CardNotFoundError,
    ExposureNotFoundError,
    IssuanceFailedError,
    InvalidCardError,
    DuplicateSocialPlatformError,
    InvalidScanError,
    InvalidUploadError,
    StorageError,
)

logger = logging.getLogger(__name__)

UUID_PATTERN = r'[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}'


class CardViewSet(viewsets.ViewSet):
    """
    ViewSet for the caller's own cards.

    All business logic is handled by services.
    Views are thin HTTP handlers only.

    list: Get all of the caller's cards
    create: Create a card (and its public link)
    retrieve: Get a specific card
    update: Replace a card's fields
    partial_update: Update some of a card's fields
    destroy: Delete a card
    expose: Ensure the card has a public link
    """

    permission_classes = [IsAuthenticated]
    lookup_value_regex = UUID_PATTERN

    @extend_schema(responses={200: CardSerializer(many=True)}, tags=['cards'])
    def list(self, request):
        cards = list_cards(owner=request.user)
        serializer = CardSerializer(cards, many=True)
        return Response(serializer.data)

    @extend_schema(
        request=CardWriteSerializer,
        responses={201: CardSerializer, 400: ErrorSerializer},
        tags=['cards'],
    )
    def create(self, request):
        serializer = CardWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            card = create_card(owner=request.user, **serializer.validated_data)
        except (InvalidCardError, DuplicateSocialPlatformError) as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(CardSerializer(card).data, status=status.HTTP_201_CREATED)

    @extend_schema(responses={200: CardSerializer, 404: ErrorSerializer}, tags=['cards'])
    def retrieve(self, request, pk=None):
        try:
            card = get_card(card_id=pk, owner=request.user)
        except CardNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response(CardSerializer(card).data)

    @extend_schema(
        request=CardWriteSerializer,
        responses={200: CardSerializer, 400: ErrorSerializer, 404: ErrorSerializer},
        tags=['cards'],
    )
    def update(self, request, pk=None, partial=False):
        serializer = CardWriteSerializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        try:
            card = update_card(card_id=pk, owner=request.user, **serializer.validated_data)
        except CardNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except (InvalidCardError, DuplicateSocialPlatformError) as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(CardSerializer(card).data)

    @extend_schema(
        request=CardWriteSerializer,
        responses={200: CardSerializer, 400: ErrorSerializer, 404: ErrorSerializer},
        tags=['cards'],
    )
    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk, partial=True)

    @extend_schema(responses={204: None, 404: ErrorSerializer}, tags=['cards'])
    def destroy(self, request, pk=None):
        try:
            delete_card(card_id=pk, owner=request.user)
        except CardNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        request=None,
        responses={
            200: ExposureSerializer,
            201: ExposureSerializer,
            404: ErrorSerializer,
            500: ErrorSerializer,
        },
        description="Return the card's public link, issuing one if the card has none.",
        tags=['cards'],
    )
    @action(detail=True, methods=['post'])
    def expose(self, request, pk=None):
        """Ensure the card is reachable through a public link."""
        try:
            public_id, issued = get_or_issue_public_id(card_id=pk, owner_id=request.user.id)
        except CardNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except IssuanceFailedError:
            logger.exception("Could not expose card %s", pk)
            return Response(
                {'error': 'Could not create a public link, please retry'},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )

        return Response(
            {'public_id': public_id, 'public_url': build_public_url(public_id)},
            status=status.HTTP_201_CREATED if issued else status.HTTP_200_OK
        )


# =============================================================================
# Public (anonymous) endpoints
# =============================================================================

def _scan_source(via, card_id):
    """Scan type for a public view; missing or unknown values count as QR."""
    if via is None:
        return ScanType.QR
    try:
        return normalize_scan_type(via)
    except InvalidScanError:
        logger.warning("Unknown scan source %r for card %s, recording as qr", via, card_id)
        return ScanType.QR


@extend_schema(
    parameters=[
        OpenApiParameter(
            name='via',
            description="How the link was opened: 'qr' (default) or 'nfc'. Unknown values count as 'qr'.",
            required=False,
            type=str,
        ),
    ],
    responses={200: PublicCardSerializer, 404: ErrorSerializer},
    description="Resolve a public link to its card and record one scan.",
    tags=['public'],
)
@api_view(['GET'])
@authentication_classes([])
@permission_classes([AllowAny])
def public_card(request, public_id):
    """Anonymous card view behind a QR code or NFC tag."""
    try:
        card = resolve_public(public_id=public_id)
    except ExposureNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

    try:
        record_scan(
            card_id=card.id,
            scan_type=_scan_source(request.query_params.get('via'), card.id),
            device_type=classify_device(request.META.get('HTTP_USER_AGENT', '')),
        )
    except CardNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

    return Response(PublicCardSerializer(card).data)


@extend_schema(
    responses={(200, 'text/vcard'): str, 404: ErrorSerializer},
    description="Download a public card as a vCard 3.0 contact.",
    tags=['public'],
)
@api_view(['GET'])
@authentication_classes([])
@permission_classes([AllowAny])
def public_vcard(request, public_id):
    """Download the public card as a .vcf file."""
    try:
        card = resolve_public(public_id=public_id)
    except ExposureNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

    response = HttpResponse(build_vcard(card), content_type='text/vcard; charset=utf-8')
    response['Content-Disposition'] = f'attachment; filename="{vcard_filename(card)}"'
    return response


@extend_schema(
    request=ScanLogSerializer,
    responses={201: None, 400: ErrorSerializer, 404: ErrorSerializer},
    description="Record a scan of a card. The device class defaults to one derived from the User-Agent.",
    tags=['public'],
)
@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def scan_log(request):
    """Log a QR/NFC scan."""
    serializer = ScanLogSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    device_type = data.get('device_type') or classify_device(request.META.get('HTTP_USER_AGENT', ''))

    try:
        recorded = record_scan(
            card_id=data['card_id'],
            scan_type=data['scan_type'],
            device_type=device_type,
        )
    except CardNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

    return Response({'recorded': recorded}, status=status.HTTP_201_CREATED)


# =============================================================================
# Uploads
# =============================================================================

@extend_schema(
    request=PresignUploadSerializer,
    responses={
        200: PresignUploadResponseSerializer,
        400: ErrorSerializer,
        503: ErrorSerializer,
    },
    description="Get a short-lived URL for uploading a profile image directly to storage.",
    tags=['uploads'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def presign_upload(request):
    """Issue a presigned image upload URL."""
    serializer = PresignUploadSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    storage = apps.get_app_config('cards').upload_storage
    if storage is None:
        return Response(
            {'error': 'Upload storage is not configured'},
            status=status.HTTP_503_SERVICE_UNAVAILABLE
        )

    try:
        upload = create_presigned_upload(
            user=request.user,
            filename=serializer.validated_data['filename'],
            content_type=serializer.validated_data['content_type'],
            storage=storage,
        )
    except InvalidUploadError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except StorageError as e:
        return Response({'error': str(e)}, status=status.HTTP_503_SERVICE_UNAVAILABLE)

    return Response(upload)
