"""
Scan tracking service.

Records one ScanEvent per public view. Recording is best-effort: a storage
failure is logged and reported through the return value, never raised, so
the public card still renders.
"""

import logging
import re
from uuid import UUID

from django.db import transaction, DatabaseError

from apps.cards.models import Card, ScanEvent, ScanType, DeviceType

from .exceptions import CardNotFoundError, InvalidScanError

logger = logging.getLogger(__name__)

_TABLET_UA = re.compile(r'ipad|tablet|kindle|silk|playbook|android(?!.*mobile)', re.IGNORECASE)
_MOBILE_UA = re.compile(r'mobi|iphone|ipod|android|blackberry|opera mini|windows phone', re.IGNORECASE)


def classify_device(user_agent: str) -> str:
    """Coarse device class from a User-Agent header; desktop when unknown."""
    if not user_agent:
        return DeviceType.DESKTOP
    if _TABLET_UA.search(user_agent):
        return DeviceType.TABLET
    if _MOBILE_UA.search(user_agent):
        return DeviceType.MOBILE
    return DeviceType.DESKTOP


def normalize_scan_type(value: str) -> str:
    """Map 'QR'/'qr'/'NFC'/'nfc' onto ScanType values."""
    normalized = str(value or '').strip().lower()
    if normalized not in ScanType.values:
        raise InvalidScanError(
            f"Invalid scan type '{value}'. Must be one of: {', '.join(ScanType.values)}"
        )
    return normalized


def normalize_device_type(value: str) -> str:
    """Map 'Mobile'/'tablet'/... onto DeviceType values."""
    normalized = str(value or '').strip().lower()
    if normalized not in DeviceType.values:
        raise InvalidScanError(
            f"Invalid device type '{value}'. Must be one of: {', '.join(DeviceType.values)}"
        )
    return normalized


def record_scan(*, card_id: UUID, scan_type: str, device_type: str) -> bool:
    """
    Record a scan event for a card.

    Args:
        card_id: UUID of the scanned card
        scan_type: 'qr' or 'nfc' (case-insensitive)
        device_type: 'mobile', 'tablet' or 'desktop' (case-insensitive)

    Returns:
        True if the event was stored, False if persistence failed

    Raises:
        InvalidScanError: If scan_type or device_type is unknown
        CardNotFoundError: If the card doesn't exist
    """
    scan_type = normalize_scan_type(scan_type)
    device_type = normalize_device_type(device_type)

    try:
        with transaction.atomic():
            if not Card.objects.filter(id=card_id).exists():
                raise CardNotFoundError(f"Card with ID {card_id} not found")

            ScanEvent.objects.create(
                card_id=card_id,
                scan_type=scan_type,
                device_type=device_type,
            )
    except DatabaseError:
        logger.exception("Failed to record %s scan for card %s", scan_type, card_id)
        return False

    return True
