"""
Public exposure service.

Mints, looks up and resolves the public identifiers that make a card
reachable without authentication (QR codes, NFC tags).
"""

import logging
from typing import Optional, Tuple
from uuid import UUID

from django.conf import settings
from django.db import transaction, IntegrityError

from apps.cards.models import Card, PublicExposure

from .exceptions import (
    CardNotFoundError,
    ExposureNotFoundError,
    IssuanceFailedError,
)
from .identifiers import generate_public_id

logger = logging.getLogger(__name__)


def build_public_url(public_id: str) -> str:
    """Absolute URL a QR code or NFC tag should point to."""
    return f"{settings.PUBLIC_BASE_URL.rstrip('/')}/vcard/{public_id}"


def get_public_id(*, card_id: UUID) -> Optional[str]:
    """Return the card's live public identifier, or None if unexposed."""
    return (
        PublicExposure.objects
        .filter(card_id=card_id)
        .values_list('public_id', flat=True)
        .first()
    )


def ensure_public_id(
    *,
    card_id: UUID,
    owner_id: UUID,
    max_attempts: Optional[int] = None
) -> str:
    """Return the card's public identifier, minting one if the card has none."""
    public_id, _ = get_or_issue_public_id(
        card_id=card_id,
        owner_id=owner_id,
        max_attempts=max_attempts,
    )
    return public_id


def get_or_issue_public_id(
    *,
    card_id: UUID,
    owner_id: UUID,
    max_attempts: Optional[int] = None
) -> Tuple[str, bool]:
    """
    Like ensure_public_id, but also report whether this call minted the id.

    Idempotent: an existing identifier is returned unchanged. Issuance
    relies on two unique constraints:
    - card_id: a concurrent caller that loses the insert race re-reads and
      returns the winner's identifier instead of failing.
    - public_id: a collision with another card's identifier is retried
      with a fresh value.

    Each insert runs in its own savepoint so a failed attempt never poisons
    an enclosing transaction.

    Args:
        card_id: UUID of the card
        owner_id: UUID of the user who must own the card
        max_attempts: Insert attempts before giving up
            (defaults to settings.PUBLIC_ID_MAX_ATTEMPTS)

    Returns:
        (public_id, issued) where issued is False if the card was already
        exposed, including by a concurrent caller that won the insert race

    Raises:
        CardNotFoundError: If the card doesn't exist or isn't owned by owner_id
        IssuanceFailedError: If every attempt collided
    """
    if not Card.objects.filter(id=card_id, owner_id=owner_id).exists():
        raise CardNotFoundError(f"Card with ID {card_id} not found")

    existing = get_public_id(card_id=card_id)
    if existing is not None:
        return existing, False

    if max_attempts is None:
        max_attempts = settings.PUBLIC_ID_MAX_ATTEMPTS

    for attempt in range(1, max_attempts + 1):
        public_id = generate_public_id()

        try:
            with transaction.atomic():
                PublicExposure.objects.create(card_id=card_id, public_id=public_id)
        except IntegrityError:
            winner = get_public_id(card_id=card_id)
            if winner is not None:
                logger.info("Card %s was exposed concurrently; reusing its public id", card_id)
                return winner, False

            logger.warning(
                "Public id collision for card %s (attempt %d/%d)",
                card_id, attempt, max_attempts
            )
            continue

        logger.info("Issued public id for card %s", card_id)
        return public_id, True

    raise IssuanceFailedError(
        f"Failed to generate unique public id after {max_attempts} attempts"
    )


def resolve_public(*, public_id: str) -> Card:
    """
    Resolve a public identifier to its card, with social links prefetched.

    No authentication is involved; callers must serialize the result with a
    representation that omits the owner.

    Raises:
        ExposureNotFoundError: If no live exposure matches public_id
    """
    try:
        exposure = (
            PublicExposure.objects
            .select_related('card')
            .prefetch_related('card__social_links')
            .get(public_id=public_id)
        )
    except PublicExposure.DoesNotExist:
        raise ExposureNotFoundError("Card not found")

    return exposure.card
