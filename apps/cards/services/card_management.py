"""
Card management service.

Owner-scoped CRUD for cards and their social links. A card that exists but
belongs to someone else is reported exactly like a missing one.
"""

import logging
from typing import Iterable, Optional
from uuid import UUID

from django.db import transaction, DatabaseError
from django.db.models import QuerySet

from apps.accounts.models import User
from apps.cards.models import Card, SocialLink

from .exceptions import (
    CardsServiceError,
    CardNotFoundError,
    InvalidCardError,
    DuplicateSocialPlatformError,
)
from .exposure import ensure_public_id

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ('name', 'email', 'phone')
OPTIONAL_FIELDS = (
    'website',
    'company',
    'position',
    'address',
    'bio',
    'profile_image_url',
    'template',
    'primary_color',
    'enable_nfc',
)
UPDATABLE_FIELDS = REQUIRED_FIELDS + OPTIONAL_FIELDS


def _card_queryset() -> QuerySet[Card]:
    return (
        Card.objects
        .select_related('exposure')
        .prefetch_related('social_links')
    )


def _validate_social_links(social_links: Optional[Iterable[dict]]) -> Optional[list]:
    if social_links is None:
        return None

    links = list(social_links)
    platforms = [link['platform'] for link in links]
    if len(platforms) != len(set(platforms)):
        raise DuplicateSocialPlatformError("Each social platform may appear only once per card")
    return links


def _replace_social_links(card: Card, links: list) -> None:
    """Swap the card's social links for the given {platform, url} entries."""
    card.social_links.all().delete()
    SocialLink.objects.bulk_create([
        SocialLink(card=card, platform=link['platform'], url=link['url'])
        for link in links
        if link.get('url')
    ])


def list_cards(*, owner: User) -> QuerySet[Card]:
    """All cards of owner, newest first."""
    return _card_queryset().filter(owner=owner).order_by('-created_at')


def get_card(*, card_id: UUID, owner: User) -> Card:
    """
    Get one of owner's cards.

    Reading a card never issues a public identifier; use ensure_public_id.

    Raises:
        CardNotFoundError: If the card doesn't exist or isn't owned by owner
    """
    try:
        return _card_queryset().get(id=card_id, owner=owner)
    except Card.DoesNotExist:
        raise CardNotFoundError(f"Card with ID {card_id} not found")


def create_card(
    *,
    owner: User,
    name: str,
    email: str,
    phone: str,
    social_links: Optional[Iterable[dict]] = None,
    **fields
) -> Card:
    """
    Create a card and expose it publicly.

    The card and its social links are stored in one transaction. Public
    identifier issuance follows and is best-effort: if it fails the error is
    logged and the card is still returned, unexposed.

    Args:
        owner: User who will own the card
        name, email, phone: Required contact fields
        social_links: Iterable of {'platform': ..., 'url': ...}
        **fields: Any of OPTIONAL_FIELDS

    Returns:
        Created Card instance

    Raises:
        InvalidCardError: If a required field is blank or an unknown field is given
        DuplicateSocialPlatformError: If a platform is listed twice
    """
    missing = [
        field for field, value in (('name', name), ('email', email), ('phone', phone))
        if not value
    ]
    if missing:
        raise InvalidCardError(f"Missing required fields: {', '.join(missing)}")

    unknown = set(fields) - set(OPTIONAL_FIELDS)
    if unknown:
        raise InvalidCardError(f"Unknown card fields: {', '.join(sorted(unknown))}")

    links = _validate_social_links(social_links) or []

    with transaction.atomic():
        card = Card.objects.create(
            owner=owner,
            name=name,
            email=email,
            phone=phone,
            **fields
        )
        _replace_social_links(card, links)

    try:
        ensure_public_id(card_id=card.id, owner_id=owner.id)
    except (CardsServiceError, DatabaseError):
        logger.exception("Public id issuance failed for new card %s", card.id)

    return get_card(card_id=card.id, owner=owner)


@transaction.atomic
def update_card(
    *,
    card_id: UUID,
    owner: User,
    social_links: Optional[Iterable[dict]] = None,
    **changes
) -> Card:
    """
    Update one of owner's cards.

    Uses select_for_update to prevent concurrent modifications. When
    social_links is given it replaces the whole set; None leaves links alone.

    Raises:
        CardNotFoundError: If the card doesn't exist or isn't owned by owner
        InvalidCardError: If a required field is blanked or an unknown field is given
        DuplicateSocialPlatformError: If a platform is listed twice
    """
    unknown = set(changes) - set(UPDATABLE_FIELDS)
    if unknown:
        raise InvalidCardError(f"Unknown card fields: {', '.join(sorted(unknown))}")

    blanked = [field for field in REQUIRED_FIELDS if field in changes and not changes[field]]
    if blanked:
        raise InvalidCardError(f"Missing required fields: {', '.join(blanked)}")

    links = _validate_social_links(social_links)

    try:
        card = (
            Card.objects
            .select_for_update()
            .get(id=card_id, owner=owner)
        )
    except Card.DoesNotExist:
        raise CardNotFoundError(f"Card with ID {card_id} not found")

    if changes:
        for field, value in changes.items():
            setattr(card, field, value)
        card.save(update_fields=list(changes) + ['updated_at'])

    if links is not None:
        _replace_social_links(card, links)

    return get_card(card_id=card.id, owner=owner)


@transaction.atomic
def delete_card(*, card_id: UUID, owner: User) -> None:
    """
    Delete one of owner's cards.

    Cascading deletes will automatically remove:
    - All social links
    - The public exposure (the shared link stops resolving)
    - All scan events

    Raises:
        CardNotFoundError: If the card doesn't exist or isn't owned by owner
    """
    deleted, _ = Card.objects.filter(id=card_id, owner=owner).delete()
    if not deleted:
        raise CardNotFoundError(f"Card with ID {card_id} not found")

    logger.info("Deleted card %s", card_id)
