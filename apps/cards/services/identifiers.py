"""
Public identifier generation.

Every public card identifier is produced here, from the operating system's
CSPRNG via `secrets`. Identifiers are never derived from card ids or
sequences.
"""

import secrets
import string

from django.conf import settings

PUBLIC_ID_ALPHABET = string.ascii_letters + string.digits
MIN_PUBLIC_ID_LENGTH = 12


def generate_public_id(length: int = None) -> str:
    """
    Return a random alphanumeric identifier.

    Args:
        length: Number of characters (defaults to settings.PUBLIC_ID_LENGTH)

    Raises:
        ValueError: If length is below MIN_PUBLIC_ID_LENGTH
    """
    if length is None:
        length = settings.PUBLIC_ID_LENGTH
    if length < MIN_PUBLIC_ID_LENGTH:
        raise ValueError(f"Public ids must be at least {MIN_PUBLIC_ID_LENGTH} characters")

    return ''.join(secrets.choice(PUBLIC_ID_ALPHABET) for _ in range(length))
