"""
Domain-specific exceptions for cards app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses.
"""


class CardsServiceError(Exception):
    """Base exception for all cards service errors."""
    pass


class CardNotFoundError(CardsServiceError):
    """Raised when a card does not exist or is not owned by the caller."""
    pass


class ExposureNotFoundError(CardsServiceError):
    """Raised when no live public exposure matches an identifier."""
    pass


class IssuanceFailedError(CardsServiceError):
    """Raised when no unique public identifier could be stored."""
    pass


class InvalidCardError(CardsServiceError):
    """Raised when required card fields are missing."""
    pass


class DuplicateSocialPlatformError(CardsServiceError):
    """Raised when a card would carry two links for the same platform."""
    pass


class InvalidScanError(CardsServiceError):
    """Raised when a scan type or device class is not recognised."""
    pass


class InvalidUploadError(CardsServiceError):
    """Raised when an upload request has a missing or unsupported file type."""
    pass


class StorageError(CardsServiceError):
    """Raised when the object storage service fails to presign an upload."""
    pass
