"""
Cards app services layer.

Services contain business logic and orchestrate operations across models.
Views stay thin and translate the exceptions below into HTTP responses.
"""

from .exceptions import (
    CardsServiceError,
    CardNotFoundError,
    ExposureNotFoundError,
    IssuanceFailedError,
    InvalidCardError,
    DuplicateSocialPlatformError,
    InvalidScanError,
    InvalidUploadError,
    StorageError,
)

from .identifiers import generate_public_id

from .card_management import (
    list_cards,
    get_card,
    create_card,
    update_card,
    delete_card,
)

from .exposure import (
    build_public_url,
    get_public_id,
    ensure_public_id,
    get_or_issue_public_id,
    resolve_public,
)

from .scan_tracking import (
    classify_device,
    record_scan,
)

from .vcard_export import (
    build_vcard,
    vcard_filename,
)

from .uploads import (
    UploadStorage,
    create_presigned_upload,
)


__all__ = [
    # Exceptions
    'CardsServiceError',
    'CardNotFoundError',
    'ExposureNotFoundError',
    'IssuanceFailedError',
    'InvalidCardError',
    'DuplicateSocialPlatformError',
    'InvalidScanError',
    'InvalidUploadError',
    'StorageError',

    # Identifiers
    'generate_public_id',

    # Card Management
    'list_cards',
    'get_card',
    'create_card',
    'update_card',
    'delete_card',

    # Public Exposure
    'build_public_url',
    'get_public_id',
    'ensure_public_id',
    'get_or_issue_public_id',
    'resolve_public',

    # Scan Tracking
    'classify_device',
    'record_scan',

    # vCard Export
    'build_vcard',
    'vcard_filename',

    # Uploads
    'UploadStorage',
    'create_presigned_upload',
]
