"""
Presigned upload service.

Profile images go straight from the browser to object storage: the API only
issues a short-lived, single-object PUT URL.
"""

import logging
import os
import secrets

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from django.conf import settings

from apps.accounts.models import User

from .exceptions import InvalidUploadError, StorageError

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = (
    'image/jpeg',
    'image/png',
    'image/gif',
    'image/webp',
)


class UploadStorage:
    """
    S3 bucket that accepts presigned uploads.

    Constructed once by the cards AppConfig and passed to
    create_presigned_upload; nothing else holds an S3 client.
    """

    def __init__(self, *, client, bucket: str, public_base_url: str = '', expires_in: int = 3600):
        self.client = client
        self.bucket = bucket
        self.public_base_url = (public_base_url or f'https://{bucket}.s3.amazonaws.com').rstrip('/')
        self.expires_in = expires_in

    @classmethod
    def from_settings(cls):
        client = boto3.client(
            's3',
            region_name=settings.AWS_REGION,
            aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
            aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
        )
        return cls(
            client=client,
            bucket=settings.AWS_S3_BUCKET_NAME,
            public_base_url=settings.AWS_S3_PUBLIC_URL,
            expires_in=settings.UPLOAD_URL_EXPIRES_IN,
        )

    def presign_put(self, *, key: str, content_type: str) -> str:
        return self.client.generate_presigned_url(
            'put_object',
            Params={
                'Bucket': self.bucket,
                'Key': key,
                'ContentType': content_type,
            },
            ExpiresIn=self.expires_in,
        )

    def public_url(self, key: str) -> str:
        return f'{self.public_base_url}/{key}'


def create_presigned_upload(
    *,
    user: User,
    filename: str,
    content_type: str,
    storage: UploadStorage
) -> dict:
    """
    Issue a writable URL for one image upload.

    Keys are namespaced per user and randomised: uploads/<user_id>/<hex>.<ext>

    Returns:
        Dict with upload_url, file_url, key and expires_in

    Raises:
        InvalidUploadError: If the file has no extension or isn't an allowed image type
        StorageError: If the storage service refuses to presign
    """
    if content_type not in ALLOWED_CONTENT_TYPES:
        raise InvalidUploadError(
            f"Unsupported content type '{content_type}'. Allowed: {', '.join(ALLOWED_CONTENT_TYPES)}"
        )

    extension = os.path.splitext(filename)[1].lstrip('.').lower()
    if not extension:
        raise InvalidUploadError("Filename must have an extension")

    key = f'uploads/{user.id}/{secrets.token_hex(16)}.{extension}'

    try:
        upload_url = storage.presign_put(key=key, content_type=content_type)
    except (BotoCoreError, ClientError) as e:
        logger.exception("Presigning upload %s failed", key)
        raise StorageError("Upload storage is unavailable") from e

    return {
        'upload_url': upload_url,
        'file_url': storage.public_url(key),
        'key': key,
        'expires_in': storage.expires_in,
    }
