from django.apps import AppConfig
from django.conf import settings


class CardsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.cards'
    label = 'cards'

    # Process-wide presigned upload storage; None until a bucket is configured
    upload_storage = None

    def ready(self):
        if settings.AWS_S3_BUCKET_NAME:
            from .services.uploads import UploadStorage
            self.upload_storage = UploadStorage.from_settings()
