# blogapi/services/storage_service.py
import logging
import uuid
from datetime import timedelta

from firebase_admin import storage
from flask import Flask

from blogapi.core.exceptions import BadRequestError, UpstreamServiceError

logger = logging.getLogger(__name__)

UPLOAD_URL_TTL = timedelta(minutes=15)


class StorageService:
    """
    Firebase Storage access.
    Hands out pre-signed URLs so clients upload images straight to the bucket instead of through the API.
    """

    def __init__(self):
        # The bucket is attached by init_app.
        self.bucket = None

    def init_app(self, app: Flask):
        bucket_name = app.config.get('FIREBASE_STORAGE_BUCKET')
        if not bucket_name:
            logger.warning("StorageService: FIREBASE_STORAGE_BUCKET is not set. Upload URLs are disabled.")
            return

        self.bucket = storage.bucket(bucket_name)
        logger.info("StorageService: Firebase Storage bucket initialized.")

    def generate_upload_url(self, user_id: str, upload_type: str, filename: str, content_type: str) -> dict:
        """
        Builds a PUT-only signed URL under the folder that matches ``upload_type``.

        :param user_id: caller id from the JWT
        :param upload_type: "post_image" or "user_avatar"
        :param filename: original client filename, used for its extension
        :param content_type: MIME type the client will send, must be image/*
        :return: {"upload_url": ..., "file_path": ...}
        """
        path_map = {
            "post_image": f"posts/{user_id}",
            "user_avatar": f"avatars/{user_id}",
        }

        folder_path = path_map.get(upload_type)
        if not folder_path:
            raise BadRequestError(f"'{upload_type}' is not a valid upload type", error_code="INVALID_UPLOAD_TYPE")
        if not content_type.startswith('image/'):
            raise BadRequestError("Only image uploads are allowed", error_code="INVALID_CONTENT_TYPE")
        if not self.bucket:
            raise UpstreamServiceError("File storage is not configured", error_code="STORAGE_NOT_CONFIGURED")

        extension = filename.rsplit('.', 1)[-1].lower() if '.' in filename else ''
        unique_filename = f"{uuid.uuid4()}.{extension}" if extension else str(uuid.uuid4())
        destination_blob_name = f"{folder_path}/{unique_filename}"

        blob = self.bucket.blob(destination_blob_name)
        upload_url = blob.generate_signed_url(
            version="v4",
            expiration=UPLOAD_URL_TTL,
            method="PUT",
            content_type=content_type
        )

        return {
            "upload_url": upload_url,
            "file_path": destination_blob_name
        }
