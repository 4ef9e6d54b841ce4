import os
import uuid
import logging
import mimetypes
from typing import Optional, Tuple

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from fastapi import UploadFile, HTTPException, status

from .config import settings

logger = logging.getLogger(__name__)

class R2Storage:
    """Stores image blobs in Cloudflare R2, or on local disk when R2 is not configured"""

    def __init__(self):
        """Initialize the R2 client with settings from config"""
        self.client = None
        self.bucket = settings.R2_BUCKET_NAME
        self.local_root = settings.UPLOAD_DIRECTORY

        if all([settings.R2_ENDPOINT, settings.R2_ACCESS_KEY_ID, settings.R2_SECRET_ACCESS_KEY]):
            try:
                self.client = boto3.client(
                    "s3",
                    endpoint_url=settings.R2_ENDPOINT,
                    aws_access_key_id=settings.R2_ACCESS_KEY_ID,
                    aws_secret_access_key=settings.R2_SECRET_ACCESS_KEY,
                )
                logger.info(f"R2Storage S3 client initialized for bucket '{self.bucket}'")
            except (BotoCoreError, ClientError) as e:
                logger.error(f"Failed to create S3 client: {e}")
                logger.warning("R2 storage will not be available, using local storage")
        else:
            missing = []
            if not settings.R2_ENDPOINT:
                missing.append("R2_ENDPOINT")
            if not settings.R2_ACCESS_KEY_ID:
                missing.append("R2_ACCESS_KEY_ID")
            if not settings.R2_SECRET_ACCESS_KEY:
                missing.append("R2_SECRET_ACCESS_KEY")
            logger.info(f"R2 storage not configured (missing: {', '.join(missing)}), using local storage")

    def _local_path(self, key: str) -> str:
        return os.path.join(self.local_root, *key.split("/"))

    @staticmethod
    def _make_key(prefix: str, filename: Optional[str], content_type: str) -> str:
        file_extension = os.path.splitext(filename or "")[1].lower()
        if not file_extension:
            file_extension = mimetypes.guess_extension(content_type) or ""
        return f"{prefix}/{uuid.uuid4().hex}{file_extension}"

    async def upload_image(self, file: UploadFile, prefix: str = "post_images") -> Tuple[str, str]:
        """Validate and store an uploaded image, returning (key, mime type)"""
        content_type = file.content_type or ""
        if content_type not in settings.ALLOWED_IMAGE_TYPES:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Unsupported image type. Please use one of: {', '.join(settings.ALLOWED_IMAGE_TYPES)}",
            )

        content = await file.read()
        if len(content) > settings.MAX_UPLOAD_SIZE:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Image exceeds the {settings.MAX_UPLOAD_SIZE // (1024 * 1024)} MB limit",
            )
        if not content:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Image file is empty",
            )

        key = self._make_key(prefix, file.filename, content_type)
        self.put(key, content, content_type)
        return key, content_type

    def put(self, key: str, content: bytes, content_type: str) -> None:
        if not self.client:
            local_path = self._local_path(key)
            os.makedirs(os.path.dirname(local_path), exist_ok=True)
            with open(local_path, "wb") as out_file:
                out_file.write(content)
            logger.info(f"Saved file locally at {local_path}")
            return

        try:
            self.client.put_object(Bucket=self.bucket, Key=key, Body=content, ContentType=content_type)
            logger.info(f"Uploaded '{key}' to R2 bucket '{self.bucket}'")
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to upload to R2: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to upload media",
            )

    def get(self, key: str) -> Optional[bytes]:
        """Read a stored object, None when it does not exist"""
        if not self.client:
            local_path = self._local_path(key)
            if not os.path.exists(local_path):
                return None
            with open(local_path, "rb") as in_file:
                return in_file.read()

        try:
            response = self.client.get_object(Bucket=self.bucket, Key=key)
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in ("NoSuchKey", "404"):
                return None
            raise
        return response["Body"].read()

    def delete(self, key: Optional[str]) -> bool:
        if not key:
            return False

        if not self.client:
            local_path = self._local_path(key)
            if os.path.exists(local_path):
                os.remove(local_path)
                return True
            return False

        try:
            self.client.delete_object(Bucket=self.bucket, Key=key)
            logger.info(f"Deleted '{key}' from R2 bucket '{self.bucket}'")
            return True
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to delete from R2: {e}")
            return False

# Global instance for app-wide usage
r2_storage = R2Storage()
