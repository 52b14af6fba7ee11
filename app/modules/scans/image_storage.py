import os
import uuid
import logging
from typing import List, Optional
from urllib.parse import urlparse

import boto3
from botocore.exceptions import ClientError
from supabase import Client

from app.config.settings import settings

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".avif", ".webp"}
PRESIGNED_URL_EXPIRY_SEC = 3600


def build_image_key(user_id: str, filename: Optional[str]) -> str:
    """Object key under the owner's folder: {user_id}/{uuid}.{ext}"""
    ext = os.path.splitext(filename or "")[1].lower() or ".jpg"
    return f"{user_id}/{uuid.uuid4()}{ext}"


def s3_configured() -> bool:
    return all([settings.aws_access_key_id, settings.aws_secret_access_key, settings.s3_bucket_name])


class SupabaseImageStorage:
    """Images in a Supabase Storage bucket, referenced by public URL."""

    def __init__(self, supabase: Client, bucket_name: Optional[str] = None):
        self.supabase = supabase
        self.bucket_name = bucket_name or settings.food_images_bucket

    def upload_image(self, content: bytes, key: str, content_type: str = "image/jpeg") -> str:
        bucket = self.supabase.storage.from_(self.bucket_name)
        try:
            bucket.upload(key, content, {"content-type": content_type})
        except Exception as e:
            logger.error(f"Failed to upload image {key} to bucket {self.bucket_name}: {e}")
            raise
        return bucket.get_public_url(key)

    def key_from_url(self, image_url: str) -> Optional[str]:
        marker = f"/{self.bucket_name}/"
        path = urlparse(image_url).path
        if marker not in path:
            return None
        return path.split(marker, 1)[1]

    def delete_images(self, image_urls: List[str]) -> int:
        """Delete stored images; returns how many keys were sent for removal"""
        keys = [k for k in (self.key_from_url(url) for url in image_urls if url) if k]
        if not keys:
            return 0
        try:
            self.supabase.storage.from_(self.bucket_name).remove(keys)
            return len(keys)
        except Exception as e:
            logger.error(f"Failed to delete {len(keys)} images from bucket {self.bucket_name}: {e}")
            return 0

    def resolve_url(self, image_url: str) -> str:
        return image_url


class S3ImageStorage:
    """Images in an S3 bucket, referenced as s3://bucket/key and served presigned."""

    def __init__(self):
        if not s3_configured():
            raise ValueError("AWS S3 credentials and bucket name must be configured")

        self.s3_client = boto3.client(
            's3',
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
            region_name=settings.aws_region
        )
        self.bucket_name = settings.s3_bucket_name

    def upload_image(self, content: bytes, key: str, content_type: str = "image/jpeg") -> str:
        try:
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=key,
                Body=content,
                ContentType=content_type
            )
            return f"s3://{self.bucket_name}/{key}"
        except ClientError as e:
            logger.error(f"Failed to upload image to S3: {str(e)}")
            raise

    def key_from_url(self, image_url: str) -> Optional[str]:
        prefix = f"s3://{self.bucket_name}/"
        if not image_url.startswith(prefix):
            return None
        return image_url[len(prefix):]

    def delete_images(self, image_urls: List[str]) -> int:
        deleted = 0
        for url in image_urls:
            key = self.key_from_url(url) if url else None
            if not key:
                continue
            try:
                self.s3_client.delete_object(Bucket=self.bucket_name, Key=key)
                deleted += 1
            except ClientError as e:
                logger.error(f"Failed to delete image {key} from S3: {str(e)}")
        return deleted

    def resolve_url(self, image_url: str) -> str:
        key = self.key_from_url(image_url)
        if not key:
            return image_url
        try:
            return self.s3_client.generate_presigned_url(
                'get_object',
                Params={'Bucket': self.bucket_name, 'Key': key},
                ExpiresIn=PRESIGNED_URL_EXPIRY_SEC
            )
        except ClientError as e:
            logger.error(f"Failed to presign {key}: {str(e)}")
            return image_url


def get_image_storage(supabase: Client):
    if s3_configured():
        return S3ImageStorage()
    return SupabaseImageStorage(supabase)
