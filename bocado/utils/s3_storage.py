"""S3 storage manager for review photos.

- review-photos/{user_id}_{review_id}_{index}_{timestamp}.{ext}
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from urllib.parse import unquote, urlparse

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

REVIEW_PHOTO_PREFIX = "review-photos"


class S3StorageManager:
    """Blob store backed by one S3 bucket."""

    def __init__(
        self,
        bucket_name: str,
        aws_access_key_id: Optional[str] = None,
        aws_secret_access_key: Optional[str] = None,
        region: str = "sa-east-1",
        public_base_url: Optional[str] = None,
        timeout_seconds: float = 30.0,
        s3_client=None,
    ) -> None:
        self.bucket_name = bucket_name
        self.region = region
        self.public_base_url = (
            public_base_url or f"https://{bucket_name}.s3.{region}.amazonaws.com"
        ).rstrip("/")
        self.s3_client = s3_client or boto3.client(
            "s3",
            aws_access_key_id=aws_access_key_id,
            aws_secret_access_key=aws_secret_access_key,
            region_name=region,
            config=Config(
                connect_timeout=timeout_seconds,
                read_timeout=timeout_seconds,
                retries={"max_attempts": 2},
            ),
        )

    @staticmethod
    def _safe_prefix(value: str, max_len: int = 50) -> str:
        # keep keys path-safe (spaces/special chars -> _)
        safe = "".join(c if c.isalnum() or c in ("-", "_") else "_" for c in value)
        return safe[:max_len] if len(safe) > max_len else safe

    @classmethod
    def review_photo_key(
        cls,
        user_id: str,
        review_id: str,
        index: int,
        extension: str,
        timestamp: Optional[int] = None,
    ) -> str:
        timestamp = timestamp if timestamp is not None else int(datetime.now().timestamp() * 1000)
        ext = cls._safe_prefix(extension.lower().lstrip("."), max_len=10) or "jpg"
        return (
            f"{REVIEW_PHOTO_PREFIX}/{cls._safe_prefix(user_id)}_{cls._safe_prefix(review_id)}"
            f"_{index}_{timestamp}.{ext}"
        )

    def url_for(self, key: str) -> str:
        return f"{self.public_base_url}/{key}"

    def key_from_url(self, url: str) -> str:
        path = unquote(urlparse(url).path).lstrip("/")
        # path-style URLs carry the bucket as first segment
        if path.startswith(f"{self.bucket_name}/"):
            path = path[len(self.bucket_name) + 1 :]
        return path

    def put(self, key: str, data: bytes, content_type: str = "image/jpeg") -> str:
        """Upload bytes and return their public URL."""
        self.s3_client.put_object(
            Bucket=self.bucket_name,
            Key=key,
            Body=data,
            ContentType=content_type,
        )
        return self.url_for(key)

    def delete(self, url: str) -> bool:
        """Delete the object behind a public URL; False when S3 refuses."""
        key = self.key_from_url(url)
        if not key.startswith(f"{REVIEW_PHOTO_PREFIX}/"):
            return False
        try:
            self.s3_client.delete_object(Bucket=self.bucket_name, Key=key)
        except (ClientError, BotoCoreError):
            return False
        return True

