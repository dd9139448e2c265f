"""Review photo uploads to the blob store."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeout
from dataclasses import dataclass, field
from datetime import datetime

import structlog
from botocore.exceptions import BotoCoreError, ClientError

from bocado.core.config import settings
from bocado.core.exceptions import PhotoUploadFailed
from bocado.utils.s3_storage import S3StorageManager

logger = structlog.get_logger(__name__)


@dataclass
class PhotoFile:
    filename: str
    content_type: str
    data: bytes


@dataclass
class PhotoUploadResult:
    uploaded_urls: list[str] = field(default_factory=list)
    errors: list[PhotoUploadFailed] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return bool(self.uploaded_urls)


def _extension(photo: PhotoFile) -> str:
    if "." in photo.filename:
        return photo.filename.rsplit(".", 1)[1].lower()
    subtype = photo.content_type.split("/")[-1] if "/" in photo.content_type else ""
    return subtype or "jpg"


class PhotoService:
    """Validates and uploads review photos, one parallel task per file."""

    def __init__(
        self,
        storage: S3StorageManager,
        max_bytes: int = settings.max_photo_bytes,
        max_photos: int = settings.max_photos_per_review,
        workers: int = settings.photo_upload_workers,
        timeout_seconds: float = settings.photo_upload_timeout_seconds,
    ) -> None:
        self.storage = storage
        self.max_bytes = max_bytes
        self.max_photos = max_photos
        self.workers = workers
        self.timeout_seconds = timeout_seconds

    def validate(self, photo: PhotoFile) -> None:
        if not photo.content_type.startswith("image/"):
            raise PhotoUploadFailed(photo.filename, "not an image")
        if len(photo.data) > self.max_bytes:
            raise PhotoUploadFailed(photo.filename, f"too large (max {self.max_bytes // (1024 * 1024)}MB)")
        if not photo.data:
            raise PhotoUploadFailed(photo.filename, "empty file")

    def _upload_one(self, user_id: str, review_id: str, index: int, photo: PhotoFile) -> str:
        self.validate(photo)
        key = self.storage.review_photo_key(
            user_id,
            review_id,
            index,
            _extension(photo),
            timestamp=int(datetime.now().timestamp() * 1000),
        )
        return self.storage.put(key, photo.data, content_type=photo.content_type)

    def upload_photo(self, user_id: str, review_id: str, photo: PhotoFile, index: int = 0) -> str:
        """Validate and store one photo, returning its URL.

        Used for uploads made one by one before the review exists; any failure
        raises PhotoUploadFailed.
        """
        try:
            url = self._upload_one(user_id, review_id, index, photo)
        except (ClientError, BotoCoreError) as exc:
            raise PhotoUploadFailed(photo.filename, str(exc) or type(exc).__name__) from exc
        logger.info("photo_uploaded", user_id=user_id, review_id=review_id, url=url)
        return url

    def upload_review_photos(self, user_id: str, review_id: str, photos: list[PhotoFile]) -> PhotoUploadResult:
        """Upload every photo in parallel and wait until each one succeeded or failed.

        URLs keep the order of the input files; failures are collected per file.
        """
        result = PhotoUploadResult()
        accepted = photos[: self.max_photos]
        for skipped in photos[self.max_photos :]:
            result.errors.append(PhotoUploadFailed(skipped.filename, f"more than {self.max_photos} photos"))

        if not accepted:
            return result

        with ThreadPoolExecutor(max_workers=max(1, min(self.workers, len(accepted)))) as pool:
            futures = [
                (photo, pool.submit(self._upload_one, user_id, review_id, index, photo))
                for index, photo in enumerate(accepted)
            ]
            for photo, future in futures:
                try:
                    result.uploaded_urls.append(future.result(timeout=self.timeout_seconds))
                except PhotoUploadFailed as exc:
                    result.errors.append(exc)
                except FutureTimeout:
                    future.cancel()
                    result.errors.append(PhotoUploadFailed(photo.filename, "upload timed out"))
                except Exception as exc:  # noqa: BLE001
                    result.errors.append(PhotoUploadFailed(photo.filename, str(exc) or type(exc).__name__))

        for error in result.errors:
            logger.warning("photo_upload_failed", user_id=user_id, review_id=review_id, error=error.message)
        logger.info(
            "photo_upload_finished",
            user_id=user_id,
            review_id=review_id,
            uploaded=len(result.uploaded_urls),
            failed=len(result.errors),
        )
        return result

    def owns_photo(self, user_id: str, url: str) -> bool:
        filename = self.storage.key_from_url(url).rsplit("/", 1)[-1]
        return filename.startswith(f"{self.storage._safe_prefix(user_id)}_")

    def delete_photo(self, url: str) -> bool:
        deleted = self.storage.delete(url)
        if not deleted:
            logger.warning("photo_delete_failed", url=url)
        return deleted


_photo_service_instance: PhotoService | None = None


def get_photo_service() -> PhotoService:
    """Lazy initialization of the photo service."""
    global _photo_service_instance
    if _photo_service_instance is None:
        storage = S3StorageManager(
            bucket_name=settings.s3_bucket_name,
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
            region=settings.s3_region,
            public_base_url=settings.s3_public_base_url,
            timeout_seconds=settings.photo_upload_timeout_seconds,
        )
        _photo_service_instance = PhotoService(storage)
    return _photo_service_instance
