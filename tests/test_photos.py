"""Tests for photo validation and parallel upload."""

import re

import pytest
from botocore.exceptions import ClientError

from bocado.core.exceptions import PhotoUploadFailed
from bocado.services.photos import PhotoFile


def _jpeg(name: str = "plato.jpg", size: int = 100) -> PhotoFile:
    return PhotoFile(filename=name, content_type="image/jpeg", data=b"\xff" * size)


class TestUploadReviewPhotos:

    def test_uploads_keep_input_order_and_key_convention(self, photo_service, s3_client):
        result = photo_service.upload_review_photos("user-ana", "review-1", [_jpeg("a.jpg"), _jpeg("b.png")])

        assert result.success
        assert result.errors == []
        assert len(result.uploaded_urls) == 2
        assert re.fullmatch(
            r"https://bucket\.example\.com/review-photos/user-ana_review-1_0_\d+\.jpg", result.uploaded_urls[0]
        )
        assert "_1_" in result.uploaded_urls[1] and result.uploaded_urls[1].endswith(".png")
        assert s3_client.put_object.call_count == 2

    def test_invalid_files_are_reported_per_file(self, photo_service):
        photos = [
            _jpeg("ok.jpg"),
            PhotoFile(filename="doc.pdf", content_type="application/pdf", data=b"%PDF"),
            _jpeg("huge.jpg", size=4096),
            _jpeg("empty.jpg", size=0),
        ]

        result = photo_service.upload_review_photos("user-ana", "review-1", photos)

        assert len(result.uploaded_urls) == 1
        assert sorted(e.filename for e in result.errors) == ["doc.pdf", "empty.jpg", "huge.jpg"]

    def test_storage_failure_does_not_hide_other_uploads(self, photo_service, s3_client):
        error = ClientError({"Error": {"Code": "500", "Message": "boom"}}, "PutObject")

        def put_object(**kwargs):
            if "_1_" in kwargs["Key"]:
                raise error
            return {}

        s3_client.put_object.side_effect = put_object

        result = photo_service.upload_review_photos("user-ana", "review-1", [_jpeg("a.jpg"), _jpeg("b.jpg")])

        assert len(result.uploaded_urls) == 1
        assert [e.filename for e in result.errors] == ["b.jpg"]

    def test_more_than_max_photos_are_rejected(self, photo_service):
        photos = [_jpeg(f"{i}.jpg") for i in range(8)]

        result = photo_service.upload_review_photos("user-ana", "review-1", photos)

        assert len(result.uploaded_urls) == 6
        assert [e.filename for e in result.errors] == ["6.jpg", "7.jpg"]

    def test_nothing_uploaded_is_not_success(self, photo_service):
        result = photo_service.upload_review_photos("user-ana", "review-1", [])

        assert not result.success


class TestDeletePhoto:

    def test_delete_review_photo(self, photo_service, s3_client):
        url = "https://bucket.example.com/review-photos/user-ana_review-1_0_1.jpg"

        assert photo_service.delete_photo(url)
        s3_client.delete_object.assert_called_once_with(
            Bucket="bocado-test", Key="review-photos/user-ana_review-1_0_1.jpg"
        )

    def test_refuses_keys_outside_review_photos(self, photo_service, s3_client):
        assert not photo_service.delete_photo("https://bucket.example.com/other/file.jpg")
        s3_client.delete_object.assert_not_called()

    def test_ownership_follows_key_prefix(self, photo_service):
        url = "https://bucket.example.com/review-photos/user-ana_review-1_0_1.jpg"

        assert photo_service.owns_photo("user-ana", url)
        assert not photo_service.owns_photo("user-beto", url)


class TestUploadSinglePhoto:

    def test_single_upload_uses_review_key_convention(self, photo_service, s3_client):
        url = photo_service.upload_photo("user-ana", "temp-9", _jpeg("a.jpg"), index=2)

        assert re.fullmatch(r"https://bucket\.example\.com/review-photos/user-ana_temp-9_2_\d+\.jpg", url)
        assert photo_service.owns_photo("user-ana", url)
        s3_client.put_object.assert_called_once()

    def test_storage_error_becomes_upload_failure(self, photo_service, s3_client):
        s3_client.put_object.side_effect = ClientError({"Error": {"Code": "500", "Message": "boom"}}, "PutObject")

        with pytest.raises(PhotoUploadFailed):
            photo_service.upload_photo("user-ana", "temp-9", _jpeg("a.jpg"))
