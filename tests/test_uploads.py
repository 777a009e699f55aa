"""Tests for Cloudinary public ids, WebP conversion and the upload path."""

import io

import cloudinary.exceptions
import cloudinary.uploader
import pytest
from PIL import Image

from studio.exceptions import InvalidFileTypeError, UploadFailureError
from studio.services.catalog import ImageUpload, upload_to_blob_store
from studio.services.cloudinary_service import build_public_id, upload_image
from studio.utils.image_converter import convert_to_webp, prepare_upload
from studio.utils.uploads import clean_text


class TestPublicId:
    def test_whitespace_becomes_dashes(self):
        assert build_public_id("Living Room.jpg", timestamp_ms=1700000000000) == "1700000000000-Living-Room"

    def test_runs_of_whitespace_collapse(self):
        assert build_public_id("master \t bath  2.png", timestamp_ms=5) == "5-master-bath-2"

    def test_missing_stem(self):
        assert build_public_id("", timestamp_ms=5) == "5-image"

    def test_uses_current_time_by_default(self):
        timestamp, _, slug = build_public_id("hall.png").partition("-")

        assert timestamp.isdigit()
        assert slug == "hall"


class TestWebpConversion:
    async def test_png_converted(self, png_bytes):
        converted, ok = await convert_to_webp(png_bytes)

        assert ok
        assert Image.open(io.BytesIO(converted)).format == "WEBP"

    async def test_large_image_downscaled(self):
        buffer = io.BytesIO()
        Image.new("RGB", (400, 200), "blue").save(buffer, format="PNG")

        converted, ok = await convert_to_webp(buffer.getvalue(), max_dimension=100)

        assert ok
        assert Image.open(io.BytesIO(converted)).size == (100, 50)

    async def test_unreadable_bytes_returned_unchanged(self):
        converted, ok = await convert_to_webp(b"definitely not an image")

        assert not ok
        assert converted == b"definitely not an image"

    async def test_prepare_upload_falls_back_to_original(self):
        assert await prepare_upload(b"garbage", "garbage.jpg") == b"garbage"

    async def test_oversized_image_uploaded_unconverted(self, png_bytes, monkeypatch):
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)

        converted, ok = await convert_to_webp(png_bytes)

        assert not ok
        assert converted == png_bytes
        assert await prepare_upload(png_bytes, "huge.png") == png_bytes


class TestUploadImage:
    async def test_retries_then_succeeds(self, monkeypatch):
        calls = []

        def flaky_upload(file, **kwargs):
            calls.append(kwargs)
            if len(calls) == 1:
                raise cloudinary.exceptions.Error("timeout")
            return {"secure_url": "https://cdn/x.webp", "public_id": "project-images/x"}

        async def no_sleep(seconds):
            return None

        monkeypatch.setattr(cloudinary.uploader, "upload", flaky_upload)
        monkeypatch.setattr("studio.services.cloudinary_service.asyncio.sleep", no_sleep)

        result = await upload_image(b"data", folder="project-images", public_id="x", max_retries=3)

        assert result["url"] == "https://cdn/x.webp"
        assert len(calls) == 2
        assert calls[0]["folder"] == "project-images"

    async def test_single_attempt_by_default(self, monkeypatch):
        calls = []

        def failing_upload(file, **kwargs):
            calls.append(kwargs)
            raise cloudinary.exceptions.Error("bad credentials")

        monkeypatch.setattr(cloudinary.uploader, "upload", failing_upload)

        with pytest.raises(cloudinary.exceptions.Error):
            await upload_image(b"data", folder="portfolio")

        assert len(calls) == 1


class TestUploadToBlobStore:
    async def test_rejects_non_images(self, fake_cloudinary):
        upload = ImageUpload(filename="plan.pdf", content_type="application/pdf", content=b"%PDF")

        with pytest.raises(InvalidFileTypeError):
            await upload_to_blob_store(upload, "project-images")

        assert fake_cloudinary == []

    async def test_missing_content_type(self, fake_cloudinary):
        upload = ImageUpload(filename="photo", content_type=None, content=b"")

        with pytest.raises(InvalidFileTypeError):
            await upload_to_blob_store(upload, "project-images")

    async def test_returns_secure_url(self, fake_cloudinary, make_upload):
        url = await upload_to_blob_store(make_upload("Dining Room.png"), "portfolio")

        assert url.startswith("https://res.cloudinary.com/test/image/upload/v1/portfolio/")
        assert url.endswith("-Dining-Room")

    async def test_cloudinary_error_becomes_upload_failure(self, monkeypatch, make_upload):
        def failing_upload(file, **kwargs):
            raise cloudinary.exceptions.Error("quota exceeded")

        monkeypatch.setattr(cloudinary.uploader, "upload", failing_upload)

        with pytest.raises(UploadFailureError) as exc_info:
            await upload_to_blob_store(make_upload(), "portfolio")

        assert exc_info.value.status_code == 502
        assert "quota exceeded" in exc_info.value.message


@pytest.mark.parametrize(
    "value, expected",
    [(None, None), ("", None), ("   ", None), ("  Kitchen ", "Kitchen")],
)
def test_clean_text(value, expected):
    assert clean_text(value) == expected
