"""Tests for the upload image source filter."""

from __future__ import annotations

import io

import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from cowclassifier.classification.image_source import MAX_IMAGE_BYTES, UploadImageSource, is_acceptable


def _upload(data: bytes, content_type: str = "image/jpeg", *, known_size: bool = True) -> UploadFile:
    return UploadFile(
        file=io.BytesIO(data),
        filename="photo.jpg",
        size=len(data) if known_size else None,
        headers=Headers({"content-type": content_type}),
    )


class TestIsAcceptable:
    @pytest.mark.parametrize("content_type", ["image/jpeg", "image/png", "IMAGE/WEBP"])
    def test_accepts_images(self, content_type: str) -> None:
        assert is_acceptable(content_type, 1024) is True

    @pytest.mark.parametrize("content_type", ["text/plain", "application/pdf", "", None])
    def test_rejects_non_images(self, content_type: str | None) -> None:
        assert is_acceptable(content_type, 1024) is False

    def test_size_limit_is_inclusive(self) -> None:
        assert is_acceptable("image/jpeg", MAX_IMAGE_BYTES) is True
        assert is_acceptable("image/jpeg", MAX_IMAGE_BYTES + 1) is False

    def test_unknown_size_passes(self) -> None:
        assert is_acceptable("image/jpeg", None) is True


class TestUploadImageSource:
    async def test_returns_image_bytes_in_order(self) -> None:
        source = UploadImageSource([_upload(b"one"), _upload(b"two", "image/png")])
        assert await source.pick_images(10) == [b"one", b"two"]

    async def test_skips_non_images_and_oversized(self) -> None:
        source = UploadImageSource(
            [_upload(b"notes", "text/plain"), _upload(b"x" * 11), _upload(b"ok")],
            max_bytes=10,
        )
        assert await source.pick_images(10) == [b"ok"]

    async def test_oversized_detected_after_read(self) -> None:
        source = UploadImageSource([_upload(b"x" * 11, known_size=False)], max_bytes=10)
        assert await source.pick_images(10) == []

    async def test_considers_only_first_max_count_uploads(self) -> None:
        uploads = [_upload(f"img-{i}".encode()) for i in range(12)]
        images = await UploadImageSource(uploads).pick_images(10)
        assert len(images) == 10
        assert images[-1] == b"img-9"

    async def test_no_uploads_returns_empty(self) -> None:
        assert await UploadImageSource([]).pick_images(10) == []
