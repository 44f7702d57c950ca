"""Image sources: supply raw image buffers for a new batch."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Sequence

    from fastapi import UploadFile

logger = logging.getLogger(__name__)

MAX_IMAGE_BYTES: int = 5 * 1024 * 1024


class ImageSource(Protocol):
    """Protocol for anything that can hand over a batch of images."""

    async def pick_images(self, max_count: int) -> list[bytes]:
        """Return up to ``max_count`` image buffers, or an empty list if none were chosen."""
        ...


def is_acceptable(content_type: str | None, size: int | None, max_bytes: int = MAX_IMAGE_BYTES) -> bool:
    """Check a candidate file's declared type and size against the upload filter."""
    if not content_type or not content_type.lower().startswith("image/"):
        return False
    return size is None or size <= max_bytes


class UploadImageSource:
    """Image source over files uploaded in a single multipart request.

    Only the first ``max_count`` uploads are considered. Files whose declared
    content type is not ``image/*`` or whose size exceeds ``max_bytes`` are
    skipped.
    """

    def __init__(self, uploads: Sequence[UploadFile], max_bytes: int = MAX_IMAGE_BYTES) -> None:
        self._uploads = list(uploads)
        self._max_bytes = max_bytes

    async def pick_images(self, max_count: int) -> list[bytes]:
        images: list[bytes] = []
        for upload in self._uploads[:max_count]:
            if not is_acceptable(upload.content_type, upload.size, self._max_bytes):
                logger.info("Skipping %s (%s, %s bytes)", upload.filename, upload.content_type, upload.size)
                continue
            data = await upload.read()
            # Size may be unknown until the body has been read.
            if len(data) > self._max_bytes:
                logger.info("Skipping %s (%d bytes exceeds limit)", upload.filename, len(data))
                continue
            images.append(data)
        return images
