"""Local storage for uploaded company logos."""

from __future__ import annotations

import logging
import mimetypes
import uuid
from pathlib import Path

from residency_board.config import get_settings

logger = logging.getLogger(__name__)

MAX_IMAGE_BYTES = 5 * 1024 * 1024


class InvalidImageError(ValueError):
    """Raised for uploads that are not images or are too large."""

    pass


def media_root() -> Path:
    root = Path(get_settings().media_dir)
    root.mkdir(parents=True, exist_ok=True)
    return root


def save_image(content: bytes, content_type: str | None, filename: str | None = None) -> str:
    """Store an image and return its id (the file name under the media root)."""
    if not content_type or not content_type.startswith("image/"):
        raise InvalidImageError("Only image uploads are accepted")
    if not content:
        raise InvalidImageError("Empty upload")
    if len(content) > MAX_IMAGE_BYTES:
        raise InvalidImageError("Image exceeds 5 MB")

    suffix = mimetypes.guess_extension(content_type) or Path(filename or "").suffix or ""
    image_id = f"{uuid.uuid4().hex}{suffix}"
    (media_root() / image_id).write_bytes(content)
    logger.info("Stored image %s (%d bytes)", image_id, len(content))
    return image_id
