"""Image loading and encoding for upload.

Core Functions:
- guess_mime_type(): Detect media type from magic bytes, falling back to extension
- load_image_file(): Read an image file from disk into an UploadedImage
- validate_image_size(): Check MAX_IMAGE_SIZE_MB limit
- encode_image(): Verify and base64-encode image bytes (no data-URL prefix)
"""

import base64
from io import BytesIO
from pathlib import Path
from typing import Optional

import filetype
from PIL import Image, UnidentifiedImageError
from pydantic import ValidationError

from src.models.models import UploadedImage
from src.utils.config import config
from src.utils.errors import ImageProcessingError
from src.utils.logger import logger


EXTENSION_MIME_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".bmp": "image/bmp",
}


def guess_mime_type(image_bytes: bytes, filename: str = "") -> Optional[str]:
    """Detect the media type of image bytes.

    Uses the filetype library to read magic bytes first, so a mislabelled
    extension does not matter. Falls back to the file extension when the
    content is not recognised.

    Args:
        image_bytes: Raw file bytes.
        filename: Original file name, used only for the fallback.

    Returns:
        Media type such as "image/png", or None if unknown.
    """
    kind = filetype.guess(image_bytes) if image_bytes else None
    if kind is not None:
        return kind.mime
    return EXTENSION_MIME_TYPES.get(Path(filename).suffix.lower())


def load_image_file(path: str | Path) -> UploadedImage:
    """Read an image file from disk.

    Args:
        path: Path to the image file.

    Returns:
        UploadedImage with detected media type.

    Raises:
        ImageProcessingError: If the file cannot be read, is empty, or is not an image.
    """
    image_path = Path(path)
    try:
        image_bytes = image_path.read_bytes()
    except OSError as e:
        logger.error(f"Could not read image file {image_path}: {e}")
        raise ImageProcessingError(f"Could not read image file: {image_path.name}") from e

    mime_type = guess_mime_type(image_bytes, image_path.name) or "application/octet-stream"
    try:
        return UploadedImage(filename=image_path.name, mime_type=mime_type, data=image_bytes)
    except ValidationError as e:
        logger.warning(f"Rejected upload {image_path.name} ({mime_type}): {e.error_count()} validation error(s)")
        raise ImageProcessingError(
            f"{image_path.name} is not a supported image. Please choose a PNG, JPG or GIF file."
        ) from e


def validate_image_size(image_bytes: bytes) -> bool:
    """Validate image size against MAX_IMAGE_SIZE_MB.

    Args:
        image_bytes: Raw image bytes.

    Returns:
        True if size valid, False if exceeds limit.
    """
    size_mb = len(image_bytes) / (1024 * 1024)
    if size_mb > config.MAX_IMAGE_SIZE_MB:
        logger.warning(f"Image size {size_mb:.2f}MB exceeds limit of {config.MAX_IMAGE_SIZE_MB}MB")
        return False
    return True


def encode_image(image_bytes: bytes) -> str:
    """Verify image bytes and encode them as bare base64 text.

    Blocking; callers on the event loop run it through asyncio.to_thread.

    Args:
        image_bytes: Raw image bytes.

    Returns:
        Base64 string without any ``data:`` prefix.

    Raises:
        ImageProcessingError: If the bytes are empty, too large, or not a decodable image.
    """
    if not image_bytes:
        raise ImageProcessingError()

    if not validate_image_size(image_bytes):
        raise ImageProcessingError(
            f"Image is too large. Maximum size is {config.MAX_IMAGE_SIZE_MB}MB. Please try another one."
        )

    try:
        with Image.open(BytesIO(image_bytes)) as img:
            img.verify()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError, ValueError) as e:
        logger.warning(f"Image verification failed: {e}")
        raise ImageProcessingError() from e

    encoded = base64.b64encode(image_bytes).decode("ascii")
    logger.debug(f"Encoded image: {len(image_bytes) / 1024:.1f}KB → {len(encoded) / 1024:.1f}KB base64")
    return encoded
