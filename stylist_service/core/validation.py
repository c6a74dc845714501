"""
Input Validation Module (v3.0.0)
Validates uploaded garment photos and form fields before the pipeline runs.
"""
import io
import json
import logging
from typing import Any, Dict, Optional

from PIL import Image, UnidentifiedImageError

from stylist_service.config import get_settings
from stylist_service.core.errors import InvalidInput
from stylist_service.core.models import ImageInput

logger = logging.getLogger(__name__)

# Configuration
ALLOWED_MIME_TYPES = {"image/jpeg", "image/png", "image/webp"}
CONTEXT_STRING_FIELDS = ("location", "occasion", "country")


class ValidationError(InvalidInput):
    """Rejected upload or form field; status_code is 400, 413 or 415."""


def validate_file_size(content: bytes, max_mb: Optional[int] = None) -> None:
    """
    Check if file size is within limits.

    Raises:
        ValidationError: If file exceeds the configured size (413)
    """
    max_mb = max_mb or get_settings().max_image_mb
    size_mb = len(content) / (1024 * 1024)
    if len(content) > max_mb * 1024 * 1024:
        raise ValidationError(
            f"File too large: {size_mb:.1f}MB (max {max_mb}MB)",
            status_code=413
        )
    if not content:
        raise ValidationError("Empty file upload", status_code=400)
    logger.debug(f"File size OK: {size_mb:.2f}MB")


def validate_mime_type(content_type: Optional[str]) -> str:
    """
    Check if MIME type is allowed.

    Returns:
        Normalized MIME type

    Raises:
        ValidationError: If MIME type is missing or not allowed (415)
    """
    if not content_type:
        raise ValidationError("Missing Content-Type for uploaded file", status_code=415)

    # Normalize content type (remove charset etc.)
    mime = content_type.split(";")[0].strip().lower()
    if mime == "image/jpg":
        mime = "image/jpeg"

    if mime not in ALLOWED_MIME_TYPES:
        raise ValidationError(
            f"Unsupported file type: {mime}. Allowed: {', '.join(sorted(ALLOWED_MIME_TYPES))}",
            status_code=415
        )
    return mime


def decode_image(content: bytes) -> Image.Image:
    """
    Decode image bytes to PIL Image.

    Raises:
        ValidationError: If image cannot be decoded (400)
    """
    try:
        image = Image.open(io.BytesIO(content))
        image.load()  # Force load to catch truncated images
        return image
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise ValidationError(f"Cannot decode image: {e}", status_code=400)


def validate_image_count(count: int, max_images: Optional[int] = None) -> None:
    """
    Raises:
        ValidationError: More images than allowed (400)
    """
    max_images = max_images or get_settings().max_images
    if count > max_images:
        raise ValidationError(f"Too many images: {count} (max {max_images})", status_code=400)


def validate_image_upload(content: bytes, content_type: Optional[str], filename: Optional[str] = None) -> ImageInput:
    """
    Complete validation pipeline for one uploaded image.

    Returns:
        ImageInput ready for the classifier

    Raises:
        ValidationError: If any validation fails
    """
    validate_file_size(content)
    mime = validate_mime_type(content_type)
    image = decode_image(content)

    logger.info(f"Image validated: {filename or 'upload'} {image.size[0]}x{image.size[1]}, {image.mode}")
    return ImageInput(data=content, mime_type=mime, filename=filename)


def validate_recommend_request(image_count: int, message: Optional[str]) -> None:
    """
    Raises:
        ValidationError: Neither an image nor a message was given (400)
    """
    if image_count == 0 and not (message or "").strip():
        raise ValidationError("Please provide at least one image or a message.", status_code=400)
    validate_image_count(image_count)


def parse_context_blob(raw: Optional[str]) -> Dict[str, Any]:
    """
    Decode the optional JSON `context` form field.

    Raises:
        ValidationError: Not valid JSON, not an object, or a known field
            that is not a string (400)
    """
    if not raw or not raw.strip():
        return {}
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValidationError(f"context must be valid JSON: {e}", status_code=400)
    if not isinstance(data, dict):
        raise ValidationError("context must be a JSON object", status_code=400)

    for key in CONTEXT_STRING_FIELDS:
        value = data.get(key)
        if value is not None and not isinstance(value, str):
            raise ValidationError(f"context.{key} must be a string", status_code=400)
    return data
