import base64
import binascii
import io
import logging
from typing import Tuple

from PIL import Image, UnidentifiedImageError

from .core.config import settings

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "image/jpeg"


def split_data_url(payload: str) -> Tuple[str, str]:
    """Split 'data:image/png;base64,AAAA' into ('image/png', 'AAAA').

    Bare base64 is returned with an empty mime type.
    """
    if payload.startswith("data:") and "," in payload:
        header, data = payload.split(",", 1)
        mime = header[len("data:"):].split(";", 1)[0]
        return mime, data
    return "", payload


def decode_image_payload(payload: str) -> Tuple[bytes, str]:
    """Decode a data URL / base64 image into (bytes, mime_type).

    Raises ValueError when the payload is not base64, too large, or not an
    image Pillow can identify.
    """
    declared_mime, data = split_data_url(payload.strip())
    try:
        image_bytes = base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError):
        raise ValueError("Image is not valid base64")

    if not image_bytes:
        raise ValueError("Image is empty")
    if len(image_bytes) > settings.MAX_IMAGE_SIZE:
        raise ValueError(f"Image too large (max {settings.MAX_IMAGE_SIZE // (1024*1024)}MB)")

    return image_bytes, detect_mime_type(image_bytes, declared_mime)


def detect_mime_type(image_bytes: bytes, declared_mime: str = "") -> str:
    try:
        with Image.open(io.BytesIO(image_bytes)) as img:
            fmt = img.format
    except (UnidentifiedImageError, OSError):
        raise ValueError("Unsupported or corrupt image")

    mime = Image.MIME.get(fmt or "")
    if not mime:
        logger.debug(f"No mime type known for format {fmt}, using {declared_mime or DEFAULT_MIME_TYPE}")
        mime = declared_mime or DEFAULT_MIME_TYPE
    return mime
