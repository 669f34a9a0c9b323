"""Helpers for moving images around as base64 text.

Images travel through the session as data URIs
(``data:image/png;base64,iVBOR...``). The functions here convert uploaded files
into that form, strip the media-type prefix before a request, re-wrap service
output, and write results back to disk for download.

No function in this module re-encodes pixels: bytes that come in are the bytes
that go out.
"""

import base64
import binascii
import logging
import time
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from .errors import DecodeError

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "image/jpeg"
PNG_MIME_TYPE = "image/png"


def strip_data_uri(encoded_image: str) -> str:
    """Return the raw base64 payload of an encoded image.

    Anything up to and including the first comma is treated as the
    ``data:<mime>;base64`` header. Strings without a comma are returned as-is.
    """
    if "," in encoded_image:
        return encoded_image.split(",", 1)[1]
    return encoded_image


def to_data_uri(data: str, mime_type: str = PNG_MIME_TYPE) -> str:
    """Wrap a raw base64 payload in a data URI header."""
    return f"data:{mime_type};base64,{data}"


def encode_image_file(path: str | Path) -> str:
    """Read an image file and return it as a data URI.

    The file is opened with Pillow first so that non-image uploads are rejected
    before any bytes are encoded. The MIME type comes from the detected image
    format, falling back to JPEG.

    Args:
        path: Path to the uploaded file

    Returns:
        Data URI holding the file's original bytes

    Raises:
        DecodeError: If the file is missing, unreadable, not an image, or too
            large to decode safely
    """
    path = Path(path)
    try:
        with Image.open(path) as img:
            image_format = img.format
            img.verify()
        raw = path.read_bytes()
    except (
        OSError,
        UnidentifiedImageError,
        ValueError,
        SyntaxError,
        Image.DecompressionBombError,
    ) as e:
        logger.warning(f"Could not read image file {path.name}: {e}")
        raise DecodeError() from e

    mime_type = Image.MIME.get(image_format or "", DEFAULT_MIME_TYPE)
    logger.debug(f"Encoded {path.name} ({len(raw)} bytes, {mime_type})")
    return to_data_uri(base64.b64encode(raw).decode("ascii"), mime_type)


def decode_data_uri(encoded_image: str) -> bytes:
    """Return the binary payload of an encoded image.

    Raises:
        ValueError: If the payload is not valid base64
    """
    try:
        return base64.b64decode(strip_data_uri(encoded_image), validate=True)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 image data: {e}") from e


def save_encoded_image(
    encoded_image: str,
    outputs_dir: Path,
    prefix: str = "vangogh-art",
    timestamp_ms: int | None = None,
) -> Path:
    """Write an encoded PNG to disk under a timestamped name.

    Args:
        encoded_image: Data URI or raw base64 payload
        outputs_dir: Directory to write into (created if missing)
        prefix: Filename prefix
        timestamp_ms: Epoch milliseconds for the suffix (default: now)

    Returns:
        Path of the written file, named ``<prefix>-<timestamp_ms>.png``
    """
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)

    outputs_dir = Path(outputs_dir)
    outputs_dir.mkdir(parents=True, exist_ok=True)
    output_path = outputs_dir / f"{prefix}-{timestamp_ms}.png"

    data = decode_data_uri(encoded_image)
    output_path.write_bytes(data)
    logger.info(f"Image saved to {output_path} ({len(data)} bytes)")
    return output_path
