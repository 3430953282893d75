"""PNG encoding for atlas pages.

Large pages can come back empty from the direct encoder under memory
pressure, so a second path through a base64 data URI is always attempted
before giving up.
"""

from __future__ import annotations

import base64
import binascii
from io import BytesIO
import logging
import re

from PIL import Image

from actionhub.core.atlas.errors import EncodeExhaustedError

logger = logging.getLogger(__name__)

_DATA_URI = re.compile(r"^data:(?P<mime>[^;,]*);base64,(?P<data>.*)$", re.DOTALL)


def _encode_direct(image: Image.Image) -> bytes | None:
    buffer = BytesIO()
    try:
        image.save(buffer, "PNG", optimize=True)
    except (OSError, ValueError, MemoryError) as e:
        logger.warning(f"Direct PNG encode failed ({image.width}x{image.height}): {e}")
        return None
    return buffer.getvalue() or None


def _encode_data_uri(image: Image.Image) -> str:
    buffer = BytesIO()
    image.save(buffer, "PNG", compress_level=1)
    payload = base64.b64encode(buffer.getvalue()).decode("ascii")
    return f"data:image/png;base64,{payload}"


def data_uri_to_bytes(data_uri: str) -> tuple[str, bytes]:
    """Decode a base64 data URI.

    Returns:
        Tuple of (mime type, payload bytes); mime defaults to image/png

    Raises:
        ValueError: If the URI is not a base64 data URI
    """
    match = _DATA_URI.match(data_uri)
    if not match:
        raise ValueError("Not a base64 data URI")
    try:
        payload = base64.b64decode(match.group("data"), validate=True)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 payload: {e}") from e
    return match.group("mime") or "image/png", payload


def encode_png(image: Image.Image) -> bytes:
    """Encode an image to PNG, falling back to the data-URI path.

    Raises:
        ValueError: If the canvas has no area
        EncodeExhaustedError: If neither path produced data
    """
    if image.width <= 0 or image.height <= 0:
        raise ValueError(f"Invalid canvas size {image.width}x{image.height}")

    data = _encode_direct(image)
    if data:
        return data

    logger.warning("Direct PNG encode returned no data, retrying via data URI")
    try:
        _, data = data_uri_to_bytes(_encode_data_uri(image))
    except (OSError, ValueError, MemoryError) as e:
        raise EncodeExhaustedError(width=image.width, height=image.height) from e
    if not data:
        raise EncodeExhaustedError(width=image.width, height=image.height)
    return data
