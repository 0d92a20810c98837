"""Decoding and measuring submitted screenshots."""

from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass
from io import BytesIO

from PIL import Image, UnidentifiedImageError

from photo_contest.services.errors import ImageTooSmallError, InvalidImageError

_DATA_URL_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?P<params>(;[^,;]+)*),(?P<payload>.*)$", re.DOTALL)
_ALLOWED_FORMATS = {"PNG", "JPEG", "WEBP"}


@dataclass(frozen=True)
class DecodedImage:
    """Raw image bytes with the metadata read from them."""

    data: bytes
    width: int
    height: int
    format: str

    @property
    def content_type(self) -> str:
        return Image.MIME.get(self.format, "application/octet-stream")

    @property
    def extension(self) -> str:
        return "jpg" if self.format == "JPEG" else self.format.lower()


def decode_data_url(value: str, *, max_bytes: int) -> bytes:
    """Return the bytes of a base64 data URL (or a bare base64 string).

    Raises:
        InvalidImageError: If the payload is not valid base64 or is too large
    """
    payload = value.strip()
    match = _DATA_URL_RE.match(payload)
    if match:
        if ";base64" not in match.group("params"):
            raise InvalidImageError("Image data URL must be base64 encoded")
        payload = match.group("payload")

    # Base64 inflates by 4/3; reject oversized payloads before decoding them.
    if len(payload) * 3 // 4 > max_bytes + 3:
        raise InvalidImageError(f"Image exceeds the {max_bytes // (1024 * 1024)} MB limit")
    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as err:
        raise InvalidImageError("Image data is not valid base64") from err
    if not data:
        raise InvalidImageError("Image data is empty")
    if len(data) > max_bytes:
        raise InvalidImageError(f"Image exceeds the {max_bytes // (1024 * 1024)} MB limit")
    return data


def inspect_image(data: bytes) -> DecodedImage:
    """Read format and dimensions with Pillow without decoding every pixel.

    Raises:
        InvalidImageError: If Pillow cannot identify a supported image
    """
    try:
        with Image.open(BytesIO(data)) as img:
            width, height = img.size
            fmt = img.format or ""
    except (UnidentifiedImageError, OSError, Image.DecompressionBombError) as err:
        raise InvalidImageError("Uploaded file is not a readable image") from err

    if fmt not in _ALLOWED_FORMATS:
        raise InvalidImageError(
            f"Unsupported image format {fmt or 'unknown'}; use PNG, JPEG or WEBP"
        )
    return DecodedImage(data=data, width=width, height=height, format=fmt)


def ensure_min_resolution(width: int, height: int, *, min_width: int, min_height: int) -> None:
    """Reject screenshots below the minimum landscape resolution."""
    if width < min_width or height < min_height:
        raise ImageTooSmallError(
            f"Resolution too low: got {width}x{height}, need {min_width}x{min_height}"
        )
