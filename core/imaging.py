"""
Image decoding and normalization.

Decodes arbitrary input bytes, corrects orientation from EXIF, shrinks to a
bounded canvas, re-encodes as JPEG and derives a smaller copy for statistics.
"""
import base64
import binascii
import io
import logging
import re
from dataclasses import dataclass

from PIL import Image, ImageOps, UnidentifiedImageError

from core.exceptions import DecodeError, InternalError, PayloadTooLarge, ValidationError
from core.signals import ImageSignals, extract_signals

logger = logging.getLogger(__name__)

MAX_UPLOAD_BYTES = 10 * 1024 * 1024
MAX_DIMENSION = 512
STATS_DIMENSION = 256
JPEG_QUALITY = 88

DATA_URL_PATTERN = re.compile(r'^data:(?P<mime>.+);base64,(?P<data>.+)$', re.DOTALL)


@dataclass(frozen=True)
class NormalizedImage:
    buffer: bytes
    data_url: str
    signals: ImageSignals
    width: int
    height: int


def decode_data_url(data_url: str, max_bytes: int = MAX_UPLOAD_BYTES) -> bytes:
    """Decode a ``data:<mime>;base64,<payload>`` URL into raw bytes"""
    match = DATA_URL_PATTERN.match(data_url.strip())
    if not match:
        raise ValidationError("Invalid data URL", 'dataUrl')

    payload = re.sub(r'\s+', '', match.group('data'))
    payload += '=' * (-len(payload) % 4)
    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValidationError("Invalid data URL", 'dataUrl') from e

    if not data:
        raise ValidationError("Invalid data URL", 'dataUrl')
    if len(data) > max_bytes:
        raise PayloadTooLarge("Image is too large")
    return data


def _open_image(data: bytes) -> Image.Image:
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (UnidentifiedImageError, Image.DecompressionBombError) as e:
        raise DecodeError(f"Unsupported image format: {e}") from e
    except (OSError, ValueError, SyntaxError) as e:
        raise DecodeError(f"Could not decode image: {e}") from e
    return image


def _to_jpeg_mode(image: Image.Image) -> Image.Image:
    if image.mode in ('RGB', 'L'):
        return image
    return image.convert('RGB')


def normalize_image_bytes(data: bytes, max_bytes: int = MAX_UPLOAD_BYTES) -> NormalizedImage:
    """
    Decode, orient, shrink and re-encode an image, then extract its signals.

    Raises:
        PayloadTooLarge: ``data`` exceeds ``max_bytes``
        DecodeError: ``data`` is empty or not a supported image container
        InternalError: re-encoding or statistics failed
    """
    if not data:
        raise DecodeError("Empty image")
    if len(data) > max_bytes:
        raise PayloadTooLarge("Image is too large")

    original = _open_image(data)
    # Re-encoding strips metadata, so EXIF presence comes from the source.
    exif_present = bool(original.info.get('exif'))

    try:
        image = ImageOps.exif_transpose(original)
        image = _to_jpeg_mode(image)
        image.thumbnail((MAX_DIMENSION, MAX_DIMENSION), Image.Resampling.LANCZOS)

        output = io.BytesIO()
        image.save(output, format='JPEG', quality=JPEG_QUALITY)
        buffer = output.getvalue()

        stats_image = Image.open(io.BytesIO(buffer))
        stats_image.load()
        stats_image.thumbnail((STATS_DIMENSION, STATS_DIMENSION), Image.Resampling.LANCZOS)

        signals = extract_signals(stats_image, exif_present)
    except (OSError, ValueError, ArithmeticError, MemoryError) as e:
        logger.error(f"Image normalization failed: {e}")
        raise InternalError(f"Failed to normalize image: {e}") from e

    data_url = f"data:image/jpeg;base64,{base64.b64encode(buffer).decode('ascii')}"
    return NormalizedImage(
        buffer=buffer,
        data_url=data_url,
        signals=signals,
        width=image.width,
        height=image.height,
    )
