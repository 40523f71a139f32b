"""
Remote image fetching with an explicit timeout and a size ceiling that is
enforced both on the declared Content-Length and on the streamed body.
"""
import logging
import time
from typing import Optional

import requests

from core.exceptions import FetchError, PayloadTooLarge

logger = logging.getLogger(__name__)

MAX_UPLOAD_BYTES = 10 * 1024 * 1024
FETCH_TIMEOUT_SECONDS = 10.0
CHUNK_SIZE = 64 * 1024

HEADERS = {
    'User-Agent': 'TrueFrame/1.0 (+image-analysis)',
    'Accept': 'image/*,*/*;q=0.8',
}


def is_oversized(content_length: Optional[str], limit: int) -> bool:
    """True only when ``content_length`` parses as an integer above ``limit``"""
    if not content_length:
        return False
    try:
        return int(content_length) > limit
    except (TypeError, ValueError):
        return False


def fetch_image_from_url(url: str, max_bytes: int = MAX_UPLOAD_BYTES,
                         timeout: float = FETCH_TIMEOUT_SECONDS) -> bytes:
    """
    Download an image.

    ``timeout`` bounds the connect and each read; the whole download is
    additionally bounded by the same number of seconds.

    Raises:
        FetchError: network failure, timeout or non-success status
        PayloadTooLarge: declared or streamed size above ``max_bytes``
    """
    deadline = time.monotonic() + timeout
    try:
        response = requests.get(url, headers=HEADERS, stream=True, timeout=timeout)
    except requests.exceptions.Timeout as e:
        logger.warning(f"⚠️ Timed out fetching {url}")
        raise FetchError(f"Timed out fetching image after {timeout:g}s") from e
    except requests.exceptions.RequestException as e:
        logger.warning(f"⚠️ Could not fetch {url}: {e}")
        raise FetchError(f"Unable to fetch image: {e}") from e

    try:
        if not response.ok:
            raise FetchError(f"Unable to fetch image: {response.status_code}")

        if is_oversized(response.headers.get('Content-Length'), max_bytes):
            raise PayloadTooLarge("Image is too large")

        buffer = bytearray()
        try:
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                if not chunk:
                    continue
                buffer.extend(chunk)
                if len(buffer) > max_bytes:
                    raise PayloadTooLarge("Image is too large")
                if time.monotonic() > deadline:
                    raise FetchError(f"Timed out fetching image after {timeout:g}s")
        except requests.exceptions.RequestException as e:
            raise FetchError(f"Unable to fetch image: {e}") from e
    finally:
        response.close()

    return bytes(buffer)
