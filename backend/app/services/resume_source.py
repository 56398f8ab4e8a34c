"""
Byte acquisition for resume attachments.

An attachment URL is either an inline data URL (``data:<meta>,<payload>``)
or a remote http(s) link. Both resolve to the raw PDF bytes held in memory.
No retries happen here; the caller decides what to do with a failure.
"""

import base64
import binascii
import logging
import re
from typing import Optional
from urllib.parse import unquote_to_bytes

import httpx

from app.config import RESUME_FETCH_TIMEOUT
from app.services.errors import (
    CancellationError,
    FetchError,
    FormatError,
    UnsupportedSourceError,
)

logger = logging.getLogger(__name__)

_DATA_URL_RE = re.compile(r"^data:([^,]*?),(.*)$", re.DOTALL)


def decode_data_url(data_url: str) -> bytes:
    """
    Decode an inline data URL into bytes.

    ``;base64`` in the meta segment means the payload is base64; otherwise it
    is percent-encoded text and is returned as UTF-8 bytes.

    Raises:
        FormatError: If the URL has no ``data:<meta>,`` prefix or the base64
            payload is corrupt.
    """
    match = _DATA_URL_RE.match(data_url)
    if not match:
        raise FormatError("Invalid data URL format.")

    meta, payload = match.group(1), match.group(2)

    if ";base64" in meta:
        try:
            return base64.b64decode(payload, validate=False)
        except (binascii.Error, ValueError) as e:
            raise FormatError(f"Invalid base64 payload in data URL: {e}")

    return unquote_to_bytes(payload)


async def _download(url: str, client: httpx.AsyncClient, timeout: float) -> bytes:
    try:
        response = await client.get(url, timeout=timeout, follow_redirects=True)
    except httpx.TimeoutException:
        raise CancellationError(f"Timed out after {timeout:g}s downloading PDF")
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        # InvalidURL is not an HTTPError subclass
        raise FetchError(f"Failed to download PDF: {e}")

    if not response.is_success:
        raise FetchError(
            f"Failed to download PDF: {response.status_code}",
            status_code=response.status_code,
        )

    return response.content


async def read_pdf_bytes(
    url: str,
    client: Optional[httpx.AsyncClient] = None,
    timeout: float = RESUME_FETCH_TIMEOUT,
) -> bytes:
    """
    Resolve an attachment URL into raw PDF bytes.

    Args:
        url: A ``data:`` URL or an absolute ``http(s)://`` URL.
        client: Optional shared AsyncClient (a batch passes one in so all
            downloads reuse the same connection pool).
        timeout: Per-request timeout in seconds.

    Raises:
        FormatError: Malformed data URL.
        FetchError: Non-2xx response or transport failure.
        CancellationError: The download timed out.
        UnsupportedSourceError: Any other URL scheme.
    """
    if url.startswith("data:"):
        return decode_data_url(url)

    if url.startswith("https://") or url.startswith("http://"):
        logger.debug("Downloading PDF from %s", url)
        if client is not None:
            return await _download(url, client, timeout)
        async with httpx.AsyncClient() as own_client:
            return await _download(url, own_client, timeout)

    raise UnsupportedSourceError("Unsupported PDF url format.")
