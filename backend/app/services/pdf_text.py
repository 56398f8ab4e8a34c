"""
PDF text decoding via pdfplumber.

pdfplumber is treated as a black box: bytes in, page count and page texts
out. Scanned/image-only PDFs decode to empty page text (no OCR).
"""

import io
import logging
import threading

import pdfplumber

from app.models.resume import DecodedPdf
from app.services.errors import DecodeError

logger = logging.getLogger(__name__)

# pdfminer logs a warning for every malformed font or xref it recovers from.
PDFMINER_LOG_LEVEL = logging.ERROR

_backend_lock = threading.Lock()
_backend_ready = False


def _configure_pdf_backend() -> None:
    logging.getLogger("pdfminer").setLevel(PDFMINER_LOG_LEVEL)
    logger.info("PDF backend configured (pdfplumber)")


def ensure_pdf_backend() -> None:
    """
    Run the process-wide decoder setup exactly once.

    Safe to call from any number of worker threads; only the first caller
    performs the setup, the rest wait on the lock and return.
    """
    global _backend_ready
    if _backend_ready:
        return
    with _backend_lock:
        if _backend_ready:
            return
        _configure_pdf_backend()
        _backend_ready = True


def decode_pdf_bytes(data: bytes) -> DecodedPdf:
    """
    Extract text from every page of an in-memory PDF.

    Raises:
        DecodeError: If pdfplumber cannot open the document or it has no pages.
    """
    ensure_pdf_backend()

    try:
        with pdfplumber.open(io.BytesIO(data)) as pdf:
            pages = [page.extract_text() or "" for page in pdf.pages]
    except Exception as e:
        raise DecodeError(f"PDF parsing failed: {e}")

    if not pages:
        raise DecodeError("PDF has no pages.")

    return DecodedPdf(page_count=len(pages), pages=pages)
