"""
Per-document resume pipeline and batch fan-out.

    acquire bytes -> decode (pdfplumber, worker thread) -> normalize
        -> extract structured fields + clip text

Documents share no mutable state, so a batch runs one task per file and
reassembles results in selection order. A failure in one document becomes
a failed outcome for that document only.
"""

import asyncio
import logging
from typing import List, Optional, Tuple

import httpx

from app.config import RESUME_FETCH_TIMEOUT, RESUME_MAX_CHARS
from app.models.resume import (
    ClippedText,
    ParsedResumePdf,
    ResumeParseOutcome,
    ResumeStructuredInfo,
    UploadedResumePdf,
)
from app.services.errors import CancellationError, ResumePipelineError
from app.services.extractor import extract_resume_structured_info
from app.services.normalizer import clip_resume_text, normalize_text
from app.services.pdf_text import decode_pdf_bytes
from app.services.resume_source import read_pdf_bytes

logger = logging.getLogger(__name__)


async def parse_resume_pdf(
    file: UploadedResumePdf,
    client: Optional[httpx.AsyncClient] = None,
    timeout: float = RESUME_FETCH_TIMEOUT,
) -> ParsedResumePdf:
    """
    Fetch and decode one attachment into normalized text.

    Raises:
        ResumePipelineError: Any acquisition or decode failure.
    """
    data = await read_pdf_bytes(file.url, client=client, timeout=timeout)
    decoded = await asyncio.to_thread(decode_pdf_bytes, data)
    text = normalize_text("\n\n".join(decoded.pages))

    return ParsedResumePdf(
        filename=file.filename,
        id=file.id,
        page_count=decoded.page_count,
        text=text,
        total_text_chars=len(text),
    )


def analyze_resume_text(
    document: ParsedResumePdf,
    max_chars: int = RESUME_MAX_CHARS,
) -> Tuple[ResumeStructuredInfo, ClippedText]:
    """Structured fields from the full text, plus the text bounded for the model."""
    structured = extract_resume_structured_info(document.text)
    clipped = clip_resume_text(document.text, max_chars)
    return structured, clipped


async def _process_one(
    file: UploadedResumePdf,
    client: httpx.AsyncClient,
    max_chars: int,
    timeout: float,
) -> ResumeParseOutcome:
    logger.info("Parsing resume %s (%s)", file.filename, file.id)
    document = await parse_resume_pdf(file, client=client, timeout=timeout)
    structured, clipped = analyze_resume_text(document, max_chars)
    logger.info(
        "Parsed resume %s: %d page(s), %d chars%s",
        file.filename,
        document.page_count,
        document.total_text_chars,
        " (truncated)" if clipped.truncated else "",
    )
    return ResumeParseOutcome(
        file=file,
        document=document,
        structured=structured,
        clipped=clipped,
    )


def _failed_outcome(file: UploadedResumePdf, error: ResumePipelineError) -> ResumeParseOutcome:
    logger.warning(
        "Could not read resume %s: [%s] %s", file.filename, error.error_code, error.message
    )
    return ResumeParseOutcome(file=file, error_code=error.error_code, error=error.message)


async def parse_resume_batch(
    files: List[UploadedResumePdf],
    max_chars: Optional[int] = None,
    timeout: Optional[float] = None,
) -> List[ResumeParseOutcome]:
    """
    Run the pipeline for every file concurrently.

    Returns one outcome per file, in the same order as files. Pipeline
    errors and per-task cancellations become failed outcomes; any other
    exception propagates. Cancelling the awaiting task cancels every
    in-flight download.
    """
    if not files:
        return []

    max_chars = max_chars or RESUME_MAX_CHARS
    timeout = timeout or RESUME_FETCH_TIMEOUT

    async with httpx.AsyncClient() as client:
        results = await asyncio.gather(
            *(_process_one(f, client, max_chars, timeout) for f in files),
            return_exceptions=True,
        )

    outcomes: List[ResumeParseOutcome] = []
    for file, result in zip(files, results):
        if isinstance(result, ResumeParseOutcome):
            outcomes.append(result)
        elif isinstance(result, ResumePipelineError):
            outcomes.append(_failed_outcome(file, result))
        elif isinstance(result, asyncio.CancelledError):
            outcomes.append(_failed_outcome(file, CancellationError("Resume parsing was cancelled.")))
        else:
            raise result

    return outcomes
