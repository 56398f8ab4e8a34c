"""
Text normalization and clipping for decoded resume text.

normalize_text() turns raw decoder output into a canonical line-oriented
form; clip_resume_text() bounds it for the screening model's context.
"""

import re
import logging

from app.config import RESUME_MAX_CHARS
from app.models.resume import ClippedText, unique_strings

logger = logging.getLogger(__name__)

TRUNCATION_MARKER = "\n\n[...content truncated...]"

_BLANK_RUN_RE = re.compile(r"\n{3,}")

__all__ = ["TRUNCATION_MARKER", "normalize_text", "clip_resume_text", "unique_strings"]


def normalize_text(text: str) -> str:
    """
    Canonicalize decoder output.

    - NUL characters removed
    - \\r\\n and bare \\r become \\n
    - three or more consecutive newlines collapse to exactly two
    - leading/trailing whitespace trimmed

    Idempotent: normalize_text(normalize_text(t)) == normalize_text(t).
    """
    if not text:
        return ""

    cleaned = text.replace("\x00", "")
    cleaned = cleaned.replace("\r\n", "\n").replace("\r", "\n")
    cleaned = _BLANK_RUN_RE.sub("\n\n", cleaned)
    return cleaned.strip()


def clip_resume_text(text: str, max_chars: int = RESUME_MAX_CHARS) -> ClippedText:
    """
    Bound text to max_chars characters.

    Text within budget is returned unchanged. Longer text is cut to the first
    max_chars code points and TRUNCATION_MARKER is appended.
    """
    if len(text) <= max_chars:
        return ClippedText(text=text, truncated=False)

    logger.debug("Clipping resume text from %d to %d chars", len(text), max_chars)
    return ClippedText(text=text[:max_chars] + TRUNCATION_MARKER, truncated=True)
