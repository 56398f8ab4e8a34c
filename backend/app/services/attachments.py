"""
Attachment discovery and selection over a chat history.

collect_uploaded_resume_pdfs() walks the history once and returns the PDF
attachments users uploaded, deduplicated by (filename, url).
select_uploaded_resume_pdfs() narrows that list by a user-supplied selector.
"""

from typing import Iterable, List, Optional, Set, Tuple

from app.models.resume import PDF_MEDIA_TYPE, ChatMessage, UploadedResumePdf

DedupeKey = Tuple[str, str]


def default_filename(index: int) -> str:
    """Placeholder name for the attachment at 0-based position index."""
    return f"resume-{index + 1}.pdf"


def collect_uploaded_resume_pdfs(messages: Iterable[ChatMessage]) -> List[UploadedResumePdf]:
    """
    Derive the ordered list of PDF attachments from user messages.

    Only user-authored ``file`` parts with media type application/pdf are
    kept. A repeat of the same filename and url is skipped; the first
    appearance wins.
    """
    results: List[UploadedResumePdf] = []
    seen: Set[DedupeKey] = set()

    for message in messages:
        if message.role != "user":
            continue

        for index, part in enumerate(message.parts):
            if part.type != "file" or part.media_type != PDF_MEDIA_TYPE or not part.url:
                continue

            filename = (part.filename or "").strip() or default_filename(len(results))
            key = (filename, part.url)
            if key in seen:
                continue

            seen.add(key)
            results.append(
                UploadedResumePdf(
                    id=f"{message.id}-file-{index}",
                    filename=filename,
                    media_type=part.media_type,
                    url=part.url,
                )
            )

    return results


def select_uploaded_resume_pdfs(
    files: List[UploadedResumePdf],
    resume_name: Optional[str] = None,
) -> List[UploadedResumePdf]:
    """
    Pick attachments by selector.

    - blank/None: every file, unchanged
    - integer 1..N: the single file at that 1-based position
    - anything else: files whose name contains the selector (case-insensitive)
    """
    selector = (resume_name or "").strip()
    if not selector:
        return files

    try:
        position = int(selector)
    except ValueError:
        position = None

    if position is not None and 1 <= position <= len(files):
        return [files[position - 1]]

    lowered = selector.lower()
    return [f for f in files if lowered in f.filename.lower()]
