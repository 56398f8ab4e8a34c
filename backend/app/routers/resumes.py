"""
Resume parsing and screening API endpoints.
"""

import logging

from fastapi import APIRouter, HTTPException

from app.models.resume import (
    ResumeFilesRequest,
    ResumeParseOutcome,
    ResumeParseRequest,
    ResumeParseResponse,
    ScreeningRequest,
    ScreeningResponse,
    UploadedResumePdf,
)
from app.services.attachments import (
    collect_uploaded_resume_pdfs,
    select_uploaded_resume_pdfs,
)
from app.services.errors import ScreeningError
from app.services.pipeline import parse_resume_batch
from app.services.screening import screen_resumes

router = APIRouter()

logger = logging.getLogger(__name__)

UNREADABLE_FILE_NOTICE = "Could not read this file."


def _select_or_404(messages, resume_name) -> tuple[list[UploadedResumePdf], list[UploadedResumePdf]]:
    files = collect_uploaded_resume_pdfs(messages)
    selected = select_uploaded_resume_pdfs(files, resume_name)

    if not selected:
        raise HTTPException(
            status_code=404,
            detail={
                "code": "NO_MATCHING_RESUME",
                "message": (
                    "No uploaded PDF resume matches the selection."
                    if files
                    else "No PDF resume has been uploaded in this conversation."
                ),
                "available_files": [f.filename for f in files],
            },
        )

    return files, selected


def _with_user_notice(outcomes: list[ResumeParseOutcome]) -> list[ResumeParseOutcome]:
    """Replace internal failure messages with the generic user-facing notice."""
    return [
        o if o.ok else o.model_copy(update={"error": UNREADABLE_FILE_NOTICE})
        for o in outcomes
    ]


@router.post("/files", response_model=list[UploadedResumePdf])
async def list_resume_files(body: ResumeFilesRequest):
    """List the PDF resumes uploaded in a conversation (no bytes fetched)."""
    return collect_uploaded_resume_pdfs(body.messages)


@router.post("/parse", response_model=ResumeParseResponse)
async def parse_resumes(body: ResumeParseRequest):
    """
    Parse the selected PDF resumes from a conversation.

    Files that cannot be fetched or decoded are reported per file with a
    generic notice; the request itself still succeeds.
    """
    files, selected = _select_or_404(body.messages, body.resume_name)

    logger.info(
        f"Parse request: {len(selected)} of {len(files)} file(s) selected "
        f"(resume_name={body.resume_name!r})"
    )

    outcomes = await parse_resume_batch(selected, max_chars=body.max_chars)

    return ResumeParseResponse(files=selected, results=_with_user_notice(outcomes))


@router.post("/screen", response_model=ScreeningResponse)
async def screen_resume_batch(body: ScreeningRequest):
    """
    Parse the selected resumes and ask Claude for screening feedback.

    Returns 422 when none of the selected files could be read and 502 when
    the model call fails.
    """
    _, selected = _select_or_404(body.messages, body.resume_name)

    outcomes = await parse_resume_batch(selected, max_chars=body.max_chars)

    try:
        commentary, token_usage = await screen_resumes(outcomes, body.job_description)
    except ScreeningError as e:
        raise HTTPException(
            status_code=422,
            detail={"code": e.error_code, "message": e.message},
        )
    except Exception as e:
        logger.error(f"Screening failed: {str(e)}", exc_info=True)
        raise HTTPException(status_code=502, detail=f"Screening failed: {str(e)}")

    logger.info(f"Screening complete, tokens used: {token_usage.get('total_tokens', 'N/A')}")

    return ScreeningResponse(
        results=_with_user_notice(outcomes),
        commentary=commentary,
        token_usage=token_usage,
    )
