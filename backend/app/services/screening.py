"""
Resume screening with Claude.

Builds a prompt from parsed resumes (structured fields + bounded text) and an
optional job description, then asks Claude for screening feedback.
"""

import asyncio
import json
import logging
from typing import List, Optional, Tuple

import anthropic

from app import config
from app.models.resume import ResumeParseOutcome
from app.services.errors import ScreeningError

logger = logging.getLogger(__name__)

SCREENING_PROMPT = """\
You are an experienced technical recruiter screening internship and
early-career candidates. Resumes may be written in Chinese, English, or both.
Reply in the language the job description is written in; if there is no job
description, reply in the language of the resumes.

For each candidate below:
- Summarize their background in 2-3 sentences (school, degree, major, graduation year).
- List their strongest signals for the role (skills, projects, internships).
- List gaps, risks, or things to verify in an interview.
- Give a recommendation: "strong yes", "yes", "maybe", or "no", with one sentence of reasoning.
- Suggest 2-3 targeted interview questions.

If several candidates are provided, finish with a short ranking.

The "structured" block of each candidate was extracted by keyword heuristics
and may be incomplete or wrong; the resume text is authoritative.

JOB DESCRIPTION:
{job_description}

CANDIDATES:
{candidates}
"""

NO_JOB_DESCRIPTION = "(none provided: judge general suitability for a software internship)"


def _format_candidate(index: int, outcome: ResumeParseOutcome) -> str:
    header = f"### Candidate {index}: {outcome.file.filename}"

    if not outcome.ok:
        return f"{header}\n(This file could not be read: {outcome.error_code}.)"

    structured = json.dumps(
        outcome.structured.model_dump(), ensure_ascii=False, indent=2
    )
    notes = []
    if outcome.clipped.truncated:
        notes.append("resume text was truncated")
    note_line = f"Notes: {', '.join(notes)}\n" if notes else ""

    return (
        f"{header}\n"
        f"Pages: {outcome.document.page_count}\n"
        f"{note_line}"
        f"Structured:\n{structured}\n"
        f"Resume text:\n{outcome.clipped.text}"
    )


def build_screening_prompt(
    outcomes: List[ResumeParseOutcome],
    job_description: Optional[str] = None,
) -> str:
    """Render the screening prompt for a batch of parse outcomes."""
    candidates = "\n\n".join(
        _format_candidate(i, outcome) for i, outcome in enumerate(outcomes, start=1)
    )
    jd = (job_description or "").strip() or NO_JOB_DESCRIPTION

    return (
        SCREENING_PROMPT
        .replace("{job_description}", jd)
        .replace("{candidates}", candidates)
    )


def screen_resumes_with_claude(
    prompt: str,
    api_key: str = None,
) -> Tuple[str, dict]:
    """
    Send the screening prompt to Claude.

    Returns:
        (commentary, token_usage)
    """
    if api_key is None:
        api_key = config.ANTHROPIC_API_KEY

    client = anthropic.Anthropic(api_key=api_key)

    response = client.messages.create(
        model=config.SCREENING_MODEL,
        max_tokens=config.SCREENING_MAX_TOKENS,
        messages=[{"role": "user", "content": prompt}],
    )

    commentary = "".join(
        getattr(block, "text", "") for block in response.content
    ).strip()

    token_usage = {
        "input_tokens": response.usage.input_tokens,
        "output_tokens": response.usage.output_tokens,
        "total_tokens": response.usage.input_tokens + response.usage.output_tokens,
    }

    return commentary, token_usage


async def screen_resumes(
    outcomes: List[ResumeParseOutcome],
    job_description: Optional[str] = None,
) -> Tuple[str, dict]:
    """
    Full screening step: prompt -> Claude -> commentary.

    Raises:
        ScreeningError: If none of the outcomes has readable text.
    """
    if not any(outcome.ok for outcome in outcomes):
        raise ScreeningError("None of the selected resumes could be read.")

    prompt = build_screening_prompt(outcomes, job_description)
    logger.info(
        "Screening %d resume(s), prompt length %d chars", len(outcomes), len(prompt)
    )
    return await asyncio.to_thread(screen_resumes_with_claude, prompt)
