"""
Pydantic models for resume attachments, parsed documents and the
structured candidate record.
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

PDF_MEDIA_TYPE = "application/pdf"

# Caps on list fields of the structured record
MAX_SKILLS = 18
MAX_HIGHLIGHTS = 6
MAX_LINKS = 6


def unique_strings(items: List[str]) -> List[str]:
    """Trim, drop blanks and drop repeats, keeping first-seen order."""
    seen: set = set()
    output: List[str] = []
    for item in items:
        value = item.strip()
        if not value or value in seen:
            continue
        seen.add(value)
        output.append(value)
    return output


# ---------------------------------------------------------------------------
# Chat history (the subset the pipeline reads)
# ---------------------------------------------------------------------------

class MessagePart(BaseModel):
    """One part of a chat message. Only file parts matter here."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    type: str
    media_type: Optional[str] = Field(default=None, alias="mediaType")
    filename: Optional[str] = None
    url: Optional[str] = None


class ChatMessage(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    role: str
    parts: List[MessagePart] = []


# ---------------------------------------------------------------------------
# Pipeline value objects
# ---------------------------------------------------------------------------

class UploadedResumePdf(BaseModel):
    """A PDF attachment reference: identity and locator, no bytes."""
    model_config = ConfigDict(frozen=True)

    id: str
    filename: str
    media_type: str = PDF_MEDIA_TYPE
    url: str


class DecodedPdf(BaseModel):
    """Raw decoder output: page count and text per page."""
    model_config = ConfigDict(frozen=True)

    page_count: int = Field(ge=1)
    pages: List[str] = []


class ParsedResumePdf(BaseModel):
    model_config = ConfigDict(frozen=True)

    filename: str
    id: str
    page_count: int = Field(ge=1)
    text: str
    total_text_chars: int


class ClippedText(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    truncated: bool = False


class ResumeStructuredInfo(BaseModel):
    """
    Heuristically extracted candidate fields.

    String fields are either a trimmed non-empty value or None. List fields
    are deduplicated (order preserved) and capped.
    """
    model_config = ConfigDict(frozen=True)

    candidate_name: Optional[str] = None
    degree: Optional[str] = None
    education: Optional[str] = None
    email: Optional[str] = None
    graduation_year: Optional[str] = None
    internship_highlights: List[str] = []
    links: List[str] = []
    major: Optional[str] = None
    phone: Optional[str] = None
    project_highlights: List[str] = []
    school: Optional[str] = None
    skills: List[str] = []

    @field_validator(
        "candidate_name", "degree", "education", "email",
        "graduation_year", "major", "phone", "school",
    )
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None

    @field_validator("skills")
    @classmethod
    def cap_skills(cls, v: List[str]) -> List[str]:
        return unique_strings(v)[:MAX_SKILLS]

    @field_validator("internship_highlights", "project_highlights")
    @classmethod
    def cap_highlights(cls, v: List[str]) -> List[str]:
        return unique_strings(v)[:MAX_HIGHLIGHTS]

    @field_validator("links")
    @classmethod
    def cap_links(cls, v: List[str]) -> List[str]:
        return unique_strings(v)[:MAX_LINKS]


class ResumeParseOutcome(BaseModel):
    """
    Result for one selected attachment.

    Either document/structured/clipped are set (success) or
    error_code/error are set (the file could not be read).
    """
    file: UploadedResumePdf
    document: Optional[ParsedResumePdf] = None
    structured: Optional[ResumeStructuredInfo] = None
    clipped: Optional[ClippedText] = None
    error_code: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.document is not None


# ---------------------------------------------------------------------------
# API request / response bodies
# ---------------------------------------------------------------------------

class ResumeFilesRequest(BaseModel):
    messages: List[ChatMessage] = []


class ResumeParseRequest(BaseModel):
    messages: List[ChatMessage] = []
    resume_name: Optional[str] = None
    max_chars: Optional[int] = Field(default=None, gt=0)


class ScreeningRequest(ResumeParseRequest):
    job_description: Optional[str] = None


class ResumeParseResponse(BaseModel):
    files: List[UploadedResumePdf]
    results: List[ResumeParseOutcome]


class ScreeningResponse(BaseModel):
    results: List[ResumeParseOutcome]
    commentary: str
    token_usage: Dict[str, Any] = {}
