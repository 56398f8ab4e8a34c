"""
Heuristic field extraction for resume text.

Each field has its own pure function taking normalized resume text and
returning a value or None (lists return []). No rule raises: anything that
does not match is simply absent from the record.

Public API:
  extract_resume_structured_info(text) -> ResumeStructuredInfo
"""

import logging
import re
from typing import List, Optional, Pattern

from app.models.resume import (
    MAX_HIGHLIGHTS,
    MAX_LINKS,
    MAX_SKILLS,
    ResumeStructuredInfo,
    unique_strings,
)
from app.services.sections import (
    INTERNSHIP_HEADING,
    PROJECTS_HEADING,
    SKILLS_HEADING,
    extract_section_lines,
)

logger = logging.getLogger(__name__)

# Candidate name is only looked for in the header region
NAME_SEARCH_LINES = 8

SKILL_MIN_CHARS = 2
SKILL_MAX_CHARS = 30

_CHINESE_NAME_RE = re.compile(r"^[\u4e00-\u9fa5]{2,4}$")
_LATIN_NAME_RE = re.compile(r"^[A-Za-z]+(?:\s+[A-Za-z]+){1,2}$")
_EMAIL_RE = re.compile(r"([a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,})")
_CN_MOBILE_RE = re.compile(r"((?:\+?86[-\s]?)?1[3-9]\d{9})")
_GENERIC_PHONE_RE = re.compile(r"(\+?\d[\d\s-]{7,}\d)")
_SCHOOL_RE = re.compile(r"(大学|学院|University|College|School)", re.IGNORECASE)
_EDUCATION_RE = re.compile(r"(本科|硕士|博士|大专|Bachelor|Master|PhD|BSc|MSc)", re.IGNORECASE)
_DEGREE_RE = re.compile(
    r"(本科|硕士|博士|大专|Bachelor(?:'s)?|Master(?:'s)?|PhD|BSc|MSc)",
    re.IGNORECASE,
)
_MAJOR_LABEL_RE = re.compile(r"(?:专业|Major)[:：]?\s*([^\n，,;；]{2,40})", re.IGNORECASE)
_MAJOR_KEYWORD_RE = re.compile(r"(计算机|软件工程|信息管理|电子|数学|统计|金融|会计)", re.IGNORECASE)
_GRADUATE_YEAR_RE = re.compile(r"(20\d{2})\s*(?:年)?\s*(?:毕业|graduate)", re.IGNORECASE)
_CLASS_YEAR_RE = re.compile(r"(20\d{2})\s*(?:届|级)")
_SKILL_SPLIT_RE = re.compile(r"[、,，;；/|·]")
_LINK_RE = re.compile(r"(https?://[^\s)]+)")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def resume_lines(text: str) -> List[str]:
    """Trimmed, non-blank lines of the text."""
    return [line.strip() for line in text.split("\n") if line.strip()]


def section_source_lines(text: str) -> List[str]:
    """Trimmed lines with blanks kept, so a blank line can close a section."""
    return [line.strip() for line in text.split("\n")]


def first_regex_match(text: str, pattern: Pattern, group: int = 1) -> Optional[str]:
    """Return the trimmed capture group of the first match, or None."""
    match = pattern.search(text)
    if not match:
        return None
    value = (match.group(group) or "").strip()
    return value or None


def _first_line_matching(lines: List[str], pattern: Pattern) -> Optional[str]:
    return next((line for line in lines if pattern.search(line)), None)


# ---------------------------------------------------------------------------
# Field rules
# ---------------------------------------------------------------------------

def extract_candidate_name(text: str) -> Optional[str]:
    """A 2-4 character Chinese name or a 2-3 word Latin name in the header."""
    top_lines = resume_lines(text)[:NAME_SEARCH_LINES]
    for pattern in (_CHINESE_NAME_RE, _LATIN_NAME_RE):
        for line in top_lines:
            if pattern.match(line):
                return line
    return None


def extract_email(text: str) -> Optional[str]:
    return first_regex_match(text, _EMAIL_RE)


def extract_phone(text: str) -> Optional[str]:
    """Chinese mobile number first, then any long international-looking digit run."""
    return first_regex_match(text, _CN_MOBILE_RE) or first_regex_match(text, _GENERIC_PHONE_RE)


def extract_school(text: str) -> Optional[str]:
    return _first_line_matching(resume_lines(text), _SCHOOL_RE)


def extract_education(text: str) -> Optional[str]:
    """The whole line mentioning a degree level."""
    return _first_line_matching(resume_lines(text), _EDUCATION_RE)


def extract_degree(text: str) -> Optional[str]:
    """Just the degree token, e.g. "本科" or "Master's"."""
    return first_regex_match(text, _DEGREE_RE)


def extract_major(text: str) -> Optional[str]:
    """Prefer an explicit "专业:"/"Major:" value, else a line naming a common major."""
    return (
        first_regex_match(text, _MAJOR_LABEL_RE)
        or _first_line_matching(resume_lines(text), _MAJOR_KEYWORD_RE)
    )


def extract_graduation_year(text: str) -> Optional[str]:
    return first_regex_match(text, _GRADUATE_YEAR_RE) or first_regex_match(text, _CLASS_YEAR_RE)


def extract_skills(text: str) -> List[str]:
    """
    Split the skills section on list delimiters.

    Tokens shorter than SKILL_MIN_CHARS or longer than SKILL_MAX_CHARS are
    dropped; the rest are deduplicated in order and capped at MAX_SKILLS.
    """
    section = extract_section_lines(section_source_lines(text), SKILLS_HEADING)
    if not section:
        return []

    tokens = [token.strip() for token in _SKILL_SPLIT_RE.split(" ".join(section))]
    tokens = [t for t in tokens if SKILL_MIN_CHARS <= len(t) <= SKILL_MAX_CHARS]
    return unique_strings(tokens)[:MAX_SKILLS]


def extract_project_highlights(text: str) -> List[str]:
    section = extract_section_lines(section_source_lines(text), PROJECTS_HEADING)
    return unique_strings(section)[:MAX_HIGHLIGHTS]


def extract_internship_highlights(text: str) -> List[str]:
    section = extract_section_lines(section_source_lines(text), INTERNSHIP_HEADING)
    return unique_strings(section)[:MAX_HIGHLIGHTS]


def extract_links(text: str) -> List[str]:
    """Every http(s) URL in the document, in order of appearance."""
    return unique_strings(_LINK_RE.findall(text))[:MAX_LINKS]


# ---------------------------------------------------------------------------
# Aggregate
# ---------------------------------------------------------------------------

def extract_resume_structured_info(text: str) -> ResumeStructuredInfo:
    """
    Run every field rule over normalized resume text.

    Fields are extracted independently; one missing field never affects
    another.
    """
    info = ResumeStructuredInfo(
        candidate_name=extract_candidate_name(text),
        degree=extract_degree(text),
        education=extract_education(text),
        email=extract_email(text),
        graduation_year=extract_graduation_year(text),
        internship_highlights=extract_internship_highlights(text),
        links=extract_links(text),
        major=extract_major(text),
        phone=extract_phone(text),
        project_highlights=extract_project_highlights(text),
        school=extract_school(text),
        skills=extract_skills(text),
    )

    missing = [
        name for name, value in info.model_dump().items()
        if value is None or value == []
    ]
    if missing:
        logger.debug("Resume fields not found: %s", ", ".join(missing))

    return info
