"""
Heading-based section segmentation for resume text.

Resumes have no reliable layout once flattened to text, so sections are
found by keyword headings (Chinese or English) and bounded by the next
short heading-looking line, a blank line, or a hard line cap.
"""

import re
from typing import List, Pattern, Sequence

# Tunable thresholds
SECTION_HEADING_MAX_CHARS = 20
SECTION_MAX_LINES = 14

SKILLS_HEADING = re.compile(r"(技能|技术栈|能力标签|skills?)", re.IGNORECASE)
PROJECTS_HEADING = re.compile(r"(项目|projects?)", re.IGNORECASE)
INTERNSHIP_HEADING = re.compile(r"(实习|工作经历|experience|intern)", re.IGNORECASE)

# Any line that looks like the start of another section
SECTION_BOUNDARY = re.compile(
    r"(教育|技能|项目|实习|经历|工作|荣誉|证书|自我评价|"
    r"objective|education|skills|projects|experience)",
    re.IGNORECASE,
)


def _looks_like_heading(line: str) -> bool:
    return bool(SECTION_BOUNDARY.search(line)) and len(line) <= SECTION_HEADING_MAX_CHARS


def extract_section_lines(lines: Sequence[str], heading_pattern: Pattern) -> List[str]:
    """
    Return the lines under the first heading matching heading_pattern.

    Accumulation starts on the line after the heading and stops at:
      - a blank line, once at least one line has been collected
        (leading blank lines are skipped)
      - a short heading-looking line, once more than one line has been
        collected
      - SECTION_MAX_LINES collected lines

    Returns [] when no line matches the heading.
    """
    start = next(
        (i for i, line in enumerate(lines) if heading_pattern.search(line)),
        None,
    )
    if start is None:
        return []

    section: List[str] = []
    for raw in lines[start + 1:]:
        line = (raw or "").strip()

        if not line:
            if section:
                break
            continue

        if len(section) > 1 and _looks_like_heading(line):
            break

        section.append(line)

        if len(section) >= SECTION_MAX_LINES:
            break

    return section
