"""
Unit tests for heading-based section segmentation.
"""

from app.services.sections import (
    INTERNSHIP_HEADING,
    PROJECTS_HEADING,
    SECTION_MAX_LINES,
    SKILLS_HEADING,
    extract_section_lines,
)


class TestExtractSectionLines:
    """Tests for extract_section_lines()."""

    def test_no_heading_returns_empty(self):
        lines = ["李雷", "清华大学", "本科"]
        assert extract_section_lines(lines, SKILLS_HEADING) == []

    def test_empty_input_returns_empty(self):
        assert extract_section_lines([], PROJECTS_HEADING) == []

    def test_collects_lines_after_heading(self):
        lines = ["李雷", "专业技能", "Python、Go", "Docker / K8s"]
        assert extract_section_lines(lines, SKILLS_HEADING) == ["Python、Go", "Docker / K8s"]

    def test_heading_matched_case_insensitively(self):
        lines = ["SKILLS", "Python, SQL"]
        assert extract_section_lines(lines, SKILLS_HEADING) == ["Python, SQL"]

    def test_first_matching_heading_wins(self):
        lines = ["Skills", "Python", "", "Skills again", "Rust"]
        assert extract_section_lines(lines, SKILLS_HEADING) == ["Python"]

    def test_blank_line_ends_section_after_content(self):
        lines = ["Projects", "Built a compiler", "", "Unrelated footer"]
        assert extract_section_lines(lines, PROJECTS_HEADING) == ["Built a compiler"]

    def test_leading_blank_lines_are_skipped(self):
        lines = ["Projects", "", "  ", "Built a compiler", "Wrote a shell"]
        assert extract_section_lines(lines, PROJECTS_HEADING) == [
            "Built a compiler",
            "Wrote a shell",
        ]

    def test_lines_are_trimmed(self):
        lines = ["项目经历", "   搭建推荐系统   "]
        assert extract_section_lines(lines, PROJECTS_HEADING) == ["搭建推荐系统"]

    def test_short_heading_stops_after_two_lines(self):
        lines = [
            "项目经历",
            "电商推荐系统",
            "负责召回与排序模块",
            "教育背景",
            "清华大学",
        ]
        assert extract_section_lines(lines, PROJECTS_HEADING) == [
            "电商推荐系统",
            "负责召回与排序模块",
        ]

    def test_heading_like_line_kept_when_section_has_one_line(self):
        """The boundary check only applies once more than one line is collected."""
        lines = ["Projects", "Chat app", "Experience", "Internship at ACME"]
        assert extract_section_lines(lines, PROJECTS_HEADING) == [
            "Chat app",
            "Experience",
            "Internship at ACME",
        ]

    def test_long_line_with_keyword_does_not_stop(self):
        """A sentence mentioning a keyword is content, not a heading."""
        long_line = "Led the projects team that rebuilt the education portal in React"
        assert len(long_line) > 20
        lines = ["Projects", "Portal rewrite", "Search service", long_line, "More"]
        assert extract_section_lines(lines, PROJECTS_HEADING) == [
            "Portal rewrite",
            "Search service",
            long_line,
            "More",
        ]

    def test_hard_cap_on_line_count(self):
        lines = ["Projects"] + [f"bullet point number {i}" for i in range(40)]
        section = extract_section_lines(lines, PROJECTS_HEADING)
        assert len(section) == SECTION_MAX_LINES == 14
        assert section[0] == "bullet point number 0"

    def test_skills_pattern_does_not_start_at_internship_heading(self):
        lines = ["实习经历", "字节跳动 后端实习", "技能", "Go、MySQL"]
        assert extract_section_lines(lines, SKILLS_HEADING) == ["Go、MySQL"]

    def test_internship_heading_english(self):
        lines = ["Work Experience", "Backend intern at ACME", "Built billing APIs"]
        assert extract_section_lines(lines, INTERNSHIP_HEADING) == [
            "Backend intern at ACME",
            "Built billing APIs",
        ]

    def test_heading_at_last_line_returns_empty(self):
        assert extract_section_lines(["李雷", "技能"], SKILLS_HEADING) == []
