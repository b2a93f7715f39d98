"""
Unit tests for document segmentation.

Tests section splitting, list item grouping and metadata extraction in
quill.contexts.segmentation.
"""

import pytest

from quill.contexts.segmentation import (
    DocumentType,
    ParsedSections,
    SegmentedDocument,
    extract_contact_info,
    extract_experience_years,
    extract_skills,
    segment_document,
)
from quill.contexts.segmentation.section_patterns import (
    clean_header_text,
    match_section_header,
    parse_header,
    starts_new_item,
)
from quill.contexts.segmentation.segmenter import extract_sections, lines_to_items


@pytest.mark.unit
class TestMatchSectionHeader:
    """Tests for match_section_header function."""

    def test_plain_headers(self):
        """Test canonical header words map to their sections."""
        assert match_section_header("Experience") == "experience"
        assert match_section_header("EDUCATION") == "education"
        assert match_section_header("Technical Skills") == "skills"

    def test_markdown_decoration(self):
        """Test markdown markers and trailing colons are ignored."""
        assert match_section_header("## Work History:") == "experience"
        assert match_section_header("**Projects**") == "projects"

    def test_first_match_wins(self):
        """Test ambiguous headers always land in the earlier archetype."""
        assert match_section_header("Professional Summary") == "summary"
        assert match_section_header("Qualifications") == "education"

    def test_inline_content_after_colon(self):
        """Test 'Skills: ...' is a header even when the whole line is long."""
        line = "Skills: Python, SQL, Docker, Kubernetes, PostgreSQL, Redis, Terraform"
        assert match_section_header(line) == "skills"

    def test_prose_is_not_a_header(self):
        """Test long lines and ordinary sentences are rejected."""
        assert match_section_header("Led a team of engineers across three regions") is None
        assert match_section_header("Experience " + "x" * 60) is None
        assert match_section_header("") is None

    def test_keyword_followed_by_prose_is_not_a_header(self):
        """Test a sentence that merely starts with a header keyword stays prose."""
        assert match_section_header("Career highlights include a 2x speedup") is None
        assert match_section_header("Experience with Docker and Terraform:") is None
        assert match_section_header("Education & Training") == "education"

    def test_parse_header_returns_inline_content(self):
        """Test parse_header pairs the section with the text after the colon."""
        assert parse_header("**Skills:** Python, SQL") == ("skills", "Python, SQL")
        assert parse_header("## Experience") == ("experience", "")
        assert parse_header("Led a team") is None

    def test_clean_header_text(self):
        """Test decoration stripping."""
        assert clean_header_text("## Work History:") == "Work History"


@pytest.mark.unit
class TestListItems:
    """Tests for list item grouping."""

    def test_bullets_start_items(self):
        """Test bullet lines start items and continuation lines join them."""
        items = lines_to_items(["- Built APIs", "in Python", "- Led team"])
        assert items == ["Built APIs in Python", "Led team"]

    def test_year_and_month_start_items(self):
        """Test lines beginning with a year or 'Month Year' start items."""
        assert starts_new_item("2019 - Present Engineer")
        assert starts_new_item("Jan 2020 - Dec 2021")
        assert starts_new_item("1. First item")
        assert not starts_new_item("continued description")

    def test_first_line_always_starts_item(self):
        """Test a section without markers still yields one item."""
        assert lines_to_items(["plain text", "more text"]) == ["plain text more text"]


@pytest.mark.unit
class TestExtractSections:
    """Tests for extract_sections function."""

    def test_preamble_becomes_contact(self):
        """Test lines before the first header form the contact block."""
        sections, warnings = extract_sections("Jane Doe\njane@example.com\n\nSkills\n- Python")
        assert sections["contact"] == ["Jane Doe", "jane@example.com"]
        assert sections["skills"] == ["- Python"]
        assert warnings == []

    def test_long_preamble_is_discarded_with_warning(self):
        """Test preamble lines past the contact window are dropped and reported."""
        text = "\n".join(["Line one", "Line two", "Line three", "Line four", "Line five"])
        text += "\nStray line six\nSkills\n- Python"
        sections, warnings = extract_sections(text)

        assert "Stray line six" not in sections["contact"]
        assert len(warnings) == 1
        assert "Stray line six" in warnings[0]

    def test_repeated_header_extends_section(self):
        """Test a header seen twice appends to the earlier section."""
        text = "Skills\n- Python\nEducation\n- BS\nSkills\n- Docker"
        sections, _ = extract_sections(text)
        assert sections["skills"] == ["- Python", "- Docker"]

    def test_inline_header_content_kept(self):
        """Test content after 'Header:' is kept as the first section line."""
        sections, _ = extract_sections("Skills: Python, SQL\n- Docker")
        assert sections["skills"] == ["Python, SQL", "- Docker"]

    def test_keyword_prose_line_kept_in_current_section(self):
        """Test a prose line starting with a header keyword is kept, not swallowed."""
        text = "Experience\n- Engineer, Acme\nCareer highlights include a 2x speedup\nSkills\n- Go"
        sections, _ = extract_sections(text)

        assert sections["experience"] == [
            "- Engineer, Acme",
            "Career highlights include a 2x speedup",
        ]
        assert sections["skills"] == ["- Go"]


@pytest.mark.unit
class TestSegmentDocument:
    """Tests for segment_document and SegmentedDocument."""

    def test_empty_text(self):
        """Test empty and None text yield an empty document without raising."""
        for text in ("", "   \n  ", None):
            document = segment_document(text)
            assert document.is_empty
            assert len(document.sections) == 0
            assert document.metadata.word_count == 0

    def test_sections_are_read_only(self):
        """Test ParsedSections rejects mutation."""
        document = segment_document("Skills\n- Python")
        with pytest.raises(TypeError):
            document.sections["skills"] = ("Rust",)

    def test_text_sections_and_list_sections(self):
        """Test summary stays text while experience becomes items."""
        text = "Summary\nBuilds data tools.\nExperience\n- Role one\n- Role two"
        document = segment_document(text)

        assert document.sections["summary"] == "Builds data tools."
        assert document.sections["experience"] == ("Role one", "Role two")
        assert document.sections.present() == ["summary", "experience"]

    def test_text_normalization_preserves_length(self):
        """Test tabs and carriage returns become spaces one for one."""
        text = "Skills\r\n-\tPython"
        document = segment_document(text)
        assert len(document.text) == len(text)
        assert "\t" not in document.text

    def test_from_text_factory(self):
        """Test SegmentedDocument.from_text delegates to segment_document."""
        document = SegmentedDocument.from_text("Skills\n- Python", "cover letter")
        assert document.document_type == DocumentType.COVER_LETTER
        assert "skills" in document.sections

    def test_unknown_document_type(self):
        """Test unknown document types coerce to OTHER."""
        assert segment_document("text", "memo").document_type == DocumentType.OTHER
        assert DocumentType.coerce(None) == DocumentType.OTHER
        assert DocumentType.coerce("Resume") == DocumentType.RESUME


@pytest.mark.unit
class TestMetadataExtraction:
    """Tests for contact, experience and skill extraction."""

    def test_contact_info(self):
        """Test name, email, phone and profile links."""
        text = (
            "John Smith\n"
            "john.smith@example.org | 555-987-6543\n"
            "github.com/jsmith\n"
            "Experience\n- Engineer"
        )
        contact = extract_contact_info(text, segment_document(text).sections)

        assert contact.name == "John Smith"
        assert contact.email == "john.smith@example.org"
        assert contact.phone == "555-987-6543"
        assert contact.github == "github.com/jsmith"
        assert contact.linkedin is None

    def test_short_digit_runs_are_not_phones(self):
        """Test digit runs shorter than a phone number are ignored."""
        contact = extract_contact_info("Jane Doe\nRoom 12345 678")
        assert contact.phone is None

    def test_experience_years_from_dates(self):
        """Test years span from the earliest year to the current year."""
        text = "Experience\n2015 - 2018 Analyst\n2018 - Present Engineer"
        sections = segment_document(text).sections
        assert extract_experience_years(text, sections, current_year=2025) == 10

    def test_experience_years_explicit_statement(self):
        """Test an explicit 'N years of experience' is used without dates."""
        assert extract_experience_years("Over 7 years of experience in data.") == 7

    def test_experience_years_capped(self):
        """Test the estimate never exceeds fifty years."""
        assert extract_experience_years("Since 1950", current_year=2025) == 50
        assert extract_experience_years("") == 0

    def test_skills_from_section_and_vocabulary(self):
        """Test skills section items are split and known keywords are added."""
        text = "Skills\n- Languages: Python, Rust; Go\nExperience\n- Deployed with Docker"
        skills = extract_skills(text, segment_document(text).sections)

        assert skills[:3] == ["Python", "Rust", "Go"]
        assert "docker" in [skill.lower() for skill in skills]
        # No duplicates, case-insensitively
        assert len({skill.lower() for skill in skills}) == len(skills)

    def test_parsed_sections_helpers(self):
        """Test text_of/items_of on text and list sections."""
        sections = ParsedSections({"summary": "Line one\nLine two", "skills": ["Python"]})
        assert sections.text_of("skills") == "Python"
        assert sections.items_of("summary") == ("Line one", "Line two")
        assert sections.text_of("projects") == ""
        assert sections.items_of("projects") == ()
