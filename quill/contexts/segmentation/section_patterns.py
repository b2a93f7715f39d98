"""
Pattern matching for résumé section identification.

Header patterns are tested in a fixed order and the first match wins, so a
line that could plausibly introduce two sections always lands in the same one
("Career Objective" is experience because experience is tested before any
later archetype, "Qualifications" is education because education precedes
skills).

Pattern classes share one convention:
- Dataclasses with frozen=True for immutability
- Class-level constants for patterns
- Helper functions that use these patterns
"""

import re
from dataclasses import dataclass
from typing import Optional


# =============================================================================
# SECTION HEADER PATTERNS
# =============================================================================

# Header text (before any colon) longer than this is treated as prose
MAX_HEADER_LENGTH = 50

# More words than this between the header keyword and any colon make the line prose
MAX_HEADER_EXTRA_WORDS = 3


@dataclass(frozen=True)
class SectionHeaderPatterns:
    """
    Ordered (section name, pattern) pairs for section headers.

    Patterns are matched against the cleaned header text (markdown markers and
    trailing colon removed), case-insensitively, anchored at the start.
    """

    ORDERED: tuple = (
        ("contact", re.compile(r"^(?:contact|personal information|details)\b", re.IGNORECASE)),
        (
            "summary",
            re.compile(
                r"^(?:summary|objective|profile|about me|professional summary)\b", re.IGNORECASE
            ),
        ),
        (
            "experience",
            re.compile(
                r"^(?:experience|employment|work history|professional experience|career)\b",
                re.IGNORECASE,
            ),
        ),
        (
            "education",
            re.compile(r"^(?:education|academic|qualifications|degrees)\b", re.IGNORECASE),
        ),
        (
            "skills",
            re.compile(
                r"^(?:skills|competencies|technical skills|expertise|technologies)\b",
                re.IGNORECASE,
            ),
        ),
        (
            "certifications",
            re.compile(r"^(?:certifications|certificates|licenses|credentials)\b", re.IGNORECASE),
        ),
        (
            "projects",
            re.compile(
                r"^(?:projects|portfolio|achievements|accomplishments)\b", re.IGNORECASE
            ),
        ),
    )

    # Markdown decoration around a header: "## Skills", "**Skills:**"
    DECORATION: re.Pattern = re.compile(r"^[#*_\s]+|[*_:\s]+$")


SECTION_ORDER = tuple(name for name, _ in SectionHeaderPatterns.ORDERED)

# Sections whose content is a list of items rather than free text
TEXT_SECTIONS = frozenset({"contact", "summary"})
LIST_SECTIONS = frozenset(SECTION_ORDER) - TEXT_SECTIONS


# =============================================================================
# LIST ITEM PATTERNS
# =============================================================================


@dataclass(frozen=True)
class ListItemPatterns:
    """
    Heuristics that mark a line as the start of a new list item.

    Lines that match none of these continue the previous item.
    """

    BULLET: re.Pattern = re.compile(r"^[\-\*•]\s+")
    NUMBERED: re.Pattern = re.compile(r"^\d+\.\s+")
    LEADING_YEAR: re.Pattern = re.compile(r"^\d{4}")
    MONTH_YEAR: re.Pattern = re.compile(r"^[A-Z][a-z]+\.?\s+\d{4}")

    ALL: tuple = (BULLET, NUMBERED, LEADING_YEAR, MONTH_YEAR)


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================


def clean_header_text(line: str) -> str:
    """
    Strip markdown decoration and a trailing colon from a candidate header.

    Example:
        >>> clean_header_text("## Work History:")
        'Work History'
    """
    return SectionHeaderPatterns.DECORATION.sub("", line.strip())


def parse_header(line: str) -> Optional[tuple[str, str]]:
    """
    Recognize a section header and any content carried on the same line.

    Content is the text after a colon ("Skills: Python, SQL" -> "Python, SQL").
    A line with more than MAX_HEADER_EXTRA_WORDS words between the header
    keyword and any colon is prose ("Career highlights include a 2x speedup").

    Returns:
        (section name, content) with content possibly empty, or None
    """
    stripped = line.strip()
    head, colon, after = stripped.partition(":")
    if not head.strip() or len(head.strip()) > MAX_HEADER_LENGTH:
        return None

    cleaned = clean_header_text(head)
    for section_name, pattern in SectionHeaderPatterns.ORDERED:
        match = pattern.match(cleaned)
        if not match:
            continue
        if len(cleaned[match.end() :].split()) > MAX_HEADER_EXTRA_WORDS:
            return None
        return section_name, after.strip(" *_") if colon else ""
    return None


def match_section_header(line: str) -> Optional[str]:
    """Return the section name a line introduces, or None if it is not a header."""
    header = parse_header(line)
    return header[0] if header else None


def starts_new_item(line: str) -> bool:
    """True if a stripped line begins a new list item."""
    return any(pattern.match(line) for pattern in ListItemPatterns.ALL)


def strip_bullet(line: str) -> str:
    """Remove a leading bullet marker ('-', '*', '•') from an item line."""
    return ListItemPatterns.BULLET.sub("", line, count=1)
