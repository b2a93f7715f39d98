"""
Patterns and vocabularies for keyword matching and ATS heuristics.

Pattern classes follow the convention from segmentation/patterns.py:
- Dataclasses with frozen=True for immutability
- Class-level constants for patterns
"""

import re
from dataclasses import dataclass

from quill.contexts.segmentation.patterns import TECHNICAL_KEYWORDS

# =============================================================================
# JOB KEYWORD VOCABULARY
# =============================================================================

# Terms recognized in free job text, on top of the résumé skill vocabulary
JOB_ONLY_KEYWORDS = (
    "nosql",
    "elasticsearch",
    "kanban",
    "jira",
    "github",
    "gitlab",
    "api",
    "serverless",
    "data science",
    "analytics",
)

JOB_KEYWORDS = TECHNICAL_KEYWORDS + JOB_ONLY_KEYWORDS

ACTION_VERBS = ("manage", "lead", "develop", "design", "implement", "optimize", "analyze")


@dataclass(frozen=True)
class JobRequirementPatterns:
    """Requirement phrases mapped to synthetic keywords."""

    YEARS_EXPERIENCE: re.Pattern = re.compile(
        r"(\d+)\+?\s*years?\s*(?:of\s*)?(?:experience|exp)\b", re.IGNORECASE
    )
    DEGREE: re.Pattern = re.compile(r"\b(?:bachelor|master|phd|degree)", re.IGNORECASE)


# =============================================================================
# ATS HEURISTIC PATTERNS
# =============================================================================


@dataclass(frozen=True)
class FormattingPatterns:
    BOX_DRAWING: re.Pattern = re.compile(r"[│┌└┐┘├┤─┬┴┼]")
    IMAGE: re.Pattern = re.compile(r"\.(?:jpg|jpeg|png|gif|bmp)\b|base64", re.IGNORECASE)
    PAGE_FOOTER: re.Pattern = re.compile(r"page \d+ of \d+", re.IGNORECASE)
    # Interior run of five or more spaces between text on one line
    COLUMN_GAP: re.Pattern = re.compile(r"(?<=\S) {5,}(?=\S)")
    FANCY_BULLET: re.Pattern = re.compile(r"[•·▪▫◦‣⁃]")
    SIMPLE_BULLET: re.Pattern = re.compile(r"^\s*[\*\-]\s", re.MULTILINE)


# Share of non-blank lines with a column gap above which a layout looks multi-column
COLUMN_LINE_RATIO = 0.3


@dataclass(frozen=True)
class StructurePatterns:
    EMAIL: re.Pattern = re.compile(r"[\w._%+-]+@[\w.-]+\.[A-Z]{2,}", re.IGNORECASE)
    PHONE: re.Pattern = re.compile(r"\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}")


ESSENTIAL_SECTIONS = ("experience", "education", "skills")
RECOMMENDED_SECTIONS = ("summary", "projects")
IDEAL_SECTION_ORDER = ("contact", "summary", "experience", "education", "skills")
MIN_SECTION_LENGTH = 20


@dataclass(frozen=True)
class ReadabilityHeuristicPatterns:
    SENTENCE_SPLIT: re.Pattern = re.compile(r"[.!?]+")
    PASSIVE_VOICE: re.Pattern = re.compile(
        r"\b(?:was|were|been|being|is|are|am)\s+\w+ed\b", re.IGNORECASE
    )
    NUMBER: re.Pattern = re.compile(r"\d+%?")


LONG_SENTENCE_WORDS = 25
PASSIVE_VOICE_LIMIT = 10
MIN_QUANTIFIED = 5
LONG_LINE_CHARS = 120
LONG_LINE_LIMIT = 5


@dataclass(frozen=True)
class CompatibilityPatterns:
    RTF: re.Pattern = re.compile(r"\\rtf|\\ansi")
    URL: re.Pattern = re.compile(r"https?://[^\s]+", re.IGNORECASE)
    FONT_MARKUP: re.Pattern = re.compile(r"font-family|font-size")
    STANDARD_DATES: tuple = (
        re.compile(r"\d{1,2}/\d{1,2}/\d{2,4}"),
        re.compile(r"\d{4}-\d{2}-\d{2}"),
        re.compile(
            r"\b(?:jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)\w*\.?\s+\d{4}", re.IGNORECASE
        ),
        re.compile(r"\b\d{1,2}/\d{4}\b"),
    )
    PRESENT: re.Pattern = re.compile(r"\bpresent\b", re.IGNORECASE)


URL_LIMIT = 5
MAX_WORDS = 1000
