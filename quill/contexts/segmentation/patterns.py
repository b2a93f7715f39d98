"""
Regex patterns and vocabularies for document metadata extraction.

Pattern classes follow the convention from section_patterns.py:
frozen dataclasses with compiled class-level constants.
"""

import re
from dataclasses import dataclass

# =============================================================================
# CONTACT PATTERNS
# =============================================================================


@dataclass(frozen=True)
class ContactPatterns:
    """Patterns for contact details found anywhere in the document."""

    EMAIL: re.Pattern = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")

    # Candidate phone run; accepted only with at least MIN_PHONE_DIGITS digits
    PHONE: re.Pattern = re.compile(r"\+?\(?\d[\d\s\-\(\)\.]{8,}\d")

    LINKEDIN: re.Pattern = re.compile(r"linkedin\.com/in/[a-zA-Z0-9\-]+", re.IGNORECASE)
    GITHUB: re.Pattern = re.compile(r"github\.com/[a-zA-Z0-9\-]+", re.IGNORECASE)
    URL: re.Pattern = re.compile(r"https?://\S+|www\.\S+", re.IGNORECASE)

    # "Jane Q. Public": two to four capitalized words
    NAME: re.Pattern = re.compile(r"^[A-Z][a-zA-Z'\-]+(?:\s+[A-Z][a-zA-Z'\-\.]*){1,3}$")


MIN_PHONE_DIGITS = 10

# =============================================================================
# EXPERIENCE PATTERNS
# =============================================================================


@dataclass(frozen=True)
class ExperiencePatterns:
    """Patterns for estimating years of experience."""

    YEAR: re.Pattern = re.compile(r"\b(19[5-9]\d|20\d{2})\b")
    EXPLICIT_YEARS: re.Pattern = re.compile(
        r"(\d{1,2})\+?\s*years?\s+(?:of\s+)?(?:professional\s+)?experience", re.IGNORECASE
    )


MAX_EXPERIENCE_YEARS = 50

# =============================================================================
# SKILL VOCABULARY
# =============================================================================

# Skill list separators inside a skills section item
SKILL_SEPARATORS = re.compile(r"[,;|•]")

# Fixed technical vocabulary recognized anywhere in the text
TECHNICAL_KEYWORDS = (
    "javascript",
    "typescript",
    "python",
    "java",
    "c++",
    "c#",
    "golang",
    "rust",
    "ruby",
    "php",
    "swift",
    "kotlin",
    "sql",
    "react",
    "angular",
    "vue",
    "node.js",
    "django",
    "flask",
    "fastapi",
    "spring",
    "express",
    "aws",
    "azure",
    "gcp",
    "docker",
    "kubernetes",
    "terraform",
    "jenkins",
    "git",
    "linux",
    "postgresql",
    "mysql",
    "mongodb",
    "redis",
    "graphql",
    "rest api",
    "microservices",
    "machine learning",
    "data analysis",
    "agile",
    "scrum",
    "ci/cd",
    "devops",
)


def keyword_pattern(keyword: str) -> re.Pattern:
    """
    Case-insensitive whole-word pattern for a keyword.

    Keywords with symbols ("c++", "node.js") use lookarounds instead of \\b,
    which does not anchor next to non-word characters.
    """
    return re.compile(rf"(?<![\w]){re.escape(keyword)}(?![\w])", re.IGNORECASE)
