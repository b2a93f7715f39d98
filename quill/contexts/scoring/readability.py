"""
Readability metrics for the Scoring context.

The default source of the readability dimension used by the aggregator.
Computes the classic formulas (Flesch reading ease, Flesch-Kincaid grade,
Gunning fog, SMOG, ARI, Coleman-Liau) with textstat over a cleaned copy of
the text and turns them into a 0-100 score aimed at business writing: reading ease
between 50 and 80 and a grade level between 8 and 12 lose nothing.
"""

import re
from dataclasses import asdict, dataclass, field
from types import MappingProxyType
from typing import Optional

import textstat

from quill.contexts.scoring.logger import log_readability_result
from quill.utils.config import load_scoring_config
from quill.utils.scores import round_half_up
from quill.utils.text_processing import match_case

# =============================================================================
# VOCABULARIES AND PATTERNS
# =============================================================================

# Long words that professional readers handle without effort
COMMON_LONG_WORDS = frozenset(
    {
        "experience",
        "management",
        "development",
        "professional",
        "responsible",
        "successful",
        "implement",
        "coordinate",
        "communicate",
        "collaborate",
        "organize",
        "analyze",
    }
)

JARGON_WORDS = (
    "synergy",
    "leverage",
    "paradigm",
    "holistic",
    "robust",
    "cutting-edge",
    "revolutionary",
    "disruptive",
    "innovative",
)

REDUNDANT_PHRASES = (
    "in order to",
    "due to the fact that",
    "at this point in time",
    "each and every",
    "first and foremost",
    "basic fundamentals",
)

# Wordy term -> plain replacement, applied by simplify_text
SIMPLER_WORDS = MappingProxyType(
    {
        "utilize": "use",
        "implement": "set up",
        "facilitate": "help",
        "demonstrate": "show",
        "collaborate": "work with",
        "optimize": "improve",
        "leverage": "use",
        "comprehensive": "complete",
        "methodology": "method",
        "functionality": "function",
    }
)
SIMPLER_WORD_PATTERN = re.compile(
    r"\b(" + "|".join(map(re.escape, SIMPLER_WORDS)) + r")\b", re.IGNORECASE
)

CLEANUP_PATTERNS = (
    re.compile(r"[•·▪▫◦‣⁃]"),
    re.compile(r"https?://[^\s]+"),
    re.compile(r"[\w._%+-]+@[\w.-]+\.[A-Z]{2,}", re.IGNORECASE),
    re.compile(r"\d{3}-\d{3}-\d{4}"),
)

SENTENCE_SPLIT = re.compile(r"[.!?]+")
PASSIVE_VOICE = re.compile(r"\b(?:was|were|been|being)\s+\w+ed\b", re.IGNORECASE)

LENGTHY_SENTENCE_WORDS = 20
TOO_LONG_SENTENCE_WORDS = 30
COMPLEX_WORD_LIMIT = 10
PASSIVE_LIMIT = 5
JARGON_LIMIT = 3
MAX_GRADE = 20.0

# =============================================================================
# REPORT STRUCTURES
# =============================================================================


@dataclass(frozen=True)
class ReadabilityMetrics:
    flesch_reading_ease: float = 0.0
    flesch_kincaid_grade: float = 0.0
    gunning_fog: float = 0.0
    smog_index: float = 0.0
    automated_readability_index: float = 0.0
    coleman_liau_index: float = 0.0

    def grades(self) -> tuple:
        return (
            self.flesch_kincaid_grade,
            self.gunning_fog,
            self.smog_index,
            self.automated_readability_index,
            self.coleman_liau_index,
        )

    def to_dict(self) -> dict:
        return {key: round(value, 2) for key, value in asdict(self).items()}


@dataclass(frozen=True)
class TextAnalysis:
    total_words: int = 0
    total_sentences: int = 0
    total_syllables: int = 0
    total_letters: int = 0
    average_words_per_sentence: float = 0.0
    average_syllables_per_word: float = 0.0
    complex_words: int = 0
    long_sentences: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class ReadabilityIssue:
    level: str  # "error", "warning" or "info"
    text: str
    issue: str
    suggestion: str
    location: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class ReadabilityReport:
    overall_score: int
    grade_level: int
    metrics: ReadabilityMetrics = field(default_factory=ReadabilityMetrics)
    analysis: TextAnalysis = field(default_factory=TextAnalysis)
    issues: tuple = ()
    suggestions: tuple = ()
    target_audience: str = ""

    def to_dict(self) -> dict:
        return {
            "overall_score": self.overall_score,
            "grade_level": self.grade_level,
            "metrics": self.metrics.to_dict(),
            "analysis": self.analysis.to_dict(),
            "issues": [issue.to_dict() for issue in self.issues],
            "suggestions": list(self.suggestions),
            "target_audience": self.target_audience,
        }


# =============================================================================
# ANALYSIS
# =============================================================================


def clean_text(text: str) -> str:
    """Drop bullets, URLs, emails and phone numbers, then collapse whitespace."""
    for pattern in CLEANUP_PATTERNS:
        text = pattern.sub("", text)
    return re.sub(r"\s+", " ", text).strip()


def _is_complex(word: str, syllables: int) -> bool:
    return syllables >= 3 and word.lower().strip(".,;:!?") not in COMMON_LONG_WORDS


def analyze_text(text: str) -> TextAnalysis:
    sentences = [s for s in SENTENCE_SPLIT.split(text) if s.strip()]
    words = text.split()
    total_sentences = len(sentences) or 1
    total_words = textstat.lexicon_count(text) or 1

    total_syllables = 0
    complex_words = 0
    for word in words:
        syllables = textstat.syllable_count(word)
        total_syllables += syllables
        if _is_complex(word, syllables):
            complex_words += 1

    return TextAnalysis(
        total_words=total_words,
        total_sentences=total_sentences,
        total_syllables=total_syllables,
        total_letters=textstat.letter_count(text),
        average_words_per_sentence=total_words / total_sentences,
        average_syllables_per_word=total_syllables / total_words,
        complex_words=complex_words,
        long_sentences=sum(1 for s in sentences if len(s.split()) >= LENGTHY_SENTENCE_WORDS),
    )


def _grade(value: float) -> float:
    return max(0.0, min(MAX_GRADE, value))


def calculate_metrics(text: str) -> ReadabilityMetrics:
    """
    Standard readability formulas, via textstat.

    Reading ease is clamped to 0-100 and every grade to 0-MAX_GRADE, so text
    the formulas were never meant for (one long unbroken token) still yields
    numbers on the usual scale.
    """
    return ReadabilityMetrics(
        flesch_reading_ease=max(0.0, min(100.0, textstat.flesch_reading_ease(text))),
        flesch_kincaid_grade=_grade(textstat.flesch_kincaid_grade(text)),
        gunning_fog=_grade(textstat.gunning_fog(text)),
        smog_index=_grade(textstat.smog_index(text)),
        automated_readability_index=_grade(textstat.automated_readability_index(text)),
        coleman_liau_index=_grade(textstat.coleman_liau_index(text)),
    )


def determine_grade_level(metrics: ReadabilityMetrics) -> int:
    grades = metrics.grades()
    return round_half_up(sum(grades) / len(grades))


def calculate_overall_score(metrics: ReadabilityMetrics) -> int:
    """
    Start at 100, then penalize reading ease outside 50-80 and an average
    grade outside 8-12.
    """
    score = 100
    ease = metrics.flesch_reading_ease

    if ease < 30:
        score -= 30
    elif ease < 50:
        score -= 15
    elif ease > 80:
        score -= 10

    grades = metrics.grades()
    average_grade = sum(grades) / len(grades)
    if average_grade > 16:
        score -= 25
    elif average_grade > 12:
        score -= 10
    elif average_grade < 8:
        score -= 15

    return max(0, min(100, score))


def find_issues(text: str) -> list[ReadabilityIssue]:
    issues = []
    sentences = [s.strip() for s in SENTENCE_SPLIT.split(text) if s.strip()]

    for index, sentence in enumerate(sentences, 1):
        word_count = len(sentence.split())
        preview = sentence[:50] + "..." if len(sentence) > 50 else sentence
        if word_count > TOO_LONG_SENTENCE_WORDS:
            issues.append(
                ReadabilityIssue(
                    "error",
                    preview,
                    f"Sentence is too long ({word_count} words)",
                    "Break this into 2-3 shorter sentences",
                    f"Sentence {index}",
                )
            )
        elif word_count > LENGTHY_SENTENCE_WORDS:
            issues.append(
                ReadabilityIssue(
                    "warning",
                    preview,
                    f"Sentence is lengthy ({word_count} words)",
                    "Consider breaking this into shorter sentences",
                    f"Sentence {index}",
                )
            )

    complex_words = [
        word
        for word in text.split()
        if textstat.syllable_count(word) >= 4 and _is_complex(word, 4)
    ]
    if len(complex_words) > COMPLEX_WORD_LIMIT:
        issues.append(
            ReadabilityIssue(
                "warning",
                ", ".join(complex_words[:5]),
                "Too many complex words",
                "Replace complex words with simpler alternatives where possible",
            )
        )

    passive_count = len(PASSIVE_VOICE.findall(text))
    if passive_count > PASSIVE_LIMIT:
        issues.append(
            ReadabilityIssue(
                "info",
                "Multiple instances of passive voice",
                f"Found {passive_count} instances of passive voice",
                "Use active voice to make the writing more direct",
            )
        )

    lowered = text.lower()
    jargon = [word for word in JARGON_WORDS if word in lowered]
    if len(jargon) > JARGON_LIMIT:
        issues.append(
            ReadabilityIssue(
                "info",
                ", ".join(jargon),
                "Overuse of business jargon",
                "Replace jargon with clear, specific language",
            )
        )

    redundant = [phrase for phrase in REDUNDANT_PHRASES if phrase in lowered]
    if redundant:
        issues.append(
            ReadabilityIssue(
                "info",
                ", ".join(redundant),
                "Redundant phrases detected",
                'Simplify: "in order to" -> "to", "due to the fact that" -> "because"',
            )
        )

    return issues


def generate_suggestions(
    metrics: ReadabilityMetrics, analysis: TextAnalysis, target_role: Optional[str] = None
) -> list[str]:
    suggestions = []
    ease = metrics.flesch_reading_ease

    if ease < 30:
        suggestions.append("Simplify the writing; it is currently very difficult to read")
    elif ease < 50:
        suggestions.append("The writing is fairly complex; consider simplifying")
    elif ease > 80:
        suggestions.append("The writing might be too simple for a professional context")
    else:
        suggestions.append("The writing has good readability for professional documents")

    if analysis.average_words_per_sentence > LENGTHY_SENTENCE_WORDS:
        suggestions.append(
            f"Average sentence length is {round(analysis.average_words_per_sentence)} words; "
            f"aim for 15-18"
        )

    complex_share = analysis.complex_words / analysis.total_words * 100
    if complex_share > 15:
        suggestions.append(f"{round(complex_share)}% of words are complex; aim for under 10%")

    if target_role:
        role = target_role.lower()
        if "executive" in role or "senior" in role:
            if metrics.flesch_kincaid_grade < 10:
                suggestions.append(
                    "For executive roles, use more sophisticated language while staying clear"
                )
        elif "technical" in role or "engineer" in role:
            suggestions.append("Include role-relevant technical terms but explain complex concepts")
        elif "sales" in role or "marketing" in role:
            suggestions.append("Use persuasive, action-oriented language that is easy to scan")

    if analysis.long_sentences > 5:
        suggestions.append(f"{analysis.long_sentences} long sentences could be broken up")

    return suggestions


def determine_target_audience(grade_level: int, target_role: Optional[str] = None) -> str:
    if grade_level <= 8:
        audience = "General audience (very accessible)"
    elif grade_level <= 10:
        audience = "High school level (good for most positions)"
    elif grade_level <= 12:
        audience = "High school graduate (ideal for professional roles)"
    elif grade_level <= 14:
        audience = "College level (suitable for technical/professional roles)"
    elif grade_level <= 16:
        audience = "College graduate (appropriate for senior/technical roles)"
    else:
        audience = "Graduate level (may be too complex for most readers)"

    if target_role:
        role = target_role.lower()
        if ("executive" in role or "senior" in role) and 12 <= grade_level <= 16:
            audience += "; well-suited for executive positions"
        elif ("entry" in role or "junior" in role) and 10 <= grade_level <= 14:
            audience += "; appropriate for entry-level positions"

    return audience


def check_readability(text: Optional[str], target_role: Optional[str] = None) -> ReadabilityReport:
    """
    Measure readability.

    Args:
        text: Document text (None or blank yields the configured neutral score)
        target_role: Optional role title used to tailor suggestions and audience

    Returns:
        ReadabilityReport
    """
    cleaned = clean_text(text or "")
    if not cleaned:
        neutral = load_scoring_config()["aggregation"]["neutral_score"]
        return ReadabilityReport(overall_score=neutral, grade_level=0)

    analysis = analyze_text(cleaned)
    metrics = calculate_metrics(cleaned)
    grade_level = determine_grade_level(metrics)
    score = calculate_overall_score(metrics)

    log_readability_result(score, grade_level, metrics.flesch_reading_ease)

    return ReadabilityReport(
        overall_score=score,
        grade_level=grade_level,
        metrics=metrics,
        analysis=analysis,
        issues=tuple(find_issues(cleaned)),
        suggestions=tuple(generate_suggestions(metrics, analysis, target_role)),
        target_audience=determine_target_audience(grade_level, target_role),
    )


# =============================================================================
# SIMPLIFICATION
# =============================================================================


def simplify_text(text: Optional[str], target_grade_level: float = 10) -> str:
    """
    Swap wordy terms for plain ones when the text reads above a target grade.

    Replacements come from SIMPLER_WORDS and keep the case of the word they
    replace ("Utilize" -> "Use"). Text already at or below target_grade_level
    (Flesch-Kincaid) is returned unchanged.

    Args:
        text: Text to simplify (None yields "")
        target_grade_level: Flesch-Kincaid grade to aim for

    Returns:
        Simplified text
    """
    if not text:
        return ""
    if textstat.flesch_kincaid_grade(text) <= target_grade_level:
        return text

    return SIMPLER_WORD_PATTERN.sub(
        lambda match: match_case(match.group(0), SIMPLER_WORDS[match.group(0).lower()]), text
    )
