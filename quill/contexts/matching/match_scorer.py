"""
Job keyword matching.

Compares the keywords a document offers with the keywords a job requires.
Matching is exact and case-insensitive: a required keyword is matched when it
is one of the document's keywords or appears as a whole word in the document
text. No stemming, no synonyms.

Example:
    >>> result = match_keywords(["Python", "SQL"], ["python", "docker"])
    >>> result.matched, result.missing, result.match_score
    (('python',), ('docker',), 50)
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional

from quill.contexts.matching.ats_patterns import (
    ACTION_VERBS,
    JOB_KEYWORDS,
    JobRequirementPatterns,
)
from quill.contexts.matching.logger import log_match_result
from quill.contexts.segmentation.patterns import keyword_pattern
from quill.utils.scores import round_half_up


@dataclass(frozen=True)
class MatchResult:
    """
    Attributes:
        matched: Required keywords found in the document
        missing: Required keywords not found
        additional: Document keywords the job did not ask for
        match_score: matched / (matched + missing) * 100, rounded; 0 with nothing required
    """

    matched: tuple = ()
    missing: tuple = ()
    additional: tuple = ()
    match_score: int = 0

    def to_dict(self) -> dict:
        return {
            "matched": list(self.matched),
            "missing": list(self.missing),
            "additional": list(self.additional),
            "match_score": self.match_score,
        }


@dataclass(frozen=True)
class JobContext:
    """Job information supplied alongside a document."""

    keywords: tuple = field(default_factory=tuple)
    description: Optional[str] = None

    @classmethod
    def from_inputs(
        cls, keywords: Optional[Iterable[str]] = None, description: Optional[str] = None
    ) -> Optional["JobContext"]:
        """Build a JobContext, or None when neither keywords nor description is given."""
        keywords = tuple(keywords or ())
        if not keywords and not (description and description.strip()):
            return None
        return cls(keywords=keywords, description=description)

    def required_keywords(self) -> list[str]:
        """Explicit keywords followed by those extracted from the description."""
        extracted = extract_job_keywords(self.description) if self.description else []
        return _dedupe(list(self.keywords) + extracted)


def _dedupe(keywords: Iterable[str]) -> list[str]:
    """Strip, drop blanks and de-duplicate case-insensitively, keeping first spelling."""
    seen = set()
    result = []
    for keyword in keywords:
        if not isinstance(keyword, str):
            continue
        cleaned = keyword.strip()
        if cleaned and cleaned.lower() not in seen:
            seen.add(cleaned.lower())
            result.append(cleaned)
    return result


def extract_job_keywords(text: Optional[str]) -> list[str]:
    """
    Derive keywords from free job text.

    Collects known technical terms, a "years of experience" marker when the
    text states a minimum number of years, "degree" when it mentions a degree,
    and a fixed set of action verbs.
    """
    if not text:
        return []

    found = [keyword for keyword in JOB_KEYWORDS if keyword_pattern(keyword).search(text)]

    if JobRequirementPatterns.YEARS_EXPERIENCE.search(text):
        found.append("years of experience")
    if JobRequirementPatterns.DEGREE.search(text):
        found.append("degree")

    lowered = text.lower()
    found.extend(verb for verb in ACTION_VERBS if verb in lowered)

    return _dedupe(found)


def match_keywords(
    document_keywords: Iterable[str],
    required_keywords: Iterable[str],
    document_text: Optional[str] = None,
) -> MatchResult:
    """
    Compare document keywords with required keywords.

    Args:
        document_keywords: Keywords the document offers (e.g., extracted skills)
        required_keywords: Keywords the job requires
        document_text: Optional full text; a required keyword appearing in it
            as a whole word counts as matched

    Returns:
        MatchResult
    """
    offered = _dedupe(document_keywords)
    required = _dedupe(required_keywords)
    offered_lower = {keyword.lower() for keyword in offered}
    required_lower = {keyword.lower() for keyword in required}

    matched = []
    missing = []
    for keyword in required:
        in_text = bool(document_text) and keyword_pattern(keyword).search(document_text)
        if keyword.lower() in offered_lower or in_text:
            matched.append(keyword)
        else:
            missing.append(keyword)

    additional = [keyword for keyword in offered if keyword.lower() not in required_lower]

    total = len(matched) + len(missing)
    score = round_half_up(len(matched) / total * 100) if total else 0

    log_match_result(len(matched), len(missing), score)

    return MatchResult(
        matched=tuple(matched),
        missing=tuple(missing),
        additional=tuple(additional),
        match_score=score,
    )
