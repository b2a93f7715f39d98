"""
Matching Context

Responsibilities:
- Compares document keywords with job keywords
- Extracts required keywords from free job text
- Scores ATS compatibility on formatting, keywords, structure, readability and compatibility

Owns: Keyword vocabularies and ATS heuristics
Never: Edits documents or decides overall pass/fail
"""

from quill.contexts.matching.ats_scorer import (
    AtsComparison,
    AtsIssue,
    AtsReport,
    AtsScorer,
    compare_documents,
    score_ats,
)
from quill.contexts.matching.match_scorer import (
    JobContext,
    MatchResult,
    extract_job_keywords,
    match_keywords,
)

__all__ = [
    "AtsComparison",
    "AtsIssue",
    "AtsReport",
    "AtsScorer",
    "JobContext",
    "MatchResult",
    "compare_documents",
    "extract_job_keywords",
    "match_keywords",
    "score_ats",
]
