"""
Scoring Context

Responsibilities:
- Measures readability with standard formulas and simplifies wordy text
- Combines ATS, readability and grammar scores into one weighted score
- Ranks issues from every analyzer and assembles recommendations
- Exposes analyze_document() as the end-to-end analysis entry point

Owns: Combined score, pass threshold and issue ranking
Never: Detects issues itself or stores results
"""

from quill.contexts.scoring.aggregator import (
    ScoreBreakdown,
    TopIssue,
    aggregate_scores,
    neutral_breakdown,
)
from quill.contexts.scoring.analyzer import analyze_document
from quill.contexts.scoring.readability import ReadabilityReport, check_readability, simplify_text

__all__ = [
    "ReadabilityReport",
    "ScoreBreakdown",
    "TopIssue",
    "aggregate_scores",
    "analyze_document",
    "check_readability",
    "neutral_breakdown",
    "simplify_text",
]
