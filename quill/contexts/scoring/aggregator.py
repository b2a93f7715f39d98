"""
Score aggregation for the Scoring context.

Combines the ATS, readability and grammar scores into one weighted number,
merges every analyzer's issues into a single severity-ranked list and builds
the recommendation list shown to the user.

    combined = round(0.4 * ats + 0.3 * readability + 0.3 * grammar)

Weights, the pass threshold and the top-issue limit come from the
"aggregation" section of the scoring config.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Union

from quill.contexts.matching.ats_scorer import AtsReport
from quill.contexts.matching.match_scorer import MatchResult
from quill.contexts.proofreading.rule_engine import (
    ACTION_VERB_SUGGESTION,
    QUANTIFY_SUGGESTION,
    GrammarReport,
)
from quill.contexts.scoring.readability import ReadabilityReport
from quill.contexts.segmentation.document_structure import DocumentType
from quill.utils.config import load_scoring_config
from quill.utils.issues import severity_rank
from quill.utils.scores import clamp_score

# Rank -> bucket name used in issue_counts
RANK_BUCKETS = {3: "critical", 2: "major", 1: "minor"}

MISSING_KEYWORD_PREVIEW = 5


@dataclass(frozen=True)
class TopIssue:
    """One entry of the merged, ranked issue list."""

    source: str  # "grammar", "ats" or "readability"
    severity: str
    category: str
    message: str
    suggestion: str = ""
    span: Optional[dict] = None

    @property
    def rank(self) -> int:
        return severity_rank(self.severity)

    def to_dict(self) -> dict:
        return {
            "source": self.source,
            "severity": self.severity,
            "category": self.category,
            "message": self.message,
            "suggestion": self.suggestion,
            "span": self.span,
        }


@dataclass(frozen=True)
class ScoreBreakdown:
    """
    Aggregated quality result for one document.

    Attributes:
        ats_score: ATS compatibility (0-100)
        readability_score: Readability (0-100)
        grammar_score: Grammar (0-100)
        match_score: Job keyword match (0-100), None without job context
        combined_score: Weighted combination of ats, readability and grammar
        passes_quality: combined_score >= threshold
        threshold: Pass threshold used
        top_issues: Highest-severity issues across analyzers
        recommendations: De-duplicated, ordered advice strings
        issue_counts: Issue totals by severity bucket
        grammar, ats, readability, match: Underlying reports when available
    """

    ats_score: int
    readability_score: int
    grammar_score: int
    combined_score: int
    passes_quality: bool
    threshold: int
    match_score: Optional[int] = None
    top_issues: tuple = ()
    recommendations: tuple = ()
    issue_counts: Mapping[str, int] = field(
        default_factory=lambda: MappingProxyType(
            {"critical": 0, "major": 0, "minor": 0, "total": 0}
        )
    )
    grammar: Optional[GrammarReport] = None
    ats: Optional[AtsReport] = None
    readability: Optional[ReadabilityReport] = None
    match: Optional[MatchResult] = None

    def to_dict(self) -> dict:
        return {
            "ats_score": self.ats_score,
            "readability_score": self.readability_score,
            "grammar_score": self.grammar_score,
            "match_score": self.match_score,
            "combined_score": self.combined_score,
            "passes_quality": self.passes_quality,
            "threshold": self.threshold,
            "top_issues": [issue.to_dict() for issue in self.top_issues],
            "recommendations": list(self.recommendations),
            "issue_counts": dict(self.issue_counts),
            "grammar": self.grammar.to_dict() if self.grammar else None,
            "ats": self.ats.to_dict() if self.ats else None,
            "readability": self.readability.to_dict() if self.readability else None,
            "match": self.match.to_dict() if self.match else None,
        }


def collect_issues(
    grammar: Optional[GrammarReport],
    ats: Optional[AtsReport],
    readability: Optional[ReadabilityReport],
) -> list[TopIssue]:
    """Flatten analyzer issues into TopIssues, grammar first, then ATS, then readability."""
    merged = []

    if grammar is not None:
        for issue in grammar.issues:
            merged.append(
                TopIssue(
                    source="grammar",
                    severity=issue.severity.value,
                    category=issue.type.value,
                    message=issue.message,
                    suggestion=issue.suggestion,
                    span=issue.span.to_dict(),
                )
            )

    if ats is not None:
        for issue in ats.issues:
            merged.append(
                TopIssue(
                    source="ats",
                    severity=issue.level,
                    category=issue.category,
                    message=issue.message,
                    suggestion=issue.fix or "",
                )
            )

    if readability is not None:
        for issue in readability.issues:
            merged.append(
                TopIssue(
                    source="readability",
                    severity=issue.level,
                    category="readability",
                    message=issue.issue,
                    suggestion=issue.suggestion,
                )
            )

    return merged


def rank_issues(issues: list[TopIssue], limit: int) -> list[TopIssue]:
    """Sort by severity rank, highest first; ties keep their original order."""
    return sorted(issues, key=lambda issue: -issue.rank)[:limit]


def count_issues(issues: list[TopIssue]) -> Mapping[str, int]:
    counts = {"critical": 0, "major": 0, "minor": 0}
    for issue in issues:
        bucket = RANK_BUCKETS.get(issue.rank)
        if bucket:
            counts[bucket] += 1
    counts["total"] = len(issues)
    return MappingProxyType(counts)


def build_recommendations(
    grammar: Optional[GrammarReport],
    ats: Optional[AtsReport],
    match: Optional[MatchResult],
    document_type=DocumentType.RESUME,
) -> list[str]:
    """
    Grammar suggestions first, then missing-keyword advice, then ATS
    recommendations, de-duplicated in order. Resumes always get the
    action-verb and quantification tips.
    """
    candidates = []

    if grammar is not None:
        candidates.extend(suggestion.suggestion for suggestion in grammar.suggestions)
    if DocumentType.coerce(document_type) == DocumentType.RESUME:
        candidates.extend([ACTION_VERB_SUGGESTION.suggestion, QUANTIFY_SUGGESTION.suggestion])

    if match is not None and match.missing:
        preview = ", ".join(match.missing[:MISSING_KEYWORD_PREVIEW])
        candidates.append(f"Add missing job keywords where relevant: {preview}")

    if ats is not None:
        candidates.extend(ats.recommendations)

    return list(dict.fromkeys(candidates))


def aggregate_scores(
    grammar: GrammarReport,
    ats: AtsReport,
    readability: Union[ReadabilityReport, float, int],
    match: Optional[MatchResult] = None,
    document_type=DocumentType.RESUME,
    threshold: Optional[int] = None,
    top_issue_limit: Optional[int] = None,
    config: Optional[Mapping] = None,
) -> ScoreBreakdown:
    """
    Combine analyzer results into a ScoreBreakdown.

    Args:
        grammar: GrammarReport from the rule engine
        ats: AtsReport from the matching context
        readability: ReadabilityReport, or an externally supplied 0-100 score
        match: MatchResult when a job context was given
        document_type: Document type (resumes always get action-verb tips)
        threshold: Pass threshold override (config default 70)
        top_issue_limit: Top issue count override (config default 10)
        config: Scoring config mapping (defaults to the packaged scoring.yaml)

    Returns:
        ScoreBreakdown
    """
    settings = (config if config is not None else load_scoring_config())["aggregation"]
    weights = settings["weights"]
    if threshold is None:
        threshold = settings["pass_threshold"]
    if top_issue_limit is None:
        top_issue_limit = settings["top_issue_limit"]

    if isinstance(readability, ReadabilityReport):
        readability_report = readability
        readability_score = clamp_score(readability.overall_score)
    else:
        readability_report = None
        readability_score = clamp_score(readability)

    ats_score = clamp_score(ats.overall_score)
    grammar_score = clamp_score(grammar.score)
    combined = clamp_score(
        weights["ats"] * ats_score
        + weights["readability"] * readability_score
        + weights["grammar"] * grammar_score
    )

    merged = collect_issues(grammar, ats, readability_report)

    return ScoreBreakdown(
        ats_score=ats_score,
        readability_score=readability_score,
        grammar_score=grammar_score,
        match_score=None if match is None else clamp_score(match.match_score),
        combined_score=combined,
        passes_quality=combined >= threshold,
        threshold=threshold,
        top_issues=tuple(rank_issues(merged, top_issue_limit)),
        recommendations=tuple(build_recommendations(grammar, ats, match, document_type)),
        issue_counts=count_issues(merged),
        grammar=grammar,
        ats=ats,
        readability=readability_report,
        match=match,
    )


def neutral_breakdown(
    has_job_context: bool = False, config: Optional[Mapping] = None
) -> ScoreBreakdown:
    """
    Deterministic result for empty input: every score at the configured
    neutral value, no issues, no recommendations.
    """
    settings = (config if config is not None else load_scoring_config())["aggregation"]
    neutral = settings["neutral_score"]
    threshold = settings["pass_threshold"]

    return ScoreBreakdown(
        ats_score=neutral,
        readability_score=neutral,
        grammar_score=neutral,
        match_score=neutral if has_job_context else None,
        combined_score=neutral,
        passes_quality=neutral >= threshold,
        threshold=threshold,
    )
