"""
Applicant-tracking-system (ATS) compatibility scoring.

Scores a résumé on five heuristic dimensions and combines them with fixed
weights from the scoring config:

    formatting 0.2, keywords 0.3, structure 0.2, readability 0.15, compatibility 0.15

Each dimension starts at 100 and loses points per detected problem; every
problem is reported as an AtsIssue with a fix hint.
"""

from dataclasses import dataclass, field
from functools import lru_cache
from types import MappingProxyType
from typing import Mapping, Optional

from quill.contexts.matching.ats_patterns import (
    COLUMN_LINE_RATIO,
    ESSENTIAL_SECTIONS,
    IDEAL_SECTION_ORDER,
    LONG_LINE_CHARS,
    LONG_LINE_LIMIT,
    LONG_SENTENCE_WORDS,
    MAX_WORDS,
    MIN_QUANTIFIED,
    MIN_SECTION_LENGTH,
    PASSIVE_VOICE_LIMIT,
    RECOMMENDED_SECTIONS,
    URL_LIMIT,
    CompatibilityPatterns,
    FormattingPatterns,
    ReadabilityHeuristicPatterns,
    StructurePatterns,
)
from quill.contexts.matching.logger import log_ats_result
from quill.contexts.segmentation.document_structure import ParsedSections
from quill.contexts.segmentation.patterns import keyword_pattern
from quill.contexts.segmentation.segmenter import segment_document
from quill.utils.config import load_scoring_config
from quill.utils.scores import clamp_score, round_half_up

DIMENSIONS = ("formatting", "keywords", "structure", "readability", "compatibility")


@dataclass(frozen=True)
class AtsIssue:
    level: str  # "error", "warning" or "info"
    category: str
    message: str
    impact: str  # "high", "medium" or "low"
    fix: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "level": self.level,
            "category": self.category,
            "message": self.message,
            "impact": self.impact,
            "fix": self.fix,
        }


@dataclass(frozen=True)
class KeywordHit:
    keyword: str
    found: bool
    count: int

    def to_dict(self) -> dict:
        return {"keyword": self.keyword, "found": self.found, "count": self.count}


@dataclass(frozen=True)
class DimensionResult:
    score: int
    issues: tuple = ()


@dataclass(frozen=True)
class AtsReport:
    overall_score: int
    breakdown: Mapping[str, int]
    issues: tuple = ()
    recommendations: tuple = ()
    passes_ats: bool = False
    keywords: tuple = ()

    def to_dict(self) -> dict:
        return {
            "overall_score": self.overall_score,
            "breakdown": dict(self.breakdown),
            "issues": [issue.to_dict() for issue in self.issues],
            "recommendations": list(self.recommendations),
            "passes_ats": self.passes_ats,
            "keywords": [hit.to_dict() for hit in self.keywords],
        }


@dataclass(frozen=True)
class AtsComparison:
    original: AtsReport
    optimized: AtsReport
    improvement: int
    improvement_areas: tuple = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "original": self.original.to_dict(),
            "optimized": self.optimized.to_dict(),
            "improvement": self.improvement,
            "improvement_areas": list(self.improvement_areas),
        }


class AtsScorer:
    """
    Heuristic ATS scorer.

    Args:
        config: Scoring config mapping (defaults to the packaged scoring.yaml)
    """

    def __init__(self, config: Optional[Mapping] = None):
        config = config if config is not None else load_scoring_config()
        self.settings = config["ats"]
        self.weights = self.settings["weights"]

    def score(
        self,
        text: str,
        sections: Optional[ParsedSections] = None,
        job_keywords: Optional[list] = None,
        readability_score: Optional[float] = None,
    ) -> AtsReport:
        """
        Score a document for ATS compatibility.

        Args:
            text: Document text
            sections: Parsed sections (segmented from text when omitted)
            job_keywords: Required job keywords; None scores keywords neutrally
            readability_score: Externally computed readability (0-100) used as
                the readability dimension score instead of the built-in heuristics

        Returns:
            AtsReport
        """
        text = text or ""
        if sections is None:
            sections = segment_document(text).sections

        keyword_hits = ()
        formatting = self.score_formatting(text)
        if job_keywords:
            keywords, keyword_hits = self.score_keywords(text, job_keywords)
        else:
            keywords = DimensionResult(score=self.settings["neutral_keyword_score"])
        structure = self.score_structure(text, sections)
        readability = self.score_readability(text)
        if readability_score is not None:
            readability = DimensionResult(clamp_score(readability_score), readability.issues)
        compatibility = self.score_compatibility(text)

        results = {
            "formatting": formatting,
            "keywords": keywords,
            "structure": structure,
            "readability": readability,
            "compatibility": compatibility,
        }
        overall = clamp_score(sum(results[name].score * self.weights[name] for name in DIMENSIONS))

        issues = tuple(issue for name in DIMENSIONS for issue in results[name].issues)
        recommendations = generate_recommendations(issues, overall)
        passes = overall >= self.settings["pass_threshold"]

        log_ats_result(overall, passes, len(issues))

        return AtsReport(
            overall_score=overall,
            breakdown=MappingProxyType({name: results[name].score for name in DIMENSIONS}),
            issues=issues,
            recommendations=tuple(recommendations),
            passes_ats=passes,
            keywords=keyword_hits,
        )

    # -------------------------------------------------------------------------
    # Dimensions
    # -------------------------------------------------------------------------

    def score_formatting(self, text: str) -> DimensionResult:
        score = 100
        issues = []

        if FormattingPatterns.BOX_DRAWING.search(text):
            score -= 20
            issues.append(
                AtsIssue(
                    "error",
                    "formatting",
                    "Document contains special characters or tables that ATS cannot parse",
                    "high",
                    "Remove tables and box characters, use simple bullet points instead",
                )
            )

        if FormattingPatterns.IMAGE.search(text):
            score -= 25
            issues.append(
                AtsIssue(
                    "error",
                    "formatting",
                    "Document contains images which ATS cannot read",
                    "high",
                    "Remove all images from the document",
                )
            )

        if FormattingPatterns.PAGE_FOOTER.search(text):
            score -= 10
            issues.append(
                AtsIssue(
                    "warning",
                    "formatting",
                    "Document contains headers/footers that may confuse ATS",
                    "medium",
                    "Remove page numbers and headers/footers",
                )
            )

        content_lines = [line for line in text.split("\n") if line.strip()]
        gapped = sum(1 for line in content_lines if FormattingPatterns.COLUMN_GAP.search(line))
        if content_lines and gapped / len(content_lines) > COLUMN_LINE_RATIO:
            score -= 15
            issues.append(
                AtsIssue(
                    "warning",
                    "formatting",
                    "Document appears to use multiple columns which ATS may misread",
                    "high",
                    "Use a single-column layout",
                )
            )

        fancy = FormattingPatterns.FANCY_BULLET.search(text)
        simple = FormattingPatterns.SIMPLE_BULLET.search(text)
        if not fancy and not simple:
            score -= 10
            issues.append(
                AtsIssue(
                    "info",
                    "formatting",
                    "Document lacks bullet points",
                    "low",
                    "Use bullet points to list achievements and responsibilities",
                )
            )
        elif fancy and not simple:
            score -= 5
            issues.append(
                AtsIssue(
                    "info",
                    "formatting",
                    "Use simple dashes (-) or asterisks (*) for bullets",
                    "low",
                    "Replace special bullet characters with simple dashes",
                )
            )

        return DimensionResult(clamp_score(score), tuple(issues))

    def score_keywords(self, text: str, job_keywords: list) -> tuple[DimensionResult, tuple]:
        """Share of job keywords present, minus a penalty for keyword stuffing."""
        hits = []
        for keyword in job_keywords:
            count = len(keyword_pattern(keyword).findall(text))
            hits.append(KeywordHit(keyword=keyword, found=count > 0, count=count))

        found = sum(1 for hit in hits if hit.found)
        score = round_half_up(found / len(hits) * 100) if hits else 100
        issues = []

        missing = [hit.keyword for hit in hits if not hit.found][:5]
        if missing:
            issues.append(
                AtsIssue(
                    "warning",
                    "keywords",
                    f"Missing important keywords: {', '.join(missing)}",
                    "high",
                    "Add these keywords naturally where relevant",
                )
            )

        limit = self.settings["keyword_stuffing_limit"]
        overused = [hit.keyword for hit in hits if hit.count > limit]
        if overused:
            score -= 10
            issues.append(
                AtsIssue(
                    "warning",
                    "keywords",
                    f"Potential keyword stuffing detected: {', '.join(overused)}",
                    "medium",
                    "Use keywords naturally, avoid excessive repetition",
                )
            )

        return DimensionResult(clamp_score(score), tuple(issues)), tuple(hits)

    def score_structure(self, text: str, sections: ParsedSections) -> DimensionResult:
        score = 100
        issues = []

        for name in ESSENTIAL_SECTIONS:
            if len(sections.text_of(name)) < MIN_SECTION_LENGTH:
                score -= 20
                issues.append(
                    AtsIssue(
                        "error",
                        "structure",
                        f"Missing or incomplete {name} section",
                        "high",
                        f"Add a clear {name} section with relevant content",
                    )
                )

        for name in RECOMMENDED_SECTIONS:
            if name not in sections:
                score -= 5
                issues.append(
                    AtsIssue(
                        "info",
                        "structure",
                        f"Consider adding a {name} section",
                        "low",
                        f"Add a {name} section to strengthen the document",
                    )
                )

        # Each ideal section within one position of its ideal slot earns 20
        order = list(sections.keys())
        order_score = sum(
            20
            for index, name in enumerate(IDEAL_SECTION_ORDER)
            if name in order and abs(order.index(name) - index) <= 1
        )
        if order_score < 60:
            score -= 10
            issues.append(
                AtsIssue(
                    "info",
                    "structure",
                    "Sections could be better organized",
                    "low",
                    "Consider ordering sections: Summary, Experience, Education, Skills",
                )
            )

        header = sections.text_of("contact") or "\n".join(text.split("\n")[:5])
        if not StructurePatterns.EMAIL.search(header):
            score -= 15
            issues.append(
                AtsIssue(
                    "error",
                    "structure",
                    "Email address not found",
                    "high",
                    "Add a clear email address in the header",
                )
            )

        if not StructurePatterns.PHONE.search(header):
            score -= 10
            issues.append(
                AtsIssue(
                    "warning",
                    "structure",
                    "Phone number not found",
                    "medium",
                    "Add a phone number for contact purposes",
                )
            )

        return DimensionResult(clamp_score(score), tuple(issues))

    def score_readability(self, text: str) -> DimensionResult:
        score = 100
        issues = []

        pieces = ReadabilityHeuristicPatterns.SENTENCE_SPLIT.split(text)
        sentences = [s for s in pieces if s.strip()]
        if sentences:
            average = sum(len(s.split()) for s in sentences) / len(sentences)
            if average > LONG_SENTENCE_WORDS:
                score -= 15
                issues.append(
                    AtsIssue(
                        "warning",
                        "readability",
                        "Sentences are too long on average",
                        "medium",
                        "Break long sentences into shorter, clearer statements",
                    )
                )

        if len(ReadabilityHeuristicPatterns.PASSIVE_VOICE.findall(text)) > PASSIVE_VOICE_LIMIT:
            score -= 10
            issues.append(
                AtsIssue(
                    "info",
                    "readability",
                    "Excessive use of passive voice detected",
                    "low",
                    "Use active voice to make achievements more impactful",
                )
            )

        if len(ReadabilityHeuristicPatterns.NUMBER.findall(text)) < MIN_QUANTIFIED:
            score -= 10
            issues.append(
                AtsIssue(
                    "info",
                    "readability",
                    "Lack of quantified achievements",
                    "medium",
                    "Add numbers, percentages and metrics to quantify impact",
                )
            )

        long_lines = sum(1 for line in text.split("\n") if len(line) > LONG_LINE_CHARS)
        if long_lines > LONG_LINE_LIMIT:
            score -= 5
            issues.append(
                AtsIssue(
                    "info",
                    "readability",
                    "Some lines are too long",
                    "low",
                    f"Keep lines under {LONG_LINE_CHARS} characters",
                )
            )

        return DimensionResult(clamp_score(score), tuple(issues))

    def score_compatibility(self, text: str) -> DimensionResult:
        score = 100
        issues = []

        if CompatibilityPatterns.RTF.search(text):
            score -= 30
            issues.append(
                AtsIssue(
                    "error",
                    "compatibility",
                    "Document appears to be in RTF format",
                    "high",
                    "Convert to plain text or PDF format",
                )
            )

        if len(CompatibilityPatterns.URL.findall(text)) > URL_LIMIT:
            score -= 10
            issues.append(
                AtsIssue(
                    "warning",
                    "compatibility",
                    "Too many hyperlinks may confuse ATS",
                    "medium",
                    "Limit hyperlinks to essential ones (LinkedIn, portfolio)",
                )
            )

        if CompatibilityPatterns.FONT_MARKUP.search(text):
            score -= 15
            issues.append(
                AtsIssue(
                    "warning",
                    "compatibility",
                    "Complex formatting detected",
                    "medium",
                    "Use standard fonts and simple formatting",
                )
            )

        if len(text.split()) > MAX_WORDS:
            score -= 10
            issues.append(
                AtsIssue(
                    "info",
                    "compatibility",
                    "Document is quite long",
                    "low",
                    "Consider condensing to 2 pages or less",
                )
            )

        has_standard_dates = any(p.search(text) for p in CompatibilityPatterns.STANDARD_DATES)
        if not has_standard_dates and CompatibilityPatterns.PRESENT.search(text):
            score -= 5
            issues.append(
                AtsIssue(
                    "info",
                    "compatibility",
                    "Use standard date formats",
                    "low",
                    'Use formats like "Jan 2023 - Present" or "01/2023 - 12/2024"',
                )
            )

        return DimensionResult(clamp_score(score), tuple(issues))

    # -------------------------------------------------------------------------
    # Comparison
    # -------------------------------------------------------------------------

    def compare(
        self, original: str, optimized: str, job_keywords: Optional[list] = None
    ) -> AtsComparison:
        """Score two versions of a document and report per-dimension gains."""
        before = self.score(original, job_keywords=job_keywords)
        after = self.score(optimized, job_keywords=job_keywords)

        areas = [
            f"{name}: +{after.breakdown[name] - before.breakdown[name]} points"
            for name in DIMENSIONS
            if after.breakdown[name] > before.breakdown[name]
        ]

        return AtsComparison(
            original=before,
            optimized=after,
            improvement=after.overall_score - before.overall_score,
            improvement_areas=tuple(areas),
        )


def generate_recommendations(issues, overall_score: int) -> list[str]:
    """
    Recommendations from the score band, impact counts, issue categories and
    the first three fix hints.
    """
    recommendations = []

    if overall_score < 50:
        recommendations.append("The document needs significant improvements to pass ATS systems")
    elif overall_score < 75:
        recommendations.append("The document is good but needs some optimization for ATS")
    else:
        recommendations.append("The document is well-optimized for ATS systems")

    high = sum(1 for issue in issues if issue.impact == "high")
    medium = sum(1 for issue in issues if issue.impact == "medium")
    if high:
        recommendations.append(f"Fix {high} critical issues first for maximum improvement")
    if medium:
        recommendations.append(f"Address {medium} moderate issues to boost the score")

    categories = {issue.category for issue in issues}
    if "formatting" in categories:
        recommendations.append(
            "Simplify formatting: use single column, standard fonts and plain bullets"
        )
    if "keywords" in categories:
        recommendations.append("Align document keywords with the job description")
    if "structure" in categories:
        recommendations.append("Ensure all essential sections are present and well-organized")

    recommendations.extend([issue.fix for issue in issues if issue.fix][:3])
    return recommendations


@lru_cache(maxsize=1)
def get_default_scorer() -> AtsScorer:
    return AtsScorer()


def score_ats(
    text: str,
    sections: Optional[ParsedSections] = None,
    job_keywords: Optional[list] = None,
    readability_score: Optional[float] = None,
) -> AtsReport:
    """Score text with the default AtsScorer (see AtsScorer.score)."""
    return get_default_scorer().score(text, sections, job_keywords, readability_score)


def compare_documents(
    original: str, optimized: str, job_keywords: Optional[list] = None
) -> AtsComparison:
    """Compare two versions with the default AtsScorer (see AtsScorer.compare)."""
    return get_default_scorer().compare(original, optimized, job_keywords)
