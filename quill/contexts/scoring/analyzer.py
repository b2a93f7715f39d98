"""
End-to-end document analysis.

analyze_document() is the single pure entry point for scoring a document:
segment, proofread, measure readability, score ATS compatibility, match job
keywords when a job context is supplied, then aggregate. Nothing here touches
files, clocks or global state, so the same input always yields the same
ScoreBreakdown.

Example:
    >>> from quill.contexts.scoring import analyze_document
    >>> result = analyze_document(resume_text, "resume", {"keywords": ["python"]})
    >>> result.combined_score, result.passes_quality
    (78, True)
"""

from collections.abc import Mapping
from typing import Optional, Union

from quill.contexts.matching.ats_scorer import score_ats
from quill.contexts.matching.match_scorer import JobContext, match_keywords
from quill.contexts.proofreading.rule_engine import check_grammar
from quill.contexts.scoring.aggregator import ScoreBreakdown, aggregate_scores, neutral_breakdown
from quill.contexts.scoring.logger import _log_debug, log_analysis_result
from quill.contexts.scoring.readability import check_readability
from quill.contexts.segmentation.segmenter import extract_skills, segment_document
from quill.utils.exceptions import ValidationError


def resolve_job_context(job_context: Union[JobContext, Mapping, None]) -> Optional[JobContext]:
    """
    Accept a JobContext or a mapping with "keywords" and/or "description".

    Raises:
        ValidationError: If job_context is neither
    """
    if job_context is None or isinstance(job_context, JobContext):
        return job_context
    if isinstance(job_context, Mapping):
        keywords = job_context.get("keywords") or ()
        if isinstance(keywords, str):
            keywords = [keywords]
        return JobContext.from_inputs(keywords=keywords, description=job_context.get("description"))
    raise ValidationError(
        "job_context must be a JobContext or a mapping", detail=type(job_context).__name__
    )


def analyze_document(
    text: Optional[str],
    document_type="resume",
    job_context: Union[JobContext, Mapping, None] = None,
    readability_score: Optional[float] = None,
    target_role: Optional[str] = None,
) -> ScoreBreakdown:
    """
    Analyze a document and aggregate its quality scores.

    Args:
        text: Document text; None or blank yields the neutral breakdown
        document_type: "resume", "cover_letter" or anything else (generic rules)
        job_context: Optional JobContext or {"keywords": [...], "description": "..."}
        readability_score: Externally computed readability (0-100) to use instead
            of the built-in readability checker
        target_role: Optional role title passed to the readability checker

    Returns:
        ScoreBreakdown

    Raises:
        ValidationError: If text is not a string or job_context is malformed
    """
    if text is not None and not isinstance(text, str):
        raise ValidationError("Document text must be a string", detail=type(text).__name__)

    job = resolve_job_context(job_context)
    document = segment_document(text, document_type)

    if document.is_empty:
        _log_debug("Empty document, returning neutral scores")
        return neutral_breakdown(has_job_context=job is not None)

    grammar = check_grammar(document.text, document.document_type)

    if readability_score is not None:
        readability = readability_score
        measured_readability = readability_score
    else:
        readability = check_readability(document.text, target_role)
        measured_readability = readability.overall_score

    required = job.required_keywords() if job is not None else []
    # the ATS readability dimension reuses the document's readability score
    ats = score_ats(
        document.text, document.sections, required or None, readability_score=measured_readability
    )

    match = None
    if job is not None:
        offered = extract_skills(document.text, document.sections)
        match = match_keywords(offered, required, document.text)

    breakdown = aggregate_scores(
        grammar, ats, readability, match=match, document_type=document.document_type
    )
    log_analysis_result(breakdown)
    return breakdown
