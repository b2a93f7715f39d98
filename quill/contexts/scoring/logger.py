"""
Scoring context logger.

Provides logging interface for the scoring context with automatic [score]
prefix. Scoring modules import from here, not from utils.logger directly.
"""

from pathlib import Path

from loguru import logger

from quill.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[score]"


def setup_scoring_logger(
    log_dir: Path, document_type: str = "resume", verbose: bool = False
) -> Path:
    """
    Setup logger for an analysis session.

    Args:
        log_dir: Directory for this analysis session
        document_type: Document type recorded in the provenance header
        verbose: Echo DEBUG messages to the console as well

    Returns:
        Path to log file

    Example:
        from quill.contexts.scoring.logger import setup_scoring_logger

        log_file = setup_scoring_logger(Path("outs/logs/analyze_20251114_123456"))
    """
    return _setup_logger(
        context_name="analyze",
        log_dir=log_dir,
        extra_provenance={"Document type": document_type},
        console_level="DEBUG" if verbose else "INFO",
    )


def _log_info(message: str) -> None:
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_readability_result(score: int, grade_level: int, reading_ease: float) -> None:
    _log_debug(f"Readability {score} (grade {grade_level}, reading ease {reading_ease:.1f})")


def log_analysis_result(breakdown) -> None:
    """Log the headline numbers of a ScoreBreakdown."""
    match = "n/a" if breakdown.match_score is None else breakdown.match_score
    _log_debug(
        f"  ats={breakdown.ats_score} readability={breakdown.readability_score} "
        f"grammar={breakdown.grammar_score} match={match}"
    )
    if breakdown.passes_quality:
        _log_success(f"Combined score {breakdown.combined_score} passes (>= {breakdown.threshold})")
    else:
        _log_warning(f"Combined score {breakdown.combined_score} below {breakdown.threshold}")
