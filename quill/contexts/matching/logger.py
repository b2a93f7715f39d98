"""
Matching context logger.

Provides logging interface for the matching context with automatic [match]
prefix. Matching modules import from here, not from loguru.
"""

from loguru import logger

CONTEXT_PREFIX = "[match]"


def _log_info(message: str) -> None:
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_match_result(matched: int, missing: int, score: int) -> None:
    _log_debug(f"Keyword match: {matched} matched, {missing} missing, score={score}")


def log_ats_result(overall: int, passes: bool, issue_count: int) -> None:
    verdict = "passes" if passes else "fails"
    _log_debug(f"ATS score {overall} ({verdict}), {issue_count} issues")
