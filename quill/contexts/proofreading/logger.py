"""
Proofreading context logger.

Provides logging interface for the proofreading context with automatic
[proofread] prefix. Proofreading modules import from here, not from loguru.
"""

from loguru import logger

CONTEXT_PREFIX = "[proofread]"


def _log_info(message: str) -> None:
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_check_result(document_type: str, issue_count: int, warning_count: int, score: int) -> None:
    _log_debug(
        f"Checked {document_type}: {issue_count} issues, {warning_count} warnings, score={score}"
    )


def log_suppressed_issue(rule_id: str, start: int, end: int, text_length: int) -> None:
    """Record an issue dropped because its span falls outside the text."""
    _log_debug(f"Suppressed {rule_id} issue with span [{start}, {end}) for text of {text_length}")
