"""
Approval context logger.

Provides logging interface for the approval context with automatic
[approval] prefix. Approval modules import from here, not from loguru.
"""

from pathlib import Path

from loguru import logger

from quill.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[approval]"


def setup_approval_logger(log_dir: Path, verbose: bool = False) -> Path:
    """
    Setup logger for a review session.

    Args:
        log_dir: Directory for this review session
        verbose: Echo DEBUG messages to the console as well

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="review",
        log_dir=log_dir,
        console_level="DEBUG" if verbose else "INFO",
    )


def _log_info(message: str) -> None:
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_workflow_created(workflow_id: str, change_count: int, status: str) -> None:
    _log_info(f"Created workflow {workflow_id} with {change_count} changes ({status})")


def log_decisions_applied(
    workflow_id: str, applied: int, errors: int, decided: int, total: int, status: str
) -> None:
    _log_info(
        f"Workflow {workflow_id}: applied {applied} decisions, {errors} errors "
        f"({decided}/{total} decided, {status})"
    )
    if status == "completed":
        _log_success(f"Workflow {workflow_id} completed")
