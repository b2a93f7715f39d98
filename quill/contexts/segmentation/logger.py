"""
Segmentation context logger.

Provides logging interface for the segmentation context with automatic
[segment] prefix. Segmentation modules import from here, not from loguru.
"""

from loguru import logger

CONTEXT_PREFIX = "[segment]"


def _log_info(message: str) -> None:
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_segmentation_result(
    document_type: str, section_names: list, word_count: int, warnings: list
) -> None:
    """Log the sections found for one document."""
    _log_debug(
        f"Segmented {document_type}: {word_count} words, "
        f"sections={section_names or '(none)'}"
    )
    for warning in warnings:
        _log_debug(f"  {warning}")
