"""Custom exceptions shared across QUILL contexts."""

from enum import Enum
from typing import Optional


class ErrorCategory(str, Enum):
    """Caller-facing error category. None of them are retryable."""

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"

    @property
    def retryable(self) -> bool:
        return False


class QuillError(Exception):
    """
    Base exception for QUILL errors.

    Attributes:
        message: Error description
        category: ErrorCategory used by callers to map the failure
        detail: Optional offending value or context, shown truncated
    """

    category = ErrorCategory.VALIDATION

    def __init__(
        self,
        message: str,
        category: Optional[ErrorCategory] = None,
        detail: Optional[str] = None,
    ):
        self.message = message
        if category is not None:
            self.category = category
        self.detail = detail

        parts = [f"[{self.category.value}] {message}"]
        if detail:
            snippet = detail[:200] + "..." if len(detail) > 200 else detail
            parts.append(f"Detail: {snippet}")

        super().__init__("\n".join(parts))

    @property
    def retryable(self) -> bool:
        return self.category.retryable


class ValidationError(QuillError):
    """Malformed input supplied by the caller."""

    category = ErrorCategory.VALIDATION


class NotFoundError(QuillError):
    """A referenced entity does not exist."""

    category = ErrorCategory.NOT_FOUND


class ConflictError(QuillError):
    """The request conflicts with the current state of an entity."""

    category = ErrorCategory.CONFLICT
