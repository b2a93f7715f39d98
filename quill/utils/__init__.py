"""
Shared utilities for QUILL.

Common functionality used across contexts:
- Issue and span value types
- Text processing and score rounding
- Configuration management
- Logging and event logging
"""

from quill.utils.issues import Issue, IssueType, Severity, Span
from quill.utils.timestamp import format_timestamp, now_exact

__all__ = ["Issue", "IssueType", "Severity", "Span", "format_timestamp", "now_exact"]
