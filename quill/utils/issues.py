"""
Shared value types for detected writing issues.

Every analyzer reports problems as Issue records anchored to a Span of the
source text. Severity ranks let the aggregator merge issues from different
analyzers (grammar severities and ATS levels) into one ordering.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class IssueType(str, Enum):
    SPELLING = "spelling"
    GRAMMAR = "grammar"
    PUNCTUATION = "punctuation"
    STYLE = "style"


class Severity(str, Enum):
    CRITICAL = "critical"
    MAJOR = "major"
    MINOR = "minor"


# Higher rank sorts first. ATS levels share ranks with grammar severities.
SEVERITY_RANK = {
    "critical": 3,
    "error": 3,
    "major": 2,
    "warning": 2,
    "minor": 1,
    "info": 1,
}


def severity_rank(level: str) -> int:
    """Rank a severity or ATS level string; unknown levels rank lowest."""
    return SEVERITY_RANK.get(str(getattr(level, "value", level)).lower(), 0)


@dataclass(frozen=True)
class Span:
    """Half-open character range [start, end) into the analyzed text."""

    start: int
    end: int

    def is_valid_for(self, text: str) -> bool:
        return 0 <= self.start <= self.end <= len(text)

    def to_dict(self) -> dict:
        return {"start": self.start, "end": self.end}


@dataclass(frozen=True)
class Issue:
    """A single writing-quality defect found by the rule engine."""

    type: IssueType
    severity: Severity
    text: str
    span: Span
    message: str
    suggestion: str = ""
    replacements: tuple = field(default_factory=tuple)
    rule_id: str = ""
    line: Optional[int] = None

    @property
    def rank(self) -> int:
        return severity_rank(self.severity)

    def to_dict(self) -> dict:
        return {
            "type": self.type.value,
            "severity": self.severity.value,
            "text": self.text,
            "span": self.span.to_dict(),
            "message": self.message,
            "suggestion": self.suggestion,
            "replacements": list(self.replacements),
            "rule_id": self.rule_id,
            "line": self.line,
        }
