"""
Plain-text report building for the CLI scripts.

analyze_document.py prints a score table and a ranked issue listing;
review_changes.py prints one row per suggested change. Both go through
TableFormatter so every report shares the same framing and alignment.
"""

from dataclasses import dataclass
from typing import Any, List, Mapping, Optional

from quill.utils.text_processing import truncate_display

COLUMN_GAP = " "


@dataclass(frozen=True)
class Column:
    """
    Fixed-width report column.

    align follows format-spec alignment: '<' left, '>' right, '^' center.
    """

    name: str
    width: int
    align: str = "<"

    def header(self) -> str:
        return f"{self.name:{self.align}{self.width}}"

    def cell(self, value: Any) -> str:
        text = "" if value is None else str(value)
        if len(text) > self.width:
            text = truncate_display(text, max(self.width, 3))[: self.width]
        return f"{text:{self.align}{self.width}}"


class TableFormatter:
    """Accumulates report lines; every add_* returns self for chaining."""

    def __init__(self, columns: List[Column], total_width: Optional[int] = None):
        self.columns = columns
        # Default width spans the columns and the gaps between them
        self.total_width = total_width or (
            sum(col.width for col in columns) + len(COLUMN_GAP) * (len(columns) - 1)
        )
        self.lines: List[str] = []

    def add_title(self, title: str) -> "TableFormatter":
        rule = "=" * self.total_width
        self.lines.extend([rule, title, rule])
        return self

    def add_header(self) -> "TableFormatter":
        self.lines.append(COLUMN_GAP.join(col.header() for col in self.columns).rstrip())
        return self

    def add_rule(self, char: str = "-") -> "TableFormatter":
        self.lines.append(char * self.total_width)
        return self

    def add_row(self, values: List[Any]) -> "TableFormatter":
        """
        Append one data row.

        Raises:
            ValueError: If the number of values differs from the number of columns
        """
        if len(values) != len(self.columns):
            raise ValueError(f"Expected {len(self.columns)} values, got {len(values)}")

        cells = (col.cell(value) for col, value in zip(self.columns, values))
        self.lines.append(COLUMN_GAP.join(cells).rstrip())
        return self

    def add_line(self, text: str = "") -> "TableFormatter":
        self.lines.append(text)
        return self

    def add_bullets(self, heading: str, items) -> "TableFormatter":
        """Heading line followed by '  - item' lines; nothing when items is empty."""
        items = list(items)
        if items:
            self.lines.extend(["", heading])
            self.lines.extend(f"  - {item}" for item in items)
        return self

    def extend(self, other: "TableFormatter") -> "TableFormatter":
        self.lines.extend(other.lines)
        return self

    def render(self) -> str:
        return "\n".join(self.lines)


def format_score_bar(score: float, width: int = 20) -> str:
    """
    Render a 0-100 score as a fixed-width bar.

    Example:
        >>> format_score_bar(50, width=10)
        '#####.....'
    """
    clamped = max(0.0, min(100.0, float(score)))
    filled = int(round(clamped / 100 * width))
    return "#" * filled + "." * (width - filled)


def format_fraction(count: int, total: int) -> str:
    """'3/4 (75.0%)'; an empty total reads as 0.0%."""
    percent = (count / total) * 100 if total else 0.0
    return f"{count}/{total} ({percent:.1f}%)"


def format_issue_counts(counts: Mapping[str, int]) -> str:
    """One-line summary of a ScoreBreakdown's issue_counts."""
    return (
        f"{counts['total']} total ({counts['critical']} critical, "
        f"{counts['major']} major, {counts['minor']} minor)"
    )
