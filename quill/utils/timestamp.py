"""Timestamps for event records, log directories and the review CLI."""

from datetime import datetime
from typing import Optional

# (unit suffix, seconds per unit), largest first
RELATIVE_UNITS = (("d", 86400), ("h", 3600), ("m", 60), ("s", 1))


def now_exact() -> str:
    """Current local time as a full ISO 8601 string (microsecond precision)."""
    return datetime.now().isoformat()


def session_stamp() -> str:
    """Current local time as 'YYYYMMDD_HHMMSS', used to name log directories."""
    return datetime.now().strftime("%Y%m%d_%H%M%S")


def format_timestamp(
    iso_timestamp: str, relative: bool = False, reference: Optional[datetime] = None
) -> str:
    """
    Render an event timestamp for display.

    Absolute form drops the microseconds ("2025-11-13 18:45:40"); relative form
    uses the largest whole unit ("2h ago", "3d from now"). Strings that are not
    ISO 8601 come back unchanged, so one malformed event never breaks a listing.

    Args:
        iso_timestamp: Timestamp as written by now_exact()
        relative: Show time relative to reference instead of the absolute time
        reference: Point relative times are measured from (defaults to now)
    """
    try:
        moment = datetime.fromisoformat(iso_timestamp)
    except (ValueError, TypeError):
        return iso_timestamp

    if not relative:
        return moment.strftime("%Y-%m-%d %H:%M:%S")

    delta = int(((reference or datetime.now()) - moment).total_seconds())
    suffix = "ago" if delta >= 0 else "from now"
    seconds = abs(delta)
    for unit, size in RELATIVE_UNITS:
        if seconds >= size or unit == "s":
            return f"{seconds // size}{unit} {suffix}"
