"""
Workflow event log for QUILL.

Approval workflow events are appended to a JSON Lines file so review sessions
can be audited after the fact. This sits beside the per-session loguru logs
(quill.utils.logger): those are for reading, this one is for querying.

Usage:
    from quill.utils.event_logging import log_workflow_event, get_recent_events

    log_workflow_event(
        event_type="decision_applied",
        workflow_id="wf_3f2a",
        source="cli",
        decided=2,
        total=5,
    )

    events = get_recent_events(5, workflow_id="wf_3f2a")
"""

import json
import os
from pathlib import Path
from typing import Iterator, Optional

from dotenv import load_dotenv
from loguru import logger

from quill.utils.timestamp import now_exact

load_dotenv()
WORKFLOW_EVENTS_FILE = Path(
    os.getenv(
        "WORKFLOW_EVENTS_FILE",
        str(Path(os.getenv("LOGS_PATH", "outs/logs")) / "workflow_events.log"),
    )
)


def _events_path(events_file: Optional[Path]) -> Path:
    return Path(events_file) if events_file else WORKFLOW_EVENTS_FILE


def log_workflow_event(
    event_type: str,
    workflow_id: str,
    source: str,
    events_file: Optional[Path] = None,
    **fields,
) -> dict:
    """
    Append one event record to the log.

    Every record carries timestamp, event_type, workflow_id and source;
    fields adds event-specific keys (counts, status).

    Returns:
        The record as written
    """
    path = _events_path(events_file)
    path.parent.mkdir(parents=True, exist_ok=True)

    record = dict(
        timestamp=now_exact(),
        event_type=event_type,
        workflow_id=workflow_id,
        source=source,
        **fields,
    )
    with path.open("a", encoding="utf-8") as log:
        log.write(json.dumps(record) + "\n")

    return record


def make_event_sink(source: str = "approval", events_file: Optional[Path] = None):
    """
    Build a callable suitable for WorkflowService(event_sink=...).

    The sink receives (event_type, workflow_id, fields) and writes one line.
    """

    def sink(event_type: str, workflow_id: str, fields: dict) -> None:
        log_workflow_event(event_type, workflow_id, source, events_file=events_file, **fields)

    return sink


def iter_events(events_file: Optional[Path] = None) -> Iterator[dict]:
    """Yield records oldest first; lines that are not valid JSON are reported and skipped."""
    path = _events_path(events_file)
    if not path.exists():
        return

    with path.open(encoding="utf-8") as log:
        for line_number, line in enumerate(log, start=1):
            if not line.strip():
                continue
            try:
                yield json.loads(line)
            except json.JSONDecodeError:
                logger.warning(f"Skipping malformed event at {path}:{line_number}")


def get_recent_events(
    n: int = 10,
    workflow_id: Optional[str] = None,
    event_type: Optional[str] = None,
    events_file: Optional[Path] = None,
) -> list[dict]:
    """
    Last n events from the log, optionally filtered.

    Args:
        n: Number of events to return
        workflow_id: Only events of this workflow
        event_type: Only events of this type
        events_file: Log file override (defaults to WORKFLOW_EVENTS_FILE)

    Returns:
        Event dicts, most recent last
    """
    wanted = {"workflow_id": workflow_id, "event_type": event_type}
    matching = [
        event
        for event in iter_events(events_file)
        if all(value is None or event.get(key) == value for key, value in wanted.items())
    ]
    return matching[-n:] if n > 0 else []
