"""Unit tests for the workflow event log and its timestamps."""

import json
from datetime import datetime

import pytest

from quill.utils.event_logging import get_recent_events, log_workflow_event, make_event_sink
from quill.utils.timestamp import format_timestamp


@pytest.fixture
def events_file(tmp_path):
    return tmp_path / "logs" / "workflow_events.log"


@pytest.mark.unit
class TestWorkflowEventLog:
    """Tests for log_workflow_event and get_recent_events."""

    def test_event_written_as_json_line(self, events_file):
        """Test each event is one JSON object per line with standard fields."""
        event = log_workflow_event(
            "workflow_created", "wf_1", "cli", events_file=events_file, total=3
        )
        lines = events_file.read_text(encoding="utf-8").splitlines()

        assert len(lines) == 1
        assert json.loads(lines[0]) == event
        assert event["event_type"] == "workflow_created"
        assert event["source"] == "cli"
        assert event["total"] == 3
        assert "timestamp" in event

    def test_missing_file_yields_no_events(self, tmp_path):
        """Test reading a log that does not exist returns an empty list."""
        assert get_recent_events(events_file=tmp_path / "none.log") == []

    def test_filters_and_limit(self, events_file):
        """Test filtering by workflow and event type, most recent last."""
        log_workflow_event("workflow_created", "wf_1", "cli", events_file=events_file)
        log_workflow_event("workflow_created", "wf_2", "cli", events_file=events_file)
        log_workflow_event("decision_applied", "wf_1", "cli", events_file=events_file)
        log_workflow_event("workflow_completed", "wf_1", "cli", events_file=events_file)

        wf_1 = get_recent_events(workflow_id="wf_1", events_file=events_file)
        assert [e["event_type"] for e in wf_1] == [
            "workflow_created",
            "decision_applied",
            "workflow_completed",
        ]

        created = get_recent_events(event_type="workflow_created", events_file=events_file)
        assert [e["workflow_id"] for e in created] == ["wf_1", "wf_2"]

        last_two = get_recent_events(n=2, events_file=events_file)
        assert [e["event_type"] for e in last_two] == ["decision_applied", "workflow_completed"]

    def test_malformed_lines_skipped(self, events_file):
        """Test corrupt lines in the log are ignored."""
        log_workflow_event("workflow_created", "wf_1", "cli", events_file=events_file)
        with open(events_file, "a", encoding="utf-8") as f:
            f.write("{not json\n")
        log_workflow_event("decision_applied", "wf_1", "cli", events_file=events_file)

        events = get_recent_events(events_file=events_file)
        assert [e["event_type"] for e in events] == ["workflow_created", "decision_applied"]

    def test_event_sink(self, events_file):
        """Test make_event_sink adapts the service callback to the log."""
        sink = make_event_sink(source="approval", events_file=events_file)
        sink("decision_applied", "wf_9", {"applied": 2, "errors": 0})

        (event,) = get_recent_events(events_file=events_file)
        assert event["workflow_id"] == "wf_9"
        assert event["source"] == "approval"
        assert event["applied"] == 2


@pytest.mark.unit
class TestFormatTimestamp:
    """Tests for format_timestamp."""

    def test_absolute(self):
        """Test microseconds are dropped from the absolute form."""
        assert format_timestamp("2025-11-13T18:45:40.572549") == "2025-11-13 18:45:40"

    def test_relative(self):
        """Test the largest whole unit is used, past or future."""
        reference = datetime(2025, 11, 13, 20, 0, 0)

        assert format_timestamp("2025-11-13T18:45:40", True, reference) == "1h ago"
        assert format_timestamp("2025-11-13T19:59:30", True, reference) == "30s ago"
        assert format_timestamp("2025-11-10T20:00:00", True, reference) == "3d ago"
        assert format_timestamp("2025-11-13T20:05:00", True, reference) == "5m from now"
        assert format_timestamp("2025-11-13T20:00:00", True, reference) == "0s ago"

    def test_unparseable_returned_unchanged(self):
        """Test malformed timestamps pass through untouched."""
        assert format_timestamp("yesterday") == "yesterday"
