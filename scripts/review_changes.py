#!/usr/bin/env python3
"""
Review suggested changes and record approve/reject decisions.

The changes file is JSON, either a list of changes or an object:

    {
      "document_type": "resume",
      "original_file": "resume.txt",
      "changes": [
        {"id": "c1", "category": "spelling", "original": "recieve", "suggested": "receive"}
      ]
    }

Every workflow event is appended to the workflow event log (WORKFLOW_EVENTS_FILE).

Usage:
    python scripts/review_changes.py review changes.json
    python scripts/review_changes.py review changes.json --approve-all -o resume_final.txt
    python scripts/review_changes.py review changes.json --decisions decisions.json
    python scripts/review_changes.py events -n 20
"""

import json
import os
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv

from quill.contexts.approval import WorkflowService
from quill.contexts.approval.logger import setup_approval_logger
from quill.utils.event_logging import get_recent_events, make_event_sink
from quill.utils.exceptions import QuillError
from quill.utils.report_formatter import Column, TableFormatter, format_fraction
from quill.utils.timestamp import format_timestamp, session_stamp

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))

app = typer.Typer(add_completion=False, help="Review suggested document changes.")


def _load_json(path: Path, label: str):
    if not path.exists():
        typer.secho(f"{label} not found: {path}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        typer.echo(f"ERROR: {label} is not valid JSON: {e}", err=True)
        raise typer.Exit(1)


def _prompt_decisions(workflow) -> list[dict]:
    """Ask for a decision on each change; blank answer leaves it pending."""
    decisions = []
    for change in workflow.changes:
        typer.secho(f"\n[{change.id}] {change.category} ({change.impact.value})", bold=True)
        typer.echo(f"  - {change.original}")
        typer.echo(f"  + {change.suggested}")
        if change.reason:
            typer.echo(f"  reason: {change.reason}")

        answer = typer.prompt("  Approve? [y/n/skip]", default="skip").strip().lower()
        if answer in ("y", "yes"):
            decisions.append({"change_id": change.id, "approved": True})
        elif answer in ("n", "no"):
            decisions.append({"change_id": change.id, "approved": False})
    return decisions


def _render_changes(workflow) -> str:
    table = TableFormatter(
        [
            Column("ID", 12),
            Column("Category", 12),
            Column("Impact", 7),
            Column("Decision", 9),
            Column("Suggested", 36),
        ]
    )
    table.add_title(f"Workflow {workflow.id} ({workflow.status.value})")
    table.add_header().add_rule()
    for change in workflow.changes:
        table.add_row(
            [
                change.id,
                change.category,
                change.impact.value,
                change.approval.value,
                change.suggested,
            ]
        )
    table.add_line().add_line(
        f"Decided: {format_fraction(workflow.decided_count, workflow.total)}"
    )
    return table.render()


@app.command()
def review(
    changes_file: Path = typer.Argument(..., help="JSON file of suggested changes"),
    decisions_file: Optional[Path] = typer.Option(
        None, "--decisions", "-d", help="JSON list of {change_id, approved, note} decisions"
    ),
    approve_all: bool = typer.Option(False, "--approve-all", help="Approve every change"),
    reject_all: bool = typer.Option(False, "--reject-all", help="Reject every change"),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Write the original with approved changes applied"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug log output"),
):
    """
    Create a workflow from a changes file and submit decisions in one session.

    Without --decisions, --approve-all or --reject-all each change is prompted for.
    """
    if approve_all and reject_all:
        typer.echo("ERROR: --approve-all and --reject-all are mutually exclusive", err=True)
        raise typer.Exit(1)

    payload = _load_json(changes_file, "Changes file")
    if isinstance(payload, list):
        payload = {"changes": payload}

    original_content = payload.get("original_content")
    if payload.get("original_file"):
        original_path = changes_file.parent / payload["original_file"]
        if not original_path.exists():
            typer.secho(f"Original file not found: {original_path}", fg=typer.colors.RED, err=True)
            raise typer.Exit(code=1)
        original_content = original_path.read_text(encoding="utf-8")

    setup_approval_logger(LOGS_PATH / f"review_{session_stamp()}", verbose=verbose)
    service = WorkflowService(event_sink=make_event_sink(source="cli"))

    try:
        workflow = service.create_workflow(
            payload.get("changes", []),
            document_type=payload.get("document_type", "resume"),
            original_content=original_content,
        )

        if decisions_file:
            decisions = _load_json(decisions_file, "Decisions file")
        elif approve_all or reject_all:
            decisions = [
                {"change_id": change.id, "approved": approve_all} for change in workflow.changes
            ]
        else:
            decisions = _prompt_decisions(workflow)

        if not workflow.is_completed:
            result = service.submit_decisions(workflow.id, decisions)
            workflow = result.workflow
            for error in result.errors:
                typer.secho(
                    f"  ! {error.change_id or '(no id)'}: {error.message}",
                    fg=typer.colors.YELLOW,
                    err=True,
                )
    except QuillError as e:
        typer.echo(f"ERROR: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(_render_changes(workflow))

    if output:
        if original_content is None:
            typer.secho(
                "No original content in changes file; nothing written", fg=typer.colors.YELLOW
            )
        else:
            output.write_text(service.apply_approved_changes(workflow.id), encoding="utf-8")
            typer.echo(f"Wrote {output}")

    if workflow.is_completed:
        typer.secho("\n✓ Review completed", fg=typer.colors.GREEN)
    else:
        typer.secho(
            f"\n{len(workflow.pending_changes)} change(s) still pending", fg=typer.colors.YELLOW
        )


@app.command()
def events(
    n: int = typer.Option(10, "--num", "-n", help="Number of recent events to show"),
    workflow_id: Optional[str] = typer.Option(
        None, "--workflow", "-w", help="Filter to events for this workflow"
    ),
    event_type: Optional[str] = typer.Option(
        None, "--event-type", "-e", help="Filter to events of this type"
    ),
    relative: bool = typer.Option(False, "--relative", "-r", help="Show relative timestamps"),
):
    """
    Show the last n workflow events.

    Examples:\n

        $ python scripts/review_changes.py events                     # Last 10 events

        $ python scripts/review_changes.py events -e workflow_completed
    """
    recent = get_recent_events(n=n, workflow_id=workflow_id, event_type=event_type)

    if not recent:
        typer.secho("No events found", fg=typer.colors.YELLOW, err=True)
        raise typer.Exit(code=1)

    for event in recent:
        when = format_timestamp(event.get("timestamp", ""), relative=relative)
        details = {
            key: value
            for key, value in event.items()
            if key not in ("timestamp", "event_type", "workflow_id", "source")
        }
        label = f"{event['event_type']:<20}"
        typer.echo(f"{when}  {label} {event['workflow_id']}  {json.dumps(details)}")


if __name__ == "__main__":
    app()
