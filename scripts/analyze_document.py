#!/usr/bin/env python3
"""
Score a résumé or cover letter for grammar, readability and ATS compatibility.

Usage:
    python scripts/analyze_document.py resume.txt
    python scripts/analyze_document.py resume.txt --keywords python,docker,kubernetes
    python scripts/analyze_document.py letter.txt --type cover_letter --job job.md --json
"""

import json
import os
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv

from quill.contexts.scoring import analyze_document
from quill.contexts.scoring.logger import setup_scoring_logger
from quill.utils.exceptions import QuillError
from quill.utils.report_formatter import (
    Column,
    TableFormatter,
    format_issue_counts,
    format_score_bar,
)
from quill.utils.timestamp import session_stamp

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))

app = typer.Typer(add_completion=False, help="Analyze document quality.")


def _read_text(path: Path, label: str) -> str:
    if not path.exists():
        typer.secho(f"{label} not found: {path}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    return path.read_text(encoding="utf-8")


def _render_report(breakdown, source: Path, document_type: str) -> str:
    report = TableFormatter([Column("Dimension", 14), Column("Score", 6, ">"), Column("", 22)])
    report.add_title(f"Quality report: {source.name} ({document_type})")
    report.add_header().add_rule()

    rows = [
        ("ATS", breakdown.ats_score),
        ("Readability", breakdown.readability_score),
        ("Grammar", breakdown.grammar_score),
    ]
    if breakdown.match_score is not None:
        rows.append(("Job match", breakdown.match_score))
    for name, score in rows:
        report.add_row([name, score, format_score_bar(score)])

    report.add_rule()
    combined = breakdown.combined_score
    report.add_row(["Combined", combined, format_score_bar(combined)])
    report.add_line().add_line(f"Issues: {format_issue_counts(breakdown.issue_counts)}")

    if breakdown.top_issues:
        issues = TableFormatter(
            [Column("Severity", 9), Column("Source", 12), Column("Message", 56)]
        )
        issues.add_line().add_line("Top issues:").add_header().add_rule()
        for issue in breakdown.top_issues:
            issues.add_row([issue.severity, issue.source, issue.message])
        report.extend(issues)

    report.add_bullets("Recommendations:", breakdown.recommendations)
    return report.render()


@app.command()
def main(
    document: Path = typer.Argument(..., help="Plain-text résumé or cover letter"),
    document_type: str = typer.Option(
        "resume", "--type", "-t", help="Document type: resume, cover_letter or other"
    ),
    keywords: Optional[str] = typer.Option(
        None, "--keywords", "-k", help="Comma-separated job keywords"
    ),
    job: Optional[Path] = typer.Option(
        None, "--job", "-j", help="Job description file to extract keywords from"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the full breakdown as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug log output"),
):
    """
    Analyze a document and print its quality breakdown.

    Exits with code 2 when the combined score is below the pass threshold.
    """
    text = _read_text(document, "Document")

    job_context = None
    if keywords or job:
        job_context = {
            "keywords": [k.strip() for k in keywords.split(",")] if keywords else [],
            "description": _read_text(job, "Job description") if job else None,
        }

    log_dir = LOGS_PATH / f"analyze_{session_stamp()}"
    setup_scoring_logger(log_dir, document_type=document_type, verbose=verbose)

    try:
        breakdown = analyze_document(text, document_type, job_context)
    except QuillError as e:
        typer.echo(f"ERROR: {e}", err=True)
        raise typer.Exit(1)

    if as_json:
        typer.echo(json.dumps(breakdown.to_dict(), indent=2))
    else:
        typer.echo(_render_report(breakdown, document, document_type))

    if breakdown.passes_quality:
        typer.secho(
            f"\n✓ Combined score {breakdown.combined_score} passes (>= {breakdown.threshold})",
            fg=typer.colors.GREEN,
            err=as_json,
        )
    else:
        typer.secho(
            f"\n✗ Combined score {breakdown.combined_score} below {breakdown.threshold}",
            fg=typer.colors.RED,
            err=as_json,
        )
        raise typer.Exit(code=2)


if __name__ == "__main__":
    app()
