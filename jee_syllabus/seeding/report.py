"""
Seeding Report - Aggregates a run's results and writes them as JSON.

The report is pure aggregation over the `created` flags collected during a
run. JSON keys use camelCase because the artifacts are shared with the
admin console.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from jee_syllabus.config import REPORT_NAME_LIMIT
from jee_syllabus.storage.upsert import UpsertResult


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class SeedingSummary:
    total_subjects: int = 0
    total_lessons: int = 0
    total_topics: int = 0
    total_subtopics: int = 0
    created: int = 0
    skipped: int = 0
    errors: int = 0

    def to_dict(self) -> dict:
        return {
            "totalSubjects": self.total_subjects,
            "totalLessons": self.total_lessons,
            "totalTopics": self.total_topics,
            "totalSubtopics": self.total_subtopics,
            "created": self.created,
            "skipped": self.skipped,
            "errors": self.errors,
        }


@dataclass
class SeedingResults:
    """
    Everything a seeding run touched, in processing order.

    Attributes:
        stream: The stream every subject was attached to
        subjects/lessons/topics/subtopics: One UpsertResult per processed entity
        errors: Recorded failures and records not created
            ({type, level, subject, message, timestamp})
    """
    stream: UpsertResult | None = None
    subjects: list[UpsertResult] = field(default_factory=list)
    lessons: list[UpsertResult] = field(default_factory=list)
    topics: list[UpsertResult] = field(default_factory=list)
    subtopics: list[UpsertResult] = field(default_factory=list)
    errors: list[dict] = field(default_factory=list)

    def record_error(self, error: Exception, subject: str | None = None) -> dict:
        entry = {
            "type": "PROCESSING_ERROR",
            "level": getattr(error, "level", None),
            "subject": subject,
            "message": str(error),
            "timestamp": utc_timestamp(),
        }
        self.errors.append(entry)
        return entry

    def record_not_created(self, level: str, name: str, subject: str | None = None) -> dict:
        """A missing record that was not created because its level is disabled."""
        entry = {
            "type": "CREATION_DISABLED",
            "level": level,
            "subject": subject,
            "message": f'{level.title()} "{name}" not found and creation disabled',
            "timestamp": utc_timestamp(),
        }
        self.errors.append(entry)
        return entry

    def _entities(self) -> list[UpsertResult]:
        return self.subjects + self.lessons + self.topics + self.subtopics

    @property
    def summary(self) -> SeedingSummary:
        entities = self._entities()
        created = sum(1 for result in entities if result.created)
        return SeedingSummary(
            total_subjects=len(self.subjects),
            total_lessons=len(self.lessons),
            total_topics=len(self.topics),
            total_subtopics=len(self.subtopics),
            created=created,
            skipped=len(entities) - created,
            errors=len(self.errors),
        )


def _detail(result: UpsertResult, limit: int | None = REPORT_NAME_LIMIT) -> dict:
    name = result.name if limit is None else result.name[:limit]
    return {"id": result.id, "name": name, "created": result.created}


def _stream_detail(result: UpsertResult | None) -> dict | None:
    if result is None:
        return None
    stream = result.record
    return {
        "id": stream.id,
        "name": stream.name,
        "code": stream.code,
        "description": stream.description,
        "isActive": stream.is_active,
        "created": result.created,
    }


def build_report(results: SeedingResults, source: str) -> dict:
    """
    Build the JSON-ready seeding report.

    Args:
        results: Results collected during the run
        source: Where the syllabus came from (PDF or JSON path)

    Returns:
        Report dictionary with summary, per-entity details and errors
    """
    return {
        "generatedAt": utc_timestamp(),
        "process": "pdf-syllabus-seeding",
        "source": source,
        "results": {
            "stream": _stream_detail(results.stream),
            "summary": results.summary.to_dict(),
            "subjects": len(results.subjects),
            "lessons": len(results.lessons),
            "topics": len(results.topics),
            "subtopics": len(results.subtopics),
            "errors": len(results.errors),
        },
        "details": {
            "subjects": [_detail(s, limit=None) for s in results.subjects],
            "lessons": [_detail(l) for l in results.lessons],
            "topics": [_detail(t) for t in results.topics],
            "subtopics": [_detail(s) for s in results.subtopics],
        },
        "errors": results.errors,
    }


def save_json(data, path: str | Path) -> Path:
    """Write `data` as 2-space indented JSON, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
    return path


def save_syllabus_json(syllabus: dict, path: str | Path, console: Console | None = None) -> Path | None:
    """Save the parsed tree for inspection. Failures only warn."""
    console = console or Console()
    try:
        saved = save_json(syllabus, path)
    except (OSError, TypeError, ValueError) as e:
        console.print(f"[yellow]⚠️ Failed to save JSON data: {escape(str(e))}[/yellow]")
        return None
    console.print(f"[green]✅ JSON data saved to: {saved}[/green]")
    return saved


def generate_seeding_report(
    results: SeedingResults,
    source: str,
    path: str | Path,
    console: Console | None = None,
) -> dict | None:
    """
    Build the report and write it to `path`.

    Returns:
        The report, or None if it could not be written (a warning is printed)
    """
    console = console or Console()
    console.print("\n📊 Generating seeding report...")
    try:
        report = build_report(results, source)
        saved = save_json(report, path)
    except (OSError, TypeError, ValueError) as e:
        console.print(f"[yellow]⚠️ Failed to generate seeding report: {escape(str(e))}[/yellow]")
        return None
    console.print(f"[green]✅ Seeding report saved to: {saved}[/green]")
    return report


def print_summary(results: SeedingResults, console: Console | None = None, show_errors: bool = True) -> None:
    """Render the per-level totals (and any errors) as rich tables."""
    console = console or Console()

    table = Table(title="Processing Summary", show_header=True, header_style="bold cyan")
    table.add_column("Level", style="white")
    table.add_column("Processed", style="green", justify="right")
    table.add_column("Created", style="green", justify="right")
    table.add_column("Skipped", style="dim", justify="right")

    for label, entries in (
        ("📚 Subjects", results.subjects),
        ("📝 Lessons", results.lessons),
        ("🏷️ Topics", results.topics),
        ("📋 Subtopics", results.subtopics),
    ):
        created = sum(1 for entry in entries if entry.created)
        table.add_row(label, str(len(entries)), str(created), str(len(entries) - created))

    console.print(table)
    console.print(f"  ❌ Errors: {len(results.errors)}")

    if show_errors and results.errors:
        errors = Table(title="Errors", show_header=True, header_style="bold red")
        errors.add_column("Subject", style="white")
        errors.add_column("Message", style="red")
        for error in results.errors:
            errors.add_row(escape(error.get("subject") or "-"), escape(error["message"]))
        console.print(errors)
