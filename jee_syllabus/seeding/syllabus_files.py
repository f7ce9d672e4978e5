"""
Syllabus Files - Discovery, loading and validation of syllabus JSON files.

Syllabus files come in two shapes:

    [{"subject": "...", "lessons": [...]}]                   # bare subject list
    {"stream": "JEE", "subjects": [{"subject": ..., ...}]}   # full tree

Topics may be plain strings or {"topic": "..."} objects; both are
flattened to strings on load.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from jee_syllabus.config import STREAM_NAME
from jee_syllabus.storage.models import Lesson, Stream, Subject, Subtopic, Topic


class SyllabusFileError(ValueError):
    """A syllabus file that cannot be found, parsed or understood."""


@dataclass
class SyllabusFile:
    path: str
    name: str
    directory: str
    size: int
    last_modified: datetime

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "name": self.name,
            "directory": self.directory,
            "size": self.size,
            "lastModified": self.last_modified.isoformat(),
        }


@dataclass
class ValidationResult:
    is_valid: bool
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"isValid": self.is_valid, "errors": self.errors}


def list_syllabus_files(seeds_dir: str | Path) -> list[SyllabusFile]:
    """
    Find every *.json file under `seeds_dir` whose name mentions "syllabus".

    Returns:
        Files sorted newest first; empty if the directory does not exist
    """
    seeds_dir = Path(seeds_dir)
    if not seeds_dir.is_dir():
        return []

    files = []
    for path in seeds_dir.rglob("*"):
        name = path.name.lower()
        if not path.is_file() or "syllabus" not in name or not name.endswith(".json"):
            continue
        stat = path.stat()
        relative = path.relative_to(seeds_dir)
        directory = relative.parent.as_posix()
        files.append(SyllabusFile(
            path=relative.as_posix(),
            name=path.name,
            directory="" if directory == "." else directory,
            size=stat.st_size,
            last_modified=datetime.fromtimestamp(stat.st_mtime),
        ))

    return sorted(files, key=lambda f: f.last_modified, reverse=True)


def _flatten_topic(topic) -> str:
    if isinstance(topic, str):
        return topic
    if isinstance(topic, dict) and "topic" in topic:
        value = topic["topic"]
        return value if isinstance(value, str) else ""
    return ""


def coerce_syllabus(data) -> dict:
    """
    Bring either accepted JSON shape to {"stream": str | None, "subjects": [...]}.

    Malformed subjects and lessons are passed through untouched so that
    validate_syllabus_data can report them.

    Raises:
        SyllabusFileError: If the data is neither a list nor has a subjects list
    """
    if isinstance(data, list):
        stream, subjects = None, data
    elif isinstance(data, dict) and isinstance(data.get("subjects"), list):
        stream, subjects = data.get("stream"), data["subjects"]
    else:
        raise SyllabusFileError(
            "Syllabus file must contain an array of subjects or an object with a subjects array"
        )

    coerced = []
    for subject in subjects:
        if isinstance(subject, dict) and isinstance(subject.get("lessons"), list):
            lessons = []
            for lesson in subject["lessons"]:
                if isinstance(lesson, dict) and isinstance(lesson.get("topics"), list):
                    lesson = {**lesson, "topics": [_flatten_topic(t) for t in lesson["topics"]]}
                lessons.append(lesson)
            subject = {**subject, "lessons": lessons}
        coerced.append(subject)

    return {"stream": stream, "subjects": coerced}


def load_syllabus_file(path: str | Path) -> dict:
    """
    Read and coerce a syllabus JSON file.

    Raises:
        FileNotFoundError: If the file does not exist
        SyllabusFileError: If the JSON is invalid or has the wrong shape
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Syllabus file not found: {path}")

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise SyllabusFileError(f"Invalid JSON format: {e}") from e

    return coerce_syllabus(data)


def resolve_seed_path(seeds_dir: str | Path, relative_path: str) -> Path:
    """Resolve `relative_path` inside `seeds_dir`, refusing anything outside it."""
    root = Path(seeds_dir).resolve()
    full_path = (root / relative_path).resolve()
    if not full_path.is_relative_to(root):
        raise SyllabusFileError(f"Invalid syllabus file path: {relative_path}")
    return full_path


def read_syllabus_file(seeds_dir: str | Path, relative_path: str) -> dict:
    """Load a syllabus file addressed relative to the seeds directory."""
    full_path = resolve_seed_path(seeds_dir, relative_path)
    try:
        return load_syllabus_file(full_path)
    except FileNotFoundError as e:
        raise SyllabusFileError(f"Syllabus file not found: {relative_path}") from e


def validate_syllabus_data(subjects) -> ValidationResult:
    """
    Check that every subject, lesson and topic has a usable name.

    Messages use 1-based positions, e.g.
    "Subject 2, Lesson 1, Topic 3: Missing or invalid topic name".
    """
    errors = []

    if not isinstance(subjects, list):
        return ValidationResult(False, ["Syllabus data must be an array"])
    if not subjects:
        return ValidationResult(False, ["Syllabus data cannot be empty"])

    for i, subject in enumerate(subjects, start=1):
        if not isinstance(subject, dict):
            errors.append(f"Subject {i}: Invalid subject entry")
            continue
        if not subject.get("subject") or not isinstance(subject["subject"], str):
            errors.append(f"Subject {i}: Missing or invalid subject name")

        lessons = subject.get("lessons")
        if not isinstance(lessons, list):
            errors.append(f"Subject {i}: Missing or invalid lessons array")
            continue

        for j, lesson in enumerate(lessons, start=1):
            if not isinstance(lesson, dict):
                errors.append(f"Subject {i}, Lesson {j}: Invalid lesson entry")
                continue
            if not lesson.get("lesson") or not isinstance(lesson["lesson"], str):
                errors.append(f"Subject {i}, Lesson {j}: Missing or invalid lesson name")

            topics = lesson.get("topics")
            if not isinstance(topics, list):
                errors.append(f"Subject {i}, Lesson {j}: Missing or invalid topics array")
                continue

            for k, topic in enumerate(topics, start=1):
                if not _flatten_topic(topic).strip():
                    errors.append(
                        f"Subject {i}, Lesson {j}, Topic {k}: Missing or invalid topic name"
                    )

    return ValidationResult(not errors, errors)


def get_syllabus_preview(subjects: list[dict], limit: int = 5) -> dict:
    """Counts plus the first `limit` subjects, for a quick look before importing."""
    lessons = [
        lesson
        for subject in subjects
        if isinstance(subject, dict) and isinstance(subject.get("lessons"), list)
        for lesson in subject["lessons"]
        if isinstance(lesson, dict)
    ]
    return {
        "subjects": len(subjects),
        "totalLessons": len(lessons),
        "totalTopics": sum(len(l.get("topics") or []) for l in lessons),
        "sampleData": subjects[:limit],
    }


def get_import_stats(session: Session, stream_name: str = STREAM_NAME) -> dict:
    """Row counts for everything under the stream (matched case-insensitively)."""
    stream = session.scalars(
        select(Stream).where(func.lower(Stream.name) == stream_name.lower()).order_by(Stream.id)
    ).first()

    if stream is None:
        return {"streamExists": False, "subjects": 0, "lessons": 0, "topics": 0, "subtopics": 0}

    subject_ids = select(Subject.id).where(Subject.stream_id == stream.id)
    lesson_ids = select(Lesson.id).where(Lesson.subject_id.in_(subject_ids))
    topic_ids = select(Topic.id).where(Topic.lesson_id.in_(lesson_ids))

    def count(model, *criteria) -> int:
        return session.scalar(select(func.count()).select_from(model).where(*criteria))

    return {
        "streamExists": True,
        "subjects": count(Subject, Subject.stream_id == stream.id),
        "lessons": count(Lesson, Lesson.subject_id.in_(subject_ids)),
        "topics": count(Topic, Topic.lesson_id.in_(lesson_ids)),
        "subtopics": count(Subtopic, Subtopic.topic_id.in_(topic_ids)),
    }
