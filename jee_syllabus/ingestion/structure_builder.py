"""
Structure Builder - Folds classified lines into a Subject -> Lesson -> Topic tree.

The builder is a small state machine:

    NO_CONTEXT --SUBJECT--> IN_SUBJECT --LESSON--> IN_SUBJECT_AND_LESSON
         ^                      |                        |   ^
         |                   SUBJECT                  LESSON/TOPIC
         +----------------------+------------------------+---+

Transitions flush whatever was open: a new lesson closes the previous
lesson, a new subject closes the previous subject and its last lesson.
A subject that never opened a lesson is not emitted.

The resulting tree uses the same shape as the syllabus JSON files:

    {"stream": "JEE",
     "subjects": [{"subject": "PHYSICS",
                   "lessons": [{"lesson": "...", "topics": ["..."]}]}]}
"""

from enum import Enum

from rich.console import Console

from jee_syllabus.config import (
    MAX_TOPICS_PER_LESSON,
    ORPHAN_LESSON_NAME,
    STREAM_NAME,
    SUBJECT_KEYWORDS,
    ProcessingConfig,
)
from jee_syllabus.ingestion.classifier import LineKind, classify
from jee_syllabus.ingestion.pdf_parser import split_lines


class BuilderState(str, Enum):
    NO_CONTEXT = "no_context"
    IN_SUBJECT = "in_subject"
    IN_SUBJECT_AND_LESSON = "in_subject_and_lesson"


class StructureBuilder:
    """
    Builds the syllabus tree one line at a time.

    Example:
        builder = StructureBuilder()
        for line in lines:
            builder.feed(line)
        subjects = builder.finish()
    """

    def __init__(
        self,
        keywords=SUBJECT_KEYWORDS,
        drop_orphan_topics: bool = True,
        orphan_lesson_name: str = ORPHAN_LESSON_NAME,
        console: Console | None = None,
        verbose: bool = False,
    ):
        """
        Args:
            keywords: Upper-case subject names used by the classifier
            drop_orphan_topics: Drop topic lines that arrive before any lesson
                of the current subject. When False they are collected under
                a lesson called `orphan_lesson_name`.
            orphan_lesson_name: Placeholder lesson for kept orphan topics
            console: Where progress lines go when verbose
            verbose: Print each subject/lesson as it is found
        """
        self.keywords = keywords
        self.drop_orphan_topics = drop_orphan_topics
        self.orphan_lesson_name = orphan_lesson_name
        self.console = console or Console()
        self.verbose = verbose

        self.subjects: list[dict] = []
        self._subject: dict | None = None
        self._lesson: dict | None = None

    @property
    def state(self) -> BuilderState:
        if self._subject is None:
            return BuilderState.NO_CONTEXT
        if self._lesson is None:
            return BuilderState.IN_SUBJECT
        return BuilderState.IN_SUBJECT_AND_LESSON

    def feed(self, line: str) -> LineKind:
        """
        Consume one trimmed line.

        Returns:
            The kind the line was used as, or LineKind.NONE if it was discarded
        """
        kind = classify(line, self.keywords)

        if kind is LineKind.SUBJECT:
            self._open_subject(line.upper())
            return kind

        state = self.state
        if kind is LineKind.LESSON and state is not BuilderState.NO_CONTEXT:
            self._open_lesson(line)
            return kind

        if kind is LineKind.TOPIC:
            if state is BuilderState.IN_SUBJECT_AND_LESSON:
                self._lesson["topics"].append(line)
                return kind
            if state is BuilderState.IN_SUBJECT and not self.drop_orphan_topics:
                self._open_lesson(self.orphan_lesson_name)
                self._lesson["topics"].append(line)
                return kind

        return LineKind.NONE

    def finish(self) -> list[dict]:
        """Flush whatever is still open and return the subjects."""
        self._flush_subject()
        self._subject = None
        self._lesson = None
        return self.subjects

    def _open_subject(self, name: str) -> None:
        self._flush_subject()
        self._subject = {"subject": name, "lessons": []}
        self._lesson = None
        if self.verbose:
            self.console.print(f"  📖 Found subject: {name}")

    def _open_lesson(self, name: str) -> None:
        if self._lesson is not None:
            self._subject["lessons"].append(self._lesson)
        self._lesson = {"lesson": name, "topics": []}
        if self.verbose:
            self.console.print(f"    📝 Found lesson: {name[:50]}...")

    def _flush_subject(self) -> None:
        if self._subject is not None and self._lesson is not None:
            self._subject["lessons"].append(self._lesson)
            self.subjects.append(self._subject)


def build_structure(lines, keywords=SUBJECT_KEYWORDS, drop_orphan_topics: bool = True) -> list[dict]:
    """Run a fresh StructureBuilder over `lines` and return the raw subjects."""
    builder = StructureBuilder(keywords=keywords, drop_orphan_topics=drop_orphan_topics)
    for line in lines:
        builder.feed(line)
    return builder.finish()


def post_process_subjects(subjects: list[dict], max_topics: int = MAX_TOPICS_PER_LESSON) -> list[dict]:
    """
    Clean up a built (or loaded) subject list.

    - Lesson names and topics are trimmed
    - Empty topics are dropped and only the first `max_topics` are kept
    - Lessons without topics and subjects without lessons are kept

    Args:
        subjects: [{"subject": str, "lessons": [{"lesson": str, "topics": [str]}]}]
        max_topics: Topic cap per lesson

    Returns:
        A new, cleaned list in the same shape
    """
    processed = []

    for subject in subjects:
        if not subject.get("subject"):
            continue

        lessons = []
        for lesson in subject.get("lessons") or []:
            if not lesson.get("lesson") or lesson.get("topics") is None:
                continue

            topics = [topic.strip() for topic in lesson["topics"]]
            lessons.append({
                "lesson": lesson["lesson"].strip(),
                "topics": [topic for topic in topics if topic][:max_topics],
            })

        processed.append({"subject": subject["subject"], "lessons": lessons})

    return processed


def extract_syllabus_structure(
    text: str,
    config: ProcessingConfig | None = None,
    console: Console | None = None,
    verbose: bool = False,
) -> dict:
    """
    Turn raw syllabus text into the stream tree.

    Args:
        text: Text of the whole syllabus document
        config: Keywords, orphan-topic policy, topic cap and stream name
        console: Where progress lines go when verbose
        verbose: Print each subject/lesson as it is found

    Returns:
        {"stream": <stream name>, "subjects": [...]}

    Raises:
        RuntimeError: If anything goes wrong while building the tree
    """
    config = config or ProcessingConfig()
    console = console or Console()

    if verbose:
        console.print("🔍 Extracting syllabus structure from PDF text...")

    try:
        builder = StructureBuilder(
            keywords=config.subject_keywords,
            drop_orphan_topics=config.drop_orphan_topics,
            orphan_lesson_name=config.orphan_lesson_name,
            console=console,
            verbose=verbose,
        )
        for line in split_lines(text):
            builder.feed(line)
        subjects = post_process_subjects(builder.finish(), config.max_topics_per_lesson)
    except Exception as e:
        raise RuntimeError(f"Failed to extract syllabus structure: {e}") from e

    return {"stream": config.stream_name or STREAM_NAME, "subjects": subjects}
