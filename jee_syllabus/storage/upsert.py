"""
Hierarchy Upserter - Find-or-create for every level of the syllabus tree.

For each candidate name the upserter:
1. Looks for a record under the same parent whose name equals the raw name
   or its normalized form (streams also match on their code)
2. Returns an existing record untouched (nothing is ever updated)
3. Otherwise creates it with the raw name, resolving `order` collisions for
   lessons and topics by moving the new record to max(order) + 1.
   When creation is turned off for subjects, lessons or topics, a missing
   record comes back as None instead

The find and the create are separate statements with no lock in between,
so two seeding runs against the same parent can race on an order slot.
"""

from dataclasses import dataclass
from difflib import SequenceMatcher

from rich.console import Console
from rich.markup import escape
from sqlalchemy import func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from jee_syllabus.config import SeederConfig
from jee_syllabus.ingestion.normalizer import Normalizer
from jee_syllabus.ingestion.subtopics import split_into_subtopics
from jee_syllabus.storage.models import Lesson, Stream, Subject, Subtopic, Topic

# Console indentation and name clipping per level, for verbose output
_LOG_LAYOUT = {
    "stream": (2, None),
    "subject": (4, None),
    "lesson": (6, 50),
    "topic": (8, 30),
}


def _scoped(stmt, scope: tuple):
    return stmt.where(*scope) if scope else stmt


class UpsertError(RuntimeError):
    """A persistence failure while finding or creating one level of the tree."""

    def __init__(self, level: str, message: str):
        super().__init__(f"Failed to create/find {level}: {message}")
        self.level = level


@dataclass
class UpsertResult:
    """
    Outcome of one find-or-create call.

    Attributes:
        record: The persisted ORM object (existing or new)
        created: True if the record was inserted by this call
        level: "stream", "subject", "lesson", "topic" or "subtopic"
    """
    record: object
    created: bool
    level: str

    @property
    def id(self) -> int:
        return self.record.id

    @property
    def name(self) -> str:
        return self.record.name


class HierarchyUpserter:
    """
    Finds or creates streams, subjects, lessons, topics and subtopics.

    Example:
        upserter = HierarchyUpserter(session, config)
        stream = upserter.find_or_create_stream("JEE")
        subject = upserter.find_or_create_subject("PHYSICS", stream.id)
    """

    def __init__(
        self,
        session: Session,
        config: SeederConfig | None = None,
        console: Console | None = None,
    ):
        self.session = session
        self.config = config or SeederConfig()
        self.console = console or Console()
        self.normalizer = Normalizer(self.config.normalization)
        self.duplicates = self.config.processing.duplicate_prevention

    # ------------------------------------------------------------------
    # Matching
    # ------------------------------------------------------------------

    def _name_matches(self, model, name: str):
        candidates = {name}
        if self.duplicates.enabled:
            candidates.add(self.normalizer.normalize(name))
        return model.name.in_(sorted(candidates))

    def _find_existing(self, model, scope: tuple, name: str, extra_match: tuple = ()):
        stmt = (
            _scoped(select(model), scope)
            .where(or_(self._name_matches(model, name), *extra_match))
            .order_by(model.id)
            .limit(1)
        )
        record = self.session.scalars(stmt).first()

        if record is None and self.duplicates.enabled and self.duplicates.fuzzy_matching:
            record = self._find_similar(model, scope, name)
        return record

    def _find_similar(self, model, scope: tuple, name: str):
        """Closest sibling whose normalized name reaches the similarity threshold."""
        target = self.normalizer.normalize(name)
        best, best_ratio = None, 0.0

        for candidate in self.session.scalars(_scoped(select(model), scope).order_by(model.id)):
            ratio = SequenceMatcher(None, target, self.normalizer.normalize(candidate.name)).ratio()
            if ratio > best_ratio:
                best, best_ratio = candidate, ratio

        if best is not None and best_ratio >= self.duplicates.similarity_threshold:
            return best
        return None

    def _resolve_order(self, model, scope: tuple, requested: int) -> int:
        """Keep `requested` if free under the parent, else max(order) + 1."""
        taken = self.session.scalar(
            _scoped(select(model.id), scope).where(model.order == requested).limit(1)
        )
        if taken is None:
            return requested

        max_order = self.session.scalar(_scoped(select(func.max(model.order)), scope))
        return (max_order or 0) + 1

    # ------------------------------------------------------------------
    # Core find-or-create
    # ------------------------------------------------------------------

    def _find_or_create(
        self,
        level: str,
        model,
        scope: tuple,
        name: str,
        factory,
        order: int | None = None,
        extra_match: tuple = (),
        create: bool = True,
    ) -> UpsertResult | None:
        try:
            existing = self._find_existing(model, scope, name, extra_match)
            if existing is not None:
                self._log(level, existing.name, created=False)
                return UpsertResult(existing, False, level)
            if not create:
                return None

            if order is None:
                record = factory()
            else:
                record = factory(order=self._resolve_order(model, scope, order))
            self.session.add(record)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise UpsertError(level, str(e)) from e

        self._log(level, record.name, created=True)
        return UpsertResult(record, True, level)

    def _log(self, level: str, name: str, created: bool) -> None:
        if not self.config.logging.verbose or level not in _LOG_LAYOUT:
            return
        indent, limit = _LOG_LAYOUT[level]
        shown = escape(name if limit is None else f"{name[:limit]}...")
        action = "Created new" if created else "Found existing"
        self.console.print(f"{' ' * indent}✅ {action} {level}: {shown}")

    # ------------------------------------------------------------------
    # Levels
    # ------------------------------------------------------------------

    def find_or_create_stream(self, name: str) -> UpsertResult:
        code = name.upper()
        return self._find_or_create(
            "stream",
            Stream,
            (),
            name,
            lambda: Stream(
                name=name,
                code=code,
                description=f"{name} syllabus and content",
                is_active=True,
            ),
            extra_match=(Stream.code == code,),
        )

    def find_or_create_subject(self, name: str, stream_id: int) -> UpsertResult | None:
        processing = self.config.processing
        return self._find_or_create(
            "subject",
            Subject,
            (Subject.stream_id == stream_id,),
            name,
            lambda: Subject(
                name=name,
                description=f"{name} for {processing.stream_name} {processing.syllabus_year}",
                stream_id=stream_id,
            ),
            create=processing.create_missing_subjects,
        )

    def find_or_create_lesson(self, name: str, subject_id: int, order: int) -> UpsertResult | None:
        return self._find_or_create(
            "lesson",
            Lesson,
            (Lesson.subject_id == subject_id,),
            name,
            lambda order: Lesson(
                name=name,
                description=f"Lesson: {name}",
                subject_id=subject_id,
                order=order,
                is_active=True,
            ),
            order=order,
            create=self.config.processing.create_missing_lessons,
        )

    def find_or_create_topic(
        self, name: str, lesson_id: int, subject_id: int, order: int
    ) -> UpsertResult | None:
        return self._find_or_create(
            "topic",
            Topic,
            (Topic.lesson_id == lesson_id,),
            name,
            lambda order: Topic(
                name=name,
                description=f"Topic: {name}",
                lesson_id=lesson_id,
                subject_id=subject_id,
                order=order,
            ),
            order=order,
            create=self.config.processing.create_missing_topics,
        )

    def find_or_create_subtopic(self, name: str, topic_id: int) -> UpsertResult:
        return self._find_or_create(
            "subtopic",
            Subtopic,
            (Subtopic.topic_id == topic_id,),
            name,
            lambda: Subtopic(name=name, description=f"Subtopic: {name}", topic_id=topic_id),
        )

    def find_or_create_subtopics(self, topic_text: str, topic_id: int) -> list[UpsertResult]:
        """
        Split a topic into subtopic phrases and find or create each one.

        Subtopic failures never abort a run: a warning is printed and an
        empty list is returned.
        """
        processing = self.config.processing
        phrases = split_into_subtopics(
            topic_text,
            max_subtopics=processing.max_subtopics_per_topic,
            max_length=processing.max_subtopic_length,
        )

        results = []
        try:
            for phrase in phrases:
                results.append(self.find_or_create_subtopic(phrase, topic_id))
        except UpsertError as e:
            self.console.print(
                f"[yellow]⚠️ Failed to process subtopics for topic: {escape(str(e))}[/yellow]"
            )
            return []
        return results
